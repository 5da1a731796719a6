from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from flask import current_app
from sqlalchemy import exists
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from incidencias.extensions import db
from incidencias.models.incidencia import Incidencia, IncidenciaId
from incidencias.services.filtro_busqueda import FiltroBusqueda, construir_condiciones
from incidencias.utils.constants import ESTADO_PENDIENTE, ZONA_HORARIA
from incidencias.utils.errors import ApiError


def ahora_local() -> datetime:
	"""Hora actual en Madrid, sin tzinfo (así se guarda fecha_incidencia)."""
	return datetime.now(ZoneInfo(ZONA_HORARIA)).replace(tzinfo=None)


def _detalle(err: SQLAlchemyError) -> str:
	return str(getattr(err, "orig", None) or err)


def _condiciones_id(id_incidencia: IncidenciaId) -> tuple:
	return (
		Incidencia.numero_aula == id_incidencia.numero_aula,
		Incidencia.correo_docente == id_incidencia.correo_docente,
		Incidencia.fecha_incidencia == id_incidencia.fecha_incidencia,
	)


# ---------------------------------------------------------------------------
# Almacén de incidencias
# ---------------------------------------------------------------------------

def existe_incidencia(id_incidencia: IncidenciaId) -> bool:
	# EXISTS contra la BD, nunca contra el identity map de la sesión
	consulta = exists().where(*_condiciones_id(id_incidencia))
	return bool(db.session.query(consulta).scalar())


def guardar_incidencia(incidencia: Incidencia, *, nueva: bool = False) -> Incidencia:
	"""
	Inserta o reemplaza la incidencia completa.

	Con nueva=True se hace un INSERT puro: si ya hay una incidencia con la
	misma identidad la clave primaria lo impide (IntegrityError) en lugar de
	sobrescribirla.
	"""
	try:
		if nueva:
			db.session.add(incidencia)
		else:
			incidencia = db.session.merge(incidencia)
		db.session.commit()
	except SQLAlchemyError:
		db.session.rollback()
		raise
	return incidencia


def borrar_incidencia(id_incidencia: IncidenciaId) -> int:
	"""Borra la incidencia con esa identidad. Devuelve las filas borradas (0 si no existía)."""
	try:
		borradas = Incidencia.query.filter(*_condiciones_id(id_incidencia)).delete()
		db.session.commit()
	except SQLAlchemyError:
		db.session.rollback()
		raise
	return borradas


def buscar_incidencias(filtro: FiltroBusqueda) -> list[Incidencia]:
	return (
		Incidencia.query.filter(*construir_condiciones(filtro))
		.order_by(
			Incidencia.numero_aula.asc(),
			Incidencia.correo_docente.asc(),
			Incidencia.fecha_incidencia.asc(),
		)
		.all()
	)


# ---------------------------------------------------------------------------
# Operaciones de la API
# ---------------------------------------------------------------------------

def crear_incidencia(correo_docente: str, data: dict) -> Incidencia:
	incidencia = Incidencia(
		numero_aula=data["numero_aula"],
		correo_docente=correo_docente,
		fecha_incidencia=ahora_local(),
		descripcion_incidencia=data["descripcion_incidencia"],
		estado_incidencia=ESTADO_PENDIENTE,
		comentario="",
	)
	current_app.logger.debug("[incidencias] incidencia inicializada: %r", incidencia)

	id_incidencia = incidencia.id_compuesto
	try:
		guardar_incidencia(incidencia, nueva=True)
	except IntegrityError:
		current_app.logger.warning("[incidencias] identidad duplicada %s", id_incidencia)
		raise ApiError(
			"Ya existe una incidencia con el mismo aula, docente y fecha.",
			409,
			payload={
				"code": "INCIDENCIA_DUPLICADA",
				"numeroAula": id_incidencia.numero_aula,
				"correoDocente": id_incidencia.correo_docente,
				"fechaIncidencia": id_incidencia.fecha_incidencia.isoformat(),
			},
		)
	except SQLAlchemyError:
		current_app.logger.exception("[incidencias] fallo al crear incidencia")
		raise ApiError("Error en la creación de incidencia.", 500)

	current_app.logger.info("[incidencias] creada %r", incidencia)
	return incidencia


def actualizar_incidencia(incidencia: Incidencia) -> Incidencia:
	id_incidencia = incidencia.id_compuesto
	try:
		if not existe_incidencia(id_incidencia):
			raise ApiError("Incidencia no encontrada.", 404)

		# Entre la comprobación y el merge puede borrarla otra petición;
		# en ese caso el merge la vuelve a insertar.
		incidencia = guardar_incidencia(incidencia)
	except SQLAlchemyError as err:
		current_app.logger.exception("[incidencias] fallo al actualizar %s", id_incidencia)
		raise ApiError(f"Error en la actualizacion de incidencia. {_detalle(err)}", 500)

	current_app.logger.info("[incidencias] actualizada %r", incidencia)
	return incidencia


def eliminar_incidencia(incidencia: Incidencia) -> None:
	id_incidencia = incidencia.id_compuesto
	try:
		if not existe_incidencia(id_incidencia):
			raise ApiError("Incidencia no encontrada.", 404)
		borrar_incidencia(id_incidencia)
	except SQLAlchemyError as err:
		current_app.logger.exception("[incidencias] fallo al borrar %s", id_incidencia)
		raise ApiError(f"Error en el borrado de incidencia. {_detalle(err)}", 500)

	current_app.logger.info("[incidencias] eliminada %s", id_incidencia)


def listar_incidencias(filtro: FiltroBusqueda) -> list[Incidencia]:
	try:
		incidencias = buscar_incidencias(filtro)
	except SQLAlchemyError:
		current_app.logger.exception("[incidencias] fallo en la búsqueda %s", filtro)
		raise ApiError("Error en la búsqueda de incidencias.", 500)

	current_app.logger.debug("[incidencias] encontradas %s", len(incidencias))
	if not incidencias:
		raise ApiError("No se han encontrado incidencias con los criterios especificados.", 404)
	return incidencias
