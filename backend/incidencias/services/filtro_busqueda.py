from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.sql.elements import ColumnElement

from incidencias.models.incidencia import Incidencia


@dataclass(frozen=True)
class FiltroBusqueda:
	"""
	Criterios de búsqueda de incidencias. None significa "sin restricción";
	cualquier otro valor (incluida la cadena vacía) se compara tal cual.
	"""

	numero_aula: str | None = None
	correo_docente: str | None = None
	fecha_inicio: datetime | None = None
	fecha_fin: datetime | None = None
	descripcion_incidencia: str | None = None
	estado_incidencia: str | None = None
	comentario: str | None = None


# campo del filtro -> columna comparada por igualdad
_IGUALDADES = (
	("numero_aula", Incidencia.numero_aula),
	("correo_docente", Incidencia.correo_docente),
	("descripcion_incidencia", Incidencia.descripcion_incidencia),
	("estado_incidencia", Incidencia.estado_incidencia),
	("comentario", Incidencia.comentario),
)


def construir_condiciones(filtro: FiltroBusqueda) -> list[ColumnElement]:
	condiciones: list[ColumnElement] = []

	for campo, columna in _IGUALDADES:
		valor = getattr(filtro, campo)
		if valor is not None:
			condiciones.append(columna == valor)

	# Rango de fechas inclusivo; cada extremo es opcional
	if filtro.fecha_inicio is not None:
		condiciones.append(Incidencia.fecha_incidencia >= filtro.fecha_inicio)
	if filtro.fecha_fin is not None:
		condiciones.append(Incidencia.fecha_incidencia <= filtro.fecha_fin)

	return condiciones
