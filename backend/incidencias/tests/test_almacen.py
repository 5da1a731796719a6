from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from incidencias.models.incidencia import Incidencia, IncidenciaId
from incidencias.schemas.incidencia_schemas import FiltroBusquedaSchema, IncidenciaSchema
from incidencias.services import incidencia_service
from incidencias.services.filtro_busqueda import FiltroBusqueda, construir_condiciones

FECHA = datetime(2026, 10, 1, 9, 30, 0)


def _nueva(**kwargs) -> Incidencia:
	datos = {
		"numero_aula": "101",
		"correo_docente": "docente@test.com",
		"fecha_incidencia": FECHA,
		"descripcion_incidencia": "Proyector roto",
		"estado_incidencia": "PENDING",
		"comentario": "",
	}
	datos.update(kwargs)
	return Incidencia(**datos)


def test_identidad_solo_compara_la_clave():
	a = _nueva(descripcion_incidencia="Proyector roto", estado_incidencia="PENDING")
	b = _nueva(descripcion_incidencia="Otra cosa", estado_incidencia="RESOLVED", comentario="hecho")

	assert a.id_compuesto == b.id_compuesto
	assert a.id_compuesto == IncidenciaId("101", "docente@test.com", FECHA)
	assert a.id_compuesto != _nueva(numero_aula="102").id_compuesto


@pytest.mark.parametrize(
	"clave, esperado",
	[
		(IncidenciaId("101", "docente@test.com", FECHA), True),
		(IncidenciaId("102", "docente@test.com", FECHA), False),
		(IncidenciaId("101", "otro@test.com", FECHA), False),
		(IncidenciaId("101", "docente@test.com", datetime(2026, 10, 1, 9, 30, 0, 1)), False),
	],
)
def test_existe_incidencia_exige_las_tres_partes(make_incidencia, clave, esperado):
	make_incidencia(fecha_incidencia=FECHA)

	assert incidencia_service.existe_incidencia(clave) is esperado


def test_guardar_reemplaza_la_incidencia_completa(make_incidencia, incidencias_en_bd):
	make_incidencia(descripcion_incidencia="Proyector roto", comentario="")

	incidencia_service.guardar_incidencia(
		_nueva(descripcion_incidencia="Bombilla fundida", estado_incidencia="RESOLVED", comentario="Cambiada")
	)

	guardadas = incidencias_en_bd()
	assert len(guardadas) == 1
	assert guardadas[0].descripcion_incidencia == "Bombilla fundida"
	assert guardadas[0].estado_incidencia == "RESOLVED"
	assert guardadas[0].comentario == "Cambiada"


def test_guardar_nueva_con_identidad_repetida_falla(db_session, make_incidencia, incidencias_en_bd):
	make_incidencia()
	db_session.expunge_all()

	with pytest.raises(IntegrityError):
		incidencia_service.guardar_incidencia(_nueva(descripcion_incidencia="Duplicada"), nueva=True)

	# La sesión sigue utilizable tras el rollback
	guardadas = incidencias_en_bd()
	assert len(guardadas) == 1
	assert guardadas[0].descripcion_incidencia == "Proyector roto"


def test_borrar_incidencia_inexistente_no_hace_nada(make_incidencia, incidencias_en_bd):
	make_incidencia()

	borradas = incidencia_service.borrar_incidencia(IncidenciaId("999", "docente@test.com", FECHA))

	assert borradas == 0
	assert len(incidencias_en_bd()) == 1


def test_borrar_incidencia_existente(make_incidencia, incidencias_en_bd):
	make_incidencia()
	make_incidencia(numero_aula="202")

	borradas = incidencia_service.borrar_incidencia(IncidenciaId("101", "docente@test.com", FECHA))

	assert borradas == 1
	assert [i.numero_aula for i in incidencias_en_bd()] == ["202"]


def test_comprobar_y_despues_guardar_es_una_carrera_aceptada(make_incidencia, incidencias_en_bd):
	# La actualización comprueba la existencia y después hace merge en dos
	# pasos. Si otra petición borra la incidencia entre medias, el merge la
	# vuelve a insertar en lugar de fallar.
	clave = make_incidencia().id_compuesto
	assert incidencia_service.existe_incidencia(clave)

	incidencia_service.borrar_incidencia(clave)
	incidencia_service.guardar_incidencia(_nueva(estado_incidencia="IN_PROGRESS"))

	guardadas = incidencias_en_bd()
	assert len(guardadas) == 1
	assert guardadas[0].id_compuesto == clave
	assert guardadas[0].estado_incidencia == "IN_PROGRESS"


def test_buscar_incidencias_sin_filtro_devuelve_todas(make_incidencia):
	make_incidencia(numero_aula="202")
	make_incidencia(numero_aula="101")

	encontradas = incidencia_service.buscar_incidencias(FiltroBusqueda())

	assert [i.numero_aula for i in encontradas] == ["101", "202"]


def test_condiciones_solo_para_campos_presentes():
	assert construir_condiciones(FiltroBusqueda()) == []
	assert len(construir_condiciones(FiltroBusqueda(numero_aula="101"))) == 1
	assert len(construir_condiciones(FiltroBusqueda(comentario=""))) == 1
	assert len(construir_condiciones(FiltroBusqueda(fecha_inicio=FECHA, fecha_fin=FECHA))) == 2
	completo = FiltroBusqueda(
		numero_aula="101",
		correo_docente="docente@test.com",
		fecha_inicio=FECHA,
		fecha_fin=FECHA,
		descripcion_incidencia="Proyector roto",
		estado_incidencia="PENDING",
		comentario="",
	)
	assert len(construir_condiciones(completo)) == 7


def test_filtro_convierte_fechas_con_zona_a_hora_de_madrid():
	filtro = FiltroBusquedaSchema().load({"fechaInicio": "2026-01-15T09:00:00+00:00"})

	assert filtro == FiltroBusqueda(fecha_inicio=datetime(2026, 1, 15, 10, 0, 0))


def test_schema_devuelve_incidencia_transitoria_con_comentario_vacio():
	incidencia = IncidenciaSchema().load(
		{
			"numeroAula": "101",
			"correoDocente": "docente@test.com",
			"fechaIncidencia": "2026-10-01T09:30:00",
			"descripcionIncidencia": "Proyector roto",
			"estadoIncidencia": "CANCELLED",
		}
	)

	assert isinstance(incidencia, Incidencia)
	assert incidencia.id_compuesto == IncidenciaId("101", "docente@test.com", FECHA)
	assert incidencia.comentario == ""
