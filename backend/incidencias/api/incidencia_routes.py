from flask import Blueprint, current_app, request

from incidencias.schemas.incidencia_schemas import (
    CabeceraDocenteSchema,
    FiltroBusquedaSchema,
    IncidenciaCreateSchema,
    IncidenciaSchema,
)
from incidencias.services import incidencia_service
from incidencias.utils.constants import CABECERA_CORREO_DOCENTE
from incidencias.utils.responses import success_response

bp = Blueprint("incidencias", __name__)

cabecera_docente_schema = CabeceraDocenteSchema()
incidencia_create_schema = IncidenciaCreateSchema()
incidencia_schema = IncidenciaSchema()
filtro_busqueda_schema = FiltroBusquedaSchema()


def _correo_docente() -> str:
    cabecera = {}
    if CABECERA_CORREO_DOCENTE in request.headers:
        cabecera[CABECERA_CORREO_DOCENTE] = request.headers[CABECERA_CORREO_DOCENTE]
    return cabecera_docente_schema.load(cabecera)["correo_docente"]


def _cuerpo_json(sin_cuerpo: dict):
    # Un body que no es JSON válido es un 400/415, nunca un body vacío
    if not request.get_data():
        return sin_cuerpo
    return request.get_json()


@bp.post("")
def crear_incidencia():
    """
    Crea una incidencia. El correo del docente llega en la cabecera
    `correo-docente`; fecha, estado y comentario los pone el servidor.
    Body JSON:
    {
      "numeroAula": "101",
      "descripcionIncidencia": "El proyector no enciende"
    }
    """
    correo_docente = _correo_docente()

    json_data = _cuerpo_json({})
    current_app.logger.debug("[incidencias] POST recibido: %s", json_data)
    data = incidencia_create_schema.load(json_data)

    incidencia = incidencia_service.crear_incidencia(correo_docente, data)

    return success_response(
        message="EXITO: Nueva incidencia creada con éxito.",
        data=incidencia_schema.dump(incidencia),
        status_code=201,
    )


@bp.put("")
def actualizar_incidencia():
    """
    Reemplaza una incidencia existente. El body trae la incidencia completa,
    incluida su identidad (numeroAula, correoDocente, fechaIncidencia).
    """
    _correo_docente()

    json_data = _cuerpo_json({})
    current_app.logger.debug("[incidencias] PUT recibido: %s", json_data)
    incidencia = incidencia_schema.load(json_data)

    incidencia = incidencia_service.actualizar_incidencia(incidencia)

    return success_response(
        message="EXITO: Incidencia modificada con exito.",
        data=incidencia_schema.dump(incidencia),
    )


@bp.get("")
def buscar_incidencias():
    """
    Busca incidencias. El filtro va en el body JSON; si la petición no trae
    body se toma de la query string (?numeroAula=101&estadoIncidencia=PENDING);
    ahí el "+" de un desfase horario debe ir como %2B
    (?fechaInicio=2026-10-01T00:00:00%2B02:00). Los campos ausentes o null
    no filtran.
    """
    json_data = _cuerpo_json(request.args.to_dict())
    current_app.logger.debug("[incidencias] GET filtro recibido: %s", json_data)
    filtro = filtro_busqueda_schema.load(json_data)

    incidencias = incidencia_service.listar_incidencias(filtro)

    return success_response(data=incidencia_schema.dump(incidencias, many=True))


@bp.delete("")
def borrar_incidencia():
    json_data = _cuerpo_json({})
    current_app.logger.debug("[incidencias] DELETE recibido: %s", json_data)
    incidencia = incidencia_schema.load(json_data)

    incidencia_service.eliminar_incidencia(incidencia)

    return success_response(message="INFO: Incidencia eliminada con exito.", status_code=204)
