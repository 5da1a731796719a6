from zoneinfo import ZoneInfo

from marshmallow import EXCLUDE, ValidationError, fields, post_load, validate

from incidencias.extensions import ma
from incidencias.models.incidencia import Incidencia
from incidencias.services.filtro_busqueda import FiltroBusqueda
from incidencias.utils.constants import (
    ESTADOS_INCIDENCIA,
    MAX_LONG_AULA,
    MAX_LONG_COMENTARIO,
    MAX_LONG_CORREO,
    MAX_LONG_DESCRIPCION,
    ZONA_HORARIA,
)


def no_vacio(value: str) -> None:
    if not value or not value.strip():
        raise ValidationError("No puede estar vacío.")


def _errores_obligatorio(campo: str) -> dict:
    return {
        "required": f"{campo} nulo o vacio.",
        "null": f"{campo} nulo o vacio.",
    }


def _fecha(**kwargs) -> fields.NaiveDateTime:
    # Las fechas con zona se pasan a hora local de Madrid antes de quitar la zona
    return fields.NaiveDateTime(timezone=ZoneInfo(ZONA_HORARIA), **kwargs)


class IncidenciaCreateSchema(ma.Schema):
    """
    Cuerpo del POST. Solo se aceptan aula y descripción: la fecha, el estado y
    el comentario los pone el servidor, así que cualquier otro campo se ignora.
    """

    class Meta:
        unknown = EXCLUDE

    numero_aula = fields.String(
        data_key="numeroAula",
        required=True,
        error_messages=_errores_obligatorio("Numero de aula"),
        validate=[no_vacio, validate.Length(max=MAX_LONG_AULA)],
    )
    descripcion_incidencia = fields.String(
        data_key="descripcionIncidencia",
        required=True,
        error_messages=_errores_obligatorio("Descripcion de incidencia"),
        validate=[no_vacio, validate.Length(max=MAX_LONG_DESCRIPCION)],
    )


class CabeceraDocenteSchema(ma.Schema):
    correo_docente = fields.String(
        data_key="correo-docente",
        required=True,
        error_messages=_errores_obligatorio("Correo del docente"),
        validate=[
            no_vacio,
            validate.Length(max=MAX_LONG_CORREO),
            validate.Email(error="Correo del docente no válido."),
        ],
    )


class IncidenciaSchema(ma.SQLAlchemyAutoSchema):
    """
    Incidencia completa tal y como viaja por la API (PUT, DELETE y resultados
    del GET). Al cargar devuelve una Incidencia transitoria, sin consultar la
    sesión: comprobar si existe es cosa del servicio.
    """

    class Meta:
        model = Incidencia
        load_instance = True
        transient = True
        unknown = EXCLUDE

    numero_aula = fields.String(
        data_key="numeroAula",
        required=True,
        error_messages=_errores_obligatorio("Numero de aula"),
        validate=[no_vacio, validate.Length(max=MAX_LONG_AULA)],
    )
    correo_docente = fields.String(
        data_key="correoDocente",
        required=True,
        error_messages=_errores_obligatorio("Correo del docente"),
        validate=[no_vacio, validate.Length(max=MAX_LONG_CORREO)],
    )
    fecha_incidencia = _fecha(
        data_key="fechaIncidencia",
        required=True,
        error_messages=_errores_obligatorio("Fecha de incidencia"),
    )
    descripcion_incidencia = fields.String(
        data_key="descripcionIncidencia",
        required=True,
        error_messages=_errores_obligatorio("Descripcion de incidencia"),
        validate=[no_vacio, validate.Length(max=MAX_LONG_DESCRIPCION)],
    )
    estado_incidencia = fields.String(
        data_key="estadoIncidencia",
        required=True,
        error_messages=_errores_obligatorio("Estado de incidencia"),
        validate=validate.OneOf(ESTADOS_INCIDENCIA),
    )
    # Sin comentario se guarda "" (nunca null)
    comentario = fields.String(
        load_default="",
        validate=validate.Length(max=MAX_LONG_COMENTARIO),
        error_messages={"null": "El comentario no puede ser nulo, usa \"\"."},
    )


class FiltroBusquedaSchema(ma.Schema):
    """Todos los campos son opcionales; null equivale a no filtrar por ese campo."""

    class Meta:
        unknown = EXCLUDE

    numero_aula = fields.String(data_key="numeroAula", load_default=None, allow_none=True)
    correo_docente = fields.String(data_key="correoDocente", load_default=None, allow_none=True)
    fecha_inicio = _fecha(data_key="fechaInicio", load_default=None, allow_none=True)
    fecha_fin = _fecha(data_key="fechaFin", load_default=None, allow_none=True)
    descripcion_incidencia = fields.String(
        data_key="descripcionIncidencia", load_default=None, allow_none=True
    )
    estado_incidencia = fields.String(
        data_key="estadoIncidencia",
        load_default=None,
        allow_none=True,
        validate=validate.OneOf(ESTADOS_INCIDENCIA),
    )
    comentario = fields.String(load_default=None, allow_none=True)

    @post_load
    def crear_filtro(self, data, **kwargs) -> FiltroBusqueda:
        return FiltroBusqueda(**data)
