# backend/incidencias/models/incidencia.py

from datetime import datetime
from typing import NamedTuple

from sqlalchemy.dialects import mysql

from incidencias.extensions import db
from incidencias.utils.constants import (
    ESTADO_PENDIENTE,
    ESTADOS_INCIDENCIA,
    MAX_LONG_AULA,
    MAX_LONG_COMENTARIO,
    MAX_LONG_CORREO,
    MAX_LONG_DESCRIPCION,
    MAX_LONG_ESTADO,
)


class IncidenciaId(NamedTuple):
    """
    Identidad de una incidencia: aula, docente y fecha, y nada más.
    Dos incidencias con el mismo IncidenciaId son la misma incidencia
    aunque difieran en descripción, estado o comentario.
    """

    numero_aula: str
    correo_docente: str
    fecha_incidencia: datetime


class Incidencia(db.Model):
    __tablename__ = "incidencias"

    # Clave primaria compuesta (numero_aula, correo_docente, fecha_incidencia)
    numero_aula = db.Column(db.String(MAX_LONG_AULA), primary_key=True)
    correo_docente = db.Column(db.String(MAX_LONG_CORREO), primary_key=True)

    # MySQL trunca a segundos si no se pide precisión de microsegundos
    fecha_incidencia = db.Column(
        db.DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql"),
        primary_key=True,
    )

    descripcion_incidencia = db.Column(db.String(MAX_LONG_DESCRIPCION), nullable=False)

    estado_incidencia = db.Column(
        db.Enum(
            *ESTADOS_INCIDENCIA,
            name="estado_incidencia_enum",
            length=MAX_LONG_ESTADO,
        ),
        nullable=False,
        default=ESTADO_PENDIENTE,
    )

    comentario = db.Column(db.String(MAX_LONG_COMENTARIO), nullable=False, default="")

    @property
    def id_compuesto(self) -> IncidenciaId:
        return IncidenciaId(self.numero_aula, self.correo_docente, self.fecha_incidencia)

    def __repr__(self) -> str:
        return (
            f"<Incidencia aula={self.numero_aula} docente={self.correo_docente} "
            f"fecha={self.fecha_incidencia} estado={self.estado_incidencia}>"
        )
