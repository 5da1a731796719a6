"""crear tabla incidencias

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    # Algunas instalaciones ya tienen la tabla creada a mano.
    if "incidencias" not in tables:
        op.create_table(
            "incidencias",
            sa.Column("numero_aula", sa.String(length=20), nullable=False),
            sa.Column("correo_docente", sa.String(length=100), nullable=False),
            sa.Column(
                "fecha_incidencia",
                sa.DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql"),
                nullable=False,
            ),
            sa.Column("descripcion_incidencia", sa.String(length=255), nullable=False),
            sa.Column(
                "estado_incidencia",
                sa.Enum(
                    "PENDING",
                    "IN_PROGRESS",
                    "CANCELLED",
                    "RESOLVED",
                    name="estado_incidencia_enum",
                    length=20,
                ),
                nullable=False,
            ),
            sa.Column("comentario", sa.String(length=255), nullable=False, server_default=""),
            sa.PrimaryKeyConstraint(
                "numero_aula",
                "correo_docente",
                "fecha_incidencia",
                name="pk_incidencias",
            ),
        )


def downgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    if "incidencias" in tables:
        op.drop_table("incidencias")
