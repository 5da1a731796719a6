import pytest

from datetime import datetime

from sqlalchemy.pool import StaticPool

from incidencias import create_app
from incidencias.config import TestConfig as BaseTestConfig
from incidencias.extensions import db

# Importar modelos para que SQLAlchemy registre mappers/tablas
import incidencias.models  # noqa: F401
from incidencias.models.incidencia import Incidencia


ORIGEN_CORS = "http://localhost:4200"


class PytestConfig(BaseTestConfig):
	SQLALCHEMY_DATABASE_URI = "sqlite://"
	SQLALCHEMY_ENGINE_OPTIONS = {
		"connect_args": {"check_same_thread": False},
		"poolclass": StaticPool,
	}
	URL_CORS = ORIGEN_CORS
	CORS_RUTA = "/incidencias"
	LOG_LEVEL = "DEBUG"


@pytest.fixture(scope="session")
def app():
	app = create_app(PytestConfig)
	with app.app_context():
		db.create_all()
		yield app
		db.session.remove()
		db.drop_all()


@pytest.fixture()
def client(app):
	return app.test_client()


@pytest.fixture()
def db_session(app):
	with app.app_context():
		yield db.session
		db.session.rollback()


@pytest.fixture(autouse=True)
def tabla_limpia(app):
	yield
	db.session.rollback()
	Incidencia.query.delete()
	db.session.commit()


@pytest.fixture()
def make_incidencia(db_session):
	def _make_incidencia(
		numero_aula: str = "101",
		correo_docente: str = "docente@test.com",
		fecha_incidencia: datetime = datetime(2026, 10, 1, 9, 30, 0),
		descripcion_incidencia: str = "Proyector roto",
		estado_incidencia: str = "PENDING",
		comentario: str = "",
	):
		i = Incidencia(
			numero_aula=numero_aula,
			correo_docente=correo_docente,
			fecha_incidencia=fecha_incidencia,
			descripcion_incidencia=descripcion_incidencia,
			estado_incidencia=estado_incidencia,
			comentario=comentario,
		)
		db_session.add(i)
		db_session.commit()
		return i

	return _make_incidencia


@pytest.fixture()
def incidencias_en_bd(db_session):
	"""Lee la tabla sin reutilizar objetos cacheados en la sesión de los tests."""

	def _incidencias_en_bd():
		db_session.expire_all()
		return (
			Incidencia.query.order_by(
				Incidencia.numero_aula.asc(),
				Incidencia.correo_docente.asc(),
				Incidencia.fecha_incidencia.asc(),
			)
			.all()
		)

	return _incidencias_en_bd


def payload_de(incidencia: Incidencia, **cambios) -> dict:
	data = {
		"numeroAula": incidencia.numero_aula,
		"correoDocente": incidencia.correo_docente,
		"fechaIncidencia": incidencia.fecha_incidencia.isoformat(),
		"descripcionIncidencia": incidencia.descripcion_incidencia,
		"estadoIncidencia": incidencia.estado_incidencia,
		"comentario": incidencia.comentario,
	}
	data.update(cambios)
	return data


@pytest.fixture()
def payload():
	return payload_de
