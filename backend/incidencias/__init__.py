import pymysql
pymysql.install_as_MySQLdb()
from flask import Flask
from flask_cors import CORS

from .config import DevConfig
from .extensions import db, migrate, ma
from .utils.errors import register_error_handlers
from .api import incidencia_routes


def create_app(config_class=DevConfig) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # CORS: solo el origen configurado en URL_CORS puede llamar a /incidencias
    CORS(
        app,
        resources={
            app.config["CORS_RUTA"]: {
                "origins": app.config["URL_CORS"],
                "methods": ["GET", "PUT", "POST", "DELETE"],
            }
        },
    )

    # Inicializar extensiones
    db.init_app(app)
    migrate.init_app(app, db, directory=app.config["MIGRATIONS_DIR"])
    ma.init_app(app)

    # Registrar blueprints
    app.register_blueprint(incidencia_routes.bp, url_prefix="/incidencias")

    # Manejadores de errores
    register_error_handlers(app)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": "reaktor-incidencias"}

    app.logger.debug("[incidencias] aplicación creada (CORS %s -> %s)", app.config["CORS_RUTA"], app.config["URL_CORS"])
    return app
