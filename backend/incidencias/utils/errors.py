from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError


class ApiError(Exception):
    """
    Excepción genérica para errores de negocio.

    El status_code distingue el tipo de fallo que ve el cliente:
    400 datos inválidos, 404 incidencia no encontrada, 409 conflicto de
    identidad y 500 fallo del almacén.
    """
    def __init__(self, message, status_code=400, errors=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}
        self.payload = payload or {}


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            app.logger.error("[incidencias] %s", err.message)
        else:
            app.logger.info("[incidencias] petición rechazada (%s): %s", err.status_code, err.message)

        response = {
            "success": False,
            "message": err.message,
        }
        if err.errors:
            response["errors"] = err.errors
        if getattr(err, "payload", None):
            response["payload"] = err.payload

        return jsonify(response), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err: ValidationError):
        app.logger.info("[incidencias] datos inválidos: %s", err.messages)
        response = {
            "success": False,
            "message": "Datos inválidos",
            "errors": err.messages if hasattr(err, "messages") else str(err),
        }
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        response = {
            "success": False,
            "message": err.description or "Error HTTP",
        }
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Traza completa en el log; el cliente solo recibe un mensaje genérico
        app.logger.exception(err)

        response = {
            "success": False,
            "message": "Error interno del servidor",
        }
        return jsonify(response), 500
