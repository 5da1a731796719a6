from .incidencia_routes import bp as incidencias_bp

__all__ = ["incidencias_bp"]
