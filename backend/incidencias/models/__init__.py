from .incidencia import Incidencia, IncidenciaId

__all__ = ["Incidencia", "IncidenciaId"]
