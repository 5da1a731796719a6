# Longitudes máximas de columnas (incidencias)
MAX_LONG_AULA = 20
MAX_LONG_CORREO = 100
MAX_LONG_DESCRIPCION = 255
MAX_LONG_ESTADO = 20
MAX_LONG_COMENTARIO = 255

# Hora de referencia para sellar las incidencias
ZONA_HORARIA = "Europe/Madrid"

# Estados de una incidencia
ESTADO_PENDIENTE = "PENDING"
ESTADO_EN_PROGRESO = "IN_PROGRESS"
ESTADO_CANCELADA = "CANCELLED"
ESTADO_RESUELTA = "RESOLVED"

ESTADOS_INCIDENCIA = (
    ESTADO_PENDIENTE,
    ESTADO_EN_PROGRESO,
    ESTADO_CANCELADA,
    ESTADO_RESUELTA,
)

# Cabecera con el correo del docente que hace la petición
CABECERA_CORREO_DOCENTE = "correo-docente"
