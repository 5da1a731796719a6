import os

from incidencias import create_app
from incidencias.config import DevConfig, ProdConfig


def _entorno_produccion() -> bool:
    return os.getenv("APP_ENV", "").lower() in ("production", "produccion", "prod")


config = ProdConfig if _entorno_produccion() else DevConfig
app = create_app(config)

if __name__ == "__main__":
    app.run()
