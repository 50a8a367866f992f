from fastapi import FastAPI

from .health import router as health_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(health_router)
    app.include_router(notifications_router)
    # Ruta usada por el cliente web de notas.
    app.include_router(notifications_router, prefix="/api")
