"""
Punto de entrada principal de la aplicación FastAPI.
Configura la aplicación, middlewares, rutas y eventos.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roastify import __version__
from roastify.core.config import settings, get_cors_origins
from roastify.core.events import startup_handler, shutdown_handler
from roastify.api.v1.router import api_router
from roastify.api.middlewares.error_handler import ErrorHandlerMiddleware
from roastify.shared.exceptions.base import AppException


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Ciclo de vida: startup antes de aceptar requests, shutdown al terminar."""
    await startup_handler(application)()
    try:
        yield
    finally:
        await shutdown_handler(application)()


def create_application() -> FastAPI:
    """
    Factory para crear y configurar la aplicación FastAPI.

    Returns:
        FastAPI: Instancia configurada de la aplicación
    """
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION or __version__,
        description="Backend de Roastify: registro de tiempo y mirror de bases de datos",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    cors_origins = get_cors_origins(settings.CORS_ORIGINS)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errores no controlados -> 500 generico
    application.add_middleware(ErrorHandlerMiddleware)

    # /api/v1/...
    application.include_router(api_router, prefix="/api")

    @application.exception_handler(AppException)
    async def app_exception_handler(request, exc: AppException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @application.get("/health", tags=["Health"])
    async def health_check():
        """Endpoint para verificar el estado de la aplicación."""
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT
        }

    return application


app = create_application()


if __name__ == "__main__":
    import uvicorn
    from roastify.core.logging_config import configure_logging

    configure_logging(settings.LOG_LEVEL)

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
