"""
Middleware para errores no controlados.

Las AppException las resuelve el exception handler registrado en main.py;
aquí solo llega lo que escapó a ese handler (errores de BD, bugs).
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger

from roastify.shared.exceptions.base import AppException


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convierte cualquier excepción no controlada en un 500 con cuerpo estándar."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except AppException as exc:
            logger.warning(
                "AppException fuera del handler en {} {}: {}",
                request.method, request.url.path, exc.error_code,
            )
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        except Exception:
            # logger.exception incluye el traceback; el mensaje va como argumento
            # para que loguru no interprete llaves del texto del error
            logger.exception("Error no manejado en {} {}", request.method, request.url.path)
            generic = AppException(
                "Ha ocurrido un error interno del servidor",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                error_code="INTERNAL_SERVER_ERROR",
            )
            return JSONResponse(status_code=generic.status_code, content=generic.to_dict())
