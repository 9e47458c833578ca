"""
Excepciones relacionadas con autenticación y autorización.
"""
from roastify.shared.exceptions.base import AppException


class AuthException(AppException):
    """Excepción base para errores de autenticación (401)."""

    def __init__(self, message: str, error_code: str = "AUTH_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details
        )


class InvalidCredentialsException(AuthException):
    """Email/contraseña incorrectos o token inválido."""

    def __init__(self, message: str = "Credenciales inválidas"):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS")


class TokenExpiredException(AuthException):
    def __init__(self):
        super().__init__(message="El token ha expirado", error_code="TOKEN_EXPIRED")


class UnauthorizedException(AuthException):
    """Falta el header Authorization o no es Bearer."""

    def __init__(self, message: str = "No autorizado"):
        super().__init__(message=message, error_code="UNAUTHORIZED")


class ForbiddenException(AppException):
    """Usuario autenticado sin permisos para la operación (403)."""

    def __init__(self, message: str = "Acceso prohibido", required_role: str = None):
        super().__init__(
            message=message,
            status_code=403,
            error_code="FORBIDDEN",
            details={"required_role": required_role} if required_role else None
        )
