"""
Excepción base de Roastify.

Las capas de aplicación y API lanzan subclases de AppException; el handler
global de main.py las traduce a JSON con la forma {"error", "message", "details"}.
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Excepción base de la aplicación.

    Args:
        message: Mensaje legible para el cliente
        status_code: Código HTTP con el que se responde
        error_code: Código estable para que el frontend distinga el caso
        details: Datos extra (ids en conflicto, campo inválido, etc.)
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Cuerpo JSON de la respuesta de error."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self):
        return f"<{type(self).__name__}({self.status_code}, {self.error_code})>"
