"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any

from roastify.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""
    
    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class EntityNotFoundException(DomainException):
    """Excepción cuando no se encuentra una entidad."""
    
    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(
            message=f"{entity_name} con ID {entity_id} no encontrado",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity_name, "id": str(entity_id)}
        )
        self.status_code = 404


class ValidationException(DomainException):
    """Excepción para errores de validación."""
    
    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class TimerAlreadyRunningException(DomainException):
    """Excepcion cuando el usuario ya tiene un timer corriendo."""
    
    def __init__(self, running_entry_id: int):
        super().__init__(
            message="Ya tienes un timer corriendo. Detenlo antes de iniciar otro.",
            error_code="TIMER_ALREADY_RUNNING",
            details={"running_entry_id": running_entry_id}
        )
        self.status_code = 409


class TimerNotRunningException(DomainException):
    """Excepcion cuando se intenta detener un timer ya detenido."""
    
    def __init__(self, entry_id: int):
        super().__init__(
            message=f"El timer {entry_id} no esta corriendo",
            error_code="TIMER_NOT_RUNNING",
            details={"entry_id": entry_id}
        )
