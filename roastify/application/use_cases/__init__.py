"""
Casos de uso de la aplicacion.
"""
from .time_tracking_use_cases import TimeTrackingUseCases
from .auth_use_cases import AuthUseCases
from .admin_use_cases import AdminUseCases
from .mirror_use_cases import MirrorUseCases

__all__ = ["TimeTrackingUseCases", "AuthUseCases", "AdminUseCases", "MirrorUseCases"]
