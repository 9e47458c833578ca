"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roastify.application.use_cases.time_tracking_use_cases import TimeTrackingUseCases
from roastify.application.use_cases.auth_use_cases import AuthUseCases
from roastify.application.use_cases.mirror_use_cases import MirrorUseCases
from roastify.infrastructure.database.session import get_db


def get_time_tracking_use_cases(
    db: AsyncSession = Depends(get_db)
) -> TimeTrackingUseCases:
    """
    Dependencia para obtener los casos de uso de registro de tiempo.

    Returns:
        TimeTrackingUseCases: Instancia de casos de uso de tiempo
    """
    return TimeTrackingUseCases(db)


def get_auth_use_cases(
    db: AsyncSession = Depends(get_db)
) -> AuthUseCases:
    return AuthUseCases(db)


def get_mirror_use_cases() -> MirrorUseCases:
    """
    Dependencia para el mirror (usa la configuracion global de la app).
    """
    return MirrorUseCases()
