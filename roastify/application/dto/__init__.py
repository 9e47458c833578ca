"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .time_entry_dto import (
    TimeEntryStartDTO,
    TimeEntryCreateDTO,
    TimeEntryResponseDTO,
    TimeSummaryDTO,
)
from .auth_dto import LoginRequestDTO, UserResponseDTO, TokenResponseDTO

__all__ = [
    "TimeEntryStartDTO",
    "TimeEntryCreateDTO",
    "TimeEntryResponseDTO",
    "TimeSummaryDTO",
    "LoginRequestDTO",
    "UserResponseDTO",
    "TokenResponseDTO",
]
