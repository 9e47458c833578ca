"""
DTOs relacionados con el registro de tiempo (timer y entradas manuales).
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator


class TimeEntryStartDTO(BaseModel):
    """DTO para iniciar el timer."""

    task_id: Optional[int] = Field(None, description="Tarea asociada")
    project_id: Optional[int] = Field(None, description="Proyecto asociado")
    description: Optional[str] = Field(
        None,
        max_length=1000,
        description="Descripcion libre de la actividad"
    )


class TimeEntryCreateDTO(BaseModel):
    """DTO para crear una entrada manual (ya finalizada)."""

    task_id: Optional[int] = None
    project_id: Optional[int] = None
    description: Optional[str] = Field(None, max_length=1000)
    start_time: datetime = Field(..., description="Inicio (ISO 8601)")
    end_time: datetime = Field(..., description="Fin (ISO 8601), posterior al inicio")

    @model_validator(mode="after")
    def check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time debe ser posterior a start_time")
        return self


class TimeEntryResponseDTO(BaseModel):
    """DTO de respuesta para una entrada de tiempo."""

    id: int
    user_id: int
    task_id: Optional[int] = None
    project_id: Optional[int] = None
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(None, description="Duracion en minutos")
    is_running: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuración de Pydantic."""
        from_attributes = True


class TimeSummaryDTO(BaseModel):
    """Totales de las entradas finalizadas."""

    total_minutes: int
    total_hours: float
    total_entries: int
