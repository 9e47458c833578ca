"""
Casos de uso para el registro de tiempo (timer por usuario).

Reglas:
- Un usuario tiene como maximo una entrada corriendo (is_running=True).
- Al detener se fija end_time y duration en minutos enteros.
"""
from datetime import datetime
from typing import Optional, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from roastify.application.dto.time_entry_dto import (
    TimeEntryStartDTO,
    TimeEntryCreateDTO,
    TimeEntryResponseDTO,
    TimeSummaryDTO,
)
from roastify.infrastructure.repositories.time_entry_repository import TimeEntryRepository
from roastify.shared.exceptions.domain import (
    EntityNotFoundException,
    TimerAlreadyRunningException,
    TimerNotRunningException,
    ValidationException,
)
from roastify.shared.utils.datetime_utils import DateTimeUtils


class TimeTrackingUseCases:
    """Casos de uso de entradas de tiempo de un usuario autenticado."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = TimeEntryRepository(db)

    async def list_entries(
        self,
        user_id: int,
        task_id: Optional[int] = None,
        project_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[TimeEntryResponseDTO]:
        entries = await self.repository.list_by_user(
            user_id,
            task_id=task_id,
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
        )
        return [TimeEntryResponseDTO.model_validate(e) for e in entries]

    async def get_running(self, user_id: int) -> Optional[TimeEntryResponseDTO]:
        entry = await self.repository.find_running(user_id)
        return TimeEntryResponseDTO.model_validate(entry) if entry else None

    async def start_timer(self, user_id: int, dto: TimeEntryStartDTO) -> TimeEntryResponseDTO:
        """
        Inicia un timer nuevo.

        Raises:
            TimerAlreadyRunningException: si ya hay una entrada corriendo
        """
        running = await self.repository.find_running(user_id)
        if running:
            raise TimerAlreadyRunningException(running.id)

        try:
            entry = await self.repository.create({
                "user_id": user_id,
                "task_id": dto.task_id,
                "project_id": dto.project_id,
                "description": dto.description,
                "start_time": DateTimeUtils.now_utc(),
                "is_running": True,
            })
            await self.db.commit()
        except IntegrityError:
            # Otro request inicio un timer entre el chequeo y el insert
            await self.db.rollback()
            running = await self.repository.find_running(user_id)
            raise TimerAlreadyRunningException(running.id if running else None)

        logger.info(f"Timer {entry.id} iniciado para usuario {user_id}")
        return TimeEntryResponseDTO.model_validate(entry)

    async def stop_timer(self, user_id: int, entry_id: int) -> TimeEntryResponseDTO:
        """
        Detiene un timer corriendo y calcula la duracion en minutos.

        Raises:
            EntityNotFoundException: si la entrada no existe o no es del usuario
            TimerNotRunningException: si la entrada ya estaba detenida
        """
        entry = await self.repository.get_by_id_for_user(entry_id, user_id)
        if not entry:
            raise EntityNotFoundException("TimeEntry", entry_id)
        if not entry.is_running:
            raise TimerNotRunningException(entry_id)

        end_time = DateTimeUtils.now_utc()
        entry = await self.repository.update(entry, {
            "end_time": end_time,
            "duration": DateTimeUtils.minutes_between(entry.start_time, end_time),
            "is_running": False,
        })
        await self.db.commit()

        logger.info(f"Timer {entry_id} detenido ({entry.duration} min)")
        return TimeEntryResponseDTO.model_validate(entry)

    async def create_manual_entry(self, user_id: int, dto: TimeEntryCreateDTO) -> TimeEntryResponseDTO:
        start_time = DateTimeUtils.ensure_utc(dto.start_time)
        end_time = DateTimeUtils.ensure_utc(dto.end_time)
        if end_time <= start_time:
            raise ValidationException("end_time debe ser posterior a start_time", field="end_time")

        entry = await self.repository.create({
            "user_id": user_id,
            "task_id": dto.task_id,
            "project_id": dto.project_id,
            "description": dto.description,
            "start_time": start_time,
            "end_time": end_time,
            "duration": DateTimeUtils.minutes_between(start_time, end_time),
            "is_running": False,
        })
        await self.db.commit()
        return TimeEntryResponseDTO.model_validate(entry)

    async def delete_entry(self, user_id: int, entry_id: int) -> None:
        entry = await self.repository.get_by_id_for_user(entry_id, user_id)
        if not entry:
            raise EntityNotFoundException("TimeEntry", entry_id)
        await self.repository.delete(entry)
        await self.db.commit()
        logger.info(f"Entrada de tiempo {entry_id} eliminada")

    async def get_summary(
        self,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> TimeSummaryDTO:
        total_minutes, total_entries = await self.repository.summarize(
            user_id, start_date=start_date, end_date=end_date
        )
        return TimeSummaryDTO(
            total_minutes=total_minutes,
            total_hours=round(total_minutes / 60, 2),
            total_entries=total_entries,
        )
