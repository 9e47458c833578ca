"""
Implementación del repositorio de entradas de tiempo.
Maneja las operaciones de base de datos para la entidad TimeEntryModel.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roastify.infrastructure.database.models import TimeEntryModel


class TimeEntryRepository:
    """Repositorio para gestionar entradas de tiempo en la base de datos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_user(
        self,
        user_id: int,
        task_id: Optional[int] = None,
        project_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[TimeEntryModel]:
        """
        Obtiene las entradas del usuario, mas recientes primero.
        """
        query = select(TimeEntryModel).where(TimeEntryModel.user_id == user_id)

        if task_id is not None:
            query = query.where(TimeEntryModel.task_id == task_id)
        if project_id is not None:
            query = query.where(TimeEntryModel.project_id == project_id)
        if start_date is not None:
            query = query.where(TimeEntryModel.start_time >= start_date)
        if end_date is not None:
            query = query.where(TimeEntryModel.start_time <= end_date)

        query = query.order_by(TimeEntryModel.start_time.desc(), TimeEntryModel.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id_for_user(self, entry_id: int, user_id: int) -> Optional[TimeEntryModel]:
        result = await self.db.execute(
            select(TimeEntryModel).where(
                TimeEntryModel.id == entry_id,
                TimeEntryModel.user_id == user_id,
            )
        )
        return result.scalars().first()

    async def find_running(self, user_id: int) -> Optional[TimeEntryModel]:
        result = await self.db.execute(
            select(TimeEntryModel)
            .where(TimeEntryModel.user_id == user_id, TimeEntryModel.is_running.is_(True))
            .order_by(TimeEntryModel.start_time.desc())
        )
        return result.scalars().first()

    async def create(self, data: Dict[str, Any]) -> TimeEntryModel:
        entry = TimeEntryModel(**data)
        self.db.add(entry)
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def update(self, entry: TimeEntryModel, data: Dict[str, Any]) -> TimeEntryModel:
        for key, value in data.items():
            setattr(entry, key, value)
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def delete(self, entry: TimeEntryModel) -> None:
        await self.db.delete(entry)
        await self.db.flush()

    async def summarize(
        self,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[int, int]:
        """
        Suma de minutos y cantidad de entradas detenidas del usuario.

        Returns:
            Tuple[int, int]: (total_minutos, total_entradas)
        """
        query = select(
            func.coalesce(func.sum(TimeEntryModel.duration), 0),
            func.count(TimeEntryModel.id),
        ).where(
            TimeEntryModel.user_id == user_id,
            TimeEntryModel.is_running.is_(False),
        )
        if start_date is not None:
            query = query.where(TimeEntryModel.start_time >= start_date)
        if end_date is not None:
            query = query.where(TimeEntryModel.start_time <= end_date)

        result = await self.db.execute(query)
        total_minutes, total_entries = result.one()
        return int(total_minutes or 0), int(total_entries or 0)
