"""
Endpoints del registro de tiempo.
Timer (start/stop), entradas manuales y resumen del usuario autenticado.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from roastify.api.v1.dependencies.auth_deps import get_current_user
from roastify.api.v1.dependencies.use_case_deps import get_time_tracking_use_cases
from roastify.application.dto.time_entry_dto import (
    TimeEntryStartDTO,
    TimeEntryCreateDTO,
    TimeEntryResponseDTO,
    TimeSummaryDTO,
)
from roastify.application.use_cases.time_tracking_use_cases import TimeTrackingUseCases
from roastify.infrastructure.database.models import UserModel


router = APIRouter(prefix="/time-tracking", tags=["Time Tracking"])


@router.get(
    "",
    response_model=List[TimeEntryResponseDTO],
    summary="Listar entradas de tiempo"
)
async def list_entries(
    task_id: Optional[int] = Query(None),
    project_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None, description="Desde (ISO 8601)"),
    end_date: Optional[datetime] = Query(None, description="Hasta (ISO 8601)"),
    user: UserModel = Depends(get_current_user),
    use_cases: TimeTrackingUseCases = Depends(get_time_tracking_use_cases),
) -> List[TimeEntryResponseDTO]:
    """
    Lista las entradas del usuario, mas recientes primero.
    Cada item indica si esta corriendo (is_running).
    """
    return await use_cases.list_entries(
        user.id,
        task_id=task_id,
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get(
    "/running",
    response_model=Optional[TimeEntryResponseDTO],
    summary="Timer corriendo del usuario"
)
async def get_running(
    user: UserModel = Depends(get_current_user),
    use_cases: TimeTrackingUseCases = Depends(get_time_tracking_use_cases),
) -> Optional[TimeEntryResponseDTO]:
    return await use_cases.get_running(user.id)


@router.get("/summary", response_model=TimeSummaryDTO, summary="Resumen de horas")
async def get_summary(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    user: UserModel = Depends(get_current_user),
    use_cases: TimeTrackingUseCases = Depends(get_time_tracking_use_cases),
) -> TimeSummaryDTO:
    return await use_cases.get_summary(user.id, start_date=start_date, end_date=end_date)


@router.post(
    "/start",
    response_model=TimeEntryResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Iniciar timer"
)
async def start_timer(
    dto: TimeEntryStartDTO,
    user: UserModel = Depends(get_current_user),
    use_cases: TimeTrackingUseCases = Depends(get_time_tracking_use_cases),
) -> TimeEntryResponseDTO:
    """
    Inicia un timer para el usuario.

    Raises:
        409: Si ya hay un timer corriendo (TIMER_ALREADY_RUNNING)
    """
    return await use_cases.start_timer(user.id, dto)


@router.post(
    "/stop/{entry_id}",
    response_model=TimeEntryResponseDTO,
    summary="Detener timer"
)
async def stop_timer(
    entry_id: int,
    user: UserModel = Depends(get_current_user),
    use_cases: TimeTrackingUseCases = Depends(get_time_tracking_use_cases),
) -> TimeEntryResponseDTO:
    """
    Detiene el timer y calcula la duracion en minutos.

    Raises:
        404: Si la entrada no existe o es de otro usuario
        400: Si la entrada ya estaba detenida (TIMER_NOT_RUNNING)
    """
    return await use_cases.stop_timer(user.id, entry_id)


@router.post(
    "",
    response_model=TimeEntryResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Crear entrada manual"
)
async def create_entry(
    dto: TimeEntryCreateDTO,
    user: UserModel = Depends(get_current_user),
    use_cases: TimeTrackingUseCases = Depends(get_time_tracking_use_cases),
) -> TimeEntryResponseDTO:
    return await use_cases.create_manual_entry(user.id, dto)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar entrada"
)
async def delete_entry(
    entry_id: int,
    user: UserModel = Depends(get_current_user),
    use_cases: TimeTrackingUseCases = Depends(get_time_tracking_use_cases),
) -> None:
    await use_cases.delete_entry(user.id, entry_id)
