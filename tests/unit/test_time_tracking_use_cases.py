"""
Tests de los casos de uso de registro de tiempo sobre SQLite en memoria.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from roastify.application.dto.time_entry_dto import TimeEntryCreateDTO, TimeEntryStartDTO
from roastify.application.use_cases.time_tracking_use_cases import TimeTrackingUseCases
from roastify.infrastructure.database.models import TimeEntryModel
from roastify.shared.exceptions.domain import (
    EntityNotFoundException,
    TimerAlreadyRunningException,
    TimerNotRunningException,
    ValidationException,
)
from roastify.shared.utils.datetime_utils import DateTimeUtils

T0 = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
USER_ID = 1
OTHER_USER_ID = 2


@pytest.fixture
def frozen_now(monkeypatch):
    """Reloj controlable para DateTimeUtils.now_utc."""
    state = {"now": T0}
    monkeypatch.setattr(DateTimeUtils, "now_utc", staticmethod(lambda: state["now"]))
    return state


async def test_start_then_stop_sets_whole_minute_duration(db_session, frozen_now) -> None:
    use_cases = TimeTrackingUseCases(db_session)

    started = await use_cases.start_timer(USER_ID, TimeEntryStartDTO(description="Diseño de logo"))
    assert started.is_running is True
    assert started.end_time is None
    assert started.duration is None

    frozen_now["now"] = T0 + timedelta(minutes=42, seconds=59)
    stopped = await use_cases.stop_timer(USER_ID, started.id)

    assert stopped.is_running is False
    assert stopped.duration == 42
    assert DateTimeUtils.ensure_utc(stopped.end_time) == frozen_now["now"]
    assert await use_cases.get_running(USER_ID) is None


async def test_start_while_running_is_rejected(db_session, frozen_now) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    first = await use_cases.start_timer(USER_ID, TimeEntryStartDTO(task_id=5))

    with pytest.raises(TimerAlreadyRunningException) as exc_info:
        await use_cases.start_timer(USER_ID, TimeEntryStartDTO(task_id=6))

    assert exc_info.value.status_code == 409
    assert exc_info.value.details == {"running_entry_id": first.id}


async def test_other_users_can_run_their_own_timer(db_session, frozen_now) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    await use_cases.start_timer(USER_ID, TimeEntryStartDTO(description="a"))
    other = await use_cases.start_timer(OTHER_USER_ID, TimeEntryStartDTO(description="b"))

    assert other.user_id == OTHER_USER_ID
    assert (await use_cases.get_running(OTHER_USER_ID)).id == other.id


async def test_concurrent_start_hits_unique_index_and_maps_to_conflict(db_session, frozen_now) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    first = await use_cases.start_timer(USER_ID, TimeEntryStartDTO(description="a"))

    # Simula que el chequeo previo no vio el timer (otro request en paralelo)
    use_cases.repository.find_running = AsyncMock(side_effect=[None, SimpleNamespace(id=first.id)])

    with pytest.raises(TimerAlreadyRunningException) as exc_info:
        await use_cases.start_timer(USER_ID, TimeEntryStartDTO(description="b"))

    assert exc_info.value.details == {"running_entry_id": first.id}


async def test_partial_index_allows_many_stopped_entries(db_session) -> None:
    for i in range(3):
        db_session.add(TimeEntryModel(user_id=USER_ID, start_time=T0 + timedelta(hours=i), duration=10))
    db_session.add(TimeEntryModel(user_id=USER_ID, start_time=T0, is_running=True))
    await db_session.flush()

    db_session.add(TimeEntryModel(user_id=USER_ID, start_time=T0, is_running=True))
    with pytest.raises(IntegrityError):
        await db_session.flush()


async def test_stop_unknown_or_foreign_entry_is_not_found(db_session, frozen_now) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    entry = await use_cases.start_timer(USER_ID, TimeEntryStartDTO(description="a"))

    with pytest.raises(EntityNotFoundException):
        await use_cases.stop_timer(USER_ID, 999)
    with pytest.raises(EntityNotFoundException):
        await use_cases.stop_timer(OTHER_USER_ID, entry.id)


async def test_stop_already_stopped_entry_fails(db_session, frozen_now) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    entry = await use_cases.start_timer(USER_ID, TimeEntryStartDTO(description="a"))
    await use_cases.stop_timer(USER_ID, entry.id)

    with pytest.raises(TimerNotRunningException) as exc_info:
        await use_cases.stop_timer(USER_ID, entry.id)

    assert exc_info.value.error_code == "TIMER_NOT_RUNNING"
    assert exc_info.value.status_code == 400


async def test_manual_entry_computes_duration(db_session) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    entry = await use_cases.create_manual_entry(
        USER_ID,
        TimeEntryCreateDTO(
            project_id=3,
            description="Reunion",
            start_time=T0,
            end_time=T0 + timedelta(hours=1, minutes=30),
        ),
    )

    assert entry.duration == 90
    assert entry.is_running is False
    assert entry.project_id == 3


def test_manual_entry_dto_rejects_end_before_start() -> None:
    with pytest.raises(ValueError):
        TimeEntryCreateDTO(start_time=T0, end_time=T0 - timedelta(minutes=1))


async def test_manual_entry_use_case_rejects_inverted_range(db_session) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    dto = TimeEntryCreateDTO.model_construct(start_time=T0, end_time=T0, description=None, task_id=None, project_id=None)

    with pytest.raises(ValidationException):
        await use_cases.create_manual_entry(USER_ID, dto)


async def test_list_is_filtered_and_newest_first(db_session) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    for hours, project_id in [(0, 1), (2, 1), (1, 2)]:
        await use_cases.create_manual_entry(
            USER_ID,
            TimeEntryCreateDTO(
                project_id=project_id,
                start_time=T0 + timedelta(hours=hours),
                end_time=T0 + timedelta(hours=hours, minutes=15),
            ),
        )
    await use_cases.create_manual_entry(
        OTHER_USER_ID,
        TimeEntryCreateDTO(start_time=T0, end_time=T0 + timedelta(minutes=5)),
    )

    entries = await use_cases.list_entries(USER_ID)
    assert [DateTimeUtils.ensure_utc(e.start_time) for e in entries] == [
        T0 + timedelta(hours=2), T0 + timedelta(hours=1), T0,
    ]

    by_project = await use_cases.list_entries(USER_ID, project_id=1)
    assert len(by_project) == 2

    recent = await use_cases.list_entries(USER_ID, start_date=T0 + timedelta(minutes=30))
    assert len(recent) == 2


async def test_delete_entry(db_session) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    entry = await use_cases.create_manual_entry(
        USER_ID, TimeEntryCreateDTO(start_time=T0, end_time=T0 + timedelta(minutes=5))
    )

    with pytest.raises(EntityNotFoundException):
        await use_cases.delete_entry(OTHER_USER_ID, entry.id)

    await use_cases.delete_entry(USER_ID, entry.id)
    assert await use_cases.list_entries(USER_ID) == []


async def test_summary_counts_only_stopped_entries(db_session, frozen_now) -> None:
    use_cases = TimeTrackingUseCases(db_session)
    for minutes in (30, 45):
        await use_cases.create_manual_entry(
            USER_ID, TimeEntryCreateDTO(start_time=T0, end_time=T0 + timedelta(minutes=minutes))
        )
    await use_cases.start_timer(USER_ID, TimeEntryStartDTO(description="en curso"))

    summary = await use_cases.get_summary(USER_ID)

    assert summary.total_minutes == 75
    assert summary.total_hours == 1.25
    assert summary.total_entries == 2


async def test_summary_of_user_without_entries(db_session) -> None:
    summary = await TimeTrackingUseCases(db_session).get_summary(USER_ID)
    assert summary.total_minutes == 0
    assert summary.total_entries == 0
    assert summary.total_hours == 0
