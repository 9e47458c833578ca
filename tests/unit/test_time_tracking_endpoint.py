"""
Tests del contrato HTTP de /api/v1/time-tracking.

Los casos de uso se mockean via dependency_overrides; se verifica ruteo,
códigos de estado y el formato de error {"error", "message", "details"}.
"""
from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from roastify.api.v1.dependencies.auth_deps import get_current_user
from roastify.api.v1.dependencies.use_case_deps import get_time_tracking_use_cases
from roastify.application.dto.time_entry_dto import TimeEntryResponseDTO, TimeSummaryDTO
from roastify.infrastructure.database.session import get_db
from roastify.shared.exceptions.domain import (
    EntityNotFoundException,
    TimerAlreadyRunningException,
    TimerNotRunningException,
)

T0 = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
USER = SimpleNamespace(id=7, email="ana@example.com", role="user", is_admin=False)


def _entry(**overrides) -> TimeEntryResponseDTO:
    data = {"id": 1, "user_id": USER.id, "start_time": T0, "is_running": True, "description": "Logo"}
    data.update(overrides)
    return TimeEntryResponseDTO(**data)


async def _fake_db():
    yield AsyncMock()


@pytest.fixture
def mock_use_cases() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def app_with_mock(mock_use_cases: AsyncMock):
    from main import create_application
    app = create_application()
    app.dependency_overrides[get_db] = _fake_db
    app.dependency_overrides[get_current_user] = lambda: USER
    app.dependency_overrides[get_time_tracking_use_cases] = lambda: mock_use_cases
    yield app
    app.dependency_overrides.clear()


async def _request(app, method: str, url: str, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, url, **kwargs)


async def test_list_entries_passes_filters(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.list_entries = AsyncMock(return_value=[_entry(), _entry(id=2, is_running=False, duration=15)])

    response = await _request(
        app_with_mock, "GET", "/api/v1/time-tracking",
        params={"project_id": 3, "start_date": "2026-03-01T00:00:00Z"},
    )

    assert response.status_code == 200
    body = response.json()
    assert [e["is_running"] for e in body] == [True, False]
    kwargs = mock_use_cases.list_entries.call_args.kwargs
    assert mock_use_cases.list_entries.call_args.args == (USER.id,)
    assert kwargs["project_id"] == 3
    assert kwargs["start_date"] == datetime(2026, 3, 1, tzinfo=timezone.utc)


async def test_running_returns_null_when_idle(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.get_running = AsyncMock(return_value=None)

    response = await _request(app_with_mock, "GET", "/api/v1/time-tracking/running")

    assert response.status_code == 200
    assert response.json() is None


async def test_start_returns_201(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.start_timer = AsyncMock(return_value=_entry())

    response = await _request(app_with_mock, "POST", "/api/v1/time-tracking/start", json={"description": "Logo"})

    assert response.status_code == 201
    assert response.json()["is_running"] is True
    dto = mock_use_cases.start_timer.call_args.args[1]
    assert dto.description == "Logo"


async def test_start_while_running_returns_409(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.start_timer = AsyncMock(side_effect=TimerAlreadyRunningException(1))

    response = await _request(app_with_mock, "POST", "/api/v1/time-tracking/start", json={"task_id": 4})

    assert response.status_code == 409
    assert response.json() == {
        "error": "TIMER_ALREADY_RUNNING",
        "message": "Ya tienes un timer corriendo. Detenlo antes de iniciar otro.",
        "details": {"running_entry_id": 1},
    }


async def test_start_rejects_too_long_description(app_with_mock, mock_use_cases) -> None:
    response = await _request(
        app_with_mock, "POST", "/api/v1/time-tracking/start", json={"description": "x" * 1001}
    )
    assert response.status_code == 422
    mock_use_cases.start_timer.assert_not_called()


async def test_stop_maps_domain_errors(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.stop_timer = AsyncMock(side_effect=EntityNotFoundException("TimeEntry", 99))
    response = await _request(app_with_mock, "POST", "/api/v1/time-tracking/stop/99")
    assert response.status_code == 404
    assert response.json()["error"] == "ENTITY_NOT_FOUND"

    mock_use_cases.stop_timer = AsyncMock(side_effect=TimerNotRunningException(1))
    response = await _request(app_with_mock, "POST", "/api/v1/time-tracking/stop/1")
    assert response.status_code == 400
    assert response.json()["error"] == "TIMER_NOT_RUNNING"


async def test_stop_returns_stopped_entry(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.stop_timer = AsyncMock(return_value=_entry(is_running=False, duration=42, end_time=T0))

    response = await _request(app_with_mock, "POST", "/api/v1/time-tracking/stop/1")

    assert response.status_code == 200
    assert response.json()["duration"] == 42
    assert mock_use_cases.stop_timer.call_args.args == (USER.id, 1)


async def test_manual_entry_validates_range(app_with_mock, mock_use_cases) -> None:
    response = await _request(
        app_with_mock, "POST", "/api/v1/time-tracking",
        json={"start_time": "2026-03-02T10:00:00Z", "end_time": "2026-03-02T09:00:00Z"},
    )
    assert response.status_code == 422

    mock_use_cases.create_manual_entry = AsyncMock(return_value=_entry(is_running=False, duration=60))
    response = await _request(
        app_with_mock, "POST", "/api/v1/time-tracking",
        json={"start_time": "2026-03-02T09:00:00Z", "end_time": "2026-03-02T10:00:00Z"},
    )
    assert response.status_code == 201


async def test_delete_returns_204(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.delete_entry = AsyncMock(return_value=None)

    response = await _request(app_with_mock, "DELETE", "/api/v1/time-tracking/5")

    assert response.status_code == 204
    mock_use_cases.delete_entry.assert_awaited_once_with(USER.id, 5)


async def test_summary(app_with_mock, mock_use_cases) -> None:
    mock_use_cases.get_summary = AsyncMock(
        return_value=TimeSummaryDTO(total_minutes=90, total_hours=1.5, total_entries=2)
    )

    response = await _request(app_with_mock, "GET", "/api/v1/time-tracking/summary")

    assert response.status_code == 200
    assert response.json() == {"total_minutes": 90, "total_hours": 1.5, "total_entries": 2}


async def test_requests_without_token_are_rejected(mock_use_cases) -> None:
    from main import create_application
    app = create_application()
    app.dependency_overrides[get_db] = _fake_db
    app.dependency_overrides[get_time_tracking_use_cases] = lambda: mock_use_cases

    response = await _request(app, "GET", "/api/v1/time-tracking")

    assert response.status_code == 401
    assert response.json()["error"] == "UNAUTHORIZED"
