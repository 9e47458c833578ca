"""
Widget de timer del lado cliente.

Mantiene el tiempo transcurrido del timer corriendo del usuario:
- tick local cada tick_seconds (1 s) recalculando desde start_time
- refresh contra el servidor cada poll_seconds (5 s)

El servidor es la fuente de verdad: si otro cliente detiene el timer,
el siguiente refresh lo limpia.
"""
from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
from loguru import logger

from roastify.shared.utils.datetime_utils import DateTimeUtils


Entry = Dict[str, Any]


def find_running_entry(entries: List[Entry]) -> Optional[Entry]:
    """
    Devuelve la entrada con is_running verdadero (1/True).

    Si hay mas de una se usa la primera y se loguea un warning.
    """
    running = [e for e in entries or [] if e.get("is_running")]
    if len(running) > 1:
        ids = [e.get("id") for e in running]
        logger.warning(f"Hay {len(running)} timers corriendo ({ids}); se usa el primero")
    return running[0] if running else None


def elapsed_seconds(start_time: Union[str, datetime, None], now: datetime) -> int:
    """Segundos enteros desde start_time hasta now (nunca negativo)."""
    start = DateTimeUtils.from_iso_string(start_time)
    if start is None:
        return 0
    return DateTimeUtils.seconds_between(start, now)


def format_elapsed(seconds: int) -> str:
    """Formato HH:MM:SS."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _extract_entries(payload: Any) -> List[Entry]:
    # La API puede responder lista pelada o envuelta en {"data": [...]}
    if isinstance(payload, dict):
        return payload.get("data") or []
    return payload or []


class TimerWidget:
    """
    Estado del timer para una UI (consola o frontend).

    El cliente httpx debe venir configurado con base_url (.../api/v1)
    y el header Authorization del usuario.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        tick_seconds: float = 1.0,
        poll_seconds: float = 5.0,
        clock: Callable[[], datetime] = DateTimeUtils.now_utc,
        on_tick: Optional[Callable[["TimerWidget"], None]] = None,
    ):
        self._client = client
        self.tick_seconds = tick_seconds
        self.poll_seconds = poll_seconds
        self._clock = clock
        self._on_tick = on_tick
        self.running_entry: Optional[Entry] = None
        self.elapsed: int = 0

    @property
    def is_running(self) -> bool:
        return self.running_entry is not None

    @property
    def display(self) -> str:
        return format_elapsed(self.elapsed)

    async def refresh(self) -> Optional[Entry]:
        """Consulta las entradas del usuario y actualiza el timer corriendo."""
        response = await self._client.get("/time-tracking")
        response.raise_for_status()

        self.running_entry = find_running_entry(_extract_entries(response.json()))
        if self.running_entry is None:
            self.elapsed = 0
        else:
            self.tick()
        return self.running_entry

    def tick(self) -> int:
        if self.running_entry is None:
            self.elapsed = 0
        else:
            self.elapsed = elapsed_seconds(self.running_entry.get("start_time"), self._clock())
        if self._on_tick:
            self._on_tick(self)
        return self.elapsed

    async def start(
        self,
        description: Optional[str] = None,
        task_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> Optional[Entry]:
        if not (description or task_id or project_id):
            raise ValueError("Indica una descripcion, tarea o proyecto para iniciar el timer")

        response = await self._client.post(
            "/time-tracking/start",
            json={"description": description, "task_id": task_id, "project_id": project_id},
        )
        response.raise_for_status()
        logger.info(f"Timer iniciado: {response.json().get('id')}")
        return await self.refresh()

    async def stop(self) -> None:
        if self.running_entry is None:
            logger.warning("No hay timer corriendo")
            return

        entry_id = self.running_entry["id"]
        response = await self._client.post(f"/time-tracking/stop/{entry_id}")
        response.raise_for_status()
        logger.info(f"Timer {entry_id} detenido")
        await self.refresh()
        self.elapsed = 0

    async def run(self, stop_event: asyncio.Event) -> None:
        """
        Corre los loops de tick y poll hasta que se setea stop_event.
        """
        await asyncio.gather(
            self._loop(self.tick_seconds, self._tick_once, stop_event),
            self._loop(self.poll_seconds, self._poll_once, stop_event),
        )

    async def _tick_once(self) -> None:
        self.tick()

    async def _poll_once(self) -> None:
        try:
            await self.refresh()
        except httpx.HTTPError as e:
            logger.error(f"Error al consultar el timer: {e}")

    @staticmethod
    async def _loop(interval: float, step, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await step()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
