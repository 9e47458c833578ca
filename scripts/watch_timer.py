"""
CLI: muestra en consola el timer corriendo del usuario (HH:MM:SS).

Tick local cada TIMER_TICK_SECONDS y consulta al servidor cada
TIMER_POLL_SECONDS. Ctrl+C para salir.

Ejecución:
  API_TOKEN=<jwt> python scripts/watch_timer.py
  python scripts/watch_timer.py --start "Revision de diseño" --project-id 3
  python scripts/watch_timer.py --stop
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
from loguru import logger
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

load_dotenv(_PROJECT_ROOT / ".env", override=False)

from roastify.core.config import settings
from roastify.core.logging_config import configure_logging
from roastify.application.services.timer_widget import TimerWidget


def _render(widget: TimerWidget) -> None:
    label = (widget.running_entry or {}).get("description") or "sin timer"
    sys.stdout.write(f"\r{widget.display}  {label[:40]:<40}")
    sys.stdout.flush()


async def run(args: argparse.Namespace) -> int:
    headers = {"Authorization": f"Bearer {args.token}"}
    async with httpx.AsyncClient(base_url=args.base_url, headers=headers, timeout=10.0) as client:
        widget = TimerWidget(
            client,
            tick_seconds=settings.TIMER_TICK_SECONDS,
            poll_seconds=settings.TIMER_POLL_SECONDS,
            on_tick=_render,
        )
        await widget.refresh()

        if args.start:
            await widget.start(description=args.start, task_id=args.task_id, project_id=args.project_id)
        if args.stop:
            await widget.stop()
            return 0

        stop_event = asyncio.Event()
        try:
            await widget.run(stop_event)
        except asyncio.CancelledError:
            stop_event.set()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Timer de Roastify en consola")
    parser.add_argument("--base-url", default=settings.API_BASE_URL)
    parser.add_argument("--token", default=settings.API_TOKEN)
    parser.add_argument("--start", metavar="DESCRIPCION", default=None)
    parser.add_argument("--task-id", type=int, default=None)
    parser.add_argument("--project-id", type=int, default=None)
    parser.add_argument("--stop", action="store_true")
    args = parser.parse_args(argv)

    configure_logging("WARNING")

    if not args.token:
        logger.error("Falta API_TOKEN (o --token)")
        return 2

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print()
        return 0
    except httpx.HTTPStatusError as e:
        logger.error(f"La API respondio {e.response.status_code}: {e.response.text}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
