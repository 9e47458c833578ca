"""
Servicios de aplicacion.

Contiene la logica reutilizable que no pertenece
a un caso de uso especifico.
"""
from roastify.application.services.timer_widget import (
    TimerWidget,
    find_running_entry,
    elapsed_seconds,
    format_elapsed,
)

__all__ = [
    "TimerWidget",
    "find_running_entry",
    "elapsed_seconds",
    "format_elapsed",
]
