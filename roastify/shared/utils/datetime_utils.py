"""
Utilidades para manejo de fechas y horas.
"""
import math
from datetime import datetime, timezone
from typing import Optional, Union


class DateTimeUtils:
    """Clase de utilidades para operaciones con fechas y horas."""

    @staticmethod
    def now_utc() -> datetime:
        """
        Obtiene la fecha y hora actual en UTC.

        Returns:
            datetime: Fecha y hora actual en UTC
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """
        Normaliza datetime a UTC (aware).

        SQLite (tests) devuelve datetimes naive: se asumen en UTC.
        """
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def from_iso_string(iso_string: Union[str, datetime, None]) -> Optional[datetime]:
        """
        Convierte un string ISO 8601 (acepta sufijo 'Z') a datetime UTC.

        Returns:
            Optional[datetime]: Objeto datetime o None si hay error
        """
        if isinstance(iso_string, datetime):
            return DateTimeUtils.ensure_utc(iso_string)
        try:
            parsed = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
        except (ValueError, TypeError, AttributeError):
            return None
        return DateTimeUtils.ensure_utc(parsed)

    @staticmethod
    def seconds_between(start: datetime, end: datetime) -> int:
        """Segundos enteros transcurridos (floor), nunca negativos."""
        delta = (DateTimeUtils.ensure_utc(end) - DateTimeUtils.ensure_utc(start)).total_seconds()
        return max(0, math.floor(delta))

    @staticmethod
    def minutes_between(start: datetime, end: datetime) -> int:
        """Minutos enteros transcurridos (floor), nunca negativos."""
        return DateTimeUtils.seconds_between(start, end) // 60
