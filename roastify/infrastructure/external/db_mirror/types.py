"""
Tipos y utilidades puras para el mirror local <-> remoto.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

Row = dict[str, Any]


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


class SyncDirection(str, Enum):
    """Dirección de copia de una tabla."""

    LOCAL_TO_REMOTE = "local_to_remote"
    REMOTE_TO_LOCAL = "remote_to_local"

    @classmethod
    def parse(cls, raw: str) -> "SyncDirection":
        """
        Acepta el valor canónico y los alias históricos de los scripts
        (LOCAL_TO_AZURE / AZURE_TO_LOCAL), sin distinguir mayúsculas.
        """
        value = (raw or "").strip().lower()
        aliases = {
            "local_to_azure": cls.LOCAL_TO_REMOTE,
            "azure_to_local": cls.REMOTE_TO_LOCAL,
        }
        if value in aliases:
            return aliases[value]
        return cls(value)


class ConflictPolicy(str, Enum):
    """
    Qué hacer cuando el id ya existe en destino.

    - OVERWRITE: ON CONFLICT (id) DO UPDATE SET <todas las columnas>
    - INSERT_ONLY: ON CONFLICT (id) DO NOTHING
    """

    OVERWRITE = "overwrite"
    INSERT_ONLY = "insert_only"


class SyncTier(str, Enum):
    CRITICAL = "critical"
    REMAINING = "remaining"


class TableSyncStatus(str, Enum):
    SYNCED = "synced"
    SKIPPED = "skipped"
    DRY_RUN = "dry_run"
    FAILED = "failed"


class SchemaStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ColumnDefinition:
    """Columna tal como la reporta information_schema.columns."""

    name: str
    data_type: str
    max_length: Optional[int] = None
    is_nullable: bool = True
    default: Optional[str] = None

    @property
    def is_sequence_backed(self) -> bool:
        return bool(self.default) and self.default.strip().lower().startswith("nextval(")


@dataclass(frozen=True)
class SyncDecision:
    """Resultado de evaluar una estrategia sobre una tabla."""

    should_sync: bool
    source_count: int
    destination_count: int
    reason: str = ""


@dataclass
class TableSyncResult:
    table: str
    tier: SyncTier
    direction: SyncDirection
    status: TableSyncStatus
    source_count: int = 0
    destination_count: int = 0
    deleted_rows: int = 0
    synced_rows: int = 0
    failed_rows: int = 0
    reason: str = ""
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["tier"] = self.tier.value
        data["direction"] = self.direction.value
        data["status"] = self.status.value
        return data


@dataclass
class SchemaResult:
    table: str
    status: SchemaStatus
    statement: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class RowErrorLog:
    """
    Acumula errores por fila sin inundar el log: solo los primeros
    `max_logged` se registran completos, el resto solo se cuentan.
    """

    max_logged: int = 3
    count: int = 0
    samples: list[str] = field(default_factory=list)

    def add(self, message: str) -> bool:
        self.count += 1
        if len(self.samples) < self.max_logged:
            self.samples.append(message)
            return True
        return False
