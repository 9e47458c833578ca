"""
Reporte de verificación del mirror.

Es un chequeo aproximado: conteos iguales no implican contenido igual.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from loguru import logger

from .types import SchemaResult, TableSyncResult, TableSyncStatus, utc_now

PERFECT_MATCH = "PERFECT MATCH"
MISMATCH = "MISMATCH"
ERROR = "ERROR"


@dataclass(frozen=True)
class TableComparison:
    table: str
    local_count: Optional[int]
    remote_count: Optional[int]
    error: Optional[str] = None

    @property
    def status(self) -> str:
        if self.error is not None:
            return ERROR
        return PERFECT_MATCH if self.local_count == self.remote_count else MISMATCH

    @property
    def matches(self) -> bool:
        return self.status == PERFECT_MATCH

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "local_count": self.local_count,
            "remote_count": self.remote_count,
            "status": self.status,
            "error": self.error,
        }


@dataclass
class VerificationReport:
    tables: list[TableComparison] = field(default_factory=list)

    @property
    def total_local(self) -> int:
        return sum(t.local_count or 0 for t in self.tables)

    @property
    def total_remote(self) -> int:
        return sum(t.remote_count or 0 for t in self.tables)

    @property
    def perfect_matches(self) -> int:
        return sum(1 for t in self.tables if t.matches)

    @property
    def match_rate(self) -> int:
        """Porcentaje entero de tablas con conteos iguales (0 si no hay tablas)."""
        if not self.tables:
            return 0
        return round(self.perfect_matches / len(self.tables) * 100)

    @property
    def all_match(self) -> bool:
        return bool(self.tables) and self.perfect_matches == len(self.tables)

    def get(self, table: str) -> Optional[TableComparison]:
        return next((t for t in self.tables if t.table == table), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tables": [t.to_dict() for t in self.tables],
            "total_local": self.total_local,
            "total_remote": self.total_remote,
            "perfect_matches": self.perfect_matches,
            "table_count": len(self.tables),
            "match_rate": self.match_rate,
        }


@dataclass
class MirrorReport:
    manifest: str
    strategy: str
    dry_run: bool = False
    locked: bool = False
    started_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None
    schema: list[SchemaResult] = field(default_factory=list)
    tables: list[TableSyncResult] = field(default_factory=list)
    verification: VerificationReport = field(default_factory=VerificationReport)

    @property
    def failed_tables(self) -> list[str]:
        return [t.table for t in self.tables if t.status is TableSyncStatus.FAILED]

    @property
    def succeeded(self) -> bool:
        return not self.locked and not self.failed_tables and self.verification.all_match

    def to_dict(self) -> dict[str, Any]:
        return {
            "manifest": self.manifest,
            "strategy": self.strategy,
            "dry_run": self.dry_run,
            "locked": self.locked,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "schema": [s.to_dict() for s in self.schema],
            "tables": [t.to_dict() for t in self.tables],
            "verification": self.verification.to_dict(),
            "failed_tables": self.failed_tables,
            "succeeded": self.succeeded,
        }


def log_verification(report: VerificationReport) -> None:
    logger.info("VERIFICACION FINAL:")
    logger.info("-" * 80)
    for t in report.tables:
        if t.status == PERFECT_MATCH:
            logger.info(f"{t.table}: {t.local_count} filas ({PERFECT_MATCH})")
        elif t.status == MISMATCH:
            logger.warning(f"{t.table}: LOCAL {t.local_count} vs REMOTO {t.remote_count}")
        else:
            logger.error(f"{t.table}: Error - {t.error}")

    logger.info("=" * 80)
    logger.info(f"Total filas LOCAL: {report.total_local:,}")
    logger.info(f"Total filas REMOTO: {report.total_remote:,}")
    logger.info(f"Coincidencias: {report.perfect_matches}/{len(report.tables)} tablas")
    logger.info(f"Match rate: {report.match_rate}%")
    if report.all_match:
        logger.success("Las bases quedaron espejadas (por conteo de filas)")
    else:
        logger.warning("Algunas tablas siguen con diferencias - revisar el log")
