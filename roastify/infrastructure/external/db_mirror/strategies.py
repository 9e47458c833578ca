"""
Estrategias para decidir si una tabla debe copiarse de origen a destino.

- row_count: el origen tiene más filas que el destino (comportamiento histórico).
  No detecta divergencias cuando los conteos coinciden, y con conteos iguales
  nunca copia aunque el destino tenga filas que el origen no tiene.
- timestamp: el MAX(updated_at) del origen es más nuevo que el del destino.
- checksum: el fingerprint SHA-256 de las filas ordenadas por id difiere.
"""

from __future__ import annotations

import base64
import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Iterable, Protocol
from uuid import UUID

import psycopg

from .sync_config import MirrorConfigError, TableSyncConfig
from .types import Row, SyncDecision


class MirrorRepository(Protocol):
    label: str

    def count_rows(self, conn: Any, table: str) -> int: ...

    def fetch_rows(self, conn: Any, table: str, *, order_by: str = "id") -> list[Row]: ...

    def max_value(self, conn: Any, table: str, column: str) -> Any: ...


@dataclass(frozen=True)
class MirrorSide:
    """Un repositorio junto con su conexión abierta."""

    repo: MirrorRepository
    conn: Any

    @property
    def label(self) -> str:
        return self.repo.label


def _normalize_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, dict):
        return {str(k): _normalize_value(v) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))}
    if isinstance(value, (list, tuple)):
        return [_normalize_value(item) for item in value]
    return str(value)


def table_fingerprint(rows: Iterable[Row]) -> str:
    """
    SHA-256 de las filas normalizadas (en el orden recibido).
    Las columnas se ordenan por nombre para no depender del orden físico.
    """
    digest = hashlib.sha256()
    for row in rows:
        payload = {column: _normalize_value(row[column]) for column in sorted(row)}
        digest.update(json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()


class SyncStrategy(ABC):
    name: str = ""

    @abstractmethod
    def decide(self, table: TableSyncConfig, source: MirrorSide, destination: MirrorSide) -> SyncDecision:
        raise NotImplementedError

    @staticmethod
    def _counts(table: TableSyncConfig, source: MirrorSide, destination: MirrorSide) -> tuple[int, int]:
        return (
            source.repo.count_rows(source.conn, table.name),
            destination.repo.count_rows(destination.conn, table.name),
        )


class RowCountStrategy(SyncStrategy):
    name = "row_count"

    def decide(self, table: TableSyncConfig, source: MirrorSide, destination: MirrorSide) -> SyncDecision:
        src_count, dst_count = self._counts(table, source, destination)
        if src_count > dst_count:
            return SyncDecision(True, src_count, dst_count, f"{source.label} tiene más filas")
        return SyncDecision(False, src_count, dst_count, f"{destination.label} ya tiene igual o más filas")


class TimestampStrategy(SyncStrategy):
    """
    Last-write-wins por tabla. Si el origen no tiene timestamps se
    comporta como row_count.
    """

    name = "timestamp"

    def __init__(self, column: str = "updated_at") -> None:
        self.column = column

    def decide(self, table: TableSyncConfig, source: MirrorSide, destination: MirrorSide) -> SyncDecision:
        src_count, dst_count = self._counts(table, source, destination)
        src_max = self._max_timestamp(table, source)
        dst_max = self._max_timestamp(table, destination)

        if src_max is None:
            fallback = RowCountStrategy().decide(table, source, destination)
            return SyncDecision(
                fallback.should_sync, src_count, dst_count, f"sin {self.column} en origen: {fallback.reason}"
            )
        if dst_max is None:
            return SyncDecision(True, src_count, dst_count, f"sin {self.column} en destino")
        if _comparable(src_max) > _comparable(dst_max):
            return SyncDecision(True, src_count, dst_count, f"{self.column} más reciente en {source.label}")
        return SyncDecision(False, src_count, dst_count, f"{destination.label} está al día por {self.column}")

    def _max_timestamp(self, table: TableSyncConfig, side: MirrorSide) -> Any:
        # Tabla sin la columna: se trata igual que una tabla sin timestamps
        try:
            return side.repo.max_value(side.conn, table.name, self.column)
        except psycopg.errors.UndefinedColumn:
            return None


class ChecksumStrategy(SyncStrategy):
    name = "checksum"

    def decide(self, table: TableSyncConfig, source: MirrorSide, destination: MirrorSide) -> SyncDecision:
        src_count, dst_count = self._counts(table, source, destination)
        if src_count == 0:
            return SyncDecision(False, src_count, dst_count, "origen vacío")

        src_fp = table_fingerprint(source.repo.fetch_rows(source.conn, table.name, order_by=table.pk_column))
        dst_fp = table_fingerprint(
            destination.repo.fetch_rows(destination.conn, table.name, order_by=table.pk_column)
        )
        if src_fp != dst_fp:
            return SyncDecision(True, src_count, dst_count, "checksum distinto")
        return SyncDecision(False, src_count, dst_count, "checksum idéntico")


def _comparable(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


_STRATEGIES = {
    RowCountStrategy.name: RowCountStrategy,
    TimestampStrategy.name: TimestampStrategy,
    ChecksumStrategy.name: ChecksumStrategy,
}


def available_strategies() -> list[str]:
    return sorted(_STRATEGIES)


def get_strategy(name: str) -> SyncStrategy:
    try:
        return _STRATEGIES[(name or "").strip().lower()]()
    except KeyError as e:
        raise MirrorConfigError(
            f"Estrategia desconocida '{name}'. Opciones: {', '.join(available_strategies())}"
        ) from e
