"""
Repositorio en memoria con la misma interfaz que PostgresMirrorRepository.

Las transacciones toman un snapshot de las tablas y lo restauran si el
bloque termina con excepción (los bloques anidados se comportan como savepoints).
"""
from __future__ import annotations

import copy
import re
from typing import Any, Optional

import psycopg

from roastify.infrastructure.external.db_mirror.types import ColumnDefinition, ConflictPolicy


class FakeConnection:
    def __init__(self, label: str) -> None:
        self.label = label
        self.closed = False

    def __enter__(self) -> "FakeConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.closed = True
        return False


class FakeTransaction:
    def __init__(self, repo: "FakeMirrorRepository") -> None:
        self._repo = repo
        self._snapshot: Optional[dict] = None

    def __enter__(self) -> "FakeTransaction":
        self._snapshot = copy.deepcopy(self._repo.tables)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self._repo.tables = self._snapshot
            self._repo.rollbacks += 1
        return False


class FakeMirrorRepository:
    def __init__(
        self,
        label: str,
        tables: Optional[dict[str, list[dict[str, Any]]]] = None,
        *,
        columns: Optional[dict[str, list[ColumnDefinition]]] = None,
        fail_ids: Optional[dict[str, set]] = None,
        crash_ids: Optional[dict[str, set]] = None,
        lock_available: bool = True,
        reachable: bool = True,
    ) -> None:
        self.label = label
        self.tables = copy.deepcopy(tables or {})
        self.columns = columns or {}
        self.fail_ids = fail_ids or {}
        self.crash_ids = crash_ids or {}
        self.lock_available = lock_available
        self.reachable = reachable
        self.executed: list[str] = []
        self.upserts = 0
        self.rollbacks = 0
        self.connections: list[FakeConnection] = []

    def connect(self) -> FakeConnection:
        conn = FakeConnection(self.label)
        self.connections.append(conn)
        return conn

    def ping(self, conn: Any) -> None:
        if not self.reachable:
            raise psycopg.OperationalError(f"{self.label} unreachable")

    def try_advisory_lock(self, conn: Any, lock_key: int) -> bool:
        return self.lock_available

    def transaction(self, conn: Any) -> FakeTransaction:
        return FakeTransaction(self)

    def fetch_column_definitions(self, conn: Any, table: str, *, schema: str = "public") -> list[ColumnDefinition]:
        return list(self.columns.get(table, []))

    def execute(self, conn: Any, statement: str) -> None:
        self.executed.append(statement)
        match = re.match(r'CREATE TABLE IF NOT EXISTS "([^"]+)"', statement)
        if match:
            self.tables.setdefault(match.group(1), [])

    def _table(self, table: str) -> list[dict[str, Any]]:
        if table not in self.tables:
            raise psycopg.errors.UndefinedTable(f'relation "{table}" does not exist')
        return self.tables[table]

    def count_rows(self, conn: Any, table: str) -> int:
        return len(self._table(table))

    def fetch_rows(self, conn: Any, table: str, *, order_by: str = "id") -> list[dict[str, Any]]:
        return [dict(r) for r in sorted(self._table(table), key=lambda r: r[order_by])]

    def max_value(self, conn: Any, table: str, column: str) -> Any:
        rows = self._table(table)
        if not self._has_column(table, column):
            raise psycopg.errors.UndefinedColumn(f'column "{column}" does not exist')
        values = [r.get(column) for r in rows if r.get(column) is not None]
        return max(values) if values else None

    def _has_column(self, table: str, column: str) -> bool:
        # Sin definiciones explícitas, las columnas salen de las filas (tabla vacía: se asume que existe)
        if table in self.columns:
            return any(c.name == column for c in self.columns[table])
        rows = self.tables[table]
        return not rows or any(column in r for r in rows)

    def delete_all_rows(self, conn: Any, table: str) -> int:
        deleted = len(self._table(table))
        self.tables[table] = []
        return deleted

    def upsert_row(
        self,
        conn: Any,
        table: str,
        row: dict[str, Any],
        *,
        pk_column: str = "id",
        policy: ConflictPolicy = ConflictPolicy.OVERWRITE,
    ) -> None:
        pk = row[pk_column]
        rows = self._table(table)
        # La fila se escribe antes de fallar: el savepoint debe deshacerla
        rows.append(dict(row))
        if pk in self.fail_ids.get(table, set()):
            raise psycopg.errors.DataError(f"invalid input for row {pk}")
        if pk in self.crash_ids.get(table, set()):
            raise RuntimeError(f"connection lost while writing row {pk}")
        rows.pop()

        self.upserts += 1
        for index, existing in enumerate(rows):
            if existing[pk_column] == pk:
                if policy is ConflictPolicy.OVERWRITE:
                    rows[index] = dict(row)
                return
        rows.append(dict(row))

    def rows(self, table: str) -> list[dict[str, Any]]:
        return sorted(self.tables.get(table, []), key=lambda r: r["id"])
