"""
Repositorio Postgres (psycopg) para un lado del mirror:
- introspección de esquema (information_schema)
- conteo / lectura completa de tablas
- borrado y UPSERT fila a fila

Se usa psycopg (v3) con conexiones en autocommit: las transacciones se
abren explícitamente con `transaction()` (y los bloques anidados son savepoints).
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from .schema_builder import quote_ident
from .sync_config import DatabaseEndpoint
from .types import ColumnDefinition, ConflictPolicy, Row


class MirrorConnectionError(RuntimeError):
    """No se pudo conectar a una de las bases del mirror."""


def build_upsert_sql(
    table: str,
    columns: Sequence[str],
    *,
    pk_column: str = "id",
    policy: ConflictPolicy = ConflictPolicy.OVERWRITE,
) -> str:
    """
    INSERT ... ON CONFLICT (pk) con la política indicada:
    - OVERWRITE: DO UPDATE SET <cada columna> = EXCLUDED.<columna>
    - INSERT_ONLY: DO NOTHING
    """
    if not columns:
        raise ValueError(f"Fila sin columnas para '{table}'")
    if pk_column not in columns:
        raise ValueError(f"Falta PK '{pk_column}' en row para UPSERT en '{table}'")

    quoted_cols = [quote_ident(c) for c in columns]
    placeholders = ", ".join(["%s"] * len(columns))
    insert_sql = (
        f"INSERT INTO {quote_ident(table)} ({', '.join(quoted_cols)}) "
        f"VALUES ({placeholders}) "
        f"ON CONFLICT ({quote_ident(pk_column)}) "
    )
    if policy is ConflictPolicy.INSERT_ONLY:
        return insert_sql + "DO NOTHING"

    set_sql = ", ".join(f"{c} = EXCLUDED.{c}" for c in quoted_cols)
    return insert_sql + f"DO UPDATE SET {set_sql}"


class PostgresMirrorRepository:
    def __init__(self, endpoint: DatabaseEndpoint) -> None:
        self._endpoint = endpoint

    @property
    def label(self) -> str:
        return self._endpoint.label

    @property
    def endpoint(self) -> DatabaseEndpoint:
        return self._endpoint

    def connect(self) -> psycopg.Connection:
        try:
            return psycopg.connect(
                self._endpoint.conninfo(),
                row_factory=dict_row,
                autocommit=True,
            )
        except psycopg.Error as e:
            # OperationalError (red, auth) o ProgrammingError (DSN mal formado)
            raise MirrorConnectionError(
                f"No se pudo conectar a {self._endpoint.describe()}: {e}\n"
                f"Sugerencia: revisa host/puerto/sslmode en el .env y que Postgres esté accesible "
                f"desde donde ejecutas el job."
            ) from e

    def ping(self, conn: psycopg.Connection) -> None:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")

    def try_advisory_lock(self, conn: psycopg.Connection, lock_key: int) -> bool:
        """
        Evita ejecuciones simultáneas del mismo mirror.
        El lock es de sesión: se libera al cerrar la conexión.
        """
        with conn.cursor() as cur:
            cur.execute("SELECT pg_try_advisory_lock(%s) AS locked", (lock_key,))
            row = cur.fetchone()
            return bool(row and row.get("locked"))

    def transaction(self, conn: psycopg.Connection) -> AbstractContextManager:
        return conn.transaction()

    def fetch_column_definitions(
        self,
        conn: psycopg.Connection,
        table: str,
        *,
        schema: str = "public",
    ) -> list[ColumnDefinition]:
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT column_name, data_type, character_maximum_length,
                       is_nullable, column_default
                FROM information_schema.columns
                WHERE table_schema = %s
                  AND table_name = %s
                ORDER BY ordinal_position
                """,
                (schema, table),
            )
            rows = cur.fetchall()

        return [
            ColumnDefinition(
                name=r["column_name"],
                data_type=r["data_type"],
                max_length=r["character_maximum_length"],
                is_nullable=r["is_nullable"] != "NO",
                default=r["column_default"],
            )
            for r in rows
        ]

    def execute(self, conn: psycopg.Connection, statement: str) -> None:
        with conn.cursor() as cur:
            cur.execute(statement)

    def count_rows(self, conn: psycopg.Connection, table: str) -> int:
        with conn.cursor() as cur:
            cur.execute(f"SELECT COUNT(*) AS count FROM {quote_ident(table)}")
            row = cur.fetchone()
            return int(row["count"]) if row else 0

    def fetch_rows(self, conn: psycopg.Connection, table: str, *, order_by: str = "id") -> list[Row]:
        with conn.cursor() as cur:
            cur.execute(f"SELECT * FROM {quote_ident(table)} ORDER BY {quote_ident(order_by)}")
            return list(cur.fetchall())

    def max_value(self, conn: psycopg.Connection, table: str, column: str) -> Optional[Any]:
        with conn.cursor() as cur:
            cur.execute(f"SELECT MAX({quote_ident(column)}) AS max_value FROM {quote_ident(table)}")
            row = cur.fetchone()
            return row["max_value"] if row else None

    def delete_all_rows(self, conn: psycopg.Connection, table: str) -> int:
        with conn.cursor() as cur:
            cur.execute(f"DELETE FROM {quote_ident(table)}")
            return cur.rowcount or 0

    def upsert_row(
        self,
        conn: psycopg.Connection,
        table: str,
        row: Row,
        *,
        pk_column: str = "id",
        policy: ConflictPolicy = ConflictPolicy.OVERWRITE,
    ) -> None:
        columns = list(row.keys())
        sql = build_upsert_sql(table, columns, pk_column=pk_column, policy=policy)
        with conn.cursor() as cur:
            cur.execute(sql, tuple(_adapt_value(row[c]) for c in columns))


def _adapt_value(value: Any) -> Any:
    # Los dict (json/jsonb) no se adaptan solos en psycopg 3; las listas van como arrays.
    if isinstance(value, dict):
        return Jsonb(value)
    return value
