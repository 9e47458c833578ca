"""
Generación de DDL a partir de information_schema.

Se construye el CREATE TABLE en Python (no con string_agg en el servidor)
para poder testear el mapeo de tipos sin una base real.
"""

from __future__ import annotations

from typing import Sequence

from .types import ColumnDefinition


_TYPE_MAP = {
    "integer": "INTEGER",
    "bigint": "BIGINT",
    "boolean": "BOOLEAN",
    "timestamp without time zone": "TIMESTAMP",
    "text": "TEXT",
    "numeric": "NUMERIC",
}

_SERIAL_MAP = {
    "integer": "SERIAL",
    "bigint": "BIGSERIAL",
    "smallint": "SMALLSERIAL",
}


def quote_ident(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def map_column_type(column: ColumnDefinition) -> str:
    """
    Mapea el data_type de information_schema a tipo SQL.
    Tipos no contemplados se pasan tal cual.
    """
    data_type = column.data_type.lower()
    if data_type == "character varying":
        return f"VARCHAR({column.max_length})" if column.max_length else "VARCHAR"
    return _TYPE_MAP.get(data_type, column.data_type)


def build_column_sql(column: ColumnDefinition) -> str:
    parts = [quote_ident(column.name)]

    if column.is_sequence_backed:
        # La secuencia remota no existe en local: se usa SERIAL como PK.
        parts.append(_SERIAL_MAP.get(column.data_type.lower(), map_column_type(column)))
        if not column.is_nullable:
            parts.append("NOT NULL")
        parts.append("PRIMARY KEY")
        return " ".join(parts)

    parts.append(map_column_type(column))
    if not column.is_nullable:
        parts.append("NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    return " ".join(parts)


def build_create_table_statement(table: str, columns: Sequence[ColumnDefinition]) -> str:
    if not columns:
        raise ValueError(f"No hay columnas para crear la tabla '{table}'")
    cols_sql = ", ".join(build_column_sql(c) for c in columns)
    return f"CREATE TABLE IF NOT EXISTS {quote_ident(table)} ({cols_sql});"
