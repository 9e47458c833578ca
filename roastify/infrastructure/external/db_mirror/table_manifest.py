"""
Manifiesto de tablas del mirror.

Este es el punto recomendado para decidir:
- qué tablas solo existen en remoto y deben crearse en local
- qué tablas son críticas (reemplazo completo local -> remoto)
- qué tablas restantes se completan y en qué dirección

El manifiesto por defecto replica las listas históricas del proyecto.
Para otro entorno, apunta MIRROR_MANIFEST_PATH (o --manifest) a un JSON:

    {
      "name": "roastify",
      "schema_tables": ["admin_reports"],
      "critical_tables": ["users", {"name": "clients"}],
      "remaining_tables": [{"name": "maintenance_content", "direction": "remote_to_local"}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .sync_config import MirrorConfigError, MirrorManifest, TableSyncConfig
from .types import SyncDirection, SyncTier


DEFAULT_MANIFEST = MirrorManifest(
    name="roastify",
    schema_tables=("admin_reports", "deleted_accounts", "password_resets", "verification_codes"),
    critical_tables=tuple(
        TableSyncConfig(name=name, tier=SyncTier.CRITICAL)
        for name in ("users", "clients", "projects", "tasks", "invoices", "time_entries")
    ),
    remaining_tables=(
        TableSyncConfig("ai_analytics", SyncTier.REMAINING, SyncDirection.LOCAL_TO_REMOTE),
        TableSyncConfig("ai_conversations", SyncTier.REMAINING, SyncDirection.LOCAL_TO_REMOTE),
        TableSyncConfig("ai_usage", SyncTier.REMAINING, SyncDirection.LOCAL_TO_REMOTE),
        TableSyncConfig("invoice_items", SyncTier.REMAINING, SyncDirection.LOCAL_TO_REMOTE),
        TableSyncConfig("user_preferences", SyncTier.REMAINING, SyncDirection.LOCAL_TO_REMOTE),
        TableSyncConfig("maintenance_content", SyncTier.REMAINING, SyncDirection.REMOTE_TO_LOCAL),
    ),
)


def _table_entry(raw: Any, *, tier: SyncTier) -> TableSyncConfig:
    if isinstance(raw, str):
        return TableSyncConfig(name=raw, tier=tier)
    if not isinstance(raw, dict) or "name" not in raw:
        raise MirrorConfigError(f"Entrada de tabla inválida en el manifiesto: {raw!r}")

    direction_raw = raw.get("direction", SyncDirection.LOCAL_TO_REMOTE.value)
    try:
        direction = SyncDirection.parse(direction_raw)
    except ValueError as e:
        raise MirrorConfigError(
            f"Dirección desconocida '{direction_raw}' para la tabla '{raw['name']}'"
        ) from e

    return TableSyncConfig(
        name=str(raw["name"]),
        tier=tier,
        direction=direction,
        pk_column=str(raw.get("pk_column", "id")),
    )


def manifest_from_dict(data: dict[str, Any]) -> MirrorManifest:
    if not isinstance(data, dict):
        raise MirrorConfigError("El manifiesto debe ser un objeto JSON")

    manifest = MirrorManifest(
        name=str(data.get("name", "custom")),
        schema_tables=tuple(str(t) for t in data.get("schema_tables", [])),
        critical_tables=tuple(
            _table_entry(t, tier=SyncTier.CRITICAL) for t in data.get("critical_tables", [])
        ),
        remaining_tables=tuple(
            _table_entry(t, tier=SyncTier.REMAINING) for t in data.get("remaining_tables", [])
        ),
    )
    return manifest.validate()


def load_manifest(path: Optional[str | Path] = None) -> MirrorManifest:
    """
    Carga el manifiesto desde un JSON o retorna el manifiesto por defecto.
    """
    if not path:
        return DEFAULT_MANIFEST

    manifest_path = Path(path)
    try:
        raw = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise MirrorConfigError(f"No existe el manifiesto: {manifest_path}") from e
    except json.JSONDecodeError as e:
        raise MirrorConfigError(f"Manifiesto JSON inválido ({manifest_path}): {e}") from e

    return manifest_from_dict(raw)
