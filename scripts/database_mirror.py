"""
CLI: mirror de bases de datos LOCAL <-> REMOTO (one-shot).

Uso recomendado:
  - Ejecutar a mano o como job (cron/systemd timer).
  - Las credenciales salen del entorno / .env (LOCAL_DB_*, REMOTE_DB_*).

Ejecución:
  python scripts/database_mirror.py
  python scripts/database_mirror.py --dry-run
  python scripts/database_mirror.py --strategy checksum --report-json mirror_report.json
  python scripts/database_mirror.py --manifest config/mirror_manifest.json --skip-schema

Códigos de salida:
  0  todas las tablas coinciden
  1  hay diferencias o tablas con error
  2  error fatal (configuración o conexión)
  3  otra corrida tiene el lock
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

load_dotenv(_PROJECT_ROOT / ".env", override=False)

from roastify.core.config import settings
from roastify.core.logging_config import configure_logging
from roastify.infrastructure.external.db_mirror.pg_repository import MirrorConnectionError
from roastify.infrastructure.external.db_mirror.strategies import available_strategies
from roastify.infrastructure.external.db_mirror.sync_config import MirrorConfigError
from roastify.infrastructure.external.db_mirror.sync_service import build_from_settings

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_FATAL = 2
EXIT_LOCKED = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mirror de bases de datos LOCAL <-> REMOTO")
    parser.add_argument(
        "--manifest",
        default=None,
        help="JSON con las listas de tablas (default: MIRROR_MANIFEST_PATH o el manifiesto integrado).",
    )
    parser.add_argument(
        "--strategy",
        choices=available_strategies(),
        default=None,
        help="Estrategia para decidir si una tabla se sincroniza (default: MIRROR_STRATEGY).",
    )
    parser.add_argument("--batch-size", type=int, default=None, help="Filas por lote (default: 100).")
    parser.add_argument(
        "--skip-schema",
        action="store_true",
        help="No crear en local las tablas que solo existen en remoto.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Solo decide y reporta; no escribe en ninguna base.",
    )
    parser.add_argument("--report-json", default=None, help="Ruta donde guardar el reporte en JSON.")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Nivel de log (default: LOG_LEVEL).")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        service = build_from_settings(
            settings,
            manifest_path=args.manifest,
            strategy=args.strategy,
            batch_size=args.batch_size,
        )
        report = service.run(dry_run=args.dry_run, reconcile_schema=not args.skip_schema)
    except MirrorConfigError as e:
        logger.error(f"Configuración inválida: {e}")
        return EXIT_FATAL
    except MirrorConnectionError as e:
        logger.error(f"Error de conexión: {e}")
        return EXIT_FATAL

    if args.report_json:
        Path(args.report_json).write_text(
            json.dumps(report.to_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(f"Reporte guardado en {args.report_json}")

    if report.locked:
        return EXIT_LOCKED
    if args.dry_run:
        return EXIT_OK if not report.failed_tables else EXIT_MISMATCH
    return EXIT_OK if report.succeeded else EXIT_MISMATCH


if __name__ == "__main__":
    raise SystemExit(main())
