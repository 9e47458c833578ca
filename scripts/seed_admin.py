"""
CLI: crea o actualiza el usuario administrador.

Lee ADMIN_NAME / ADMIN_EMAIL / ADMIN_PASSWORD del entorno (o .env), o los
flags --name / --email / --password. La contraseña nunca se imprime; si no
hay ninguna configurada se genera una aleatoria y se muestra una sola vez.

Ejecución:
  python scripts/seed_admin.py
  python scripts/seed_admin.py --email admin@roastify.online
"""

from __future__ import annotations

import argparse
import asyncio
import secrets
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

load_dotenv(_PROJECT_ROOT / ".env", override=False)

from roastify.core.config import settings
from roastify.core.logging_config import configure_logging
from roastify.application.use_cases.admin_use_cases import AdminUseCases
from roastify.infrastructure.database.session import close_db, init_db, session_scope
from roastify.shared.exceptions.base import AppException


async def seed(name: str, email: str, password: str) -> None:
    await init_db()
    try:
        async with session_scope() as session:
            await AdminUseCases(session).seed_admin_user(name, email, password)
    finally:
        await close_db()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Crear/actualizar usuario administrador")
    parser.add_argument("--name", default=settings.ADMIN_NAME)
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--password", default=settings.ADMIN_PASSWORD)
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL)

    if not args.email:
        logger.error("Falta ADMIN_EMAIL (o --email)")
        return 2

    password = args.password
    if not password:
        password = secrets.token_urlsafe(16)
        # Unica vez que se muestra: no queda en logs
        print(f"Contraseña generada para {args.email}: {password}")

    try:
        asyncio.run(seed(args.name, args.email, password))
    except AppException as e:
        logger.error(f"No se pudo crear el administrador: {e.message}")
        return 1

    logger.success("Usuario administrador listo")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
