"""
Endpoint para disparar el mirror de bases de datos desde la UI (solo admin).
"""
import asyncio
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger

from roastify.api.v1.dependencies.auth_deps import require_admin
from roastify.api.v1.dependencies.use_case_deps import get_mirror_use_cases
from roastify.application.use_cases.mirror_use_cases import MirrorUseCases
from roastify.infrastructure.database.models import UserModel


router = APIRouter(prefix="/mirror", tags=["Mirror"])


@router.post(
    "/run",
    status_code=status.HTTP_200_OK,
    summary="Ejecutar el mirror local <-> remoto"
)
async def run_mirror(
    dry_run: bool = Query(
        default=False,
        description="Si True, solo decide y reporta (no escribe)"
    ),
    admin: UserModel = Depends(require_admin),
    use_cases: MirrorUseCases = Depends(get_mirror_use_cases),
) -> Dict[str, Any]:
    """
    Ejecuta una corrida completa del mirror y devuelve el reporte.

    Si otra corrida tiene el lock, el reporte vuelve con locked=True.
    """
    try:
        logger.info(f"Mirror solicitado por {admin.email} (dry_run={dry_run})")

        # Ejecutar en thread separado para no bloquear el event loop
        return await asyncio.to_thread(use_cases.run, dry_run)

    except Exception as e:
        logger.error(f"Error en mirror: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al ejecutar el mirror: {str(e)}"
        )
