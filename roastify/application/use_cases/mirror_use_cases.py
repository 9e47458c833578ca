"""
Casos de uso del mirror de bases de datos.

Las corridas son sincronas (psycopg); los endpoints las ejecutan con
asyncio.to_thread para no bloquear el event loop.
"""
from typing import Any, Callable, Dict, Optional

from loguru import logger

from roastify.core.config import Settings, settings as app_settings
from roastify.infrastructure.external.db_mirror.sync_service import (
    DatabaseMirrorService,
    build_from_settings,
)


class MirrorUseCases:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        service_factory: Callable[[Settings], DatabaseMirrorService] = build_from_settings,
    ):
        self.settings = settings or app_settings
        self._service_factory = service_factory

    def run(self, dry_run: bool = False, reconcile_schema: bool = True) -> Dict[str, Any]:
        """
        Ejecuta una corrida completa y devuelve el reporte serializado.

        Raises:
            MirrorConfigError: configuración incompleta
            MirrorConnectionError: no se pudo conectar a alguno de los lados
        """
        service = self._service_factory(self.settings)
        report = service.run(dry_run=dry_run, reconcile_schema=reconcile_schema)
        if report.locked:
            logger.warning("Mirror omitido: otra corrida tiene el lock")
        return report.to_dict()
