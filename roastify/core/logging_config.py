"""
Configuracion de loguru para la API y los scripts.
"""
import sys
from typing import Optional

from loguru import logger


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Reinicia los sinks de loguru: stderr con el nivel indicado y,
    opcionalmente, un archivo con rotacion.

    Args:
        level: Nivel minimo (DEBUG, INFO, WARNING...)
        log_file: Ruta del archivo de log (None = solo consola)
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_file:
        logger.add(
            log_file,
            rotation="500 MB",
            retention="10 days",
            level=level.upper(),
        )
