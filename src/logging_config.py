"""
Configuration du logging de Monynha Fun via loguru.

Deux sorties :
- console (stderr) : colorée, pour suivre la CLI en direct
- fichier : JSON avec rotation, chaque entrée portant le store actif
"""

import sys
from pathlib import Path

from loguru import logger

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/monynha.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    store_backend: str = "local",
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin du fichier de log JSON
        rotation_size : Taille maximale avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conservés
        store_backend : Store actif, ajouté au contexte de chaque entrée
    """
    logger.remove()
    logger.configure(extra={"store": store_backend})

    logger.add(sys.stderr, level=log_level.upper(), format=_CONSOLE_FORMAT, colorize=True)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",  # requêtes du store en DEBUG
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)
