"""
Configuration du logging.

Un format unique pour toute l'application ; chaque module utilise
`logging.getLogger(__name__)`. Les lignes d'audit RGPD passent par le logger
dédié `garage.audit`, pour pouvoir les router à part (fichier, SIEM...).
"""

import logging
from typing import Optional, Union

AUDIT_LOGGER_NAME = "garage.audit"


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """Configure le root logger avec un formatter simple.

    Parameters
    ----------
    level: int | str
        Niveau de log (ex : ``logging.INFO`` ou ``"INFO"``).
    log_file: Optional[str]
        Fichier optionnel ; si fourni, les logs y sont aussi écrits.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(AUDIT_LOGGER_NAME)
