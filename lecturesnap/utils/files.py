"""
utils/files.py.
"""

from __future__ import annotations

from pathlib import Path
import time

from lecturesnap.models.types import StrOrPath
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger, with_child_logger


@with_child_logger
def wait_for_file(
    file_path: StrOrPath,
    timeout: float = 3.0,
    interval: float = 0.5,
    *,
    logger: LoggerProtocol | None = None,
) -> bool:
    """
    Attend que le fichier existe et que sa taille soit stable, jusqu'à `timeout` secondes.
    """
    logger = ensure_logger(logger, __name__)
    path = Path(file_path)
    deadline = time.monotonic() + timeout
    last_size = -1
    while True:
        try:
            size = path.stat().st_size if path.is_file() else -1
        except OSError:
            # supprimé entre is_file et stat
            size = -1
        if size >= 0 and size == last_size:
            return True
        last_size = size
        if time.monotonic() > deadline:
            logger.debug("[wait_for_file] timeout sur %s", path)
            return path.is_file() and last_size >= 0
        time.sleep(interval)


def is_hidden_or_temp(path: StrOrPath) -> bool:
    """
    Fichier caché, temporaire de l'OS ou téléchargement en cours.
    """
    p = Path(path)
    if p.name.startswith("."):
        return True
    return p.name.endswith(("~", ".swp", ".tmp", ".part", ".crdownload", ".download"))
