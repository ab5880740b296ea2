"""
# routing/access.py

Jetons d'accès aux dossiers : acquis pour la durée d'une opération,
relâchés sur tous les chemins de sortie.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import ExitStack, contextmanager
import os
from pathlib import Path
import threading
import time

from lecturesnap.models.exceptions import MoveError
from lecturesnap.models.types import StrOrPath
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger


class AccessGrantManager:
    """
    Registre des accès dossier en cours, avec compteur par chemin.

    Chaque accès est horodaté à sa première acquisition.
    """

    def __init__(self) -> None:
        self._grants: dict[str, tuple[int, float]] = {}
        self._lock = threading.Lock()

    def acquire(self, folder: StrOrPath) -> str:
        """
        Vérifie que le dossier est accessible en écriture puis enregistre l'accès.

        Lève MoveError sinon.
        """
        path = Path(folder)
        if not path.is_dir():
            raise MoveError("Dossier inaccessible", ctx={"folder": str(path)})
        if not os.access(path, os.W_OK | os.X_OK):
            raise MoveError("Permission refusée sur le dossier", ctx={"folder": str(path)})
        key = path.resolve().as_posix()
        with self._lock:
            count, since = self._grants.get(key, (0, time.time()))
            self._grants[key] = (count + 1, since)
        return key

    def release(self, key: str) -> None:
        with self._lock:
            count, since = self._grants.get(key, (0, 0.0))
            if count <= 1:
                self._grants.pop(key, None)
            else:
                self._grants[key] = (count - 1, since)

    def is_granted(self, folder: StrOrPath) -> bool:
        with self._lock:
            return Path(folder).resolve().as_posix() in self._grants

    def active(self) -> dict[str, int]:
        with self._lock:
            return {k: count for k, (count, _) in self._grants.items()}


GRANTS = AccessGrantManager()


@contextmanager
def folder_access(
    *folders: StrOrPath,
    manager: AccessGrantManager = GRANTS,
    logger: LoggerProtocol | None = None,
) -> Iterator[list[str]]:
    """
    Acquiert un jeton par dossier ; tous sont relâchés à la sortie, erreur ou non.
    """
    logger = ensure_logger(logger, __name__)
    with ExitStack() as stack:
        keys: list[str] = []
        for folder in folders:
            key = manager.acquire(folder)
            stack.callback(manager.release, key)
            keys.append(key)
            logger.debug("[ACCESS] acquis : %s", key)
        try:
            yield keys
        finally:
            logger.debug("[ACCESS] relâchés : %s", keys)


def find_source_root(file_path: StrOrPath, source_roots: Sequence[StrOrPath]) -> Path | None:
    """
    Premier dossier source qui contient file_path (comparaison par composants, pas par préfixe).
    """
    target = Path(file_path).resolve()
    for root in source_roots:
        root_path = Path(root).resolve()
        if target.is_relative_to(root_path) and target != root_path:
            return Path(root)
    return None
