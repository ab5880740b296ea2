"""
Utils for queue.
"""

# watcher/queue_utils.py
from __future__ import annotations

from pathlib import Path
import threading
import time

from lecturesnap.models.types import StrOrPath


def get_lock_key(file_path: StrOrPath) -> str:
    return f"path:{Path(file_path).resolve().as_posix()}"


class PendingFileLockManager:
    """
    Verrous logiques : un fichier n'est en file qu'une seule fois.

    Chaque lock est horodaté pour permettre une purge.
    """

    def __init__(self) -> None:
        self._locks: dict[str, float] = {}
        self._lock = threading.Lock()

    def acquire(self, key: str) -> bool:
        """
        Pose un verrou atomiquement.

        Retourne False si déjà verrouillé.
        """
        with self._lock:
            if key in self._locks:
                return False
            self._locks[key] = time.time()
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._locks.pop(key, None)

    def is_locked(self, key: str) -> bool:
        with self._lock:
            return key in self._locks

    def get_all_locks(self) -> dict[str, float]:
        with self._lock:
            return dict(self._locks)

    def purge_expired(self, timeout: float = 7200) -> list[str]:
        """
        Supprime les verrous plus vieux que `timeout` secondes.
        """
        now = time.time()
        with self._lock:
            expired = [k for k, t in self._locks.items() if now - t > timeout]
            for k in expired:
                del self._locks[k]
        return expired
