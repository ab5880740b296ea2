"""
Start watcher.
"""

# /watcher/start.py
from __future__ import annotations

from collections.abc import Sequence
import os
from pathlib import Path
import time
from typing import Union

from watchdog.events import FileMovedEvent, FileSystemEvent, FileSystemEventHandler
from watchdog.observers.polling import PollingObserver

from lecturesnap.extract.text_extractor import is_supported
from lecturesnap.models.llm_config import LLMConfig
from lecturesnap.routing.folders import discover_courses
from lecturesnap.utils.config import (
    WATCHDOG_DEBOUNCE_WINDOW,
    WATCHDOG_POLL_INTERVAL,
    ConfigError,
    Settings,
)
from lecturesnap.utils.files import is_hidden_or_temp
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger
from lecturesnap.watcher.queue_manager import RoutingQueue

Pathish = Union[str, bytes, os.PathLike[str], os.PathLike[bytes]]


class DropHandler(FileSystemEventHandler):
    """
    Enfile les documents déposés (créés ou renommés) dans un dossier source.
    """

    def __init__(
        self,
        queue: RoutingQueue,
        *,
        ignore_dirs: Sequence[Path] = (),
        debounce_window: float = WATCHDOG_DEBOUNCE_WINDOW,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """
        Args:
            queue: File de routage.
            ignore_dirs: Dossiers dont les événements sont ignorés (dossiers principaux).
            debounce_window: Fenêtre anti-rafale en secondes.
            logger: Logger compatible LoggerProtocol, ou None.
        """
        self._queue = queue
        self._ignore = [Path(d).resolve() for d in ignore_dirs]
        self._debounce_window = debounce_window
        self._logger = logger
        self._last_event: dict[str, float] = {}

    @staticmethod
    def _to_str(path: Pathish) -> str:
        s = os.fspath(path)
        if isinstance(s, bytes):
            # utf-8 + surrogateescape: évite les erreurs sur noms non-décodables
            return s.decode("utf-8", errors="surrogateescape")
        return s

    def _accepts(self, raw: Pathish) -> Path | None:
        path = Path(self._to_str(raw))
        if is_hidden_or_temp(path) or not is_supported(path):
            return None
        resolved = path.resolve()
        if any(resolved.is_relative_to(d) for d in self._ignore):
            return None
        return path

    def _should_emit(self, path: Path) -> bool:
        """Anti-rafale: évite les doublons dans une fenêtre courte."""
        key = path.as_posix()
        now = time.monotonic()
        if now - self._last_event.get(key, 0.0) < self._debounce_window:
            return False
        self._last_event[key] = now
        return True

    def _emit(self, raw: Pathish, action: str) -> None:
        path = self._accepts(raw)
        if path is None or not self._should_emit(path):
            return
        if self._logger is not None:
            self._logger.info("[%s] FILE → %s", action, path)
        self._queue.enqueue(path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(event.src_path, "CREATION")

    def on_moved(self, event: FileMovedEvent) -> None:  # type: ignore[override]
        if not event.is_directory:
            self._emit(event.dest_path, "DEPLACEMENT")


def start_watcher(settings: Settings, llm_config: LLMConfig, *, logger: LoggerProtocol | None = None) -> None:
    """
    Surveille les dossiers sources (PollingObserver, non récursif) et route chaque document déposé.

    Bloque jusqu'à CTRL+C.
    """
    logger = ensure_logger(logger, __name__)
    if not settings.source_roots:
        raise ConfigError("[CONFIG ERROR] Aucun dossier source à surveiller.")
    if not settings.main_folders:
        raise ConfigError("[CONFIG ERROR] Aucun dossier principal (cours) déclaré.")

    queue = RoutingQueue(
        courses=lambda: discover_courses(settings.main_folders, logger=logger),
        source_roots=lambda: list(settings.source_roots),
        llm_config=llm_config,
        logger=logger,
    )
    handler = DropHandler(queue, ignore_dirs=settings.main_folders, logger=logger)
    observer = PollingObserver(timeout=WATCHDOG_POLL_INTERVAL)
    for root in settings.source_roots:
        observer.schedule(handler, str(root), recursive=False)
        logger.info("Watcher démarré (PollingObserver, interval=%.2fs) sur %s", WATCHDOG_POLL_INTERVAL, root)
    observer.start()
    worker = queue.start_thread()

    last_maintenance = time.monotonic()
    try:
        while True:
            time.sleep(0.5)
            now = time.monotonic()
            if now - last_maintenance >= 3600:
                logger.info("🪵 Etat Horaire : %d en file, bilan %s", queue.qsize(), queue.report.counts())
                queue.locks.purge_expired(timeout=7200)
                last_maintenance = now
    except KeyboardInterrupt:
        logger.info("Arrêt demandé (CTRL+C).")
    finally:
        observer.stop()
        observer.join(timeout=10)
        queue.stop()
        worker.join(timeout=5)
        logger.info("Watcher arrêté proprement. Bilan : %s", queue.report.counts())
