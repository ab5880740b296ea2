"""
queue.
"""

# watcher/queue_manager.py
from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from queue import Empty, Queue
import threading

from lecturesnap.extract.text_extractor import extract_text
from lecturesnap.llm.llm_call import call_llm
from lecturesnap.models.courses import Course
from lecturesnap.models.llm_config import LLMConfig
from lecturesnap.models.outcome import BatchReport, RoutingOutcome
from lecturesnap.models.types import LLMCall, StrOrPath, TextExtractor
from lecturesnap.routing.engine import route
from lecturesnap.utils.files import wait_for_file
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger
from lecturesnap.watcher.queue_utils import PendingFileLockManager, get_lock_key


class RoutingQueue:
    """
    File FIFO unique consommée par un seul worker : les fichiers sont routés un par un.

    Les listes de cours et de dossiers sources sont relues avant chaque fichier.
    """

    def __init__(
        self,
        courses: Callable[[], Sequence[Course]],
        source_roots: Callable[[], Sequence[StrOrPath]],
        llm_config: LLMConfig,
        *,
        extract: TextExtractor = extract_text,
        llm_call: LLMCall = call_llm,
        on_outcome: Callable[[RoutingOutcome], None] | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._courses = courses
        self._source_roots = source_roots
        self._config = llm_config
        self._extract = extract
        self._llm_call = llm_call
        self._on_outcome = on_outcome
        self._logger = ensure_logger(logger, __name__)
        self._queue: Queue[Path] = Queue()
        self._stop = threading.Event()
        self.locks = PendingFileLockManager()
        self.report = BatchReport()

    def enqueue(self, file_path: StrOrPath) -> bool:
        """
        Enfile un fichier s'il n'y est pas déjà.
        """
        key = get_lock_key(file_path)
        if not self.locks.acquire(key):
            self._logger.debug("[QUEUE] 🚫 Ignoré, déjà en file : %s", key)
            return False
        self._queue.put(Path(file_path))
        self._logger.debug("[QUEUE] Taille actuelle: %d", self._queue.qsize())
        return True

    def qsize(self) -> int:
        return self._queue.qsize()

    def process_one(self, timeout: float | None = None) -> RoutingOutcome | None:
        """
        Traite le prochain fichier de la file. Relâche toujours le verrou.

        Une erreur est journalisée sans arrêter le worker.
        """
        try:
            path = self._queue.get(timeout=timeout)
        except Empty:
            return None
        try:
            if not wait_for_file(path, logger=self._logger):
                self._logger.warning("⚠️ Fichier introuvable, skip : %s", path)
                return None
            outcome = route(
                path,
                self._courses(),
                self._source_roots(),
                self._config,
                extract=self._extract,
                llm_call=self._llm_call,
                logger=self._logger,
            )
            self.report.append(outcome)
            self._logger.info("[QUEUE] %s", outcome.summary().replace("\n", " | "))
            if self._on_outcome is not None:
                self._on_outcome(outcome)
            return outcome
        except Exception as exc:  # pylint: disable=broad-except
            self._logger.exception("[ERREUR] File d'attente (%s): %s", path, exc)
            return None
        finally:
            self.locks.release(get_lock_key(path))
            self._queue.task_done()

    def run(self, poll: float = 0.5) -> None:
        """
        Boucle du worker jusqu'à stop().
        """
        while not self._stop.is_set():
            self.process_one(timeout=poll)

    def stop(self) -> None:
        self._stop.set()

    def start_thread(self) -> threading.Thread:
        """
        Lance run() dans un thread daemon pour ne pas bloquer la boucle principale.
        """
        thread = threading.Thread(target=self.run, name="routing-worker", daemon=True)
        thread.start()
        return thread
