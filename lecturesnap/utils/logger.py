"""2025-10 - logger du projet."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import functools
import logging
import logging.handlers
from pathlib import Path
import time
from typing import Any, Optional, ParamSpec, Protocol, TypeVar, cast

from lecturesnap.utils.config import LOG_FILE_PATH, LOG_LEVEL, LOG_ROTATION_DAYS

GLOBAL_LOG_NAME = "LectureSnap.log"
_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] %(message)s"


class LoggerProtocol(Protocol):
    """
    Contrat minimal d'un logger : niveaux usuels + création d'un logger enfant.
    """

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def get_child(self, suffix: str) -> LoggerProtocol: ...


@dataclass(frozen=True)
class LectureSnapLogger:
    """
    Implémentation concrète de LoggerProtocol, adossée à un logging.Logger.
    """

    _base: logging.Logger

    @property
    def name(self) -> str:
        return self._base.name

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.exception(msg, *args, **kwargs)

    def get_child(self, suffix: str) -> LoggerProtocol:
        return LectureSnapLogger(self._base.getChild(suffix))


def purge_old_logs(log_dir: str | Path, keep_days: int = 30) -> list[Path]:
    """
    Supprime les fichiers de log de log_dir plus vieux que keep_days.

    Retourne la liste des fichiers supprimés.
    """
    root = Path(log_dir)
    if not root.is_dir():
        return []
    cutoff = time.time() - keep_days * 86400
    removed: list[Path] = []
    for path in root.iterdir():
        if path.is_file() and path.stat().st_mtime < cutoff:
            path.unlink(missing_ok=True)
            removed.append(path)
    return removed


def _ensure_handlers(base: logging.Logger, log_dir: Path, script_name: str) -> None:
    if getattr(base, "_lecturesnap_configured", False):
        return

    formatter = logging.Formatter(_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    base.addHandler(stream)

    # rotation quotidienne à minuit : log global + log du script
    for filename in {GLOBAL_LOG_NAME, f"{script_name}.log"}:
        fh = logging.handlers.TimedRotatingFileHandler(
            filename=log_dir / filename,
            when="midnight",
            backupCount=14,
            encoding="utf-8",
        )
        fh.setFormatter(formatter)
        base.addHandler(fh)

    base.propagate = False
    setattr(base, "_lecturesnap_configured", True)


def get_logger(script_name: str) -> LoggerProtocol:
    """
    Constructeur de logger.

    Crée le dossier de logs si besoin, purge les vieux fichiers et branche console + fichiers.

    :param script_name: Nom du script (ou du module).
    :return: Logger prêt à l'emploi.
    """
    log_dir = Path(LOG_FILE_PATH)
    log_dir.mkdir(parents=True, exist_ok=True)

    base = logging.getLogger(script_name)
    base.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    first_time = not getattr(base, "_lecturesnap_configured", False)
    _ensure_handlers(base, log_dir, script_name.replace("/", "_"))

    if first_time:
        try:
            purge_old_logs(log_dir, LOG_ROTATION_DAYS)
        except OSError as exc:
            base.warning("Rotation des logs échouée: %s", exc)
    return LectureSnapLogger(base)


def ensure_logger(logger: LoggerProtocol | None, module: str) -> LoggerProtocol:
    """
    Retourne le logger fourni, ou un logger neuf nommé d'après le module.
    """
    if logger is None:
        return get_logger(module)
    return logger


# ---------- Décorateur type-safe ----------
P = ParamSpec("P")
R = TypeVar("R")


def with_child_logger(func: Callable[P, R]) -> Callable[P, R]:
    """
    Injecte un logger enfant nommé d'après la fonction quand l'appelant n'en fournit pas.

    Un logger transmis explicitement est gardé tel quel (pas d'empilement).
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        current = cast(Optional[LoggerProtocol], kwargs.get("logger"))
        if current is None:
            base = ensure_logger(None, func.__module__)
            kwargs["logger"] = _get_or_child(base, func.__name__)
        return func(*args, **kwargs)

    return wrapper


def _get_or_child(logger: LoggerProtocol, suffix: str) -> LoggerProtocol:
    base_name = getattr(logger, "name", "")
    if base_name.endswith(f".{suffix}") or base_name == suffix:
        return logger
    return logger.get_child(suffix)
