"""
# routing/folders.py

Découverte des dossiers de cours et gestion (création, renommage).
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from lecturesnap.models.classification import is_no_match
from lecturesnap.models.courses import Course, MainFolder
from lecturesnap.models.exceptions import ErrCode, LectureSnapError
from lecturesnap.models.types import StrOrPath
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger, with_child_logger

_FORBIDDEN_CHARS = frozenset('/\\:*?"<>|\0')


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def is_reserved_name(name: str) -> bool:
    """
    Le nom sentinelle "No Matching Course Found" ne peut pas désigner un cours.
    """
    return is_no_match(name)


def validate_course_name(name: str) -> str:
    clean = name.strip()
    if not clean or clean in (".", ".."):
        raise LectureSnapError("Nom de cours vide", code=ErrCode.CONFIG, ctx={"name": name})
    if is_reserved_name(clean):
        raise LectureSnapError("Nom de cours réservé", code=ErrCode.CONFIG, ctx={"name": clean})
    if any(ch in _FORBIDDEN_CHARS for ch in clean):
        raise LectureSnapError("Caractère interdit dans le nom de cours", code=ErrCode.CONFIG, ctx={"name": clean})
    return clean


@with_child_logger
def load_courses(main_folder: StrOrPath, *, logger: LoggerProtocol | None = None) -> list[Course]:
    """
    Enfants directs (dossiers uniquement) d'un dossier principal, triés par nom.

    Dossiers cachés et nom réservé ignorés. Dossier illisible → liste vide.
    """
    logger = ensure_logger(logger, __name__)
    root = Path(main_folder)
    try:
        children = sorted(root.iterdir(), key=lambda p: p.name.casefold())
    except OSError as exc:
        logger.error("[FOLDER] Lecture impossible de %s : %s", root, exc)
        return []

    courses: list[Course] = []
    for child in children:
        if not child.is_dir() or _is_hidden(child):
            continue
        if is_reserved_name(child.name):
            logger.warning("[FOLDER] Dossier au nom réservé ignoré : %s", child)
            continue
        courses.append(Course(name=child.name, path=child))
    logger.debug("[FOLDER] %d cours dans %s", len(courses), root)
    return courses


@with_child_logger
def discover_main_folders(
    main_folders: Iterable[StrOrPath], *, logger: LoggerProtocol | None = None
) -> list[MainFolder]:
    logger = ensure_logger(logger, __name__)
    return [
        MainFolder(name=Path(p).name, path=Path(p), courses=load_courses(p, logger=logger)) for p in main_folders
    ]


@with_child_logger
def discover_courses(main_folders: Iterable[StrOrPath], *, logger: LoggerProtocol | None = None) -> list[Course]:
    """
    Tous les cours de tous les dossiers principaux, énumérés à neuf.

    Un nom présent dans plusieurs dossiers principaux (casse ignorée) est signalé,
    seul le premier dossier est gardé.
    """
    logger = ensure_logger(logger, __name__)
    courses: list[Course] = []
    seen: dict[str, Course] = {}
    for main in discover_main_folders(main_folders, logger=logger):
        for course in main.courses:
            first = seen.setdefault(course.name.casefold(), course)
            if first is not course:
                logger.warning(
                    "[FOLDER] Cours %r en double : %s retenu, %s ignoré", course.name, first.path, course.path
                )
                continue
            courses.append(course)
    return courses


@with_child_logger
def ensure_folder_exists(folder_path: StrOrPath, *, logger: LoggerProtocol | None = None) -> bool:
    """
    Crée le dossier (mkdir -p) si besoin.

    Retourne True s'il a été créé, False s'il existait déjà.
    """
    logger = ensure_logger(logger, __name__)
    folder = Path(folder_path)
    if folder.is_dir():
        logger.debug("[FOLDER] déjà présent : %s", folder)
        return False
    folder.mkdir(parents=True, exist_ok=True)
    logger.info("[FOLDER] créé : %s", folder)
    return True


@with_child_logger
def add_course(main_folder: StrOrPath, name: str, *, logger: LoggerProtocol | None = None) -> Course:
    """
    Crée un nouveau dossier de cours sous main_folder.
    """
    logger = ensure_logger(logger, __name__)
    clean = validate_course_name(name)
    path = Path(main_folder) / clean
    try:
        ensure_folder_exists(path, logger=logger)
    except OSError as exc:
        raise LectureSnapError(
            "Création du dossier de cours KO", code=ErrCode.UNEXPECTED, ctx={"path": str(path)}
        ) from exc
    return Course(name=clean, path=path)


@with_child_logger
def rename_course(course: Course, new_name: str, *, logger: LoggerProtocol | None = None) -> Course:
    """
    Renomme le dossier d'un cours. Refuse d'écraser un dossier existant.
    """
    logger = ensure_logger(logger, __name__)
    clean = validate_course_name(new_name)
    target = course.main_folder / clean
    if target.exists() and target.resolve() != course.path.resolve():
        raise LectureSnapError(
            "Un dossier porte déjà ce nom", code=ErrCode.CONFIG, ctx={"from": str(course.path), "to": str(target)}
        )
    try:
        course.path.rename(target)
    except OSError as exc:
        raise LectureSnapError(
            "Renommage du cours KO", code=ErrCode.UNEXPECTED, ctx={"from": str(course.path), "to": str(target)}
        ) from exc
    logger.info("[FOLDER] Cours renommé : %s -> %s", course.name, clean)
    return Course(name=clean, path=target)
