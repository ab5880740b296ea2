"""
# routing/engine.py

Pipeline par fichier : extraction → classification → résolution → déplacement.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from datetime import datetime
import json
from pathlib import Path
import shutil

from lecturesnap.extract.text_extractor import extract_text
from lecturesnap.llm.classifier import classify
from lecturesnap.llm.llm_call import call_llm
from lecturesnap.models.courses import Course
from lecturesnap.models.exceptions import ErrCode, LectureSnapError, MoveError
from lecturesnap.models.llm_config import LLMConfig
from lecturesnap.models.outcome import BatchReport, RoutingOutcome, RoutingState
from lecturesnap.models.types import LLMCall, StrOrPath, TextExtractor
from lecturesnap.routing.access import find_source_root, folder_access
from lecturesnap.routing.folders import ensure_folder_exists
from lecturesnap.routing.fuzzy import resolve_course
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger, with_child_logger

CoursesSource = Sequence[Course] | Callable[[], Sequence[Course]]
RootsSource = Sequence[StrOrPath] | Callable[[], Sequence[StrOrPath]]

NOTE_NO_MATCH = "LLM indicated no matching folder, file left in place"
NOTE_LLM_ERROR = "LLM call failed, file left in place"
NOTE_UNRESOLVED = "No matching lecture folder found, file left in place"
NOTE_OUT_OF_SCOPE = "File is not inside a known source folder, no move performed"
NOTE_ALREADY_FILED = "File already in its course folder"
NOTE_DRY_RUN = "Dry run, no move performed"


def _snapshot(source: CoursesSource | RootsSource) -> tuple:  # type: ignore[type-arg]
    return tuple(source() if callable(source) else source)


def move_file(src: Path, dest_dir: Path) -> Path:
    """
    Déplace src dans dest_dir sans jamais écraser un fichier existant.

    Lève MoveError (collision, permission, I/O).
    """
    dest = dest_dir / src.name
    if dest.exists():
        raise MoveError("Un fichier du même nom existe déjà", ctx={"src": str(src), "dest": str(dest)})
    try:
        shutil.move(str(src), str(dest))
    except OSError as exc:
        raise MoveError("Déplacement KO", ctx={"src": str(src), "dest": str(dest), "root_msg": str(exc)}) from exc
    return dest


@with_child_logger
def route(
    file_path: StrOrPath,
    known_courses: Sequence[Course],
    source_roots: Sequence[StrOrPath],
    llm_config: LLMConfig,
    *,
    extract: TextExtractor = extract_text,
    llm_call: LLMCall = call_llm,
    dry_run: bool = False,
    logger: LoggerProtocol | None = None,
) -> RoutingOutcome:
    """
    Route un fichier vers son dossier de cours.

    Les listes de cours et de dossiers sources sont figées à l'entrée.
    Aucune exception ne sort : tout échec devient un RoutingOutcome FAILED.
    """
    logger = ensure_logger(logger, __name__)
    src = Path(file_path)
    courses: tuple[Course, ...] = tuple(known_courses)
    roots: tuple[StrOrPath, ...] = tuple(source_roots)
    outcome = RoutingOutcome(filename=src.name, source=src)
    state = RoutingState.EXTRACTING

    def failed(code: ErrCode, note: str) -> RoutingOutcome:
        logger.error("[ROUTE] ❌ %s échoue en %s : %s", src.name, state, note)
        return replace(outcome, state=RoutingState.FAILED, failed_at=state, error=code, note=note)

    try:
        # 1) Extraction
        logger.debug("[ROUTE] %s → %s", src.name, state)
        text = extract(src)
        if not text or not text.strip():
            return failed(ErrCode.EXTRACTION, "Failed to extract text")

        # 2) Classification
        state = RoutingState.CLASSIFYING
        logger.debug("[ROUTE] %s → %s", src.name, state)
        result = classify(text, [c.name for c in courses], llm_config, llm_call=llm_call, logger=logger)
        outcome = replace(outcome, subject=result.subject, course_folder=result.course_folder)
        if result.is_no_match:
            note = NOTE_LLM_ERROR if result.error else NOTE_NO_MATCH
            logger.info("[ROUTE] %s : %s", src.name, note)
            return replace(outcome, error=result.error, note=note)

        # 3) Résolution exacte puis approchée
        state = RoutingState.RESOLVING
        logger.debug("[ROUTE] %s → %s", src.name, state)
        course, method = resolve_course(result.course_folder, courses)
        if course is None:
            logger.warning("[ROUTE] Aucun dossier pour %r (fichier %s)", result.course_folder, src.name)
            return replace(outcome, note=NOTE_UNRESOLVED)
        if method == "fuzzy":
            logger.info("[ROUTE] %r rapproché de %r", result.course_folder, course.name)
        outcome = replace(outcome, resolved_course=course)

        # 4) Déplacement
        state = RoutingState.MOVING
        logger.debug("[ROUTE] %s → %s", src.name, state)
        if src.resolve().parent == course.path.resolve():
            return replace(outcome, note=NOTE_ALREADY_FILED)
        root = find_source_root(src, roots)
        if root is None:
            logger.warning("[ROUTE] %s hors des dossiers sources, pas de déplacement", src)
            return replace(outcome, error=ErrCode.SCOPE, note=NOTE_OUT_OF_SCOPE)
        if dry_run:
            return replace(outcome, destination=course.path / src.name, note=NOTE_DRY_RUN)

        with folder_access(root, course.main_folder, logger=logger):
            ensure_folder_exists(course.path, logger=logger)
            dest = move_file(src, course.path)
        logger.info("[MOVE] ✅ %s → %s", src.name, dest)
        return replace(outcome, destination=dest, moved=True)

    except MoveError as exc:
        exc.with_context({"file": str(src), "course": outcome.resolved_course.name if outcome.resolved_course else None})
        logger.debug("[MOVE] ctx=%r", exc.ctx)
        return failed(ErrCode.MOVE, f"{exc} {exc.ctx.get('dest') or exc.ctx.get('folder') or ''}".strip())
    except LectureSnapError as exc:
        return failed(exc.code, str(exc))
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("[ROUTE] Erreur inattendue sur %s", src)
        code = ErrCode.MOVE if state is RoutingState.MOVING else ErrCode.UNEXPECTED
        return failed(code, f"{type(exc).__name__}: {exc}")


@with_child_logger
def route_batch(
    files: Iterable[StrOrPath],
    courses: CoursesSource,
    source_roots: RootsSource,
    llm_config: LLMConfig,
    *,
    extract: TextExtractor = extract_text,
    llm_call: LLMCall = call_llm,
    dry_run: bool = False,
    on_outcome: Callable[[RoutingOutcome], None] | None = None,
    logger: LoggerProtocol | None = None,
) -> BatchReport:
    """
    Traite les fichiers un par un, dans l'ordre d'entrée.

    courses / source_roots peuvent être des callables : ils sont réévalués avant chaque fichier.
    Un même fichier n'est routé qu'une fois par lot.
    """
    logger = ensure_logger(logger, __name__)
    report = BatchReport()
    seen: set[Path] = set()
    items = list(files)
    for index, file_path in enumerate(items, start=1):
        key = Path(file_path).resolve()
        if key in seen:
            logger.warning("[BATCH] Doublon ignoré : %s", file_path)
            continue
        seen.add(key)
        logger.info("[BATCH] Processing file %d of %d: %s", index, len(items), Path(file_path).name)
        outcome = route(
            file_path,
            _snapshot(courses),
            _snapshot(source_roots),
            llm_config,
            extract=extract,
            llm_call=llm_call,
            dry_run=dry_run,
            logger=logger,
        )
        report.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
    logger.info("[BATCH] Terminé : %s", report.counts())
    return report


def write_report(report: BatchReport, path: StrOrPath) -> Path:
    """
    Journal JSON du lot (horodaté).
    """
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    payload = {"date": datetime.now().strftime("%Y-%m-%d %H:%M:%S")} | report.to_dict()
    with open(dest, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=4, ensure_ascii=False)
    return dest
