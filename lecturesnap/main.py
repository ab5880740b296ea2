"""
# main.py

Point d'entrée CLI : sort / summarize / courses / watch.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from lecturesnap.extract.text_extractor import extract_text
from lecturesnap.llm.classifier import summarize
from lecturesnap.models.exceptions import LLMError
from lecturesnap.routing.engine import route_batch, write_report
from lecturesnap.routing.folders import add_course, discover_courses, discover_main_folders, rename_course
from lecturesnap.routing.fuzzy import find_exact
from lecturesnap.utils.config import ConfigError, Settings, load_llm_config, load_settings
from lecturesnap.utils.logger import get_logger
from lecturesnap.utils.safe_runner import safe_main
from lecturesnap.watcher.start import start_watcher

logger = get_logger("lecturesnap")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lecturesnap",
        description="Classe des documents de cours (PDF, images) dans leurs dossiers grâce à un LLM.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    folders = argparse.ArgumentParser(add_help=False)
    folders.add_argument(
        "--main-folder", action="append", default=None, help="Dossier principal (un sous-dossier par cours)"
    )
    folders.add_argument(
        "--source-root", action="append", default=None, help="Dossier depuis lequel les fichiers peuvent être déplacés"
    )

    llm = argparse.ArgumentParser(add_help=False)
    llm.add_argument("--backend", choices=["remote", "local"], default=None, help="Backend LLM (défaut: env)")
    llm.add_argument("--model", default=None, help="Nom du modèle (défaut: env)")

    p_sort = sub.add_parser("sort", parents=[folders, llm], help="Classer et déplacer des fichiers")
    p_sort.add_argument("files", nargs="+", help="Fichiers à classer (traités dans l'ordre)")
    p_sort.add_argument("--dry-run", action="store_true", help="Classer sans déplacer")
    p_sort.add_argument("--report", default=None, help="Écrit le bilan JSON à ce chemin")

    p_sum = sub.add_parser("summarize", parents=[llm], help="Résumé court d'un document")
    p_sum.add_argument("file")

    p_courses = sub.add_parser("courses", parents=[folders], help="Lister / créer / renommer des cours")
    courses_sub = p_courses.add_subparsers(dest="action", required=True)
    courses_sub.add_parser("list", help="Lister les cours")
    p_add = courses_sub.add_parser("add", help="Créer un dossier de cours")
    p_add.add_argument("name")
    p_ren = courses_sub.add_parser("rename", help="Renommer un dossier de cours")
    p_ren.add_argument("old")
    p_ren.add_argument("new")

    sub.add_parser("watch", parents=[folders, llm], help="Surveiller les dossiers sources")
    return parser


def cmd_sort(args: argparse.Namespace, settings: Settings) -> int:
    config = load_llm_config(args.backend, args.model)
    if not settings.main_folders:
        raise ConfigError("[CONFIG ERROR] Aucun dossier principal (cours) déclaré.")
    if not settings.source_roots:
        logger.warning("Aucun dossier source déclaré : aucun fichier ne sera déplacé.")

    report = route_batch(
        [Path(f).expanduser() for f in args.files],
        courses=lambda: discover_courses(settings.main_folders, logger=logger),
        source_roots=settings.source_roots,
        llm_config=config,
        dry_run=args.dry_run,
        logger=logger,
    )
    print(report.render())
    print()
    print(", ".join(f"{k}={v}" for k, v in report.counts().items()))
    if args.report:
        dest = write_report(report, args.report)
        logger.info("Bilan écrit dans %s", dest)
    return 1 if report.failed else 0


def cmd_summarize(args: argparse.Namespace) -> int:
    config = load_llm_config(args.backend, args.model)
    path = Path(args.file).expanduser()
    text = extract_text(path, logger=logger)
    if not text:
        print(f"Could not extract text from {path.name}.")
        return 1
    try:
        summary = summarize(text, config, logger=logger)
    except LLMError as exc:
        logger.error("[SUMMARY] ❌ %s | ctx=%r", exc, exc.ctx)
        print(f"Error: {exc.reason}")
        return 1
    print(f"Summary of {path.name}:\n\n{summary}")
    return 0


def cmd_courses(args: argparse.Namespace, settings: Settings) -> int:
    if not settings.main_folders:
        raise ConfigError("[CONFIG ERROR] Aucun dossier principal (cours) déclaré.")
    mains = discover_main_folders(settings.main_folders, logger=logger)

    if args.action == "list":
        for main in mains:
            print(f"{main.name} ({main.path})")
            for course in main.courses:
                print(f"  - {course.name}")
        return 0

    if args.action == "add":
        if len(mains) != 1:
            raise ConfigError("[CONFIG ERROR] Préciser un seul --main-folder pour créer un cours.")
        course = add_course(mains[0].path, args.name, logger=logger)
        print(f"Created {course.path}")
        return 0

    course = find_exact(args.old, [c for m in mains for c in m.courses])
    if course is None:
        print(f"Course not found: {args.old}")
        return 1
    renamed = rename_course(course, args.new, logger=logger)
    print(f"Renamed {course.path} -> {renamed.path}")
    return 0


@safe_main
def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger.debug("Commande : %s", args.command)
    if args.command == "summarize":
        return cmd_summarize(args)
    settings = load_settings(args.main_folder, getattr(args, "source_root", None))
    if args.command == "sort":
        return cmd_sort(args, settings)
    if args.command == "courses":
        return cmd_courses(args, settings)
    start_watcher(settings, load_llm_config(args.backend, args.model), logger=logger)
    return 0


if __name__ == "__main__":
    main()
