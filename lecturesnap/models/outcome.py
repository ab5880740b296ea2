"""
# models/outcome.py
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from lecturesnap.models.classification import NO_MATCH, UNKNOWN_SUBJECT
from lecturesnap.models.courses import Course
from lecturesnap.models.exceptions import ErrCode


class RoutingState(StrEnum):
    """
    États de la machine de routage d'un fichier.
    """

    EXTRACTING = "extracting"
    CLASSIFYING = "classifying"
    RESOLVING = "resolving"
    MOVING = "moving"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class RoutingOutcome:
    """
    Résultat du routage d'un fichier, produit une seule fois.

    Attributes:
        filename: Nom du fichier traité.
        source: Chemin d'origine.
        subject: Matière détectée par le LLM.
        course_folder: Nom proposé par le LLM (avant résolution).
        resolved_course: Cours réel retenu, ou None.
        destination: Chemin final si déplacé.
        moved: True si le fichier a été déplacé.
        state: DONE ou FAILED.
        failed_at: État dans lequel l'échec est survenu.
        error: Code d'erreur, ou None.
        note: Précision lisible (hors périmètre, non résolu, ...).
    """

    filename: str
    source: Path
    subject: str = UNKNOWN_SUBJECT
    course_folder: str = NO_MATCH
    resolved_course: Course | None = None
    destination: Path | None = None
    moved: bool = False
    state: RoutingState = RoutingState.DONE
    failed_at: RoutingState | None = None
    error: ErrCode | None = None
    note: str = ""

    @property
    def failed(self) -> bool:
        return self.state is RoutingState.FAILED

    def summary(self) -> str:
        """
        Bloc texte affiché pour un fichier.
        """
        if self.error is ErrCode.EXTRACTION:
            return f"File: {self.filename}\nError: Failed to extract text."
        lines = [
            f"File: {self.filename}",
            f"Subject: {self.subject}",
            f"Course Folder: {self.resolved_course.name if self.resolved_course else self.course_folder}",
        ]
        if self.moved and self.destination is not None:
            lines.append(f"Moved to: {self.destination}")
        elif self.note:
            lines.append(f"Note: {self.note}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "source": self.source.as_posix(),
            "subject": self.subject,
            "course_folder": self.course_folder,
            "resolved_course": self.resolved_course.name if self.resolved_course else None,
            "destination": self.destination.as_posix() if self.destination else None,
            "moved": self.moved,
            "state": str(self.state),
            "failed_at": str(self.failed_at) if self.failed_at else None,
            "error": str(self.error) if self.error else None,
            "note": self.note,
        }


@dataclass(slots=True)
class BatchReport:
    """
    Agrégat des résultats d'un lot, dans l'ordre de traitement.
    """

    outcomes: list[RoutingOutcome] = field(default_factory=list)

    def append(self, outcome: RoutingOutcome) -> None:
        self.outcomes.append(outcome)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def moved(self) -> list[RoutingOutcome]:
        return [o for o in self.outcomes if o.moved]

    @property
    def failed(self) -> list[RoutingOutcome]:
        return [o for o in self.outcomes if o.failed]

    def counts(self) -> dict[str, int]:
        errors = Counter(str(o.error) for o in self.outcomes if o.error)
        return {
            "total": len(self.outcomes),
            "moved": len(self.moved),
            "left_in_place": len(self.outcomes) - len(self.moved),
            "failed": len(self.failed),
            **{f"error_{k.lower()}": v for k, v in errors.items()},
        }

    def render(self) -> str:
        return "\n\n".join(o.summary() for o in self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {"counts": self.counts(), "outcomes": [o.to_dict() for o in self.outcomes]}
