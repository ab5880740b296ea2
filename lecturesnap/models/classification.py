"""
# models/classification.py
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from lecturesnap.models.exceptions import ErrCode
from lecturesnap.models.llm_config import Backend

# valeurs réservées : jamais un nom de cours légitime
NO_MATCH = "No Matching Course Found"
UNKNOWN_SUBJECT = "Unknown Subject"
ERROR_SUBJECT_PREFIX = "Error: "


def is_no_match(name: str | None) -> bool:
    return not name or name.strip().casefold() == NO_MATCH.casefold()


class PromptMode(StrEnum):
    CLASSIFY = "classify"
    SUMMARIZE = "summarize"


@dataclass(frozen=True, slots=True, kw_only=True)
class ClassificationPrompt:
    """
    Prompt construit pour un appel, immuable et jamais persisté.
    """

    mode: PromptMode
    backend: Backend
    text: str
    course_names: tuple[str, ...] = ()
    body: str

    def __str__(self) -> str:
        return self.body


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """
    Réponse normalisée du LLM.

    Attributes:
        subject: Matière détectée (ou message d'erreur si l'appel a échoué).
        course_folder: Nom de cours candidat ou NO_MATCH.
        error: ErrCode.LLM si l'appel LLM a échoué, None sinon.
    """

    subject: str = UNKNOWN_SUBJECT
    course_folder: str = NO_MATCH
    error: ErrCode | None = None

    @property
    def is_no_match(self) -> bool:
        return is_no_match(self.course_folder)

    @classmethod
    def default(cls) -> ClassificationResult:
        return cls(UNKNOWN_SUBJECT, NO_MATCH)

    @classmethod
    def from_error(cls, reason: str) -> ClassificationResult:
        return cls(f"{ERROR_SUBJECT_PREFIX}{reason}", NO_MATCH, ErrCode.LLM)

    def as_tuple(self) -> tuple[str, str]:
        return (self.subject, self.course_folder)
