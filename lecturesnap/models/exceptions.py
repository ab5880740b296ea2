# lecturesnap/models/exceptions.py
from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum  # py>=3.11
from typing import Any


class ErrCode(StrEnum):
    EXTRACTION = "EXTRACTION"
    LLM = "LLM"
    MOVE = "MOVE"
    SCOPE = "SCOPE"
    CONFIG = "CONFIG"
    UNEXPECTED = "UNEXPECTED"


class LectureSnapError(RuntimeError):
    """
    Erreur métier avec code + contexte structuré.
    """

    __slots__ = ("code", "ctx")

    def __init__(self, message: str, *, code: ErrCode, ctx: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.ctx: dict[str, Any] = dict(ctx or {})

    def with_context(self, extra: dict[str, Any]) -> LectureSnapError:
        # n'écrase pas ce qui existe déjà
        for k, v in extra.items():
            self.ctx.setdefault(k, v)
        return self

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class ExtractionError(LectureSnapError):
    """
    Texte illisible, format non supporté ou vide.
    """

    def __init__(self, message: str, *, ctx: Mapping[str, Any] | None = None) -> None:
        super().__init__(message, code=ErrCode.EXTRACTION, ctx=ctx)


class LLMError(LectureSnapError):
    """
    Appel LLM en échec : réseau, clé absente, endpoint invalide, statut non-2xx, timeout, réponse illisible.

    `reason` est la forme courte affichée à l'utilisateur.
    """

    def __init__(self, reason: str, *, ctx: Mapping[str, Any] | None = None) -> None:
        super().__init__(reason, code=ErrCode.LLM, ctx=ctx)
        self.reason = reason


class MoveError(LectureSnapError):
    """
    Déplacement impossible (permission, collision, I/O).
    """

    def __init__(self, message: str, *, code: ErrCode = ErrCode.MOVE, ctx: Mapping[str, Any] | None = None) -> None:
        super().__init__(message, code=code, ctx=ctx)
