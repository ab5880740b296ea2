"""
# llm/response_parser.py

Normalisation des réponses brutes du LLM en (subject, course_folder).

Ne lève jamais : toute sortie illisible retombe sur la paire par défaut
("Unknown Subject", "No Matching Course Found").
"""

from __future__ import annotations

import json
import re
from typing import Any

from lecturesnap.models.classification import NO_MATCH, UNKNOWN_SUBJECT, ClassificationResult
from lecturesnap.models.llm_config import ResponseSchema

THINK_OPEN = "<think>"
THINK_CLOSE = "</think>"
FINISH_MARKER = '},"finish_reason"'

_THINK_BLOCK = re.compile(re.escape(THINK_OPEN) + r".*?" + re.escape(THINK_CLOSE), re.DOTALL)
_SUBJECT_LINE = re.compile(r"^[ \t*_-]*Subject[ \t*]*:[ \t*]*(.+?)[ \t]*$", re.IGNORECASE | re.MULTILINE)
_COURSE_LINE = re.compile(r"^[ \t*_-]*Course[ \t]+Folder[ \t*]*:[ \t*]*(.+?)[ \t]*$", re.IGNORECASE | re.MULTILINE)
_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_VALUE_JUNK = " \t\"'`*"


def strip_reasoning(text: str) -> str:
    """
    Retire les blocs <think>...</think> (non-gourmand, multi-lignes) puis les marqueurs orphelins.
    """
    cleaned = _THINK_BLOCK.sub("", text)
    return cleaned.replace(THINK_OPEN, "").replace(THINK_CLOSE, "")


def unwrap_envelope(raw: str) -> str:
    """
    Si raw est une enveloppe chat-completion, retourne choices[0].message.content.

    Sinon retourne raw tel quel.
    """
    try:
        payload: Any = json.loads(raw)
    except (TypeError, ValueError):
        return raw
    if not isinstance(payload, dict):
        return raw
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return raw
    return content if isinstance(content, str) else raw


def truncate_metadata(text: str) -> str:
    idx = text.find(FINISH_MARKER)
    return text[:idx] if idx >= 0 else text


def normalize(raw: str) -> str:
    """
    Enveloppe → raisonnement → métadonnées de fin, puis trim.
    """
    return truncate_metadata(strip_reasoning(unwrap_envelope(raw))).strip()


def _clean_value(value: str) -> str:
    return value.strip().strip(_VALUE_JUNK).strip()


def parse_lines(text: str) -> ClassificationResult:
    subject = UNKNOWN_SUBJECT
    course_folder = NO_MATCH
    if match := _SUBJECT_LINE.search(text):
        subject = _clean_value(match.group(1)) or UNKNOWN_SUBJECT
    if match := _COURSE_LINE.search(text):
        course_folder = _clean_value(match.group(1)) or NO_MATCH
    return ClassificationResult(subject, course_folder)


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        payload = json.loads(text)
    except ValueError:
        # texte autour de l'objet : on décode le premier objet complet
        start = text.find("{")
        if start < 0:
            return None
        try:
            payload, _ = json.JSONDecoder().raw_decode(text, start)
        except ValueError:
            return None
    return payload if isinstance(payload, dict) else None


def parse_json(text: str) -> ClassificationResult:
    payload = _load_object(_CODE_FENCE.sub("", text).strip())
    if payload is None:
        return ClassificationResult.default()
    subject = payload.get("subject")
    course_folder = payload.get("course_folder")
    return ClassificationResult(
        subject.strip() if isinstance(subject, str) and subject.strip() else UNKNOWN_SUBJECT,
        course_folder.strip() if isinstance(course_folder, str) and course_folder.strip() else NO_MATCH,
    )


def parse(raw: str | None, schema: ResponseSchema | str = ResponseSchema.LINES) -> ClassificationResult:
    """
    Point d'entrée unique : normalise raw puis applique le schéma demandé.

    Args:
        raw: Sortie brute du LLM (éventuellement enveloppe JSON).
        schema: "lines" (Subject:/Course Folder:) ou "json" ({"subject", "course_folder"}).

    Returns:
        ClassificationResult, la paire par défaut si rien d'exploitable.
    """
    if not isinstance(raw, str) or not raw.strip():
        return ClassificationResult.default()
    try:
        kind = ResponseSchema(str(schema).lower())
    except ValueError:
        return ClassificationResult.default()
    text = normalize(raw)
    if kind is ResponseSchema.JSON:
        return parse_json(text)
    return parse_lines(text)
