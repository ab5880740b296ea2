"""
# llm/classifier.py
"""

from __future__ import annotations

from collections.abc import Sequence

from lecturesnap.llm.llm_call import call_llm
from lecturesnap.llm.prompts import PROMPTS
from lecturesnap.llm.response_parser import normalize, parse
from lecturesnap.models.classification import (
    NO_MATCH,
    ClassificationPrompt,
    ClassificationResult,
    PromptMode,
)
from lecturesnap.models.exceptions import LLMError
from lecturesnap.models.llm_config import Backend, LLMConfig
from lecturesnap.models.types import LLMCall
from lecturesnap.utils.config import PROMPT_MAX_CHARS
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger, with_child_logger


def build_prompt(
    text: str,
    course_names: Sequence[str] = (),
    *,
    backend: Backend,
    mode: PromptMode = PromptMode.CLASSIFY,
    max_chars: int = PROMPT_MAX_CHARS,
) -> ClassificationPrompt:
    """
    Construit le prompt de classification (schéma selon backend) ou de résumé.
    """
    content = text.strip()[:max_chars] if max_chars > 0 else text.strip()
    # un nom par cours, casse ignorée, premier gardé
    unique: dict[str, str] = {}
    for name in course_names:
        unique.setdefault(name.casefold(), name)
    names = tuple(unique.values())
    if mode is PromptMode.SUMMARIZE:
        body = PROMPTS["summarize"].format(content=content)
    else:
        key = "classify_json" if backend is Backend.REMOTE else "classify_lines"
        body = PROMPTS[key].format(content=content, courses="\n".join(names), no_match=NO_MATCH)
    return ClassificationPrompt(mode=mode, backend=backend, text=content, course_names=names, body=body)


@with_child_logger
def classify(
    text: str,
    course_names: Sequence[str],
    config: LLMConfig,
    *,
    llm_call: LLMCall = call_llm,
    logger: LoggerProtocol | None = None,
) -> ClassificationResult:
    """
    Demande au LLM le cours correspondant au texte.

    Une LLMError ne remonte pas : elle devient un résultat "no match" dont le subject porte l'erreur.
    """
    logger = ensure_logger(logger, __name__)
    prompt = build_prompt(text, course_names, backend=config.backend)
    logger.debug("[DEBUG] prompt classify (%d car.) : %s", len(prompt.body), prompt.body[:300])

    try:
        raw = llm_call(prompt.body, config)
    except LLMError as exc:
        logger.error("[LLM] ❌ Classification impossible : %s | ctx=%r", exc, exc.ctx)
        return ClassificationResult.from_error(exc.reason)

    result = parse(raw, config.schema)
    logger.info("[CLASSIFY] Subject=%r Course Folder=%r", result.subject, result.course_folder)
    return result


@with_child_logger
def summarize(
    text: str,
    config: LLMConfig,
    *,
    llm_call: LLMCall = call_llm,
    logger: LoggerProtocol | None = None,
) -> str:
    """
    Résumé court (3-5 phrases), sans parsing structuré.

    Lève LLMError si l'appel échoue.
    """
    logger = ensure_logger(logger, __name__)
    prompt = build_prompt(text, backend=config.backend, mode=PromptMode.SUMMARIZE)
    raw = llm_call(prompt.body, config)
    summary = normalize(raw)
    while "\n\n" in summary:
        summary = summary.replace("\n\n", "\n")
    logger.debug("[SUMMARY] %d caractères", len(summary))
    return summary
