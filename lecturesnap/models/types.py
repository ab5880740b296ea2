"""
types.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lecturesnap.models.llm_config import LLMConfig

StrOrPath = str | Path

# collaborateurs injectables : extraction de texte et transport LLM
TextExtractor = Callable[..., str | None]
LLMCall = Callable[[str, "LLMConfig"], str]
