"""
Fixtures communes.
"""

from __future__ import annotations

import os
from pathlib import Path
import tempfile

# avant tout import de lecturesnap : les logs ne doivent pas sortir du tmp
os.environ["LOG_FILE_PATH"] = tempfile.mkdtemp(prefix="lecturesnap-logs-")
os.environ.setdefault("LECTURESNAP_ENV_FILE", os.devnull)

import pytest  # noqa: E402

from lecturesnap.models.courses import Course  # noqa: E402
from lecturesnap.models.llm_config import Backend, LLMConfig  # noqa: E402


@pytest.fixture
def remote_config() -> LLMConfig:
    return LLMConfig(backend=Backend.REMOTE, model_name="gpt-test", credential="sk-test")


@pytest.fixture
def local_config() -> LLMConfig:
    return LLMConfig(backend=Backend.LOCAL, model_name="local-test", server_url="http://localhost:11434")


@pytest.fixture
def workspace(tmp_path: Path) -> dict[str, Path]:
    """
    inbox/ (dossier source) + courses/ (dossier principal avec deux cours).
    """
    inbox = tmp_path / "inbox"
    main = tmp_path / "courses"
    inbox.mkdir()
    (main / "Linear Algebra").mkdir(parents=True)
    (main / "Calculus").mkdir()
    return {"root": tmp_path, "inbox": inbox, "main": main}


@pytest.fixture
def courses(workspace: dict[str, Path]) -> list[Course]:
    main = workspace["main"]
    return [Course("Linear Algebra", main / "Linear Algebra"), Course("Calculus", main / "Calculus")]


class FakeLLM:
    """
    Collaborateur LLM factice : renvoie une réponse fixe et garde les prompts reçus.
    """

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    def __call__(self, prompt: str, config: LLMConfig) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_llm() -> type[FakeLLM]:
    return FakeLLM
