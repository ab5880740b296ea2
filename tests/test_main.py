from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import fitz
import pytest

from lecturesnap import main as cli
from lecturesnap.llm import llm_call as llm_module


class FakeResponse:
    def __init__(self, content: str) -> None:
        self.status_code = 200
        self._body = {"choices": [{"message": {"content": content}}]}
        self.text = json.dumps(self._body)

    def raise_for_status(self) -> None:
        return None

    def json(self) -> Any:
        return self._body


@pytest.fixture
def openai(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []

    def fake_post(url: str, **kwargs: Any) -> FakeResponse:
        calls.append({"url": url, **kwargs})
        prompt = kwargs["json"]["messages"][0]["content"]
        if "Summarize the following" in prompt:
            return FakeResponse("A short summary.")
        return FakeResponse('{"subject": "Linear Algebra", "course_folder": "Linear Algebra"}')

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("LECTURESNAP_BACKEND", raising=False)
    monkeypatch.setattr(llm_module.requests, "post", fake_post)
    return calls


def _pdf(path: Path, text: str) -> Path:
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), text)
    doc.save(path)
    doc.close()
    return path


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(argv)
    return int(exc_info.value.code)


def test_sort_moves_and_writes_report(workspace, openai, capsys, tmp_path: Path) -> None:
    src = _pdf(workspace["inbox"] / "week1.pdf", "Vector spaces and linear maps")
    report = tmp_path / "report.json"

    code = _run(
        [
            "sort",
            str(src),
            "--main-folder",
            str(workspace["main"]),
            "--source-root",
            str(workspace["inbox"]),
            "--report",
            str(report),
        ]
    )

    assert code == 0
    assert (workspace["main"] / "Linear Algebra" / "week1.pdf").exists()
    out = capsys.readouterr().out
    assert "File: week1.pdf" in out
    assert "Course Folder: Linear Algebra" in out
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["counts"]["moved"] == 1
    assert "Vector spaces" in openai[0]["json"]["messages"][0]["content"]


def test_sort_without_main_folder_is_config_error(workspace, openai, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LECTURESNAP_MAIN_FOLDERS", raising=False)
    assert _run(["sort", str(workspace["inbox"] / "x.pdf")]) == 2


def test_summarize(workspace, openai, capsys) -> None:
    src = _pdf(workspace["inbox"] / "notes.pdf", "Derivatives")
    assert _run(["summarize", str(src)]) == 0
    assert "Summary of notes.pdf:" in capsys.readouterr().out


def test_summarize_unreadable(workspace, openai, capsys) -> None:
    bad = workspace["inbox"] / "bad.pdf"
    bad.write_bytes(b"nope")
    assert _run(["summarize", str(bad)]) == 1
    assert "Could not extract text from bad.pdf." in capsys.readouterr().out
    assert openai == []


def test_courses_add_list_rename(workspace, capsys) -> None:
    main = str(workspace["main"])
    assert _run(["courses", "--main-folder", main, "add", "Statistics"]) == 0
    assert (workspace["main"] / "Statistics").is_dir()

    assert _run(["courses", "--main-folder", main, "rename", "Statistics", "Probability"]) == 0
    assert (workspace["main"] / "Probability").is_dir()

    capsys.readouterr()

    assert _run(["courses", "--main-folder", main, "list"]) == 0
    out = capsys.readouterr().out
    assert "  - Probability" in out
    assert "Statistics" not in out


def test_courses_add_reserved_name(workspace) -> None:
    assert _run(["courses", "--main-folder", str(workspace["main"]), "add", "No Matching Course Found"]) == 1
