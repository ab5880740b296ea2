from __future__ import annotations

from pathlib import Path

from lecturesnap.models.courses import Course
from lecturesnap.models.exceptions import ErrCode
from lecturesnap.models.outcome import BatchReport, RoutingOutcome, RoutingState


def test_summary_for_moved_file(tmp_path: Path) -> None:
    course = Course("Calculus", tmp_path / "Calculus")
    outcome = RoutingOutcome(
        filename="a.pdf",
        source=tmp_path / "a.pdf",
        subject="Calculus I",
        course_folder="calculas",
        resolved_course=course,
        destination=course.path / "a.pdf",
        moved=True,
    )
    assert outcome.summary().splitlines() == [
        "File: a.pdf",
        "Subject: Calculus I",
        "Course Folder: Calculus",
        f"Moved to: {course.path / 'a.pdf'}",
    ]


def test_summary_for_extraction_failure(tmp_path: Path) -> None:
    outcome = RoutingOutcome(
        filename="scan.png",
        source=tmp_path / "scan.png",
        state=RoutingState.FAILED,
        failed_at=RoutingState.EXTRACTING,
        error=ErrCode.EXTRACTION,
    )
    assert outcome.failed
    assert outcome.summary() == "File: scan.png\nError: Failed to extract text."


def test_batch_counts(tmp_path: Path) -> None:
    report = BatchReport()
    report.append(RoutingOutcome(filename="a", source=tmp_path / "a", moved=True))
    report.append(RoutingOutcome(filename="b", source=tmp_path / "b", error=ErrCode.SCOPE, note="out"))
    report.append(
        RoutingOutcome(filename="c", source=tmp_path / "c", state=RoutingState.FAILED, error=ErrCode.MOVE)
    )

    assert report.counts() == {
        "total": 3,
        "moved": 1,
        "left_in_place": 2,
        "failed": 1,
        "error_scope": 1,
        "error_move": 1,
    }
    assert report.to_dict()["outcomes"][1]["note"] == "out"
    assert report.render().count("File: ") == 3
