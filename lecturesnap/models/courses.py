"""
# models/courses.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Course:
    """
    Un dossier de cours (LectureFolder) sous un dossier principal.

    L'identité se fait par le nom, pas par le chemin.

    Attributes:
        name: Nom du dossier (dernier segment).
        path: Chemin complet du dossier.
    """

    name: str
    path: Path

    @classmethod
    def from_path(cls, path: str | Path) -> Course:
        p = Path(path)
        return cls(name=p.name, path=p)

    @property
    def main_folder(self) -> Path:
        """
        Dossier principal (parent) du cours.
        """
        return self.path.parent

    def matches(self, name: str) -> bool:
        return self.name.casefold() == name.strip().casefold()


@dataclass(slots=True, kw_only=True)
class MainFolder:
    """
    Dossier de collection contenant un sous-dossier par cours.
    """

    name: str
    path: Path
    courses: list[Course] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if not self.name:
            self.name = self.path.name

    @property
    def course_names(self) -> list[str]:
        return [c.name for c in self.courses]
