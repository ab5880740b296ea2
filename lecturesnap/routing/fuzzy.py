"""
# routing/fuzzy.py
"""

from __future__ import annotations

from collections.abc import Sequence

from Levenshtein import distance

from lecturesnap.models.courses import Course

MAX_DISTANCE = 1


def edit_distance(a: str, b: str) -> int:
    """
    Distance de Levenshtein insensible à la casse (coût 1 par opération).
    """
    return distance(a.casefold(), b.casefold())


def find_closest(candidate: str, courses: Sequence[Course], max_distance: int = MAX_DISTANCE) -> Course | None:
    """
    Cours le plus proche de candidate, seulement si la distance <= max_distance.

    À égalité, le premier dans l'ordre d'entrée gagne. Fonction pure.
    """
    best: Course | None = None
    smallest = max_distance + 1
    for course in courses:
        dist = edit_distance(candidate.strip(), course.name)
        if dist < smallest:
            smallest = dist
            best = course
            if dist == 0:
                break
    return best


def find_exact(candidate: str, courses: Sequence[Course]) -> Course | None:
    return next((c for c in courses if c.matches(candidate)), None)


def resolve_course(candidate: str, courses: Sequence[Course]) -> tuple[Course | None, str]:
    """
    Exact (casse ignorée) puis approché.

    Retourne (cours, méthode) avec méthode "exact", "fuzzy" ou "".
    """
    if course := find_exact(candidate, courses):
        return course, "exact"
    if course := find_closest(candidate, courses):
        return course, "fuzzy"
    return None, ""
