from __future__ import annotations

from typing import Iterable

from .models.course import Course


def _matches_search(course: Course, needle: str) -> bool:
    if needle in course.title.lower() or needle in course.description.lower():
        return True
    if course.category and needle in course.category.lower():
        return True
    return any(needle in tag.lower() for tag in course.tags)


def filter_catalog(
    courses: Iterable[Course],
    search: str | None = None,
    category: str | None = None,
    level: str | None = None,
    modality: str | None = None,
) -> list[Course]:
    """Published (or status-less) courses matching every given filter."""
    needle = (search or "").strip().lower()
    out = []
    for course in courses:
        if course.is_draft:
            continue
        if needle and not _matches_search(course, needle):
            continue
        if category and course.category != category:
            continue
        if level and course.level != level:
            continue
        if modality and course.modality != modality:
            continue
        out.append(course)
    return out


def unique_categories(courses: Iterable[Course]) -> list[str]:
    seen: dict[str, None] = {}
    for course in courses:
        if course.category:
            seen.setdefault(course.category, None)
    return list(seen)
