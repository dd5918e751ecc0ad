"""
Management overview for a single course.

Four upstream lists are fetched in parallel and combined into headline stats
plus a recent-activity feed. A list that fails to load counts as empty, so
one broken endpoint never blanks the whole overview.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from .backend import BackendClient, unwrap_list
from .errors import BackendError
from .models import Announcement, Assignment, ForumThread, RosterEntry
from .models.base import parse_timestamp

logger = logging.getLogger(__name__)

PER_KIND = 5
MAX_ACTIVITIES = 10

OVERVIEW_SOURCES = {
    "students": "/inscriptions/course/{course_id}/students",
    "assignments": "/assignments/course/{course_id}",
    "forums": "/forums/course/{course_id}",
    "announcements": "/announcements/course/{course_id}",
}


def fetch_sources(
    backend: BackendClient,
    course_id: int | str,
    token: str | None,
    max_workers: int = 4,
) -> tuple[dict[str, Any], list[str]]:
    """Fetch every overview source concurrently.

    Returns the payloads by source name (``None`` for failures) and the
    names of the sources that failed.
    """
    results: dict[str, Any] = {}
    failed: list[str] = []
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {
            name: pool.submit(backend.get, path.format(course_id=course_id), token)
            for name, path in OVERVIEW_SOURCES.items()
        }
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except BackendError as exc:
                logger.warning("overview: %s for course %s failed: %s", name, course_id, exc.message)
                results[name] = None
                failed.append(name)
    return results, failed


def _activity(kind: str, ident: Any, description: str, timestamp: str | None, user: str | None = None) -> dict:
    return {
        "id": f"{kind}-{ident}",
        "type": kind,
        "description": description,
        "timestamp": timestamp,
        "user": user,
    }


def recent_activity(
    roster: list[RosterEntry],
    assignments: list[Assignment],
    threads: list[ForumThread],
    announcements: list[Announcement],
) -> list[dict]:
    activities = []

    for a in announcements[:PER_KIND]:
        if a.created_at:
            activities.append(_activity("announcement", a.id, f"Nuevo anuncio: {a.title}", a.created_at, a.author))

    for a in assignments[:PER_KIND]:
        timestamp = a.created_at or a.due_date
        if timestamp:
            activities.append(_activity("assignment", a.id, f"Nueva tarea: {a.title}", timestamp))

    for t in threads[:PER_KIND]:
        if t.created_at:
            activities.append(_activity("forum", t.id, f"Nueva discusión: {t.title}", t.created_at, t.author))

    dated_students = [s for s in roster if parse_timestamp(s.enrollment_date)]
    dated_students.sort(key=lambda s: parse_timestamp(s.enrollment_date), reverse=True)
    for s in dated_students[:PER_KIND]:
        activities.append(
            _activity("enrollment", s.id, f"{s.name} se inscribió en el curso", s.enrollment_date, s.name)
        )

    dated = [(parse_timestamp(a["timestamp"]), a) for a in activities]
    dated = [(ts, a) for ts, a in dated if ts is not None]
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [a for _, a in dated[:MAX_ACTIVITIES]]


def reported_total(data: Any, default: int) -> int:
    """``totalStudents`` from a roster payload when it is a positive number, else ``default``."""
    if not isinstance(data, dict):
        return default
    try:
        total = int(data.get("totalStudents") or 0)
    except (TypeError, ValueError):
        return default
    return total if total > 0 else default


def build_overview(sources: dict[str, Any], failed: list[str] | None = None) -> dict:
    students_data = sources.get("students")
    roster = RosterEntry.from_list(unwrap_list(students_data, "inscriptions", "students"))
    assignments = Assignment.from_list(unwrap_list(sources.get("assignments"), "assignments"))
    threads = ForumThread.from_list(unwrap_list(sources.get("forums"), "threads"))
    announcements = Announcement.from_list(unwrap_list(sources.get("announcements"), "announcements"))

    total_students = reported_total(students_data, len(roster))

    progress = [s.progress for s in roster if s.progress is not None]
    average_progress = round(sum(progress) / len(progress)) if progress else 0

    return {
        "stats": {
            "total_students": total_students,
            "published_assignments": len(assignments),
            "total_announcements": len(announcements),
            "active_threads": sum(1 for t in threads if not t.is_locked),
            "average_progress": average_progress,
        },
        "recent_activity": recent_activity(roster, assignments, threads, announcements),
        "failed_sources": sorted(failed or []),
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }
