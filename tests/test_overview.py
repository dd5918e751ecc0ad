"""
Course overview aggregation.

- four sibling fetches run together; one failing counts as empty
- recent activity: newest first, at most 10, undated items skipped
"""

import requests

from aula.backend import BackendClient
from aula.overview import build_overview, fetch_sources, recent_activity, reported_total
from aula.models import Announcement, Assignment, ForumThread, RosterEntry

from conftest import BACKEND, FakeBackend


def _client(fake):
    return BackendClient(BACKEND, http=fake)


def _seed(fake, course_id=10):
    fake.add("GET", f"/inscriptions/course/{course_id}/students", {
        "totalStudents": 3,
        "inscriptions": [
            {"id": 1, "student": {"id": 7, "name": "Ana"}, "enrollmentDate": "2026-03-01T10:00:00Z", "progress": 40},
            {"id": 2, "student": {"id": 8, "name": "Luis"}, "enrollmentDate": "2026-03-02T10:00:00Z", "progress": 61},
        ],
    })
    fake.add("GET", f"/assignments/course/{course_id}", [
        {"assignment_id": 5, "title": "Tarea 1", "createdAt": "2026-03-03T10:00:00Z"},
    ])
    fake.add("GET", f"/forums/course/{course_id}", [
        {"id": 9, "title": "Dudas", "createdAt": "2026-03-04T10:00:00Z", "user": {"name": "Ana"}},
        {"id": 10, "title": "Cerrado", "isLocked": True},
    ])
    fake.add("GET", f"/announcements/course/{course_id}", [
        {"id": 3, "title": "Bienvenidos", "createdAt": "2026-03-05T10:00:00Z"},
    ])


def test_fetch_and_build_overview():
    fake = FakeBackend()
    _seed(fake)

    sources, failed = fetch_sources(_client(fake), 10, "tok")
    assert failed == []

    out = build_overview(sources, failed)
    assert out["stats"] == {
        "total_students": 3,
        "published_assignments": 1,
        "total_announcements": 1,
        "active_threads": 1,
        "average_progress": 50,
    }
    kinds = [a["id"] for a in out["recent_activity"]]
    assert kinds == ["announcement-3", "forum-9", "assignment-5", "enrollment-8", "enrollment-7"]
    assert out["recent_activity"][0]["user"] == "Profesor"
    assert out["failed_sources"] == []


def test_one_failed_source_counts_as_zero():
    fake = FakeBackend()
    _seed(fake)
    fake.add("GET", "/assignments/course/10", {"message": "boom"}, status=500)
    fake.fail("GET", "/forums/course/10", requests.Timeout("slow"))

    sources, failed = fetch_sources(_client(fake), 10, "tok")
    out = build_overview(sources, failed)

    assert sorted(failed) == ["assignments", "forums"]
    assert out["stats"]["published_assignments"] == 0
    assert out["stats"]["active_threads"] == 0
    assert out["stats"]["total_students"] == 3
    assert out["stats"]["total_announcements"] == 1
    assert out["failed_sources"] == ["assignments", "forums"]


def test_all_sources_failed_gives_empty_overview():
    out = build_overview({}, ["students", "assignments", "forums", "announcements"])
    assert out["stats"]["total_students"] == 0
    assert out["stats"]["average_progress"] == 0
    assert out["recent_activity"] == []


def test_recent_activity_is_capped_and_skips_undated():
    announcements = Announcement.from_list(
        [{"id": i, "title": f"a{i}", "createdAt": f"2026-01-0{i}T00:00:00Z"} for i in range(1, 8)]
    )
    assignments = Assignment.from_list(
        [{"id": i, "title": f"t{i}", "dueDate": f"2026-02-0{i}T00:00:00Z"} for i in range(1, 8)]
    )
    threads = ForumThread.from_list([{"id": 1, "title": "sin fecha"}])
    roster = RosterEntry.from_list([{"id": 1, "student": {"name": "X"}}])

    out = recent_activity(roster, assignments, threads, announcements)
    assert len(out) == 10
    # at most five of each kind make it in
    assert sum(1 for a in out if a["type"] == "assignment") == 5
    assert sum(1 for a in out if a["type"] == "announcement") == 5
    assert out[0]["id"] == "assignment-5"
    assert all(a["type"] != "forum" and a["type"] != "enrollment" for a in out)


def test_roster_row_without_numeric_progress():
    fake = FakeBackend()
    _seed(fake)
    fake.add("GET", "/inscriptions/course/10/students", {
        "totalStudents": "N/A",
        "inscriptions": [
            {"id": 1, "student": {"id": 7, "name": "Ana"}, "progress": 40},
            {"id": 2, "student": {"id": 8, "name": "Luis"}, "progress": "N/A"},
            {"id": 3, "student": {"id": 9, "name": "Eva"}, "progress": 60},
        ],
    })

    sources, failed = fetch_sources(_client(fake), 10, "tok")
    out = build_overview(sources, failed)

    assert failed == []
    assert out["stats"]["total_students"] == 3
    assert out["stats"]["average_progress"] == 50


def test_non_numeric_total_falls_back_to_roster():
    assert reported_total({"totalStudents": "muchos"}, 2) == 2
    assert reported_total({"totalStudents": None}, 2) == 2
    assert reported_total({"totalStudents": "5"}, 2) == 5
    assert reported_total([], 2) == 2
