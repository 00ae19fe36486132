"""Shared fixtures: wire entries, rosters and a fake data service."""

import json

import httpx
import pytest

from cohort_dashboard.client import DashboardClient
from cohort_dashboard.models import (
    BonusScore,
    ExerciseScore,
    GdScore,
    StudentWeekRecord,
)
from cohort_dashboard.parsers import from_wire
from cohort_dashboard.store import ViewStateStore


def make_entry(name, **overrides):
    entry = {
        "name": name,
        "mail": f"{name.split()[0].lower()}@example.com",
        "group_id": "Group 1",
        "ta": "Alice",
        "attendance": "yes",
        "fa": 3,
        "fb": 4,
        "fc": 2,
        "fd": 5,
        "bonus_attempt": 1,
        "bonus_answer_quality": 2,
        "bonus_follow_up": 0,
        "exercise_submitted": "yes",
        "exercise_test_passing": "no",
        "exercise_good_documentation": "yes",
        "exercise_good_structure": "no",
        "week": 2,
    }
    entry.update(overrides)
    return entry


def make_record(record_id, name, **overrides):
    fields = {
        "id": record_id,
        "name": name,
        "group": "Group 1",
        "ta": "Alice",
        "week": 2,
        "gd_score": GdScore(),
        "bonus_score": BonusScore(),
        "exercise_score": ExerciseScore(),
    }
    fields.update(overrides)
    return StudentWeekRecord(**fields)


class FakeService:
    """In-memory stand-in for the grading data service."""

    def __init__(self):
        self.weeks = {}
        self.student_count = 12
        self.weekly_counts = [{"week": 0, "attended": 10}, {"week": 2, "attended": 7}]
        self.admins = {"ta@example.com"}
        self.fail = {}  # path or (method, path) -> (status, body)
        self.saved = []  # (week, payload)
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))
        failure = self.fail.get((request.method, path)) or self.fail.get(path)
        if failure:
            status, body = failure
            return httpx.Response(status, text=body)

        if path == "/login":
            gmail = json.loads(request.content)["gmail"]
            if gmail in self.admins:
                return httpx.Response(200, json={"ok": True})
            return httpx.Response(403, json={"message": "Not an admin"})

        if path.startswith("/weekly_data/"):
            week = int(path.rsplit("/", 1)[1])
            if request.method == "GET":
                return httpx.Response(200, json=self.weeks.get(week, []))
            payload = json.loads(request.content)
            self.saved.append((week, payload))
            self.weeks[week] = payload
            return httpx.Response(200, json={"saved": len(payload)})

        if path == "/students/count":
            return httpx.Response(200, json={"total_students": self.student_count})

        if path == "/attendance/weekly_counts":
            return httpx.Response(200, json=self.weekly_counts)

        return httpx.Response(404, text="Not Found")


@pytest.fixture
def service():
    fake = FakeService()
    fake.weeks[0] = [make_entry("Zoe Adams", week=0), make_entry("bob lee", week=0, ta=None)]
    fake.weeks[2] = [
        make_entry("Carol King", week=2, group_id="Group 2", ta="Bruno"),
        make_entry("bob lee", week=2),
        make_entry("Anna Smith", week=2, ta=None),
    ]
    return fake


@pytest.fixture
def client(service):
    return DashboardClient("http://testserver", transport=httpx.MockTransport(service.handler))


@pytest.fixture
def roster():
    return [
        make_record(1, "Carol King", group="Group 2", ta="Bruno"),
        make_record(2, "bob lee"),
        make_record(3, "Anna Smith", ta="N/A"),
        make_record(4, "alan turing", group="Group 2", ta="Alice"),
    ]


@pytest.fixture
def week_two_store(roster):
    store = ViewStateStore(week=2)
    store.replace_roster(roster)
    return store


@pytest.fixture
def sample_entry():
    return make_entry("Bob Lee")


@pytest.fixture
def sample_record(sample_entry):
    return from_wire(sample_entry, 2, 0)
