"""Converters between the data service's JSON entries and dashboard models."""

import json
import logging
from dataclasses import replace
from typing import Any, Optional

from . import scoring
from .models import (
    UNASSIGNED_TA,
    BonusScore,
    ExerciseScore,
    GdScore,
    StudentWeekRecord,
    WeeklyAttendanceSummary,
)

logger = logging.getLogger(__name__)

YES = "yes"
NO = "no"


class MalformedPayloadError(ValueError):
    """Raised when a response body does not have the expected shape."""

    pass


def _flag(value: Any) -> bool:
    return value == YES


def _yes_no(value: bool) -> str:
    return YES if value else NO


def _score(entry: dict, key: str) -> int:
    value = entry.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedPayloadError(f"Field '{key}' is not a number: {value!r}")
    return int(value)


def from_wire(entry: dict, week: int, position: int) -> StudentWeekRecord:
    """Build a roster record from one ``/weekly_data`` entry.

    Args:
        entry: Decoded JSON object for one student
        week: Week the roster was requested for
        position: Zero-based index of the entry in the response

    Returns:
        StudentWeekRecord with ``id = position + 1`` and a computed total

    Raises:
        MalformedPayloadError: If the entry is not an object or has no name
    """
    if not isinstance(entry, dict):
        raise MalformedPayloadError(f"Entry {position} is not an object")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise MalformedPayloadError(f"Entry {position} has no name")

    gd_score = GdScore(
        fa=_score(entry, "fa"),
        fb=_score(entry, "fb"),
        fc=_score(entry, "fc"),
        fd=_score(entry, "fd"),
    )
    bonus_score = BonusScore(
        attempt=_score(entry, "bonus_attempt"),
        good=_score(entry, "bonus_answer_quality"),
        follow_up=_score(entry, "bonus_follow_up"),
    )
    exercise_score = ExerciseScore(
        submitted=_flag(entry.get("exercise_submitted")),
        private_test=_flag(entry.get("exercise_test_passing")),
        good_structure=_flag(entry.get("exercise_good_structure")),
        good_doc=_flag(entry.get("exercise_good_documentation")),
    )

    record = StudentWeekRecord(
        id=position + 1,
        name=name,
        email=entry.get("mail"),
        group=entry.get("group_id"),
        ta=entry.get("ta") or UNASSIGNED_TA,
        attendance=_flag(entry.get("attendance")),
        gd_score=gd_score,
        bonus_score=bonus_score,
        exercise_score=exercise_score,
        week=week,
    )
    return _with_total(record)


def _with_total(record: StudentWeekRecord) -> StudentWeekRecord:
    return replace(record, total=scoring.total(record))


def to_wire(record: StudentWeekRecord, week: int) -> dict:
    """Serialize a roster record for ``POST /weekly_data/{week}``.

    The total is always recomputed from the sub-scores.
    """
    return {
        "name": record.name,
        "mail": record.email,
        "group_id": record.group,
        "ta": None if record.ta == UNASSIGNED_TA else record.ta,
        "attendance": _yes_no(record.attendance),
        "fa": record.gd_score.fa,
        "fb": record.gd_score.fb,
        "fc": record.gd_score.fc,
        "fd": record.gd_score.fd,
        "bonus_attempt": record.bonus_score.attempt,
        "bonus_answer_quality": record.bonus_score.good,
        "bonus_follow_up": record.bonus_score.follow_up,
        "exercise_submitted": _yes_no(record.exercise_score.submitted),
        "exercise_test_passing": _yes_no(record.exercise_score.private_test),
        "exercise_good_documentation": _yes_no(record.exercise_score.good_doc),
        "exercise_good_structure": _yes_no(record.exercise_score.good_structure),
        "week": week,
        "total": scoring.total(record),
    }


def parse_roster(data: Any, week: int) -> list[StudentWeekRecord]:
    """Normalize a whole ``/weekly_data`` response.

    A single bad entry fails the whole roster; rows are never dropped.
    """
    if not isinstance(data, list):
        raise MalformedPayloadError("Weekly data response is not a list")
    roster = [from_wire(entry, week, index) for index, entry in enumerate(data)]
    logger.debug("Normalized %d entries for week %d", len(roster), week)
    return roster


def parse_student_count(data: Any) -> int:
    if not isinstance(data, dict):
        raise MalformedPayloadError("Student count response is not an object")
    count = data.get("total_students")
    if isinstance(count, bool) or not isinstance(count, int):
        raise MalformedPayloadError(f"Invalid total_students: {count!r}")
    return count


def parse_weekly_attendance(data: Any) -> list[WeeklyAttendanceSummary]:
    if not isinstance(data, list):
        raise MalformedPayloadError("Weekly attendance response is not a list")
    summaries = []
    for item in data:
        try:
            summaries.append(
                WeeklyAttendanceSummary(week=int(item["week"]), attended=int(item["attended"]))
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPayloadError(f"Invalid weekly attendance entry {item!r}: {e}")
    return summaries


def parse_error_detail(text: str) -> str:
    """Pull ``message`` out of a JSON error body, else return the raw body."""
    try:
        data = json.loads(text)
    except ValueError:
        return text
    message: Optional[Any] = data.get("message") if isinstance(data, dict) else None
    return str(message) if message else text
