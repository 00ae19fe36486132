"""Plain-text rendering of the roster view."""

from typing import Sequence

from . import pipeline
from .models import StudentWeekRecord
from .store import ViewStateStore


def _check(value: bool) -> str:
    return "x" if value else "-"


def _score(value: int) -> str:
    return str(value) if value else "-"


def format_counters(store: ViewStateStore) -> str:
    participants = store.total_participants if store.total_participants is not None else "?"
    return (
        f"Total Participants: {participants} | "
        f"Attendees: {store.attendees} | Absentees: {store.absentees}"
    )


def format_header(store: ViewStateStore) -> str:
    name = "Name" + pipeline.sort_indicator(store.criteria.sort, "name")
    columns = [f"{'ID':>3}", f"{name:<24}", f"{'Github':<28}"]
    if store.week > 0:
        columns.append(f"{'Group':<8}")
    columns += [f"{'TA':<12}", "Att"]
    if store.week > 0:
        columns += ["GD: C D T E", "Bonus: A G F", "Ex: S T St Dc"]
    columns.append("Total")
    return " ".join(columns)


def format_record(store: ViewStateStore, record: StudentWeekRecord) -> str:
    """One table row; score columns only appear after week 0."""
    columns = [
        f"{record.id:>3}",
        f"{record.initials:<2} {record.name[:21]:<21}",
        f"{(record.email or '')[:28]:<28}",
    ]
    if store.week > 0:
        columns.append(f"{(record.group or '')[:8]:<8}")
    columns += [f"{record.ta[:12]:<12}", f"{_check(record.attendance):^3}"]
    if store.week > 0:
        gd = record.gd_score
        bonus = record.bonus_score
        ex = record.exercise_score
        columns += [
            "    " + " ".join(_score(v) for v in (gd.fa, gd.fb, gd.fc, gd.fd)),
            "       " + " ".join(_score(v) for v in (bonus.attempt, bonus.good, bonus.follow_up)),
            "    " + "  ".join(
                _check(v) for v in (ex.submitted, ex.private_test, ex.good_structure, ex.good_doc)
            ),
        ]
    columns.append(f"{store.display_total(record):>5}")
    return " ".join(columns)


def format_roster(store: ViewStateStore, view: Sequence[StudentWeekRecord]) -> str:
    """Render the week heading, counters and the visible rows."""
    mode = " (editing)" if store.editing else ""
    lines = [f"Week {store.week}{mode}", format_counters(store), ""]
    if store.last_error:
        lines += [f"Error: {store.last_error}", ""]
    if not view:
        lines.append(pipeline.empty_message(store.criteria))
        return "\n".join(lines)
    lines.append(format_header(store))
    lines.extend(format_record(store, record) for record in view)
    summary = pipeline.results_summary(view)
    if summary:
        lines += ["", summary]
    return "\n".join(lines)
