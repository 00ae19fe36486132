"""View state for the dashboard: one week's roster plus counters."""

import logging
from typing import Iterable, Optional

from . import scoring
from .models import FilterCriteria, StudentWeekRecord, WeeklyAttendanceSummary

logger = logging.getLogger(__name__)


class ViewStateStore:
    """Owns the live roster and the flags that govern editing it.

    The roster is held as a tuple and only ever replaced as a whole, so any
    snapshot handed out stays valid after later edits.
    """

    def __init__(self, week: int = 0):
        self._roster: tuple[StudentWeekRecord, ...] = ()
        self._week = week
        self._editing = False
        self.total_participants: Optional[int] = None
        self.weekly_attendance: list[WeeklyAttendanceSummary] = []
        self.criteria = FilterCriteria()
        self.last_error: Optional[str] = None

    @property
    def roster(self) -> tuple[StudentWeekRecord, ...]:
        return self._roster

    @property
    def week(self) -> int:
        return self._week

    @property
    def editing(self) -> bool:
        return self._editing

    @property
    def can_edit_scores(self) -> bool:
        """Score fields are editable only in edit mode outside week 0."""
        return self._editing and self._week != 0

    def begin_edit(self) -> None:
        self._editing = True

    def end_edit(self) -> None:
        self._editing = False

    def set_week(self, week: int) -> None:
        """Make ``week`` the active week.

        Switching to another week drops unsaved edits and empties the roster
        until the new week's roster is committed.
        """
        if week == self._week:
            return
        if self._editing:
            logger.info("Discarding unsaved edits for week %d", self._week)
            self._editing = False
        self._roster = ()
        self._week = week

    def replace_roster(self, records: Iterable[StudentWeekRecord]) -> None:
        self._roster = tuple(records)

    def clear_roster(self) -> None:
        self._roster = ()

    def find(self, record_id: int) -> Optional[StudentWeekRecord]:
        for record in self._roster:
            if record.id == record_id:
                return record
        return None

    def display_total(self, record: StudentWeekRecord) -> int:
        """Live total while editing, last saved total otherwise."""
        if self._editing:
            return scoring.total(record)
        return record.total

    @property
    def attendees(self) -> int:
        for summary in self.weekly_attendance:
            if summary.week == self._week:
                return summary.attended
        return 0

    @property
    def absentees(self) -> int:
        return (self.total_participants or 0) - self.attendees
