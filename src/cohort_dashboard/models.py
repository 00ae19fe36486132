"""Data models for the cohort dashboard."""

from dataclasses import dataclass, field
from typing import Optional

UNASSIGNED_TA = "N/A"
ALL_GROUPS = "All Groups"
ALL_TAS = "All TAs"
GROUPS = ["Group 1", "Group 2", "Group 3", "Group 4"]
WEEKS = [0, 1, 2, 3, 4]

ASCENDING = "ascending"
DESCENDING = "descending"

GD_KEYS = ("fa", "fb", "fc", "fd")
BONUS_KEYS = ("attempt", "good", "follow_up")
EXERCISE_KEYS = ("submitted", "private_test", "good_structure", "good_doc")

# Filled in by the grading pipeline on the server, never by an operator.
SERVER_DERIVED_EXERCISE_KEYS = ("submitted", "private_test")


@dataclass(frozen=True)
class GdScore:
    """Group-discussion sub-scores, each 0-5."""

    fa: int = 0  # communication
    fb: int = 0  # depth of answer
    fc: int = 0  # technical fluency
    fd: int = 0  # engagement


@dataclass(frozen=True)
class BonusScore:
    """Bonus sub-scores, each 0-5."""

    attempt: int = 0
    good: int = 0
    follow_up: int = 0


@dataclass(frozen=True)
class ExerciseScore:
    """Exercise checks for the week's assignment."""

    submitted: bool = False
    private_test: bool = False
    good_structure: bool = False
    good_doc: bool = False


@dataclass(frozen=True)
class StudentWeekRecord:
    """One student's row for one week.

    ``id`` is the 1-based position in the fetched roster. It only identifies
    the row within the roster it was loaded with.
    """

    id: int
    name: str
    group: Optional[str] = None
    ta: str = UNASSIGNED_TA
    email: Optional[str] = None
    attendance: bool = False
    gd_score: GdScore = field(default_factory=GdScore)
    bonus_score: BonusScore = field(default_factory=BonusScore)
    exercise_score: ExerciseScore = field(default_factory=ExerciseScore)
    week: int = 0
    total: int = 0

    @property
    def initials(self) -> str:
        parts = self.name.split()
        first = self.name[:1]
        second = parts[1][:1] if len(parts) > 1 else ""
        return f"{first}{second}"


@dataclass(frozen=True)
class WeeklyAttendanceSummary:
    """Number of students who attended a given week."""

    week: int
    attended: int


@dataclass(frozen=True)
class SortConfig:
    """The single active sort key, if any."""

    key: Optional[str] = None
    direction: str = ASCENDING


@dataclass(frozen=True)
class FilterCriteria:
    """Operator-selected filters and sort for the roster view."""

    search: str = ""
    group: str = ALL_GROUPS
    ta: str = ALL_TAS
    sort: SortConfig = field(default_factory=SortConfig)

    @property
    def is_filtering(self) -> bool:
        return bool(self.search) or self.group != ALL_GROUPS or self.ta != ALL_TAS
