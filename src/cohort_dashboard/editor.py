"""Field-level edits to the live roster."""

import logging
from dataclasses import replace
from typing import Any, Callable

from . import scoring
from .models import (
    BONUS_KEYS,
    EXERCISE_KEYS,
    GD_KEYS,
    SERVER_DERIVED_EXERCISE_KEYS,
    StudentWeekRecord,
)
from .store import ViewStateStore

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 5
TRUE_VALUES = ("yes", "y", "true", "1", "x")


def parse_score(raw: Any) -> int:
    """Coerce operator input to a sub-score.

    Empty or unparseable input becomes 0; decimals are truncated and
    numbers are clamped to 0-5.
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(float(str(raw).strip()))
        except (ValueError, OverflowError):
            return 0
    return max(MIN_SCORE, min(MAX_SCORE, value))


class EditController:
    """Applies single-field edits to the store's roster.

    Every accepted edit replaces the roster with a new tuple in which only
    the touched record differs. Refused edits return ``False`` and leave the
    roster as it was.
    """

    def __init__(self, store: ViewStateStore):
        self.store = store

    def _apply(
        self, record_id: int, change: Callable[[StudentWeekRecord], StudentWeekRecord]
    ) -> bool:
        roster = self.store.roster
        for index, record in enumerate(roster):
            if record.id == record_id:
                updated = change(record)
                updated = replace(updated, total=scoring.total(updated))
                self.store.replace_roster(roster[:index] + (updated,) + roster[index + 1 :])
                return True
        logger.debug("No record with id %d in week %d", record_id, self.store.week)
        return False

    def can_edit(self, field_name: str) -> bool:
        """Whether ``field_name`` is editable in the current mode and week.

        ``field_name`` is ``attendance`` or one of the sub-score keys.
        """
        if field_name == "attendance":
            return self.store.editing
        if field_name in SERVER_DERIVED_EXERCISE_KEYS:
            return False
        if field_name in GD_KEYS or field_name in BONUS_KEYS or field_name in EXERCISE_KEYS:
            return self.store.can_edit_scores
        raise KeyError(field_name)

    def set_attendance(self, record_id: int, attended: bool) -> bool:
        if not self.can_edit("attendance"):
            return False
        return self._apply(record_id, lambda r: replace(r, attendance=attended))

    def toggle_attendance(self, record_id: int) -> bool:
        record = self.store.find(record_id)
        if record is None:
            return False
        return self.set_attendance(record_id, not record.attendance)

    def set_gd_score(self, record_id: int, key: str, raw: Any) -> bool:
        if key not in GD_KEYS:
            raise KeyError(key)
        if not self.can_edit(key):
            return False
        value = parse_score(raw)
        return self._apply(
            record_id, lambda r: replace(r, gd_score=replace(r.gd_score, **{key: value}))
        )

    def set_bonus_score(self, record_id: int, key: str, raw: Any) -> bool:
        if key not in BONUS_KEYS:
            raise KeyError(key)
        if not self.can_edit(key):
            return False
        value = parse_score(raw)
        return self._apply(
            record_id, lambda r: replace(r, bonus_score=replace(r.bonus_score, **{key: value}))
        )

    def set_exercise(self, record_id: int, key: str, checked: bool) -> bool:
        if key not in EXERCISE_KEYS:
            raise KeyError(key)
        if not self.can_edit(key):
            return False
        return self._apply(
            record_id,
            lambda r: replace(r, exercise_score=replace(r.exercise_score, **{key: checked})),
        )

    def toggle_exercise(self, record_id: int, key: str) -> bool:
        if key not in EXERCISE_KEYS:
            raise KeyError(key)
        record = self.store.find(record_id)
        if record is None:
            return False
        return self.set_exercise(record_id, key, not getattr(record.exercise_score, key))

    def set_field(self, record_id: int, field_name: str, value: str) -> bool:
        """Apply a text value to any editable field.

        Scores take 0-5; attendance and exercise checks take yes/no.
        """
        checked = value.strip().lower() in TRUE_VALUES
        if field_name == "attendance":
            return self.set_attendance(record_id, checked)
        if field_name in GD_KEYS:
            return self.set_gd_score(record_id, field_name, value)
        if field_name in BONUS_KEYS:
            return self.set_bonus_score(record_id, field_name, value)
        if field_name in EXERCISE_KEYS:
            return self.set_exercise(record_id, field_name, checked)
        raise KeyError(field_name)
