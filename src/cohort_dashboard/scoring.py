"""Score formulas for a student's week.

Inputs are expected to be in range already; nothing here clamps.
"""

from .models import BonusScore, ExerciseScore, GdScore, StudentWeekRecord


def gd_total(gd: GdScore) -> int:
    """Weighted GD score out of 100 (two criteria worth 30, two worth 20)."""
    return 6 * gd.fa + 6 * gd.fb + 4 * gd.fc + 4 * gd.fd


def bonus_total(bonus: BonusScore) -> int:
    """Weighted bonus score out of 30."""
    return 2 * bonus.attempt + 2 * bonus.good + 2 * bonus.follow_up


def exercise_total(exercise: ExerciseScore) -> int:
    """Exercise points out of 100."""
    return (
        (10 if exercise.submitted else 0)
        + (50 if exercise.private_test else 0)
        + (20 if exercise.good_doc else 0)
        + (20 if exercise.good_structure else 0)
    )


def total(record: StudentWeekRecord) -> int:
    return (
        gd_total(record.gd_score)
        + bonus_total(record.bonus_score)
        + exercise_total(record.exercise_score)
    )
