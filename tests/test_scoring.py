"""Tests for the score formulas."""

import itertools

from cohort_dashboard import scoring
from cohort_dashboard.models import BonusScore, ExerciseScore, GdScore

from tests.conftest import make_record


def test_gd_total_weights():
    assert scoring.gd_total(GdScore(fa=1)) == 6
    assert scoring.gd_total(GdScore(fb=1)) == 6
    assert scoring.gd_total(GdScore(fc=1)) == 4
    assert scoring.gd_total(GdScore(fd=1)) == 4
    assert scoring.gd_total(GdScore(5, 5, 5, 5)) == 100


def test_bonus_total():
    assert scoring.bonus_total(BonusScore()) == 0
    assert scoring.bonus_total(BonusScore(attempt=5, good=5, follow_up=5)) == 30
    assert scoring.bonus_total(BonusScore(attempt=1, good=2, follow_up=3)) == 12


def test_exercise_total_points():
    assert scoring.exercise_total(ExerciseScore(submitted=True)) == 10
    assert scoring.exercise_total(ExerciseScore(private_test=True)) == 50
    assert scoring.exercise_total(ExerciseScore(good_doc=True)) == 20
    assert scoring.exercise_total(ExerciseScore(good_structure=True)) == 20
    assert scoring.exercise_total(ExerciseScore(True, True, True, True)) == 100


def test_total_is_sum_of_parts():
    for fa, fc, attempt, flags in itertools.product(
        range(6), (0, 3, 5), (0, 2, 5), itertools.product((False, True), repeat=4)
    ):
        gd = GdScore(fa=fa, fb=5 - fa, fc=fc, fd=1)
        bonus = BonusScore(attempt=attempt, good=1, follow_up=4)
        exercise = ExerciseScore(*flags)
        record = make_record(1, "X", gd_score=gd, bonus_score=bonus, exercise_score=exercise)

        expected = (
            6 * gd.fa + 6 * gd.fb + 4 * gd.fc + 4 * gd.fd
            + 2 * (bonus.attempt + bonus.good + bonus.follow_up)
            + 10 * flags[0] + 50 * flags[1] + 20 * flags[2] + 20 * flags[3]
        )
        assert scoring.total(record) == expected


def test_full_gd_marks_score_one_hundred():
    record = make_record(1, "Bob Lee", gd_score=GdScore(5, 5, 5, 5))
    assert scoring.total(record) == 100
