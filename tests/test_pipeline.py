"""Tests for filtering, sorting and the derived view."""

import itertools
from dataclasses import replace

import pytest

from cohort_dashboard import pipeline
from cohort_dashboard.models import (
    ALL_GROUPS,
    ALL_TAS,
    ASCENDING,
    DESCENDING,
    FilterCriteria,
    SortConfig,
)

from tests.conftest import make_record


def names(records):
    return [r.name for r in records]


def test_no_criteria_keeps_fetch_order(roster):
    assert names(pipeline.derive_view(roster, FilterCriteria())) == [
        "Carol King",
        "bob lee",
        "Anna Smith",
        "alan turing",
    ]


def test_filter_by_group(roster):
    assert names(pipeline.filter_by_group(roster, "Group 2")) == ["Carol King", "alan turing"]
    assert len(pipeline.filter_by_group(roster, ALL_GROUPS)) == 4


def test_filter_by_ta(roster):
    assert names(pipeline.filter_by_ta(roster, "Alice")) == ["bob lee", "alan turing"]
    assert len(pipeline.filter_by_ta(roster, ALL_TAS)) == 4


def test_filter_by_name_is_case_insensitive(roster):
    assert names(pipeline.filter_by_name(roster, "AN")) == ["Anna Smith", "alan turing"]
    assert names(pipeline.filter_by_name(roster, "lee")) == ["bob lee"]
    assert len(pipeline.filter_by_name(roster, "")) == 4


def test_filters_do_not_mutate_roster(roster):
    before = list(roster)
    pipeline.derive_view(roster, FilterCriteria(search="a", sort=SortConfig("name", DESCENDING)))
    assert roster == before


def test_filter_order_does_not_matter(roster):
    steps = [
        lambda rs: pipeline.filter_by_group(rs, "Group 2"),
        lambda rs: pipeline.filter_by_ta(rs, "Alice"),
        lambda rs: pipeline.filter_by_name(rs, "a"),
    ]
    results = set()
    for order in itertools.permutations(steps):
        view = roster
        for step in order:
            view = step(view)
        results.add(tuple(r.id for r in view))
    assert results == {(4,)}


def test_sort_by_name_ascending_ignores_case(roster):
    view = pipeline.sort_records(roster, SortConfig("name", ASCENDING))
    assert names(view) == ["alan turing", "Anna Smith", "bob lee", "Carol King"]


def test_sort_by_name_descending(roster):
    view = pipeline.sort_records(roster, SortConfig("name", DESCENDING))
    assert names(view) == ["Carol King", "bob lee", "Anna Smith", "alan turing"]


def test_sort_is_stable_for_equal_keys():
    roster = [make_record(1, "Sam", ta="b"), make_record(2, "sam", ta="a"), make_record(3, "Al")]
    assert [r.id for r in pipeline.sort_records(roster, SortConfig("name"))] == [3, 1, 2]
    assert [r.id for r in pipeline.sort_records(roster, SortConfig("name", DESCENDING))] == [1, 2, 3]


def test_sort_on_non_string_key_keeps_order(roster):
    shuffled = [replace(r, total=t) for r, t in zip(roster, (50, 10, 90, 0))]
    view = pipeline.sort_records(shuffled, SortConfig("total"))
    assert [r.id for r in view] == [1, 2, 3, 4]


def test_derive_view_is_idempotent(roster):
    criteria = FilterCriteria(search="a", group=ALL_GROUPS, sort=SortConfig("name", DESCENDING))
    assert pipeline.derive_view(roster, criteria) == pipeline.derive_view(roster, criteria)


def test_derive_view_combines_filters_and_sort(roster):
    criteria = FilterCriteria(search="a", group="Group 2", sort=SortConfig("name"))
    assert names(pipeline.derive_view(roster, criteria)) == ["alan turing", "Carol King"]


def test_request_sort_toggles_direction():
    first = pipeline.request_sort(SortConfig(), "name")
    second = pipeline.request_sort(first, "name")
    third = pipeline.request_sort(second, "name")
    assert first == SortConfig("name", ASCENDING)
    assert second == SortConfig("name", DESCENDING)
    assert third == SortConfig("name", ASCENDING)


def test_request_sort_new_key_resets_to_ascending():
    current = SortConfig("name", DESCENDING)
    assert pipeline.request_sort(current, "email") == SortConfig("email", ASCENDING)


def test_request_sort_unknown_key():
    with pytest.raises(ValueError):
        pipeline.request_sort(SortConfig(), "shoe_size")


def test_ta_options_come_from_full_roster(roster):
    assert pipeline.ta_options(roster) == [ALL_TAS, "Alice", "Bruno"]
    assert pipeline.ta_options([]) == [ALL_TAS]
    assert pipeline.ta_options([make_record(1, "X", ta="")]) == [ALL_TAS]


def test_clear_filters_keeps_sort():
    criteria = FilterCriteria(search="x", group="Group 1", ta="Alice", sort=SortConfig("name"))
    cleared = pipeline.clear_filters(criteria)
    assert cleared == FilterCriteria(sort=SortConfig("name"))


def test_sort_indicator():
    sort = SortConfig("name", DESCENDING)
    assert pipeline.sort_indicator(sort, "name") == " ▼"
    assert pipeline.sort_indicator(SortConfig("name"), "name") == " ▲"
    assert pipeline.sort_indicator(sort, "email") == ""


def test_empty_message():
    assert pipeline.empty_message(FilterCriteria()) == "No data available."
    assert (
        pipeline.empty_message(FilterCriteria(ta="Alice"))
        == "No data available for your current filters."
    )


def test_results_summary(roster):
    assert pipeline.results_summary(roster) == "Showing 1 to 4 of 4 results"
    many = [make_record(i, f"S{i}") for i in range(1, 13)]
    assert pipeline.results_summary(many) == "Showing 1 to 10 of 12 results"
    assert pipeline.results_summary([]) is None
