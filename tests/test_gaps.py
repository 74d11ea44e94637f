import pytest

from ticket_trends import UNKNOWN, PeriodGranularityError, PeriodValue, entity_series, fill_gaps


def test_empty_input_gives_empty_series():
    assert fill_gaps([]) == []


def test_single_point_is_returned_as_is():
    assert fill_gaps([PeriodValue("2023-01", 5)]) == [PeriodValue("2023-01", 5)]


def test_missing_months_are_zero_filled():
    assert fill_gaps([("2023-03", 7), ("2023-01", 5)]) == [
        PeriodValue("2023-01", 5),
        PeriodValue("2023-02", 0),
        PeriodValue("2023-03", 7),
    ]


def test_month_series_crosses_year_boundary():
    series = fill_gaps({"2022-11": 1, "2023-02": 4})
    assert [point.period for point in series] == ["2022-11", "2022-12", "2023-01", "2023-02"]
    assert [point.value for point in series] == [1, 0, 0, 4]


def test_week_series_wraps_into_next_year():
    series = fill_gaps([("2023-W51", 1), ("2024-W02", 3)])
    periods = [point.period for point in series]
    assert periods == ["2023-W51", "2023-W52", "2024-W01", "2024-W02"]
    assert periods == sorted(periods)
    assert [point.value for point in series] == [1, 0, 0, 3]


def test_week_53_years_keep_their_last_week():
    series = fill_gaps([("2020-W52", 2), ("2021-W01", 1)])
    assert [point.period for point in series] == ["2020-W52", "2020-W53", "2021-W01"]


def test_fill_gaps_is_repeatable():
    points = [("2023-01", 5), ("2023-04", 2)]
    assert fill_gaps(points) == fill_gaps(points)


def test_mixed_granularities_are_rejected():
    with pytest.raises(PeriodGranularityError):
        fill_gaps([("2023-01", 1), ("2023-W03", 2)])


def test_non_period_keys_are_rejected():
    with pytest.raises(PeriodGranularityError):
        fill_gaps({UNKNOWN: 3, "2023-01": 1})


def test_entity_series_skips_unknown_period_and_fills_absent_names():
    period_counts = {
        "2023-01": {"Chen": 2},
        "2023-02": {"Dana": 1},
        "2023-04": {"Chen": 1},
        UNKNOWN: {"Chen": 9},
    }
    assert entity_series(period_counts, "Chen") == [
        PeriodValue("2023-01", 2),
        PeriodValue("2023-02", 0),
        PeriodValue("2023-03", 0),
        PeriodValue("2023-04", 1),
    ]


def test_fill_gaps_spans_a_53_week_year():
    series = fill_gaps({"2026-W52": 1, "2027-W02": 2})
    assert [point.period for point in series] == ["2026-W52", "2026-W53", "2027-W01", "2027-W02"]
    assert all(type(point.value) is int for point in series)
