"""Tests for :mod:`uniformcheck.bias`."""

from __future__ import annotations

import pytest

from uniformcheck.bias import detect_bias


def test_bias_example_from_skewed_buckets() -> None:
    table = {value: 10 for value in range(1, 11)}
    table[4] = 15
    table[8] = 5

    report = detect_bias(table, 100 / 10)

    assert report.bias_percentage == pytest.approx(50.0)
    assert report.has_significant_bias is True
    assert report.most_frequent_value == 4
    assert report.least_frequent_value == 8
    assert report.max_frequency == 15
    assert report.min_frequency == 5
    assert report.description == (
        "Significant bias detected: 50.0% deviation. Value 4 appears 15 times, "
        "value 8 appears 5 times (expected: 10.0)"
    )


def test_small_deviation_is_not_significant() -> None:
    table = {1: 11, 2: 9, 3: 10, 4: 10}

    report = detect_bias(table, 10.0)

    assert report.bias_percentage == pytest.approx(10.0)
    assert report.has_significant_bias is False
    assert report.description == "No significant bias detected. Maximum deviation: 10.0%"


def test_exactly_twenty_percent_is_not_significant() -> None:
    report = detect_bias({1: 12, 2: 8}, 10.0)

    assert report.bias_percentage == pytest.approx(20.0)
    assert report.has_significant_bias is False


def test_ties_resolve_to_smallest_value() -> None:
    table = {5: 8, 1: 10, 2: 12, 4: 8, 3: 12}

    report = detect_bias(table, 10.0)

    assert report.most_frequent_value == 2
    assert report.least_frequent_value == 4


def test_deviation_takes_larger_side() -> None:
    report = detect_bias({1: 11, 2: 2, 3: 17}, 10.0)

    assert report.bias_percentage == pytest.approx(80.0)


def test_empty_table_is_rejected() -> None:
    with pytest.raises(ValueError):
        detect_bias({}, 10.0)
