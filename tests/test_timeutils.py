"""Tests for timestamp parsing and calendar fields."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from move_analyze.timeutils import calendar_fields, delta_stats, month_label, parse_timestamp, week_of_year


@pytest.mark.parametrize(
    "text",
    [
        "2010-02-11 17:00:00",
        "2010-02-11T17:00:00",
        "2010-02-11T17:00:00Z",
        "2010-02-11 12:00:00-05:00",
        " 2010-02-11 17:00:00+00:00 ",
    ],
)
def test_parse_timestamp_to_utc(text):
    assert parse_timestamp(text) == datetime(2010, 2, 11, 17, 0, tzinfo=UTC)
    assert parse_timestamp(text).utcoffset() == timedelta(0)


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp("11/02/2010 noon")


@pytest.mark.parametrize(
    ("dt", "week"),
    [
        (datetime(2010, 1, 1, tzinfo=UTC), 1),
        (datetime(2010, 1, 7, 23, 59, tzinfo=UTC), 1),
        (datetime(2010, 1, 8, tzinfo=UTC), 2),
        (datetime(2010, 12, 24, tzinfo=UTC), 52),
        (datetime(2010, 12, 31, tzinfo=UTC), 53),
        (datetime(2012, 12, 30, tzinfo=UTC), 53),
    ],
)
def test_week_of_year(dt, week):
    assert week_of_year(dt) == week


def test_calendar_fields_across_new_year():
    before = calendar_fields(datetime(2010, 12, 31, 23, 30, tzinfo=UTC))
    after = calendar_fields(datetime(2011, 1, 1, 0, 10, tzinfo=UTC))

    assert (before.week, before.month, before.year, before.hour) == (53, 12, 2010, 23)
    assert (after.week, after.month, after.year, after.hour) == (1, 1, 2011, 0)


def test_calendar_fields_are_taken_in_utc():
    local = datetime(2011, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    f = calendar_fields(local)
    assert (f.year, f.month, f.week, f.hour) == (2010, 12, 53, 23)


def test_month_label():
    assert month_label(1) == "Jan"
    assert month_label(12) == "Dec"


def test_delta_stats():
    t0 = datetime(2010, 1, 1, tzinfo=UTC)
    stats = delta_stats([t0, t0 + timedelta(seconds=60), t0 + timedelta(seconds=180)])
    assert stats.count == 2
    assert stats.min_s == 60.0
    assert stats.max_s == 120.0
    assert stats.median_s == 90.0
    assert delta_stats([t0]) is None
