"""Tests for the day/night classifier (Albany, NY around the June solstice).

Reference times (EDT = UTC-4): civil dawn ~04:45, sunrise ~05:18,
sunset ~20:38, civil dusk ~21:12.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pyproj import Transformer

from move_analyze.daytime import DaytimeClassifier
from move_analyze.models import Relocation

LON, LAT = -73.75, 42.65


@pytest.fixture(scope="module")
def utm_xy() -> tuple[float, float]:
    return Transformer.from_crs("EPSG:4326", "EPSG:32618", always_xy=True).transform(LON, LAT)


@pytest.mark.parametrize(
    ("when", "expected"),
    [
        (datetime(2010, 6, 21, 17, 0, tzinfo=UTC), "day"),
        (datetime(2010, 6, 21, 5, 0, tzinfo=UTC), "night"),
        (datetime(2010, 6, 21, 9, 0, tzinfo=UTC), "night"),
        (datetime(2010, 6, 22, 0, 55, tzinfo=UTC), "night"),
    ],
)
def test_twilight_folds_into_night_by_default(when, expected):
    clf = DaytimeClassifier("EPSG:4326")
    assert clf.classify(when, LON, LAT) == expected


@pytest.mark.parametrize(
    ("when", "expected"),
    [
        (datetime(2010, 6, 21, 17, 0, tzinfo=UTC), "day"),
        (datetime(2010, 6, 21, 5, 0, tzinfo=UTC), "night"),
        (datetime(2010, 6, 21, 9, 0, tzinfo=UTC), "dawn"),
        (datetime(2010, 6, 22, 0, 55, tzinfo=UTC), "dusk"),
    ],
)
def test_crepuscule_kept_separate(when, expected):
    clf = DaytimeClassifier("EPSG:4326", include_crepuscule=True)
    assert clf.classify(when, LON, LAT) == expected


def test_projected_coordinates(utm_xy):
    clf = DaytimeClassifier("EPSG:32618")
    lon, lat = clf.lonlat(*utm_xy)
    assert lon == pytest.approx(LON, abs=1e-6)
    assert lat == pytest.approx(LAT, abs=1e-6)
    assert clf.classify(datetime(2010, 6, 21, 17, 0, tzinfo=UTC), *utm_xy) == "day"


def test_callable_on_relocations(utm_xy):
    clf = DaytimeClassifier("EPSG:32618")
    r = Relocation(
        individual_id="F1",
        x=utm_xy[0],
        y=utm_xy[1],
        timestamp=datetime(2010, 6, 21, 5, 0, tzinfo=UTC),
    )
    assert clf(r) == "night"


def test_unlocatable_point_gives_no_label():
    clf = DaytimeClassifier("EPSG:4326")
    assert clf.classify(datetime(2010, 6, 21, 17, 0, tzinfo=UTC), 10.0, 500.0) is None


def test_invalid_crs():
    with pytest.raises(ValueError):
        DaytimeClassifier("EPSG:999999")
