"""Tests for the synthetic relocation generator script."""

from __future__ import annotations

import importlib.util
import math
import statistics
import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

from move_analyze.metrics import compute_movement
from move_analyze.models import Relocation
from move_analyze.timeutils import parse_timestamp
from move_analyze.tracks import make_track

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "generate_sample_fisher_csv.py"


@pytest.fixture(scope="module")
def generator():
    spec = importlib.util.spec_from_file_location("generate_sample_fisher_csv", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def test_walk_is_correlated(generator):
    rows = generator.generate_relocations(
        animals=[generator.Animal("F1", 586_000.0, 4_722_000.0, 400)],
        seed=42,
        start=datetime(2010, 2, 11, tzinfo=UTC),
        interval_minutes=10.0,
        missing_rate=0.0,
        duplicate_rate=0.0,
    )
    fixes = [
        Relocation(
            individual_id=r["id"],
            x=float(r["x_"]),
            y=float(r["y_"]),
            timestamp=parse_timestamp(r["t_"]),
            row_index=i,
        )
        for i, r in enumerate(rows)
    ]
    recs = compute_movement(make_track("F1", fixes))
    turns = [abs(r.dir_rel) for r in recs if r.dir_rel is not None]

    assert len(turns) > 300
    assert statistics.median(turns) < math.pi / 2


def test_injected_missing_and_duplicate_rows(generator):
    rows = generator.generate_relocations(
        animals=[generator.Animal("F1", 0.0, 0.0, 200), generator.Animal("M1", 0.0, 0.0, 200)],
        seed=1,
        start=datetime(2010, 2, 11, tzinfo=UTC),
        interval_minutes=10.0,
        missing_rate=0.2,
        duplicate_rate=0.2,
    )
    assert len(rows) > 400
    assert any("NA" in r.values() for r in rows)
    assert {r["id"] for r in rows} == {"F1", "M1"}
