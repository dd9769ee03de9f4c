"""Smoke tests for the diagnostic figures."""

from __future__ import annotations

from datetime import UTC, datetime

import matplotlib.pyplot as plt
import pytest
from conftest import make_track

from move_analyze.metrics import compute_all
from move_analyze.models import Track
from move_analyze.pipeline import annotate
from move_analyze.plots import PLOTS, plot_step_length_by_month, plot_turn_angle_rose, render_all


@pytest.fixture
def records():
    a = make_track("A", [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (10.0, 10.0), (0.0, 5.0)])
    b = make_track("B", [(0.0, 0.0)])
    labelled = Track(
        individual_id=a.individual_id,
        relocations=a.relocations,
        tod=("day", "day", "night", "night", "day"),
    )
    return annotate(compute_all([labelled, b]))


def test_each_plot_builds_a_figure(records):
    for func in PLOTS.values():
        fig = func(records)
        assert fig.axes
        plt.close(fig)


def test_rose_gets_one_panel_per_individual(records):
    fig = plot_turn_angle_rose(records)
    assert len([ax for ax in fig.axes if ax.get_visible()]) == 2
    plt.close(fig)


def test_render_all(records, tmp_path):
    written = render_all(records, tmp_path / "plots")
    assert sorted(p.name for p in written) == sorted(PLOTS)
    assert all(p.stat().st_size > 0 for p in written)


def test_nothing_to_plot(tmp_path):
    assert render_all([], tmp_path / "plots") == []
    assert not (tmp_path / "plots").exists()


def test_month_panels_use_abbreviations():
    jan = make_track("A", [(0.0, 0.0), (10.0, 0.0), (20.0, 0.0), (30.0, 0.0)], start=datetime(2010, 1, 31, 23, 40, tzinfo=UTC))
    fig = plot_step_length_by_month(annotate(compute_all([jan])))
    (ax,) = fig.axes
    assert [t.get_text() for t in ax.get_xticklabels()] == ["Jan", "Feb"]
    plt.close(fig)


def test_render_all_leaves_no_open_figures(records, tmp_path):
    before = set(plt.get_fignums())
    render_all(records, tmp_path / "plots")
    assert set(plt.get_fignums()) == before
