"""End-to-end tests of the analysis pipeline."""

from __future__ import annotations

import csv

import pytest

from move_analyze.csv_io import load_relocations
from move_analyze.pipeline import AnalysisConfig, analyze, annotate, run_pipeline
from move_analyze.plots import PLOTS


def test_run_pipeline_writes_export_and_plots(fisher_csv, tmp_path):
    out = tmp_path / "movement_parameter.csv"
    plots = tmp_path / "plots"

    result = run_pipeline(fisher_csv, out, plots)

    c = result.cleaning
    assert (c.rows_in, c.rows_incomplete, c.rows_duplicate, c.rows_out) == (8, 1, 1, 6)
    assert [t.individual_id for t in result.tracks] == ["F1", "M1"]

    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 6
    assert [r["id"] for r in rows] == ["F1", "F1", "F1", "M1", "M1", "M1"]
    # 17:00-17:25 UTC in February is midday in upstate New York
    assert {r["tod_"] for r in rows} == {"day"}
    assert [r["sl"] for r in rows if r["id"] == "F1"] == ["100.0", "100.0", "NA"]
    assert rows[2]["dir_abs"] == "NA"
    assert float(rows[1]["dir_rel"]) == pytest.approx(0.0)
    assert rows[0]["nsd"] == "0.0"

    for name in PLOTS:
        assert (plots / name).is_file()


def test_interleaved_input_never_crosses_individuals(fisher_csv):
    rows, _ = load_relocations(fisher_csv)
    result = analyze(rows, AnalysisConfig(classify_daytime=False))

    m1 = [a.record for a in result.records if a.record.individual_id == "M1"]
    assert [r.sl for r in m1] == [pytest.approx(100.0), pytest.approx(100.0), None]
    assert [r.nsd for r in m1] == [0.0, pytest.approx(10_000.0), pytest.approx(20_000.0)]
    assert all(r.tod is None for r in m1)


def test_summaries_follow_tracks(fisher_csv):
    rows, _ = load_relocations(fisher_csv)
    result = analyze(rows, AnalysisConfig(classify_daytime=False))

    f1, m1 = result.summaries
    assert f1.individual_id == "F1"
    assert f1.straightness == pytest.approx(1.0)
    assert m1.cum_dist == pytest.approx(200.0)


def test_all_rows_filtered_out(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("id,x_,y_,t_\nF1,NA,1,2010-01-01 00:00:00\nF1,1,1,\n", encoding="utf-8")
    out = tmp_path / "out.csv"

    result = run_pipeline(src, out, tmp_path / "plots")

    assert result.cleaning.rows_out == 0
    assert result.tracks == []
    assert result.records == []
    assert out.read_text(encoding="utf-8").strip().startswith("id,x_,y_,t_")
    assert len(out.read_text(encoding="utf-8").strip().splitlines()) == 1


def test_missing_column_stops_the_run(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("id,x_,y_\nF1,1,1\n", encoding="utf-8")
    with pytest.raises(KeyError):
        run_pipeline(src, tmp_path / "out.csv", tmp_path / "plots")


def test_bad_crs_fails_before_work(fisher_csv, tmp_path):
    out = tmp_path / "out.csv"
    with pytest.raises(ValueError):
        run_pipeline(fisher_csv, out, tmp_path / "plots", AnalysisConfig(crs="not-a-crs"))
    assert not out.exists()


def test_annotate_adds_calendar_fields(fisher_csv):
    rows, _ = load_relocations(fisher_csv)
    result = analyze(rows, AnalysisConfig(classify_daytime=False))
    again = annotate(a.record for a in result.records)
    assert again == list(result.records)
    assert {(a.calendar.year, a.calendar.month, a.calendar.week, a.calendar.hour) for a in again} == {
        (2010, 2, 6, 17)
    }
