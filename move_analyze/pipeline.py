"""End-to-end analysis: load, clean, build tracks, compute metrics, export, plot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from move_analyze.cleaning import CleaningReport, clean_relocations
from move_analyze.csv_io import ColumnMap, load_relocations, write_movement_csv
from move_analyze.daytime import DaytimeClassifier
from move_analyze.metrics import TrackSummary, compute_all, summarize_track
from move_analyze.models import DEFAULT_CRS, NA_MARKER, AnnotatedRecord, MovementRecord, RawRelocation, Track
from move_analyze.timeutils import calendar_fields
from move_analyze.tracks import build_tracks

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Settings for one analysis run."""

    crs: str = DEFAULT_CRS
    # Twilight as its own dawn/dusk labels instead of being folded into night.
    include_crepuscule: bool = False
    columns: ColumnMap = field(default_factory=ColumnMap)
    angle_unit: str = "radians"
    na_marker: str = NA_MARKER
    # Skip the day/night step (no CRS lookup, tod_ stays empty).
    classify_daytime: bool = True
    workers: int = 1


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Everything produced by :func:`analyze`."""

    cleaning: CleaningReport
    tracks: Sequence[Track]
    records: Sequence[AnnotatedRecord]
    summaries: Sequence[TrackSummary]


def annotate(records: Iterable[MovementRecord]) -> list[AnnotatedRecord]:
    """Attach calendar fields to each record (row-wise, order independent)."""

    return [AnnotatedRecord(record=r, calendar=calendar_fields(r.timestamp)) for r in records]


def analyze(rows: Iterable[RawRelocation], config: AnalysisConfig | None = None) -> AnalysisResult:
    """Run the in-memory part of the pipeline on parsed rows."""

    cfg = config or AnalysisConfig()
    classifier = DaytimeClassifier(cfg.crs, cfg.include_crepuscule) if cfg.classify_daytime else None

    relocations, report = clean_relocations(rows)
    tracks = build_tracks(relocations, tod=classifier)
    records = annotate(compute_all(tracks, workers=cfg.workers))
    summaries = [summarize_track(t) for t in tracks]
    return AnalysisResult(cleaning=report, tracks=tracks, records=records, summaries=summaries)


def run_pipeline(
    csv_path: str | Path,
    out_path: str | Path,
    plots_dir: str | Path,
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """Load a relocation CSV, analyze it, write the export and the plots.

    Raises:
        KeyError: If the input lacks a required column.
        ValueError: If the configured CRS is invalid.
    """

    from move_analyze.plots import render_all

    cfg = config or AnalysisConfig()
    rows, _ = load_relocations(csv_path, cfg.columns)
    result = analyze(rows, cfg)
    write_movement_csv(result.records, out_path, angle_unit=cfg.angle_unit, na_marker=cfg.na_marker)
    render_all(result.records, plots_dir)
    return result
