"""Diagnostic figures for movement records (matplotlib)."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from move_analyze.models import TOD_DAWN, TOD_DAY, TOD_DUSK, TOD_NIGHT, AnnotatedRecord
from move_analyze.timeutils import month_label

logger = logging.getLogger(__name__)

TOD_COLORS = {
    TOD_DAY: "#FFC300",
    TOD_NIGHT: "#1F77B4",
    TOD_DAWN: "#F08A5D",
    TOD_DUSK: "#6A2C70",
}
TOD_ORDER = (TOD_DAWN, TOD_DAY, TOD_DUSK, TOD_NIGHT)
ROSE_BINS = 19
FIG_DPI = 150


def _by_individual(records: Sequence[AnnotatedRecord]) -> dict[str, list[AnnotatedRecord]]:
    groups: dict[str, list[AnnotatedRecord]] = {}
    for a in records:
        groups.setdefault(a.record.individual_id, []).append(a)
    return groups


def _facet(n: int, ncols: int, subplot_kw: dict | None = None, panel_size: float = 3.5):
    ncols = max(1, min(ncols, n))
    nrows = max(1, math.ceil(n / ncols))
    fig, axes = plt.subplots(
        nrows,
        ncols,
        figsize=(panel_size * ncols, panel_size * nrows),
        squeeze=False,
        subplot_kw=subplot_kw,
    )
    flat = list(axes.flat)
    for ax in flat[n:]:
        ax.set_visible(False)
    return fig, flat[:n]


def plot_locations_by_id(records: Sequence[AnnotatedRecord], ncols: int = 3) -> Figure:
    """Fixes of each individual on its own axes (free scales)."""

    groups = _by_individual(records)
    fig, axes = _facet(len(groups), ncols)
    for ax, (ind, rows) in zip(axes, groups.items()):
        ax.scatter([a.record.x for a in rows], [a.record.y for a in rows], s=4, color="black")
        ax.set_title(ind)
        ax.set_xlabel("x (m)")
        ax.set_ylabel("y (m)")
    fig.tight_layout()
    return fig


def plot_locations_all(records: Sequence[AnnotatedRecord]) -> Figure:
    """All individuals together, colored by id, equal aspect."""

    fig, ax = plt.subplots(figsize=(8, 8))
    for ind, rows in _by_individual(records).items():
        ax.scatter([a.record.x for a in rows], [a.record.y for a in rows], s=4, label=ind)
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    if records:
        ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.08), ncol=6, markerscale=3, frameon=False)
    fig.tight_layout()
    return fig


def plot_step_length_by_tod(records: Sequence[AnnotatedRecord], ncols: int = 3) -> Figure:
    """Boxplots of log step length by time of day, one panel per individual.

    Records with undefined or zero step length, or without a tod label, are
    left out.
    """

    groups = _by_individual(records)
    fig, axes = _facet(len(groups), ncols)
    for ax, (ind, rows) in zip(axes, groups.items()):
        data: dict[str, list[float]] = {}
        for a in rows:
            r = a.record
            if r.sl is None or r.sl <= 0 or r.tod is None:
                continue
            data.setdefault(r.tod, []).append(math.log(r.sl))
        labels = [t for t in TOD_ORDER if t in data]
        if labels:
            bp = ax.boxplot([data[t] for t in labels], showfliers=False, widths=0.6, patch_artist=True)
            ax.set_xticks(range(1, len(labels) + 1), labels)
            for patch, t in zip(bp["boxes"], labels):
                patch.set_facecolor(TOD_COLORS[t])
                patch.set_alpha(0.6)
        ax.set_title(ind)
        ax.set_xlabel("Time of Day")
        ax.set_ylabel("log Step Length (m)")
    fig.suptitle("Step Length Distribution by Day/Night")
    fig.tight_layout()
    return fig


def plot_step_length_by_month(records: Sequence[AnnotatedRecord], ncols: int = 3) -> Figure:
    """Boxplots of log step length by calendar month, one panel per individual.

    Months are labelled with their English abbreviation; undefined and zero
    step lengths are left out.
    """

    groups = _by_individual(records)
    fig, axes = _facet(len(groups), ncols)
    for ax, (ind, rows) in zip(axes, groups.items()):
        data: dict[int, list[float]] = {}
        for a in rows:
            sl = a.record.sl
            if sl is None or sl <= 0:
                continue
            data.setdefault(a.calendar.month, []).append(math.log(sl))
        months = sorted(data)
        if months:
            ax.boxplot([data[m] for m in months], showfliers=False, widths=0.6)
            ax.set_xticks(range(1, len(months) + 1), [month_label(m) for m in months])
        ax.set_title(ind)
        ax.set_xlabel("Month")
        ax.set_ylabel("log Step Length (m)")
    fig.suptitle("Step Length Distribution by Month")
    fig.tight_layout()
    return fig


def plot_turn_angle_rose(records: Sequence[AnnotatedRecord], ncols: int = 2) -> Figure:
    """Polar density histograms of turning angles per individual.

    0 is straight ahead, +/-pi is a reversal.
    """

    groups = _by_individual(records)
    fig, axes = _facet(len(groups), ncols, subplot_kw={"projection": "polar"}, panel_size=4.0)
    edges = [-math.pi + i * (2.0 * math.pi / ROSE_BINS) for i in range(ROSE_BINS + 1)]
    for ax, (ind, rows) in zip(axes, groups.items()):
        angles = [a.record.dir_rel for a in rows if a.record.dir_rel is not None]
        if angles:
            ax.hist(angles, bins=edges, density=True, color="skyblue", edgecolor="black", alpha=0.8)
        ax.set_theta_zero_location("N")
        ax.set_theta_direction(-1)
        ax.set_xticks([0, math.pi / 2, math.pi, 3 * math.pi / 2], ["0", "π/2", "±π", "-π/2"])
        ax.set_title(ind, fontweight="bold")
    fig.suptitle("Turn Angle Distribution", fontweight="bold")
    fig.tight_layout()
    return fig


def plot_nsd(records: Sequence[AnnotatedRecord], ncols: int = 3) -> Figure:
    """Net squared displacement against time, one panel per individual."""

    groups = _by_individual(records)
    fig, axes = _facet(len(groups), ncols)
    cmap = plt.get_cmap("viridis", max(1, len(groups)))
    for k, (ax, (ind, rows)) in enumerate(zip(axes, groups.items())):
        ax.plot([a.record.timestamp for a in rows], [a.record.nsd for a in rows], color=cmap(k), linewidth=1)
        ax.set_title(ind)
        ax.set_xlabel("Date")
        ax.set_ylabel("NSD (m²)")
        ax.tick_params(axis="x", labelrotation=45)
    fig.suptitle("Net-Squared Displacement")
    fig.tight_layout()
    return fig


PLOTS = {
    "locations_by_id.png": plot_locations_by_id,
    "locations_all.png": plot_locations_all,
    "step_length_by_tod.png": plot_step_length_by_tod,
    "step_length_by_month.png": plot_step_length_by_month,
    "turn_angle_rose.png": plot_turn_angle_rose,
    "nsd_over_time.png": plot_nsd,
}


def render_all(records: Sequence[AnnotatedRecord], out_dir: str | Path) -> list[Path]:
    """Write every diagnostic figure as PNG into ``out_dir``.

    Returns:
        Paths written. Empty if there is nothing to plot.
    """

    if not records:
        logger.warning("没有可绘制的数据，跳过绘图")
        return []

    d = Path(out_dir)
    d.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, func in PLOTS.items():
        fig = func(records)
        path = d / name
        try:
            fig.savefig(path, dpi=FIG_DPI, bbox_inches="tight")
        finally:
            plt.close(fig)
        written.append(path)
    logger.info("已输出 %s 张图到 %s", len(written), d)
    return written
