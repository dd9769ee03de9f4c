"""Relocation cleaning: drop incomplete rows, then exact duplicates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from move_analyze.models import RawRelocation, Relocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CleaningReport:
    """Row counts through the cleaning stages."""

    rows_in: int
    rows_incomplete: int
    rows_duplicate: int
    rows_out: int


def drop_incomplete(rows: Iterable[RawRelocation]) -> tuple[list[Relocation], int]:
    """Keep rows with x, y and timestamp present.

    Returns:
        (complete relocations, number of rows dropped)
    """

    kept: list[Relocation] = []
    dropped = 0
    for r in rows:
        if not r.is_complete:
            dropped += 1
            continue
        kept.append(
            Relocation(
                individual_id=r.individual_id,
                x=r.x,
                y=r.y,
                timestamp=r.timestamp,
                row_index=r.row_index,
            )
        )
    return kept, dropped


def drop_duplicates(relocations: Iterable[Relocation]) -> tuple[list[Relocation], int]:
    """Drop repeated (id, x, y, timestamp) rows, keeping the first seen.

    Returns:
        (unique relocations in input order, number of rows dropped)
    """

    seen: set[tuple] = set()
    kept: list[Relocation] = []
    dropped = 0
    for r in relocations:
        if r.key in seen:
            dropped += 1
            continue
        seen.add(r.key)
        kept.append(r)
    return kept, dropped


def clean_relocations(rows: Iterable[RawRelocation]) -> tuple[list[Relocation], CleaningReport]:
    """Run both cleaning stages.

    An empty result is valid and is returned as an empty list.
    """

    raw = list(rows)
    complete, n_incomplete = drop_incomplete(raw)
    unique, n_dupe = drop_duplicates(complete)

    report = CleaningReport(
        rows_in=len(raw),
        rows_incomplete=n_incomplete,
        rows_duplicate=n_dupe,
        rows_out=len(unique),
    )
    if n_incomplete > 0:
        logger.warning("有 %s 行缺少坐标或时间，已删除", n_incomplete)
    if n_dupe > 0:
        logger.warning("有 %s 行重复记录（id, x, y, t 相同），已删除", n_dupe)
    logger.info("清洗完成：输入 %s 行，保留 %s 行", report.rows_in, report.rows_out)
    return unique, report
