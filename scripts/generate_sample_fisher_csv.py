from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Animal:
    name: str
    x0: float
    y0: float
    fixes: int


def generate_relocations(
    *,
    animals: list[Animal],
    seed: int,
    start: datetime,
    interval_minutes: float,
    missing_rate: float,
    duplicate_rate: float,
) -> list[dict[str, str]]:
    """Generate fake relocation rows (correlated random walks in UTM meters)."""

    rng = random.Random(seed)
    out: list[dict[str, str]] = []

    for animal in animals:
        x, y = animal.x0, animal.y0
        heading = rng.uniform(0, 2 * math.pi)
        cur = start + timedelta(minutes=rng.uniform(0, interval_minutes))
        for _ in range(animal.fixes):
            # Resting bouts: several fixes at (almost) the same spot
            if rng.random() < 0.15:
                step = rng.uniform(0, 5)
            else:
                step = rng.lognormvariate(4.0, 1.0)
            heading += rng.vonmisesvariate(0.0, 2.0)
            heading = heading % (2 * math.pi)
            x += step * math.sin(heading)
            y += step * math.cos(heading)
            cur = cur + timedelta(minutes=interval_minutes * rng.uniform(0.9, 1.1))

            row = {
                "id": animal.name,
                "x_": f"{x:.2f}",
                "y_": f"{y:.2f}",
                "t_": cur.strftime("%Y-%m-%d %H:%M:%S"),
            }
            if rng.random() < missing_rate:
                row[rng.choice(["x_", "y_", "t_"])] = "NA"
            out.append(row)
            if rng.random() < duplicate_rate:
                out.append(dict(row))

    # Interleave individuals by time like a real telemetry download
    out.sort(key=lambda r: r["t_"])
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake fisher relocation CSV for demo/testing.")
    p.add_argument("--out", type=str, default="sample_data/fisher.csv", help="Output CSV path")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--fixes", type=int, default=400, help="Fixes per individual")
    p.add_argument("--interval-minutes", type=float, default=10.0, help="Nominal fix interval")
    p.add_argument("--missing-rate", type=float, default=0.01, help="Share of rows with one NA field")
    p.add_argument("--duplicate-rate", type=float, default=0.005, help="Share of rows written twice")
    p.add_argument(
        "--start",
        type=str,
        default="2010-02-11 00:00:00",
        help="Start time in UTC, e.g. '2010-02-11 00:00:00'",
    )
    args = p.parse_args()

    start = datetime.fromisoformat(args.start).replace(tzinfo=UTC)
    # UTM 18N around Albany, NY
    animals = [
        Animal("F1", 586_000.0, 4_722_000.0, args.fixes),
        Animal("F2", 591_500.0, 4_718_500.0, args.fixes),
        Animal("M1", 583_000.0, 4_716_000.0, args.fixes),
        Animal("M4", 595_000.0, 4_725_000.0, args.fixes),
    ]

    rows = generate_relocations(
        animals=animals,
        seed=args.seed,
        start=start,
        interval_minutes=args.interval_minutes,
        missing_rate=args.missing_rate,
        duplicate_rate=args.duplicate_rate,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["id", "x_", "y_", "t_"])
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
