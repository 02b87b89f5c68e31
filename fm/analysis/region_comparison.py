#!/usr/bin/env python3
"""
Region Comparison - US vs JP winning averages side by side.

For every period with a known day count, prints both releases' averages,
their difference, and the spread of winning totals (min/max of the
per-assignment maxima, in pounds).

Usage:
    python -m fm.analysis.region_comparison [--rom-dir DIR] [-o regions.json]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from fm.core.config import get_rom_base_path
from fm.core.errors import RomDecodeError
from fm.core.rom_image import RomImage, Variant
from fm.core.rotation_scoring import RotationScorer


def compare_regions(image: RomImage) -> List[Dict[str, Any]]:
    scorer = RotationScorer(image.config)
    by_variant = {}
    for variant in Variant:
        image.set_variant(variant)
        by_variant[variant] = scorer.winning_averages(image)

    rows = []
    us_periods = by_variant[Variant.US].periods
    jp_periods = by_variant[Variant.JP].periods
    for us, jp in zip(us_periods, jp_periods):
        if us.skipped or jp.skipped:
            continue
        rows.append({
            "period": us.name,
            "days": us.days,
            "us": round(us.score.average, 2),
            "jp": round(jp.score.average, 2),
            "delta": round(jp.score.average - us.score.average, 2),
            "us_spread": [us.score.min_maximum / 100, us.score.max_maximum / 100],
            "jp_spread": [jp.score.min_maximum / 100, jp.score.max_maximum / 100],
        })
    return rows


def print_table(rows: List[Dict[str, Any]]) -> None:
    print(f"{'Period':12s} {'Days':>4s} {'US':>7s} {'JP':>7s} {'Delta':>7s}  US spread      JP spread")
    print("-" * 76)
    for r in rows:
        us_lo, us_hi = r["us_spread"]
        jp_lo, jp_hi = r["jp_spread"]
        print(f"{r['period']:12s} {r['days']:4d} {r['us']:7.2f} {r['jp']:7.2f} {r['delta']:+7.2f}"
              f"  {us_lo:5.2f}-{us_hi:<6.2f}  {jp_lo:5.2f}-{jp_hi:<6.2f}")


def main():
    parser = argparse.ArgumentParser(description="Compare US and JP winning averages")
    parser.add_argument("--rom-dir", help="Directory holding both .sfc images")
    parser.add_argument("-o", "--output", help="Write rows as JSON")
    args = parser.parse_args()

    try:
        image = RomImage.load(args.rom_dir or get_rom_base_path())
        rows = compare_regions(image)
    except (RomDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print_table(rows)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(rows, f, indent=2)
        print(f"\nSaved to {args.output}")


if __name__ == '__main__':
    main()
