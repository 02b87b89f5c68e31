#!/usr/bin/env python3
"""
Stride Comparison - Where the in-game bait lookup diverges from the data.

Reads the US bait rating grid twice (stride 6 as the game does, stride 7 as
the table is laid out) and lists every (bait, day) cell whose value differs.

Usage:
    python -m fm.analysis.stride_comparison [--rom-dir DIR] [-o diff.json]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

import numpy as np

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from fm.core.bait_ratings import BaitRatingReader, StrideMode
from fm.core.config import get_rom_base_path
from fm.core.errors import RomDecodeError
from fm.core.rom_image import RomImage, Variant


def compare_strides(image: RomImage) -> Dict[str, Any]:
    image.set_variant(Variant.US)
    reader = BaitRatingReader(image, image.config)
    buggy = np.array(reader.read_grid(StrideMode.BUGGY), dtype=np.int64)
    corrected = np.array(reader.read_grid(StrideMode.CORRECTED), dtype=np.int64)

    diff = buggy != corrected
    baits = list(reader.baits)
    cells = [
        {
            "bait": f"0x{baits[b]:02X}",
            "day": int(d) + 1,
            "in_game": int(buggy[b, d]),
            "corrected": int(corrected[b, d]),
        }
        for b, d in zip(*np.nonzero(diff))
    ]

    return {
        "baits": len(baits),
        "days": buggy.shape[1],
        "differing_cells": int(diff.sum()),
        "differing_baits": int(diff.any(axis=1).sum()),
        "per_day": [int(n) for n in diff.sum(axis=0)],
        "mean_abs_delta": float(np.abs(buggy - corrected).mean()),
        "cells": cells,
    }


def print_summary(result: Dict[str, Any]) -> None:
    print("=" * 60)
    print("Bait rating stride comparison (in-game 6 vs corrected 7)")
    print("=" * 60)
    total = result["baits"] * result["days"]
    print(f"Differing cells: {result['differing_cells']}/{total}")
    print(f"Differing baits: {result['differing_baits']}/{result['baits']}")
    print(f"Mean |delta|:    {result['mean_abs_delta']:.2f}")
    for day, n in enumerate(result["per_day"], 1):
        print(f"  day {day}: {n}")


def main():
    parser = argparse.ArgumentParser(description="Compare bait rating strides")
    parser.add_argument("--rom-dir", help="Directory holding both .sfc images")
    parser.add_argument("-o", "--output", help="Write the full cell list as JSON")
    args = parser.parse_args()

    try:
        image = RomImage.load(args.rom_dir or get_rom_base_path())
    except (RomDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = compare_strides(image)
    print_summary(result)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(result, f, indent=2)
        print(f"\nSaved to {args.output}")


if __name__ == '__main__':
    main()
