#!/usr/bin/env python3
"""
Rotation Scoring - Expected winning weight per tournament period.

Each period day, the ten fishers draw from the same 10-slot weight row,
cyclically shifted right by 0..7 slots. For a period of d days every one
of the 8^d shift assignments is evaluated; the best per-fisher total of
each assignment is the winning total for it.

    average = (sum_of_maxima / 100 + 0.165 * count) / count

Weights are stored as BCD: the word 0x0125 means 125 (1.25 lb). The
constant 0.165 is an empirical correction measured against the game.

Weight table:
    [0x17D2 (US) / 0x17CE (JP) + day*2] -> row pointer -> 10 words
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from fm.core.config import DEFAULT_CONFIG, DecodeConfig
from fm.core.errors import MalformedWeightEncodingError
from fm.core.rom_image import RomImage

logger = logging.getLogger(__name__)


@dataclass
class RotationScore:
    """Winning statistics of one period."""
    days: int
    count: int                 # assignments evaluated (8^days)
    sum_of_maxima: int         # hundredths
    min_maximum: int
    max_maximum: int
    average: float

    @property
    def raw_average(self) -> float:
        """Mean winning total without the correction term, in hundredths."""
        return self.sum_of_maxima / self.count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days": self.days,
            "count": self.count,
            "sum_of_maxima": self.sum_of_maxima,
            "min_maximum": self.min_maximum,
            "max_maximum": self.max_maximum,
            "average": round(self.average, 4),
        }


@dataclass
class PeriodAverage:
    name: str
    days: Optional[int]
    score: Optional[RotationScore] = None

    @property
    def skipped(self) -> bool:
        return self.score is None


@dataclass
class WinningAverages:
    variant: str
    periods: List[PeriodAverage] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant,
            "periods": [
                {
                    "name": p.name,
                    "days": p.days,
                    "skipped": p.skipped,
                    **({"score": p.score.to_dict()} if p.score else {}),
                }
                for p in self.periods
            ],
        }


def decode_weight(raw: int, offset: int = 0) -> int:
    """Read a 16-bit weight word's hex digits as a decimal number (0x0125 -> 125)."""
    text = f"{raw:04X}"
    if not text.isdigit():
        raise MalformedWeightEncodingError(offset, raw)
    return int(text)


def read_weight_table(image: RomImage, config: DecodeConfig = DEFAULT_CONFIG) -> List[List[int]]:
    """Read all config.days weight rows of the active variant."""
    base = config.weight_table_base[image.variant.value]
    rows = []
    for day in range(config.days):
        row_offset = image.read_leaf_word(base + day * 2)
        row = []
        for slot in range(config.fisher_count):
            offset = row_offset + slot * 2
            row.append(decode_weight(image.read_leaf_word(offset), offset))
        rows.append(row)
    return rows


def rotate_row(row: Sequence[int], amount: int) -> List[int]:
    """Cyclic right rotation: element i moves to i + amount."""
    return [int(v) for v in np.roll(np.asarray(row), amount)]


def iter_assignments(days: int, rotation_count: int = DEFAULT_CONFIG.rotation_count) -> Iterator[Tuple[int, ...]]:
    """
    Yield every shift assignment for `days` days in odometer order.

    Day 0 advances fastest; when it wraps from rotation_count-1 to 0 it
    carries into day 1, and so on. Ends when the last day wraps.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")

    perm = [0] * days
    while True:
        yield tuple(perm)
        perm[0] += 1
        for x in range(days):
            if perm[x] != rotation_count:
                break
            if x == days - 1:
                return
            perm[x] = 0
            perm[x + 1] += 1


class RotationScorer:
    """Brute-force winning average over all rotation assignments."""

    def __init__(self, config: DecodeConfig = DEFAULT_CONFIG):
        self.config = config

    def _rotation_matrix(self, row: Sequence[int]) -> np.ndarray:
        weights = np.asarray(row, dtype=np.int64)
        if weights.shape != (self.config.fisher_count,):
            raise ValueError(
                f"weight row must have {self.config.fisher_count} entries, got {len(row)}"
            )
        # rotations[r] == row rotated right by r
        return np.stack([np.roll(weights, r) for r in range(self.config.rotation_count)])

    def winning_totals(self, row: Sequence[int], days: int) -> np.ndarray:
        """Best per-fisher total for each assignment, in odometer order."""
        rotations = self._rotation_matrix(row)
        assignments = np.array(
            list(iter_assignments(days, self.config.rotation_count)), dtype=np.intp
        )
        # (count, days, fishers) -> per-fisher sums -> best fisher
        per_fisher = rotations[assignments].sum(axis=1)
        return per_fisher.max(axis=1)

    def score(self, row: Sequence[int], days: int) -> RotationScore:
        maxima = self.winning_totals(row, days)
        count = len(maxima)
        total = int(maxima.sum())
        average = (total / 100.0 + self.config.average_correction * count) / count
        return RotationScore(
            days=days,
            count=count,
            sum_of_maxima=total,
            min_maximum=int(maxima.min()),
            max_maximum=int(maxima.max()),
            average=average,
        )

    def winning_averages(self, image: RomImage) -> WinningAverages:
        """Score every period with a known day count for the active variant."""
        rows = read_weight_table(image, self.config)
        result = WinningAverages(variant=image.variant.value)
        for (name, days), row in zip(self.config.periods, rows):
            period = PeriodAverage(name=name, days=days)
            if days is None:
                logger.warning("Skipping %s period: day count unknown", name)
            else:
                period.score = self.score(row, days)
                logger.info("%s %s: %.2f over %d assignments", image.variant.value,
                            name, period.score.average, period.score.count)
            result.periods.append(period)
        return result


def format_winning_averages(averages: WinningAverages) -> str:
    return "".join(
        f"{p.name:<12} | {p.score.average:.2f}\n"
        for p in averages.periods
        if not p.skipped
    )
