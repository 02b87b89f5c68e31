#!/usr/bin/env python3
"""
Bait Ratings - Per-bait, per-day rating bytes.

Cell layout: 0x1571C + bait * stride + day, baits 0x71..0xB9, days 0..5.

The shipped US game indexes this table with stride 6 although each bait
row holds 7 bytes, so from bait 0x72 on every lookup lands in a
neighbouring row. StrideMode.BUGGY reproduces what the game actually
reads; StrideMode.CORRECTED reads what the data was laid out as.
"""
from enum import Enum
from typing import List

from fm.core.config import DEFAULT_CONFIG, DecodeConfig
from fm.core.errors import UnsupportedVariantError
from fm.core.rom_image import RomImage, Variant


class StrideMode(Enum):
    BUGGY = 6       # in-game
    CORRECTED = 7

    @property
    def stride(self) -> int:
        return self.value


class BaitRatingReader:
    """Reads the bait x day rating grid from the active image."""

    def __init__(self, image: RomImage, config: DecodeConfig = DEFAULT_CONFIG):
        self.image = image
        self.config = config

    @property
    def baits(self) -> range:
        return range(self.config.first_bait, self.config.last_bait + 1)

    def cell_offset(self, bait: int, day: int, mode: StrideMode) -> int:
        return self.config.bait_rating_offset + bait * mode.stride + day

    def read_grid(self, mode: StrideMode = StrideMode.BUGGY) -> List[List[int]]:
        """Return one row of rating_days values per bait, bait-ascending."""
        if self.image.variant != Variant.US:
            # JP stores 7 days per bait; offsets not verified yet
            raise UnsupportedVariantError("bait ratings", self.image.variant.value)

        return [
            [self.image.read_byte(self.cell_offset(bait, day, mode))
             for day in range(self.config.rating_days)]
            for bait in self.baits
        ]


def format_bait_ratings(grid: List[List[int]]) -> str:
    return "".join(", ".join(str(v) for v in row) + "\n" for row in grid)
