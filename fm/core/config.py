#!/usr/bin/env python3
"""
FM Configuration - ROM paths and table constants for Fishing Master decoding.

Environment Variables:
    FM_ROM_PATH: Directory holding both .sfc images (default: current directory)

Usage:
    Set FM_ROM_PATH before running, or pass --rom-dir to the CLI:
        export FM_ROM_PATH="/path/to/roms"   # Unix/Mac
        set FM_ROM_PATH=D:\\path\\to\\roms      # Windows

Table layout (all offsets are file offsets into the headerless .sfc):
    Spots:        root pointer @ 0xD90B -> 31 area pointers -> <=16 spot
                  pointers per area (floor 0xD800) -> words, high byte = spot id
    Bait ratings: 0x1571C + bait * stride + day, baits 0x71..0xB9, 6 days
    Weights:      pointer table @ 0x17D2 (US) / 0x17CE (JP), 7 rows x 10 words
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

# Cache for lazy initialization
_rom_base_path: Optional[Path] = None

ROM_FILENAMES = {
    "us": "Mark Davis' The Fishing Master (USA).sfc",
    "jp": "Oomono Black Bass Fishing - Jinzouko Hen (Japan).sfc",
}

# Chained-table reads live in the second 64K bank
LEAF_BANK = 0x10000

DAYS = 7
FISHER_COUNT = 10
ROTATION_COUNT = 8
AVERAGE_CORRECTION = 0.165

SPOT_ROOT_OFFSET = 0xD90B
AREA_COUNT = 31
SPOT_SLOT_COUNT = 16
SPOT_OFFSET_FLOOR = 0xD800
LAST_AREA_SPOT_WORDS = 3

BAIT_RATING_OFFSET = 0x1571C
FIRST_BAIT = 0x71
LAST_BAIT = 0xB9

WEIGHT_TABLE_BASE = {"us": 0x17D2, "jp": 0x17CE}

# (name, days); None = day count not known yet
PERIODS: Tuple[Tuple[str, Optional[int]], ...] = (
    ("spring", 1),
    ("summer", 2),
    ("fall", 2),
    ("winter 1", 3),
    ("winter 2", 3),
    ("championship", 3),
    ("bonus", None),
)


@dataclass(frozen=True)
class DecodeConfig:
    """Every table constant the decoders read, injectable for synthetic images."""
    leaf_bank: int = LEAF_BANK
    days: int = DAYS
    fisher_count: int = FISHER_COUNT
    rotation_count: int = ROTATION_COUNT
    average_correction: float = AVERAGE_CORRECTION
    spot_root_offset: int = SPOT_ROOT_OFFSET
    area_count: int = AREA_COUNT
    spot_slot_count: int = SPOT_SLOT_COUNT
    spot_offset_floor: int = SPOT_OFFSET_FLOOR
    last_area_spot_words: int = LAST_AREA_SPOT_WORDS
    bait_rating_offset: int = BAIT_RATING_OFFSET
    first_bait: int = FIRST_BAIT
    last_bait: int = LAST_BAIT
    weight_table_base: Dict[str, int] = field(default_factory=lambda: dict(WEIGHT_TABLE_BASE))
    rom_filenames: Dict[str, str] = field(default_factory=lambda: dict(ROM_FILENAMES))
    periods: Tuple[Tuple[str, Optional[int]], ...] = PERIODS

    @property
    def rating_days(self) -> int:
        """Bait ratings only cover the regular days, not the bonus one."""
        return self.days - 1


DEFAULT_CONFIG = DecodeConfig()


def get_rom_base_path() -> Path:
    """Get ROM directory from FM_ROM_PATH, falling back to the working directory.

    Returns:
        Path to the directory holding both ROM images.

    Raises:
        ValueError: If FM_ROM_PATH points to a directory that doesn't exist.
    """
    global _rom_base_path

    if _rom_base_path is not None:
        return _rom_base_path

    env_path = os.environ.get('FM_ROM_PATH')
    if not env_path:
        return Path.cwd()

    path = Path(env_path)
    if not path.is_dir():
        raise ValueError(
            f"FM_ROM_PATH points to non-existent directory: {env_path}"
        )

    _rom_base_path = path
    return _rom_base_path

