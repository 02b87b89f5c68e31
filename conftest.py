"""Synthetic ROM images shared by the test modules."""
import struct
from typing import Dict, List, Sequence

import pytest

from fm.core.config import DEFAULT_CONFIG
from fm.core.rom_image import RomImage, Variant

ROM_SIZE = 0x20000

SAMPLE_ROW = [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]


class RomBuilder:
    """Writes little endian words into a zeroed image."""

    def __init__(self, size: int = ROM_SIZE):
        self.data = bytearray(size)

    def word(self, offset: int, value: int) -> "RomBuilder":
        struct.pack_into("<H", self.data, offset, value)
        return self

    def leaf_word(self, offset: int, value: int) -> "RomBuilder":
        return self.word(offset | DEFAULT_CONFIG.leaf_bank, value)

    def leaf_words(self, offset: int, values: Sequence[int]) -> "RomBuilder":
        for i, value in enumerate(values):
            self.leaf_word(offset + i * 2, value)
        return self

    def fill_pattern(self, start: int, end: int) -> "RomBuilder":
        for i in range(start, end):
            self.data[i] = i & 0xFF
        return self

    def build(self) -> bytes:
        return bytes(self.data)


def bcd(weight: int) -> int:
    """Encode a weight the way the ROM stores it (125 -> 0x0125)."""
    return int(str(weight), 16)


def spot_id_word(spot_id: int) -> int:
    return (spot_id << 8) | 0x55


def add_spot_tables(rom: RomBuilder) -> RomBuilder:
    """
    31 areas: area 1 has two sub areas (ids 1-3 and 4-8), areas 2-30 are
    empty, area 31 has one sub area (ids 9-11) sized by the 3-word rule.
    """
    rom.leaf_word(0xD90B, 0xE000)
    for area in range(31):
        rom.leaf_word(0xE000 + area * 2, 0xE210)
    rom.leaf_word(0xE000, 0xE100)
    rom.leaf_word(0xE000 + 30 * 2, 0xE300)

    rom.leaf_words(0xE100, [0xE200, 0xE206, 0x0000])
    rom.leaf_words(0xE200, [spot_id_word(i) for i in range(1, 9)])
    rom.leaf_word(0xE210, 0x0000)

    rom.leaf_words(0xE300, [0xE400, 0x0000])
    rom.leaf_words(0xE400, [spot_id_word(i) for i in (9, 10, 11)])
    return rom


EXPECTED_SPOTS = (
    "Area 1\n"
    "Sub area 1 | 1, 2, 3\n"
    "Sub area 2 | 4, 5, 6, 7, 8\n"
    "\n"
    + "".join(f"Area {n}\n\n" for n in range(2, 31))
    + "Area 31\n"
    "Sub area 1 | 9, 10, 11\n"
    "\n"
)


def add_weight_table(rom: RomBuilder, base: int, rows: List[List[int]]) -> RomBuilder:
    for day, row in enumerate(rows):
        row_offset = 0x1800 + day * 0x20
        rom.leaf_word(base + day * 2, row_offset)
        rom.leaf_words(row_offset, [bcd(w) for w in row])
    return rom


def default_rows() -> List[List[int]]:
    rows = [list(SAMPLE_ROW) for _ in range(DEFAULT_CONFIG.days)]
    rows[1] = [5, 125, 40, 300, 0, 75, 210, 90, 15, 60]
    return rows


def build_us_rom(rows=None) -> bytes:
    rom = RomBuilder()
    add_spot_tables(rom)
    rom.fill_pattern(0x15000, 0x16000)
    add_weight_table(rom, 0x17D2, rows or default_rows())
    return rom.build()


def build_jp_rom(rows=None) -> bytes:
    rom = RomBuilder()
    add_weight_table(rom, 0x17CE, rows or default_rows())
    return rom.build()


def make_image(us: bytes, jp: bytes, variant: Variant = Variant.US) -> RomImage:
    buffers: Dict[Variant, bytes] = {Variant.US: us, Variant.JP: jp}
    return RomImage(buffers, variant=variant)


@pytest.fixture
def rom_builder():
    return RomBuilder()


@pytest.fixture
def image():
    return make_image(build_us_rom(), build_jp_rom())
