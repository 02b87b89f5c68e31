#!/usr/bin/env python3
"""
Spot Decoder - Area / sub-area fishing spot ids from the US ROM.

Pointer chain (all reads via the 0x10000 leaf bank):
  [0xD90B]                  -> area table
  area table + area*2       -> spot pointer list for that area
  spot list + slot*2        -> start of one sub area's words, while > 0xD800
  word high byte            -> spot id

A sub area runs until the next sub area's start. The last sub area of an
area runs until the next area's table entry; the last area has no next
entry and is fixed at 3 words.

Only the US layout is known. JP raises UnsupportedVariantError.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from fm.core.config import DEFAULT_CONFIG, DecodeConfig
from fm.core.errors import UnsupportedVariantError
from fm.core.rom_image import RomImage, Variant

logger = logging.getLogger(__name__)


@dataclass
class PointerScan:
    """Result of a bounded sentinel scan over a pointer table."""
    offsets: List[int] = field(default_factory=list)
    slots_read: int = 0
    hit_sentinel: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.offsets


@dataclass
class SubArea:
    number: int          # 1-based
    start: int
    end: int
    spot_ids: List[int] = field(default_factory=list)


@dataclass
class Area:
    number: int          # 1-based
    table_offset: int
    sub_areas: List[SubArea] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "area": self.number,
            "sub_areas": [
                {"sub_area": s.number, "spots": list(s.spot_ids)}
                for s in self.sub_areas
            ],
        }


class SpotDecoder:
    """Walks the spot pointer chain of the active ROM image."""

    def __init__(self, image: RomImage, config: DecodeConfig = DEFAULT_CONFIG):
        self.image = image
        self.config = config

    def scan_pointer_table(self, start: int) -> PointerScan:
        """
        Read up to spot_slot_count pointers from start.

        A pointer at or below spot_offset_floor ends the table; it is not
        skipped, later slots are never read.
        """
        scan = PointerScan()
        for slot in range(self.config.spot_slot_count):
            value = self.image.read_leaf_word(start + slot * 2)
            scan.slots_read += 1
            if value <= self.config.spot_offset_floor:
                scan.hit_sentinel = True
                break
            scan.offsets.append(value)
        return scan

    def _read_spot_ids(self, start: int, end: int) -> List[int]:
        # Always reads at least one word, even if start >= end
        ids = []
        pos = start
        while True:
            ids.append(self.image.read_leaf_word(pos) >> 8)
            pos += 2
            if pos >= end:
                break
        return ids

    def decode_area(self, area_table: int, area: int) -> Area:
        """Decode one area (0-based index) of the table at area_table."""
        cfg = self.config
        entry = area_table + area * 2
        spot_table = self.image.read_leaf_word(entry)
        scan = self.scan_pointer_table(spot_table)
        result = Area(number=area + 1, table_offset=spot_table)

        offsets = scan.offsets
        for i, start in enumerate(offsets):
            if i != len(offsets) - 1:
                end = offsets[i + 1]
            elif area != cfg.area_count - 1:
                end = self.image.read_leaf_word(entry + 2)
            else:
                end = start + cfg.last_area_spot_words * 2
            result.sub_areas.append(SubArea(
                number=i + 1,
                start=start,
                end=end,
                spot_ids=self._read_spot_ids(start, end),
            ))

        if scan.is_empty:
            logger.debug("Area %d has no sub areas (table 0x%04X)", area + 1, spot_table)
        return result

    def decode(self) -> List[Area]:
        """Decode every area of the active image."""
        if self.image.variant != Variant.US:
            raise UnsupportedVariantError("spots", self.image.variant.value)

        area_table = self.image.read_leaf_word(self.config.spot_root_offset)
        areas = [self.decode_area(area_table, a) for a in range(self.config.area_count)]
        logger.info("Decoded %d areas, %d sub areas", len(areas),
                    sum(len(a.sub_areas) for a in areas))
        return areas


def format_spots(areas: List[Area]) -> str:
    """Render areas as the spots.txt text block."""
    lines = []
    for area in areas:
        lines.append(f"Area {area.number}\n")
        for sub in area.sub_areas:
            ids = ", ".join(str(i) for i in sub.spot_ids)
            lines.append(f"Sub area {sub.number} | {ids}\n")
        lines.append("\n")
    return "".join(lines)
