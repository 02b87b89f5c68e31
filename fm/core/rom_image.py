#!/usr/bin/env python3
"""
ROM Image - In-memory store for the US and JP Fishing Master images.

Both .sfc files are read once and never mutated. Reports pick the active
variant with set_variant(); every read can also name a variant explicitly.

Read kinds:
  read_byte       raw byte (bait ratings)
  read_word_le    16-bit little endian word
  read_leaf_word  16-bit word from the 0x10000 bank; every pointer-table
                  chase goes through this one
"""
import logging
import struct
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from fm.core.config import DEFAULT_CONFIG, DecodeConfig
from fm.core.errors import MissingInputError, OutOfBoundsError

logger = logging.getLogger(__name__)


class Variant(Enum):
    """Supported ROM releases."""
    US = "us"
    JP = "jp"

    def index(self) -> int:
        """Position of this release in load order."""
        return list(Variant).index(self)

    @property
    def suffix(self) -> str:
        return f"_{self.value}"

    @classmethod
    def parse(cls, text: str) -> "Variant":
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(
                f"unknown variant {text!r} (expected one of: "
                f"{', '.join(v.value for v in cls)})"
            ) from None


class RomImage:
    """
    Read-only view over both ROM buffers.

    Usage:
        rom = RomImage.load("/path/to/roms")
        rom.set_variant(Variant.JP)
        ptr = rom.read_leaf_word(0x17CE)
    """

    def __init__(self, buffers: Dict[Variant, bytes], variant: Variant = Variant.US,
                 config: DecodeConfig = DEFAULT_CONFIG):
        """
        Args:
            buffers: Image bytes for each Variant.
            variant: Initially active variant.
            config: Table constants (only leaf_bank is used here).
        """
        missing = [v.value for v in Variant if v not in buffers]
        if missing:
            raise ValueError(f"no image for variant(s): {', '.join(missing)}")
        self._buffers = {v: bytes(buffers[v]) for v in Variant}
        self._variant = variant
        self.config = config

    @classmethod
    def load(cls, rom_dir: Union[str, Path],
             config: DecodeConfig = DEFAULT_CONFIG) -> "RomImage":
        """Read both images from rom_dir. Raises MissingInputError if either is absent."""
        rom_dir = Path(rom_dir)
        buffers: Dict[Variant, bytes] = {}
        for variant in Variant:
            path = rom_dir / config.rom_filenames[variant.value]
            if not path.is_file():
                raise MissingInputError(str(path))
            buffers[variant] = path.read_bytes()
            logger.info("Loaded %s image: %s (%d bytes)",
                        variant.value, path.name, len(buffers[variant]))
        return cls(buffers, config=config)

    @property
    def variant(self) -> Variant:
        return self._variant

    def set_variant(self, variant: Variant) -> None:
        self._variant = variant

    def size(self, variant: Optional[Variant] = None) -> int:
        return len(self._buffers[variant or self._variant])

    def _checked(self, offset: int, width: int, variant: Optional[Variant]) -> bytes:
        variant = variant or self._variant
        data = self._buffers[variant]
        if offset < 0 or offset + width > len(data):
            raise OutOfBoundsError(offset, len(data), variant.value)
        return data

    def read_byte(self, offset: int, variant: Optional[Variant] = None) -> int:
        return self._checked(offset, 1, variant)[offset]

    def read_word_le(self, offset: int, variant: Optional[Variant] = None) -> int:
        data = self._checked(offset, 2, variant)
        return struct.unpack_from("<H", data, offset)[0]

    def read_leaf_word(self, offset: int, variant: Optional[Variant] = None) -> int:
        """Word at offset in the leaf bank. For 16-bit offsets this equals offset + 0x10000."""
        return self.read_word_le(offset | self.config.leaf_bank, variant)
