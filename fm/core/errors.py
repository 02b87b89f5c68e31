"""
Decode errors. All of them are terminal for the report that raised them.
"""
from typing import Optional


class RomDecodeError(Exception):
    """Base class for everything the decoders raise on bad input."""


class MissingInputError(RomDecodeError):
    """A required ROM image is not on disk."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} not found!")


class OutOfBoundsError(RomDecodeError):
    """A computed offset falls outside the active image."""

    def __init__(self, offset: int, size: int, variant: Optional[str] = None):
        self.offset = offset
        self.size = size
        self.variant = variant
        where = f" ({variant} image)" if variant else ""
        super().__init__(
            f"offset 0x{offset:X} outside image of 0x{size:X} bytes{where}"
        )


class UnsupportedVariantError(RomDecodeError):
    """A report has no verified table offsets for the requested variant."""

    def __init__(self, feature: str, variant: str):
        self.feature = feature
        self.variant = variant
        super().__init__(f"{variant} not implemented for {feature}")


class MalformedWeightEncodingError(RomDecodeError):
    """A weight word printed in hex is not a decimal numeral."""

    def __init__(self, offset: int, raw: int):
        self.offset = offset
        self.raw = raw
        super().__init__(
            f"failed to parse weight 0x{raw:04X} at 0x{offset:X} as decimal"
        )
