"""RomImage reads, variant switching and loading."""
import pytest

from conftest import RomBuilder, make_image
from fm.core.errors import MissingInputError, OutOfBoundsError
from fm.core.rom_image import RomImage, Variant


def test_word_is_little_endian():
    rom = RomBuilder(0x100).word(0x10, 0xBEEF).build()
    image = make_image(rom, rom)
    assert image.read_word_le(0x10) == 0xBEEF
    assert image.read_byte(0x10) == 0xEF
    assert image.read_byte(0x11) == 0xBE


def test_leaf_word_reads_from_second_bank():
    rom = RomBuilder().word(0x1D90B, 0x1234).word(0xD90B, 0x9999).build()
    image = make_image(rom, rom)
    assert image.read_leaf_word(0xD90B) == 0x1234


def test_reads_follow_active_variant():
    us = RomBuilder(0x10).word(0, 0x1111).build()
    jp = RomBuilder(0x10).word(0, 0x2222).build()
    image = make_image(us, jp)

    assert image.read_word_le(0) == 0x1111
    image.set_variant(Variant.JP)
    assert image.variant is Variant.JP
    assert image.read_word_le(0) == 0x2222
    assert image.read_word_le(0, Variant.US) == 0x1111


@pytest.mark.parametrize("offset", [-1, 0x10, 0x100])
def test_out_of_range_byte_is_fatal(offset):
    image = make_image(bytes(0x10), bytes(0x10))
    with pytest.raises(OutOfBoundsError) as exc:
        image.read_byte(offset)
    assert exc.value.size == 0x10
    assert exc.value.variant == "us"


def test_word_straddling_the_end_is_fatal():
    image = make_image(bytes(0x10), bytes(0x10))
    with pytest.raises(OutOfBoundsError):
        image.read_word_le(0x0F)


def test_leaf_read_on_short_image_is_fatal():
    image = make_image(bytes(0x8000), bytes(0x8000))
    with pytest.raises(OutOfBoundsError) as exc:
        image.read_leaf_word(0x0000)
    assert exc.value.offset == 0x10000


def test_both_variants_required():
    with pytest.raises(ValueError):
        RomImage({Variant.US: b""})


def test_variant_accessors():
    assert Variant.US.index() == 0
    assert Variant.JP.index() == 1
    assert Variant.JP.suffix == "_jp"
    assert Variant.parse("US") is Variant.US
    with pytest.raises(ValueError):
        Variant.parse("eu")


def test_load_reads_both_files(tmp_path):
    image_us = RomBuilder(0x20).word(0, 1).build()
    image_jp = RomBuilder(0x20).word(0, 2).build()
    (tmp_path / "Mark Davis' The Fishing Master (USA).sfc").write_bytes(image_us)
    (tmp_path / "Oomono Black Bass Fishing - Jinzouko Hen (Japan).sfc").write_bytes(image_jp)

    image = RomImage.load(tmp_path)
    assert image.read_word_le(0) == 1
    assert image.read_word_le(0, Variant.JP) == 2


def test_load_missing_file(tmp_path):
    (tmp_path / "Mark Davis' The Fishing Master (USA).sfc").write_bytes(b"\x00")
    with pytest.raises(MissingInputError) as exc:
        RomImage.load(tmp_path)
    assert "Jinzouko Hen" in str(exc.value)
