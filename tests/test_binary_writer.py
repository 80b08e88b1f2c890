"""Tests for the binary primitives writer."""
import io
import struct

from dcm_exporter.core.binary_writer import BinaryWriter, pack_fixed_string


def _written(fn):
    stream = io.BytesIO()
    fn(BinaryWriter(stream))
    return stream.getvalue()


def test_scalars_are_little_endian():
    """Should write u8/u16/u32/f32 in little-endian order."""
    data = _written(lambda w: (w.write_u8(0x12), w.write_u16(0x3456), w.write_u32(0x789ABCDE), w.write_f32(1.5)))

    assert data == b"\x12" + b"\x56\x34" + b"\xde\xbc\x9a\x78" + struct.pack("<f", 1.5)


def test_fixed_string_is_null_padded():
    """Should pad short strings with zero bytes up to the field width."""
    assert pack_fixed_string("abc", 8) == b"abc\x00\x00\x00\x00\x00"


def test_fixed_string_is_truncated():
    """Should truncate strings longer than the field without a terminator."""
    assert pack_fixed_string("abcdefgh", 4) == b"abcd"
    assert pack_fixed_string("abcd", 4) == b"abcd"


def test_fixed_string_empty_and_none():
    """Should write an all-zero field for empty or missing strings."""
    assert pack_fixed_string("", 32) == b"\x00" * 32
    assert pack_fixed_string(None, 4) == b"\x00" * 4


def test_fixed_string_replaces_non_ascii():
    """Should replace non-ASCII characters with '?'."""
    assert pack_fixed_string("Würfel", 8) == b"W?rfel\x00\x00"


def test_u32_range():
    """Should write a contiguous sequence of u32 values."""
    data = _written(lambda w: w.write_u32_range(3, 4))

    assert struct.unpack("<4I", data) == (3, 4, 5, 6)


def test_u32_range_empty():
    """Should write nothing for an empty range."""
    assert _written(lambda w: w.write_u32_range(0, 0)) == b""
