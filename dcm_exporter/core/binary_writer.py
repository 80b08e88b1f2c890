# -*- coding: utf-8 -*-
"""
DCM Blender Exporter - Binary Writer

- Little-endian scalar writers (u8/u16/u32/f32) over any binary stream
- Fixed-length, null-padded ASCII strings (no length prefix, no terminator
  when the text fills the field)
- No knowledge of DCM records; the record writers decide what goes where
"""

from __future__ import annotations
import struct
from dataclasses import dataclass
from typing import BinaryIO


@dataclass
class BinaryWriter:
    """
    Minimalistic binary writer with explicit endianness.
    """
    stream: BinaryIO
    little_endian: bool = True

    # ---- scalar writers ----
    def write_u8(self, v: int) -> None:
        self.stream.write(struct.pack('<B' if self.little_endian else '>B', v & 0xFF))

    def write_u16(self, v: int) -> None:
        self.stream.write(struct.pack('<H' if self.little_endian else '>H', v & 0xFFFF))

    def write_u32(self, v: int) -> None:
        self.stream.write(struct.pack('<I' if self.little_endian else '>I', v & 0xFFFFFFFF))

    def write_f32(self, v: float) -> None:
        self.stream.write(struct.pack('<f' if self.little_endian else '>f', float(v)))

    # ---- bulk writers ----
    def write_bytes(self, data: bytes) -> None:
        self.stream.write(data)

    def write_f32_array(self, values) -> None:
        values = [float(v) for v in values]
        fmt = ('<' if self.little_endian else '>') + 'f' * len(values)
        self.stream.write(struct.pack(fmt, *values))

    def write_u32_range(self, start: int, count: int) -> None:
        """
        Write the contiguous sequence start..start+count-1 as u32.
        """
        fmt = ('<' if self.little_endian else '>') + 'I' * count
        self.stream.write(struct.pack(fmt, *range(start, start + count)))

    def write_fixed_string(self, s: str, length: int) -> None:
        """
        Write 's' as ASCII into exactly 'length' bytes, truncating or
        zero-padding. Non-ASCII characters become '?'.
        """
        self.stream.write(pack_fixed_string(s, length))

    def tell(self) -> int:
        return self.stream.tell()


def pack_fixed_string(s: str, length: int) -> bytes:
    raw = (s or "").encode('ascii', errors='replace')[:length]
    return raw + b'\x00' * (length - len(raw))
