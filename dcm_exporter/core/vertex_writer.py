# -*- coding: utf-8 -*-
"""
DCM Blender Exporter - Vertex Writer

Vertex layout (36 bytes):
- position (3 x f32)
- uv (2 x f32)
- color (4 x u8), each channel round(clamp(c * 255, 0, 255))
- normal (3 x f32)
"""

from __future__ import annotations
import math
from typing import Iterable, Tuple

from .binary_writer import BinaryWriter
from .errors import MeshEncodingError
from .schema import ExpandedVertex

VERTEX_STRIDE = 36


def quantize_channel(c: float) -> int:
    """
    Float color channel -> byte. Clamps before rounding; rounding is
    Python's round-to-nearest (ties to even) for every channel.
    """
    if math.isnan(c):
        raise MeshEncodingError("Vertex color channel is NaN")
    scaled = min(max(float(c) * 255.0, 0.0), 255.0)
    return int(round(scaled))


def quantize_color(color) -> Tuple[int, int, int, int]:
    r, g, b, a = color
    return (quantize_channel(r), quantize_channel(g), quantize_channel(b), quantize_channel(a))


def write_vertex(binw: BinaryWriter, v: ExpandedVertex) -> None:
    binw.write_f32_array(v.position)
    binw.write_f32_array(v.uv)
    for c in quantize_color(v.color):
        binw.write_u8(c)
    binw.write_f32_array(v.normal)


def write_vertices(binw: BinaryWriter, vertices: Iterable[ExpandedVertex]) -> int:
    count = 0
    for v in vertices:
        write_vertex(binw, v)
        count += 1
    return count
