"""Tests for vertex encoding and color quantization."""
import io
import struct

import pytest

from dcm_exporter.core.binary_writer import BinaryWriter
from dcm_exporter.core.errors import MeshEncodingError
from dcm_exporter.core.schema import ExpandedVertex
from dcm_exporter.core.vertex_writer import (
    VERTEX_STRIDE,
    quantize_channel,
    quantize_color,
    write_vertex,
    write_vertices,
)


@pytest.mark.parametrize("value, expected", [
    (1.0, 255),
    (0.0, 0),
    (0.5019, 128),
    (1.5, 255),
    (-0.2, 0),
])
def test_quantize_channel(value, expected):
    """Should scale by 255, clamp and round to the nearest byte."""
    assert quantize_channel(value) == expected


def test_quantize_color_alpha_included():
    assert quantize_color((1.0, 0.0, 0.5019, 1.0)) == (255, 0, 128, 255)


def test_vertex_layout():
    """Should write position, UV, color bytes and normal in 36 bytes."""
    stream = io.BytesIO()
    vertex = ExpandedVertex(
        position=(1.0, 2.0, 3.0),
        uv=(0.25, 0.75),
        color=(1.0, 0.0, 0.5019, 1.0),
        normal=(0.0, 1.0, 0.0),
    )

    write_vertex(BinaryWriter(stream), vertex)
    data = stream.getvalue()

    assert len(data) == VERTEX_STRIDE
    assert struct.unpack("<3f2f4B3f", data) == (1.0, 2.0, 3.0, 0.25, 0.75, 255, 0, 128, 255, 0.0, 1.0, 0.0)


def test_write_vertices_returns_count():
    stream = io.BytesIO()
    vertex = ExpandedVertex((0.0, 0.0, 0.0), (0.0, 0.0), (1.0, 1.0, 1.0, 1.0), (0.0, 1.0, 0.0))

    count = write_vertices(BinaryWriter(stream), [vertex] * 5)

    assert count == 5
    assert len(stream.getvalue()) == 5 * VERTEX_STRIDE


def test_nan_channel_rejected():
    """Should refuse NaN color channels instead of guessing a byte."""
    with pytest.raises(MeshEncodingError):
        quantize_channel(float("nan"))


def test_infinite_channels_clamp():
    assert quantize_channel(float("inf")) == 255
    assert quantize_channel(float("-inf")) == 0
