"""Tests for submesh planning and encoding."""
import io
import struct

import pytest

from dcm_exporter.config.constants import COMPACT_LAYOUT, SUBMESH_FULL_STREAM, SUBMESH_PARTITIONED
from dcm_exporter.core.binary_writer import BinaryWriter
from dcm_exporter.core.errors import IndexOverflowError
from dcm_exporter.core.schema import DataHeader, SubMeshRecord
from dcm_exporter.core.submesh_writer import SubmeshWriter, plan_submeshes


def test_full_stream_repeats_whole_range():
    """Should give every declared submesh the whole stream and material 1."""
    records = plan_submeshes(SUBMESH_FULL_STREAM, "Cube", 3, 36)

    assert len(records) == 3
    assert all(r.index_start == 0 and r.index_count == 36 for r in records)
    assert all(r.material_id == 1 and r.header.path == "Cube" for r in records)


def test_partitioned_uses_ranges_and_materials():
    records = plan_submeshes(SUBMESH_PARTITIONED, "Cube", 2, 36,
                             ranges=[(0, 18), (18, 18)], material_ids=[0, None])

    assert [(r.index_start, r.index_count) for r in records] == [(0, 18), (18, 18)]
    assert [r.material_id for r in records] == [0, 1]


def test_unknown_policy():
    with pytest.raises(ValueError):
        plan_submeshes("STRIPS", "Cube", 1, 3)


def test_submesh_layout():
    """Should write the header, descriptors, u16 count and contiguous u32 indices."""
    stream = io.BytesIO()
    record = SubMeshRecord(header=DataHeader(path="Tri"), material_id=1, index_start=3, index_count=3)

    SubmeshWriter().write_submesh(BinaryWriter(stream), record)
    data = stream.getvalue()

    assert len(data) == 2 + 128 + 5 + 12
    assert struct.unpack_from("<BB", data, 0) == (0, 1)
    assert data[2:5] == b"Tri" and data[5:130] == b"\x00" * 125
    assert struct.unpack_from("<BBBH3I", data, 130) == (1, 2, 2, 3, 3, 4, 5)


def test_submesh_layout_with_short_names():
    stream = io.BytesIO()
    record = SubMeshRecord(header=DataHeader(path="Tri"), material_id=1, index_start=0, index_count=0)

    SubmeshWriter(COMPACT_LAYOUT).write_submesh(BinaryWriter(stream), record)

    assert len(stream.getvalue()) == 2 + 32 + 5


def test_max_index_count_accepted():
    stream = io.BytesIO()
    record = SubMeshRecord(header=DataHeader(path="Big"), material_id=1, index_start=0, index_count=0xFFFF)

    SubmeshWriter().write_submesh(BinaryWriter(stream), record)

    assert struct.unpack_from("<H", stream.getvalue(), 2 + 128 + 3)[0] == 0xFFFF


def test_index_overflow_rejected():
    """Should refuse index counts that do not fit a u16 and write nothing."""
    stream = io.BytesIO()
    record = SubMeshRecord(header=DataHeader(path="Huge"), material_id=1, index_start=0, index_count=0x10000)

    with pytest.raises(IndexOverflowError):
        SubmeshWriter().write_submesh(BinaryWriter(stream), record)
    assert stream.getvalue() == b""
