# -*- coding: utf-8 -*-
"""
DCM Blender Exporter - Submesh Writer

- Emits indexed submesh descriptors over an already de-indexed vertex stream
- Indices are always the contiguous sequence start..start+count-1
- index_count is a u16 on the wire; anything above 65535 is rejected
- Partitioning is a named policy:
    FULL_STREAM  every declared submesh covers the whole stream (legacy output)
    PARTITIONED  each submesh covers its own contiguous range
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from .binary_writer import BinaryWriter
from .errors import IndexOverflowError
from .schema import DataFlags, DataHeader, SubMeshArrangement, SubMeshRecord, SubMeshType
from ..config.constants import (
    DATA_LOCAL_ID,
    MAX_SUBMESH_INDICES,
    SUBMESH_LEGACY_MATERIAL_ID,
    SUBMESH_FULL_STREAM,
    SUBMESH_PARTITIONED,
    LEGACY_LAYOUT,
    RecordLayout,
)


def plan_submeshes(policy: str,
                   name: str,
                   submesh_count: int,
                   vertex_count: int,
                   ranges: Optional[Sequence[Tuple[int, int]]] = None,
                   material_ids: Optional[Sequence[Optional[int]]] = None) -> List[SubMeshRecord]:
    """
    Build the submesh records for one mesh.

    参数:
        policy: FULL_STREAM / PARTITIONED
        name: mesh data name (DataHeader path of every submesh)
        submesh_count: submeshes declared by the source mesh
        vertex_count: length of the de-indexed stream
        ranges: (start, count) per submesh, PARTITIONED only
        material_ids: material table index per submesh, PARTITIONED only
    """
    if policy == SUBMESH_FULL_STREAM:
        return [
            SubMeshRecord(
                header=DataHeader(flags=DataFlags.INTERNAL, local_id=DATA_LOCAL_ID, path=name),
                material_id=SUBMESH_LEGACY_MATERIAL_ID,
                index_start=0,
                index_count=vertex_count,
            )
            for _ in range(submesh_count)
        ]

    if policy == SUBMESH_PARTITIONED:
        if ranges is None:
            ranges = [(0, vertex_count)]
        records = []
        for i, (start, count) in enumerate(ranges):
            mat_id = None
            if material_ids is not None and i < len(material_ids):
                mat_id = material_ids[i]
            records.append(SubMeshRecord(
                header=DataHeader(flags=DataFlags.INTERNAL, local_id=DATA_LOCAL_ID, path=name),
                material_id=SUBMESH_LEGACY_MATERIAL_ID if mat_id is None else mat_id,
                index_start=start,
                index_count=count,
            ))
        return records

    raise ValueError(f"Unknown submesh policy: {policy}")


class SubmeshWriter:

    def __init__(self, layout: RecordLayout = LEGACY_LAYOUT):
        self.layout = layout

    def write_submesh(self, binw: BinaryWriter, record: SubMeshRecord) -> None:
        """
        Submesh layout:
        - flags (u8), local id (u8), name (fixed string, layout.submesh_name)
        - material id (u8), arrangement (u8), type (u8)
        - index count (u16)
        - index count x u32 indices
        """
        if record.index_count > MAX_SUBMESH_INDICES:
            raise IndexOverflowError(
                f"Submesh index count {record.index_count} exceeds {MAX_SUBMESH_INDICES}",
                record.header.path,
            )
        if record.arrangement != SubMeshArrangement.TRIANGLES or record.submesh_type != SubMeshType.INDEXED:
            raise ValueError("Only indexed triangle-list submeshes are supported")

        binw.write_u8(record.header.flags)
        binw.write_u8(record.header.local_id)
        binw.write_fixed_string(record.header.path, self.layout.submesh_name)

        binw.write_u8(record.material_id)
        binw.write_u8(record.arrangement)
        binw.write_u8(record.submesh_type)
        binw.write_u16(record.index_count)
        binw.write_u32_range(record.index_start, record.index_count)
