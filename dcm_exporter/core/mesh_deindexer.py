# -*- coding: utf-8 -*-
"""
DCM Blender Exporter - Mesh De-indexer

- Expands an indexed triangle mesh into one vertex record per triangle corner
- Reverses winding: each (i0, i1, i2) is emitted as (i0, i2, i1)
- Positions/normals go through the coordinate converter, UV/color are copied
- Missing or short attribute arrays fall back to UV (0,0), color white,
  normal up (the fallback normal is still transformed)
"""

from __future__ import annotations
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .coordinate_converter import CoordinateConverter
from .errors import MeshEncodingError
from .schema import ExpandedVertex, SourceMesh
from ..config.constants import DEFAULT_UV, DEFAULT_COLOR, DEFAULT_NORMAL


def rewound_corners(triangles: Sequence[int]) -> Iterator[int]:
    """
    Yield triangle-corner indices in reversed winding order.
    """
    if len(triangles) % 3 != 0:
        raise MeshEncodingError(f"Triangle index count {len(triangles)} is not a multiple of 3")
    for i in range(0, len(triangles), 3):
        yield triangles[i]
        yield triangles[i + 2]
        yield triangles[i + 1]


def _lookup(values: Optional[Sequence], idx: int, default):
    if values is None or idx < 0 or idx >= len(values):
        return default
    return values[idx]


class MeshDeindexer:

    def __init__(self, converter: CoordinateConverter):
        self.converter = converter

    def expand(self, mesh: SourceMesh, triangles: Optional[Sequence[int]] = None) -> List[ExpandedVertex]:
        """
        De-index 'triangles' (defaults to the whole mesh) into a flat vertex list.
        """
        if triangles is None:
            triangles = mesh.triangles
        return [self.expand_corner(mesh, idx) for idx in rewound_corners(triangles)]

    def expand_submeshes(self, mesh: SourceMesh) -> Tuple[List[ExpandedVertex], List[Tuple[int, int]]]:
        """
        De-index each submesh in turn; returns (vertices, [(start, count), ...]).
        Falls back to a single range over the whole mesh when the mesh carries
        no per-submesh triangle lists.
        """
        if not mesh.submesh_triangles:
            vertices = self.expand(mesh)
            return vertices, [(0, len(vertices))]

        vertices: List[ExpandedVertex] = []
        ranges: List[Tuple[int, int]] = []
        for tris in mesh.submesh_triangles:
            start = len(vertices)
            vertices.extend(self.expand(mesh, tris))
            ranges.append((start, len(vertices) - start))
        return vertices, ranges

    def expand_corner(self, mesh: SourceMesh, idx: int) -> ExpandedVertex:
        if idx < 0 or idx >= len(mesh.positions):
            raise MeshEncodingError(
                f"Triangle index {idx} out of range (vertex count {len(mesh.positions)})",
                mesh.name,
            )
        position = self.converter.convert_position(mesh.positions[idx])
        normal = self.converter.convert_normal(_lookup(mesh.normals, idx, DEFAULT_NORMAL))
        uv = _lookup(mesh.uvs, idx, DEFAULT_UV)
        color = _lookup(mesh.colors, idx, DEFAULT_COLOR)
        return ExpandedVertex(
            position=position,
            uv=(float(uv[0]), float(uv[1])),
            color=_rgba(color),
            normal=normal,
        )


def _rgba(color: Iterable[float]) -> Tuple[float, float, float, float]:
    c = tuple(float(v) for v in color)
    if len(c) == 3:
        return c + (1.0,)
    return c[:4]
