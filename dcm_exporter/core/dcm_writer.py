# -*- coding: utf-8 -*-
"""
DCM Blender Exporter - DCM File Writer (file assembler)

- Strictly sequential, non-restartable state machine per file:
    INIT -> HEADER_WRITTEN -> MATERIALS_WRITTEN -> PER_MESH_LOOP -> DONE
- Collects export targets with resolvable geometry and the identity-deduplicated
  material list before anything is written, so header counts always match
  the records that follow
- File layout:
    FileHeader | MaterialRecord* | (MeshRecord, Vertex*, SubMeshRecord*)*
- Any I/O or encoding fault aborts the whole file
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, List, Optional, Sequence, Tuple

from .binary_writer import BinaryWriter
from .coordinate_converter import CoordinateConverter, policy_for_axis_mode
from .errors import (
    ExportIOError,
    IndexOverflowError,
    MeshEncodingError,
    MissingMaterialError,
    UnresolvableMeshError,
)
from .material_writer import MaterialWriter
from .mesh_deindexer import MeshDeindexer
from .schema import (
    DataFlags,
    DataHeader,
    ExportTarget,
    FileHeader,
    MeshRecord,
    SourceMaterial,
    SourceMesh,
)
from .submesh_writer import SubmeshWriter, plan_submeshes
from .vertex_writer import write_vertices
from ..config.constants import (
    DATA_LOCAL_ID,
    MAX_RECORD_COUNT,
    MAX_SUBMESH_INDICES,
    SUBMESH_FULL_STREAM,
)
from ..config.export_settings import ExportSettings


class AssemblerState(Enum):
    INIT = "init"
    HEADER_WRITTEN = "header_written"
    MATERIALS_WRITTEN = "materials_written"
    PER_MESH_LOOP = "per_mesh_loop"
    DONE = "done"


@dataclass
class AssemblyReport:
    material_count: int = 0
    mesh_count: int = 0
    skipped_targets: List[str] = field(default_factory=list)
    vertex_counts: Dict[str, int] = field(default_factory=dict)
    submesh_counts: Dict[str, int] = field(default_factory=dict)
    bytes_written: int = 0


class DCMWriter:
    """
    One instance writes exactly one file.

    Usage:
        writer = DCMWriter(settings, logger)
        report = writer.write_file(path, targets)
    """

    def __init__(self, settings: Optional[ExportSettings] = None, logger=None):
        self.settings = settings or ExportSettings()
        self.logger = logger
        self.layout = self.settings.layout
        self.policy = policy_for_axis_mode(self.settings.axis_mode)

        self.material_writer = MaterialWriter(self.settings.texture_extension, self.layout, logger)
        self.submesh_writer = SubmeshWriter(self.layout)

        self.state = AssemblerState.INIT
        self.meshes: List[Tuple[ExportTarget, SourceMesh]] = []
        self.materials: List[SourceMaterial] = []
        self.report = AssemblyReport()

    # ====== state handling ======
    def _advance(self, expected: AssemblerState, next_state: AssemblerState) -> None:
        if self.state != expected:
            raise RuntimeError(f"DCMWriter: expected state {expected.value}, got {self.state.value}")
        self.state = next_state

    def _log(self, level: str, message: str, context: Optional[str] = None) -> None:
        if self.logger:
            getattr(self.logger, level)(message, context)

    # ====== INIT: collect targets and materials ======
    def collect(self, targets: Sequence[ExportTarget]) -> None:
        """
        Resolve geometry per target and gather unique materials (by identity,
        in first-seen order). Targets without geometry are skipped.
        """
        if self.state != AssemblerState.INIT:
            raise RuntimeError("DCMWriter: collect() is only allowed before the header is written")

        self.meshes = []
        self.materials = []
        seen = set()

        for target in targets:
            mesh = target.resolve_mesh()
            if mesh is None:
                self._log("warning", f"No mesh geometry on '{target.name}', skipping",
                          UnresolvableMeshError.code)
                self.report.skipped_targets.append(target.name)
                continue
            self.meshes.append((target, mesh))

            for mat in target.materials:
                if mat is None:
                    self._log("warning", f"Empty material slot on '{target.name}', skipping",
                              MissingMaterialError.code)
                    continue
                if id(mat) in seen:
                    continue
                seen.add(id(mat))
                self.materials.append(mat)

        if len(self.materials) > MAX_RECORD_COUNT:
            raise MeshEncodingError(f"Too many materials: {len(self.materials)} (max {MAX_RECORD_COUNT})")
        if len(self.meshes) > MAX_RECORD_COUNT:
            raise MeshEncodingError(f"Too many meshes: {len(self.meshes)} (max {MAX_RECORD_COUNT})")

    def build_header(self) -> FileHeader:
        return FileHeader(material_count=len(self.materials), mesh_count=len(self.meshes))

    # ====== HEADER_WRITTEN ======
    def write_header(self, binw: BinaryWriter) -> FileHeader:
        """
        File header layout (16 bytes):
        - magic "DCM" (3 bytes)
        - version, material_count, mesh_count, armature_count, animation_count (u8)
        - pos, tex0, tex1, color, offset colour, normal formats (u8)
        - index size, bone weights format (u8)
        """
        self._advance(AssemblerState.INIT, AssemblerState.HEADER_WRITTEN)
        header = self.build_header()
        binw.write_bytes(header.magic)
        for name in FileHeader.FIELD_ORDER:
            binw.write_u8(int(getattr(header, name)))
        self.report.material_count = header.material_count
        self.report.mesh_count = header.mesh_count
        return header

    # ====== MATERIALS_WRITTEN ======
    def write_materials(self, binw: BinaryWriter) -> None:
        self._advance(AssemblerState.HEADER_WRITTEN, AssemblerState.MATERIALS_WRITTEN)
        for mat in self.materials:
            self.material_writer.write_material(binw, mat)

    # ====== PER_MESH_LOOP ======
    def write_meshes(self, binw: BinaryWriter) -> None:
        self._advance(AssemblerState.MATERIALS_WRITTEN, AssemblerState.PER_MESH_LOOP)
        for target, mesh in self.meshes:
            self.write_mesh(binw, target, mesh)

    def write_mesh(self, binw: BinaryWriter, target: ExportTarget, mesh: SourceMesh) -> None:
        if self.state != AssemblerState.PER_MESH_LOOP:
            raise RuntimeError("DCMWriter: meshes are written after the materials")

        converter = CoordinateConverter.from_transform(target.transform, self.policy)
        deindexer = MeshDeindexer(converter)

        if self.settings.submesh_policy == SUBMESH_FULL_STREAM:
            vertices = deindexer.expand(mesh)
            submeshes = plan_submeshes(SUBMESH_FULL_STREAM, mesh.name, mesh.submesh_count, len(vertices))
        else:
            vertices, ranges = deindexer.expand_submeshes(mesh)
            submeshes = plan_submeshes(
                self.settings.submesh_policy, mesh.name, len(ranges), len(vertices),
                ranges=ranges, material_ids=self._submesh_material_ids(target, len(ranges)),
            )

        # Reject before anything of this mesh hits the stream
        if len(submeshes) > MAX_RECORD_COUNT:
            raise MeshEncodingError(f"Too many submeshes: {len(submeshes)}", target.name)
        for sm in submeshes:
            if sm.index_count > MAX_SUBMESH_INDICES:
                raise IndexOverflowError(
                    f"Mesh '{target.name}' has {sm.index_count} de-indexed vertices in one submesh "
                    f"(max {MAX_SUBMESH_INDICES})",
                    target.name,
                )

        record = MeshRecord(
            header=DataHeader(flags=DataFlags.INTERNAL, local_id=DATA_LOCAL_ID, path=target.name),
            submesh_count=len(submeshes),
            vertex_count=len(vertices),
        )
        self.write_mesh_header(binw, record)
        write_vertices(binw, vertices)
        for sm in submeshes:
            self.submesh_writer.write_submesh(binw, sm)

        self.report.vertex_counts[target.name] = record.vertex_count
        self.report.submesh_counts[target.name] = record.submesh_count
        self._log("info", f"Mesh '{target.name}': {record.vertex_count} vertices, "
                          f"{record.submesh_count} submesh(es)")

    def write_mesh_header(self, binw: BinaryWriter, record: MeshRecord) -> None:
        """
        Mesh layout:
        - flags (u8), local id (u8), object name (fixed string, layout.mesh_name)
        - submesh count (u8)
        - vertex count (u32)
        """
        binw.write_u8(record.header.flags)
        binw.write_u8(record.header.local_id)
        binw.write_fixed_string(record.header.path, self.layout.mesh_name)
        binw.write_u8(record.submesh_count)
        binw.write_u32(record.vertex_count)

    def _submesh_material_ids(self, target: ExportTarget, count: int) -> List[Optional[int]]:
        ids: List[Optional[int]] = []
        for i in range(count):
            mat = target.submesh_materials[i] if i < len(target.submesh_materials) else None
            ids.append(self._material_index(mat))
        return ids

    def _material_index(self, mat: Optional[SourceMaterial]) -> Optional[int]:
        if mat is None:
            return None
        for i, m in enumerate(self.materials):
            if m is mat:
                return i
        return None

    # ====== DONE ======
    def finish(self, binw: BinaryWriter) -> AssemblyReport:
        self._advance(AssemblerState.PER_MESH_LOOP, AssemblerState.DONE)
        self.report.bytes_written = binw.tell()
        return self.report

    # ====== Public entry points ======
    def write_stream(self, stream: BinaryIO, targets: Sequence[ExportTarget]) -> AssemblyReport:
        binw = BinaryWriter(stream)
        self.collect(targets)
        self.write_header(binw)
        self.write_materials(binw)
        self.write_meshes(binw)
        return self.finish(binw)

    def write_file(self, path: str, targets: Sequence[ExportTarget]) -> AssemblyReport:
        """
        Write a complete DCM file. The file handle is closed on every exit
        path; on failure the partially written file is left for the caller
        to discard.
        """
        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(path, 'wb') as f:
                return self.write_stream(f, targets)
        except OSError as e:
            raise ExportIOError(f"Couldn't write DCM file '{path}': {e}") from e
