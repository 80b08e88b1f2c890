# -*- coding: utf-8 -*-
"""
DCM Blender Exporter - Structure Checker
导出后的 .dcm 二进制结构校验（只校验，不构建场景数据）
- 文件头：magic / version / 格式码 / 计数
- 逐条走读 material / mesh / submesh 记录，核对计数与剩余字节
"""

from typing import Dict, Optional
import struct
import os

from ..config.constants import (
    DCM_MAGIC,
    DCM_CURRENT_VERSION,
    DCM_INDEX_SIZE,
    LEGACY_LAYOUT,
    RecordLayout,
)
from ..core.schema import FileHeader, SubMeshArrangement, SubMeshType

HEADER_SIZE = 16
VERTEX_SIZE = 36


def _cstr(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")


class StructureChecker:
    def __init__(self, layout: RecordLayout = LEGACY_LAYOUT):
        self.layout = layout
        self.expected_formats = FileHeader()

    def check_dcm_file(self, filepath: str) -> Dict:
        if not os.path.exists(filepath):
            return {"filepath": filepath, "header": None, "materials": [], "meshes": [],
                    "errors": [f"文件不存在: {filepath}"], "warnings": []}
        with open(filepath, "rb") as f:
            report = self.check_dcm_bytes(f.read())
        report["filepath"] = filepath
        return report

    def check_dcm_bytes(self, data: bytes) -> Dict:
        report = {
            "filepath": None,
            "header": None,
            "materials": [],
            "meshes": [],
            "errors": [],
            "warnings": []
        }

        if len(data) < HEADER_SIZE:
            report["errors"].append(f"文件过短: {len(data)} 字节")
            return report

        header = self._read_header(data, report)
        report["header"] = header
        pos = HEADER_SIZE

        for _ in range(header["material_count"]):
            pos = self._read_material(data, pos, report)
            if pos is None:
                return report

        for _ in range(header["mesh_count"]):
            pos = self._read_mesh(data, pos, report)
            if pos is None:
                return report

        if pos != len(data):
            report["errors"].append(f"文件尾部存在 {len(data) - pos} 个未声明的字节")

        return report

    # ========== 记录走读 ==========

    def _read_header(self, data: bytes, report: Dict) -> Dict:
        magic = data[0:3]
        values = struct.unpack_from("<13B", data, 3)
        header = dict(zip(FileHeader.FIELD_ORDER, values))
        header["magic"] = magic

        if magic != DCM_MAGIC:
            report["errors"].append(f"Magic 错误: {magic!r}")
        if header["version"] != DCM_CURRENT_VERSION:
            report["warnings"].append(f"未知版本: {header['version']}")
        if header["index_size"] != DCM_INDEX_SIZE:
            report["errors"].append(f"index_size 错误: {header['index_size']}")

        for name in ("pos_format", "tex0_format", "tex1_format", "color_format",
                     "offset_colour_format", "normal_format", "bone_weights_format",
                     "armature_count", "animation_count"):
            expected = int(getattr(self.expected_formats, name))
            if header[name] != expected:
                report["errors"].append(f"{name} 期望 {expected}, 实际 {header[name]}")
        return header

    def _need(self, data: bytes, pos: int, size: int, what: str, report: Dict) -> bool:
        if pos + size > len(data):
            report["errors"].append(f"{what} 记录被截断 (offset={pos})")
            return False
        return True

    def _read_material(self, data: bytes, pos: int, report: Dict) -> Optional[int]:
        lay = self.layout
        size = 2 + lay.material_path + 64 + 4 + 4 * lay.texture_map
        if not self._need(data, pos, size, "Material", report):
            return None
        flags, local_id = struct.unpack_from("<BB", data, pos)
        path = _cstr(data[pos + 2:pos + 2 + lay.material_path])
        report["materials"].append({"offset": pos, "flags": flags, "local_id": local_id, "path": path})
        return pos + size

    def _read_mesh(self, data: bytes, pos: int, report: Dict) -> Optional[int]:
        lay = self.layout
        head_size = 2 + lay.mesh_name + 1 + 4
        if not self._need(data, pos, head_size, "Mesh", report):
            return None
        name = _cstr(data[pos + 2:pos + 2 + lay.mesh_name])
        submesh_count, vertex_count = struct.unpack_from("<BI", data, pos + 2 + lay.mesh_name)
        mesh = {"offset": pos, "name": name, "vertex_count": vertex_count, "submeshes": []}
        report["meshes"].append(mesh)
        pos += head_size

        if not self._need(data, pos, vertex_count * VERTEX_SIZE, f"Mesh '{name}' 顶点", report):
            return None
        pos += vertex_count * VERTEX_SIZE

        for _ in range(submesh_count):
            sub_head = 2 + lay.submesh_name + 5
            if not self._need(data, pos, sub_head, f"Mesh '{name}' 子网格", report):
                return None
            sub_name = _cstr(data[pos + 2:pos + 2 + lay.submesh_name])
            material_id, arrangement, sub_type, index_count = struct.unpack_from(
                "<BBBH", data, pos + 2 + lay.submesh_name)
            pos += sub_head
            if not self._need(data, pos, index_count * 4, f"Mesh '{name}' 索引", report):
                return None
            indices = struct.unpack_from(f"<{index_count}I", data, pos)
            pos += index_count * 4

            if arrangement != SubMeshArrangement.TRIANGLES:
                report["warnings"].append(f"Mesh '{name}' 子网格排列方式 {arrangement}")
            if sub_type != SubMeshType.INDEXED:
                report["errors"].append(f"Mesh '{name}' 子网格类型 {sub_type} 不是 INDEXED")
            if indices and max(indices) >= vertex_count:
                report["errors"].append(f"Mesh '{name}' 索引引用超出顶点范围")
            if index_count % 3 != 0:
                report["errors"].append(f"Mesh '{name}' 索引数量不是 3 的倍数")

            mesh["submeshes"].append({
                "name": sub_name,
                "material_id": material_id,
                "index_count": index_count,
                "first_index": indices[0] if indices else None,
            })
        return pos


def validate_dcm_report(report: Dict) -> bool:
    """报告中存在错误时抛出 ValueError"""
    if report["errors"]:
        raise ValueError("; ".join(report["errors"]))
    return True
