# File: core/schema.py
# Purpose: DCM 导出数据结构定义（dataclass）
# Notes:
# - 文件侧记录：FileHeader / DataHeader / MaterialRecord / MeshRecord / SubMeshRecord
# - 源数据侧：WorldTransform / SourceMesh / SourceMaterial / ExportTarget
# - 枚举取值与 DCM 格式定义一致（骨骼/动画相关枚举保留但不使用）

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import MeshEncodingError
from ..config.constants import (
    DCM_MAGIC,
    DCM_CURRENT_VERSION,
    DCM_INDEX_SIZE,
    DATA_LOCAL_ID,
    DEFAULT_COLORS,
    DEFAULT_SHININESS,
)


# ==================== 枚举类型 ====================

class DataFlags(IntEnum):
    INTERNAL = 0x0
    EXTERNAL_LINK = 0x1


class PositionFormat(IntEnum):
    NONE = 0
    F2 = 1
    F3 = 2
    F4 = 3


class TexCoordFormat(IntEnum):
    NONE = 0
    F2 = 1
    US2 = 2


class ColorFormat(IntEnum):
    NONE = 0
    UB4 = 1
    F3 = 2
    F4 = 3


class NormalFormat(IntEnum):
    NONE = 0
    F3 = 1


class BoneWeightsFormat(IntEnum):
    NONE = 0
    UI_F3 = 1


class SubMeshArrangement(IntEnum):
    NONE = 0
    TRIANGLE_STRIP = 1
    TRIANGLES = 2


class SubMeshType(IntEnum):
    NONE = 0
    RANGED = 1
    INDEXED = 2


# ==================== 文件记录 ====================

@dataclass
class FileHeader:
    """DCM 文件头（16 字节），格式码固定为本导出器支持的子集"""
    material_count: int = 0
    mesh_count: int = 0
    armature_count: int = 0
    animation_count: int = 0
    magic: bytes = DCM_MAGIC
    version: int = DCM_CURRENT_VERSION
    pos_format: int = PositionFormat.F3
    tex0_format: int = TexCoordFormat.F2
    tex1_format: int = TexCoordFormat.NONE
    color_format: int = ColorFormat.UB4
    offset_colour_format: int = ColorFormat.NONE
    normal_format: int = NormalFormat.F3
    index_size: int = DCM_INDEX_SIZE
    bone_weights_format: int = BoneWeightsFormat.NONE

    # Wire order of the trailing u8 fields
    FIELD_ORDER = (
        "version", "material_count", "mesh_count", "armature_count", "animation_count",
        "pos_format", "tex0_format", "tex1_format", "color_format",
        "offset_colour_format", "normal_format", "index_size", "bone_weights_format",
    )


@dataclass
class DataHeader:
    """每个 material/mesh/submesh 记录前的地址头；path 是数据标识，不是文件路径"""
    flags: int = DataFlags.INTERNAL
    local_id: int = DATA_LOCAL_ID
    path: str = ""


@dataclass
class MaterialRecord:
    header: DataHeader
    texture_path: str
    ambient: Tuple[float, float, float, float] = DEFAULT_COLORS["ambient"]
    diffuse: Tuple[float, float, float, float] = DEFAULT_COLORS["diffuse"]
    specular: Tuple[float, float, float, float] = DEFAULT_COLORS["specular"]
    emission: Tuple[float, float, float, float] = DEFAULT_COLORS["emission"]
    shininess: float = DEFAULT_SHININESS
    diffuse_map: str = ""
    light_map: str = ""
    normal_map: str = ""
    specular_map: str = ""


@dataclass
class MeshRecord:
    header: DataHeader
    submesh_count: int
    vertex_count: int


@dataclass
class SubMeshVertexRange:
    """RANGED 子网格使用的顶点区间（本导出器不使用）"""
    start: int
    count: int


@dataclass
class SubMeshRecord:
    header: DataHeader
    material_id: int
    index_start: int
    index_count: int
    arrangement: int = SubMeshArrangement.TRIANGLES
    submesh_type: int = SubMeshType.INDEXED


@dataclass
class ExpandedVertex:
    """去索引后的单个三角形角点（已转换到 DCM 空间）"""
    position: Tuple[float, float, float]
    uv: Tuple[float, float]
    color: Tuple[float, float, float, float]
    normal: Tuple[float, float, float]


# ==================== 源数据（宿主场景侧） ====================

@dataclass
class WorldTransform:
    """对象世界变换；rotation 为单位四元数 (w, x, y, z)"""
    scale: Sequence[float] = (1.0, 1.0, 1.0)
    rotation: Sequence[float] = (1.0, 0.0, 0.0, 0.0)
    translation: Sequence[float] = (0.0, 0.0, 0.0)


@dataclass
class SourceMesh:
    """
    索引三角网格。
    positions/normals/uvs/colors 以顶点索引对齐；uvs/colors/normals 可为 None。
    submesh_triangles 为每个子网格的三角形角点索引（可选，PARTITIONED 策略使用）。
    """
    name: str
    triangles: Sequence[int]
    positions: Sequence[Sequence[float]]
    normals: Optional[Sequence[Sequence[float]]] = None
    uvs: Optional[Sequence[Sequence[float]]] = None
    colors: Optional[Sequence[Sequence[float]]] = None
    submesh_count: int = 1
    submesh_triangles: Optional[List[Sequence[int]]] = None


@dataclass(eq=False)
class SourceMaterial:
    """
    材质属性包。
    按通道名查询（ambient/diffuse/specular/emission 为 RGBA，shininess 为 float），
    缺失时返回 None，由编码器套用默认值。
    以对象身份比较（去重按身份，不按值）。
    """
    name: str
    properties: Dict[str, Any] = field(default_factory=dict)
    texture_name: Optional[str] = None

    def get_color(self, channel: str) -> Optional[Tuple[float, float, float, float]]:
        value = self.properties.get(channel)
        if value is None:
            return None
        rgba = tuple(float(c) for c in value)
        if len(rgba) == 3:
            rgba = rgba + (1.0,)
        if len(rgba) != 4:
            raise MeshEncodingError(
                f"Material '{self.name}' channel '{channel}' is not RGB/RGBA: {value!r}", self.name)
        return rgba

    def get_float(self, name: str) -> Optional[float]:
        value = self.properties.get(name)
        return None if value is None else float(value)


@dataclass(eq=False)
class ExportTarget:
    """
    导出对象。
    mesh 优先；mesh 为 None 时回退到 skinned_mesh。
    skinned_mesh 是求值后的变形网格：蒙皮网格，或曲线/曲面/文字/元球转换出的网格。
    submesh_materials 与子网格一一对应（可含 None）。
    """
    name: str
    transform: WorldTransform = field(default_factory=WorldTransform)
    mesh: Optional[SourceMesh] = None
    skinned_mesh: Optional[SourceMesh] = None
    materials: List[Optional[SourceMaterial]] = field(default_factory=list)
    submesh_materials: List[Optional[SourceMaterial]] = field(default_factory=list)

    def resolve_mesh(self) -> Optional[SourceMesh]:
        if self.mesh is not None:
            return self.mesh
        return self.skinned_mesh
