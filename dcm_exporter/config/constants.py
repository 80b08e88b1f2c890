# -*- coding: utf-8 -*-
"""
DCM 常量定义
"""

from dataclasses import dataclass

# 文件头常量
DCM_MAGIC = b"DCM"
DCM_CURRENT_VERSION = 1
DCM_INDEX_SIZE = 4  # 32位索引

# DataHeader 常量
DATA_LOCAL_ID = 1
SUBMESH_LEGACY_MATERIAL_ID = 1

# 容量上限
MAX_RECORD_COUNT = 0xFF     # material_count / mesh_count / submesh_count 均为 u8
MAX_SUBMESH_INDICES = 0xFFFF  # index_count 为 u16

# 纹理扩展名
TEXTURE_EXT_DTEX = ".dtex"
TEXTURE_EXT_PNG = ".png"
TEXTURE_EXTENSIONS = (TEXTURE_EXT_DTEX, TEXTURE_EXT_PNG)
DEFAULT_TEXTURE_NAME = "material"

# 文件扩展名
EXT_DCM = ".dcm"
EXT_AUDIT = ".audit.log"
DEFAULT_FILENAME = "mesh.dcm"

# 导出范围
SCOPE_ACTIVE_OBJECT = "ACTIVE_OBJECT"
SCOPE_SELECTED = "SELECTED"
SCOPE_SELECTED_WITH_CHILDREN = "SELECTED_WITH_CHILDREN"
EXPORT_SCOPES = (SCOPE_ACTIVE_OBJECT, SCOPE_SELECTED, SCOPE_SELECTED_WITH_CHILDREN)

# 坐标模式
AXIS_MIRROR_X = "MIRROR_X"
AXIS_Z_UP_SWAP = "Z_UP_SWAP"
AXIS_MODES = (AXIS_MIRROR_X, AXIS_Z_UP_SWAP)

# 子网格划分策略
SUBMESH_FULL_STREAM = "FULL_STREAM"
SUBMESH_PARTITIONED = "PARTITIONED"
SUBMESH_POLICIES = (SUBMESH_FULL_STREAM, SUBMESH_PARTITIONED)

# 默认值（按通道名）
DEFAULT_COLORS = {
    "ambient": (1.0, 1.0, 1.0, 1.0),
    "diffuse": (1.0, 1.0, 1.0, 1.0),
    "specular": (0.0, 0.0, 0.0, 1.0),
    "emission": (0.0, 0.0, 0.0, 1.0),
}
DEFAULT_SHININESS = 0.0

DEFAULT_UV = (0.0, 0.0)
DEFAULT_COLOR = (1.0, 1.0, 1.0, 1.0)
DEFAULT_NORMAL = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class RecordLayout:
    """固定长度字符串字段宽度（按记录类型）"""
    name: str
    material_path: int     # MaterialRecord 的纹理名/路径
    texture_map: int       # diffuse/light/normal/specular map 名
    mesh_name: int         # Mesh DataHeader path
    submesh_name: int      # SubMesh DataHeader path


# 与现有导出结果逐字节一致
LEGACY_LAYOUT = RecordLayout("LEGACY", material_path=128, texture_map=32, mesh_name=128, submesh_name=128)
# 网格/子网格名称 32 字节
COMPACT_LAYOUT = RecordLayout("COMPACT", material_path=128, texture_map=32, mesh_name=32, submesh_name=32)

RECORD_LAYOUTS = {
    LEGACY_LAYOUT.name: LEGACY_LAYOUT,
    COMPACT_LAYOUT.name: COMPACT_LAYOUT,
}
