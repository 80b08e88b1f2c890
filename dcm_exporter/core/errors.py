# File: core/errors.py
# Purpose: DCM 导出错误类型与错误码
# Notes:
# - 所有异常均继承 DCMExportError，携带 code 字段用于 audit.log
# - 致命错误：ConfigurationError / ExportIOError / MeshEncodingError / IndexOverflowError
# - 局部恢复：UnresolvableMeshError（跳过对象）/ MissingMaterialError（跳过材质）

ERROR_CODES = {
    "CONFIG_INVALID": "DCM-CFG-001",
    "EXPORT_EMPTY": "DCM-EXP-000",
    "MESH_UNRESOLVABLE": "DCM-MSH-010",
    "MESH_ENCODING": "DCM-MSH-011",
    "INDEX_OVERFLOW": "DCM-MSH-012",
    "IO_FAILED": "DCM-IO-020",
    "MAT_MISSING": "DCM-MAT-030",
    "STR_MISMATCH": "DCM-STR-090",
    "EXPORT_EXCEPTION": "DCM-EXP-999",
}


class DCMExportError(Exception):
    """DCM 导出异常基类"""
    code = ERROR_CODES["EXPORT_EXCEPTION"]

    def __init__(self, message: str, object_name: str = None):
        super().__init__(message)
        self.object_name = object_name


class ConfigurationError(DCMExportError):
    """配置非法或宿主处于不允许导出的状态"""
    code = ERROR_CODES["CONFIG_INVALID"]


class NoExportTargetsError(DCMExportError):
    code = ERROR_CODES["EXPORT_EMPTY"]


class UnresolvableMeshError(DCMExportError):
    """对象没有可导出的网格"""
    code = ERROR_CODES["MESH_UNRESOLVABLE"]


class MeshEncodingError(DCMExportError):
    code = ERROR_CODES["MESH_ENCODING"]


class IndexOverflowError(MeshEncodingError):
    """子网格索引数超出 u16 范围"""
    code = ERROR_CODES["INDEX_OVERFLOW"]


class ExportIOError(DCMExportError):
    code = ERROR_CODES["IO_FAILED"]


class MissingMaterialError(DCMExportError):
    code = ERROR_CODES["MAT_MISSING"]
