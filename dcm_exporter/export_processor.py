# File: export_processor.py
# Purpose: 统一导出处理器
# Notes:
# - 一次调用导出一个完整的 .dcm 文件（不可取消、不重试）
# - 前置校验：配置合法、宿主状态允许导出、存在导出对象
# - 失败时删除不完整的输出文件
# - 可选：导出后结构校验、audit.log

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .config.constants import EXT_AUDIT
from .config.export_settings import ExportSettings
from .core.dcm_writer import AssemblyReport, DCMWriter
from .core.errors import (
    ERROR_CODES,
    ConfigurationError,
    DCMExportError,
    ExportIOError,
    NoExportTargetsError,
)
from .core.schema import ExportTarget
from .utils.logger import Logger
from .validators.structure_checker import StructureChecker
from .writers.audit_writer import AuditLogger


class ExportStatus(Enum):
    SUCCESS = "success"
    NO_TARGETS = "no_targets"
    CONFIG_ERROR = "config_error"
    FAILED = "failed"


@dataclass
class HostState:
    """宿主运行状态（由宿主层填写）"""
    is_playing: bool = False
    in_edit_mode: bool = False


@dataclass
class ExportResult:
    status: ExportStatus
    filepath: str
    message: str = ""
    error_code: str = ""
    mesh_count: int = 0
    material_count: int = 0
    skipped_targets: List[str] = field(default_factory=list)
    structure_report: Optional[dict] = None

    @property
    def success(self) -> bool:
        return self.status == ExportStatus.SUCCESS


class ExportProcessor:
    """
    统一导出处理器

    串联配置校验 → 文件写入 → 结构校验 → 审计日志
    """

    def __init__(self, settings: Optional[ExportSettings] = None, logger: Optional[Logger] = None):
        self.settings = settings or ExportSettings()
        self.logger = logger or Logger()

    def check_host_state(self, host_state: Optional[HostState]) -> None:
        if host_state is None:
            return
        if host_state.is_playing:
            raise ConfigurationError(
                "Exporting is not allowed while animation playback is running. "
                "Please stop playback and try again."
            )
        if host_state.in_edit_mode:
            raise ConfigurationError("Exporting is not allowed in Edit Mode. Switch to Object Mode and try again.")

    def export(self, filepath: str, targets: Sequence[ExportTarget],
               host_state: Optional[HostState] = None) -> ExportResult:
        """
        导出 targets 到 filepath

        参数:
            filepath: 输出 .dcm 路径
            targets: 导出对象（由宿主场景层构建）
            host_state: 宿主状态，用于阻断不允许导出的状态

        返回:
            ExportResult
        """
        rejected = self._preflight(filepath, targets, host_state)
        if rejected is not None:
            return rejected

        # audit.log 只在进入写入阶段后生成
        audit = AuditLogger(filepath + EXT_AUDIT) if self.settings.write_audit else None
        self.logger.bind_audit(audit)
        try:
            return self._export(filepath, targets)
        finally:
            self.logger.bind_audit(None)
            if audit:
                try:
                    audit.save()
                except OSError as e:
                    self.logger.error(f"Couldn't write audit log {audit.filepath}: {e}", ExportIOError.code)

    def _preflight(self, filepath: str, targets: Sequence[ExportTarget],
                   host_state: Optional[HostState]) -> Optional[ExportResult]:
        """写入前的校验；返回 None 表示可以导出"""
        try:
            self.settings.validate()
            self.check_host_state(host_state)
        except ConfigurationError as e:
            self.logger.error(str(e), e.code)
            return ExportResult(ExportStatus.CONFIG_ERROR, filepath, str(e), e.code)

        if not any(t.resolve_mesh() is not None for t in targets):
            msg = "No objects found to export with current settings."
            self.logger.warning(msg, NoExportTargetsError.code)
            return ExportResult(ExportStatus.NO_TARGETS, filepath, msg, NoExportTargetsError.code)
        return None

    def _export(self, filepath: str, targets: Sequence[ExportTarget]) -> ExportResult:
        self.logger.info(f"Exporting {len(targets)} object(s) to {filepath}")
        self.logger.info(f"Settings: {self.settings!r}")

        writer = DCMWriter(self.settings, self.logger)
        try:
            report = writer.write_file(filepath, targets)
        except DCMExportError as e:
            self.logger.error(f"Export failed: {e}", e.code)
            self._discard(filepath)
            return ExportResult(ExportStatus.FAILED, filepath, str(e), e.code)
        except Exception as e:
            code = ERROR_CODES["EXPORT_EXCEPTION"]
            self.logger.error(f"Export failed: {type(e).__name__}: {e}", code)
            self._discard(filepath)
            return ExportResult(ExportStatus.FAILED, filepath, str(e), code)

        result = self._success(filepath, report)

        if self.settings.auto_validate:
            structure = StructureChecker(self.settings.layout).check_dcm_file(filepath)
            result.structure_report = structure
            for w in structure["warnings"]:
                self.logger.warning(w)
            if structure["errors"]:
                for err in structure["errors"]:
                    self.logger.error(err, ERROR_CODES["STR_MISMATCH"])
                self._discard(filepath)
                result.status = ExportStatus.FAILED
                result.message = "Structure check failed: " + "; ".join(structure["errors"])
                result.error_code = ERROR_CODES["STR_MISMATCH"]

        return result

    def _success(self, filepath: str, report: AssemblyReport) -> ExportResult:
        msg = f"Successfully exported {report.mesh_count} meshes to {os.path.basename(filepath)}"
        self.logger.info(msg)
        return ExportResult(
            ExportStatus.SUCCESS,
            filepath,
            msg,
            mesh_count=report.mesh_count,
            material_count=report.material_count,
            skipped_targets=list(report.skipped_targets),
        )

    def _discard(self, filepath: str) -> None:
        """删除不完整的输出文件"""
        try:
            if os.path.exists(filepath):
                os.remove(filepath)
                self.logger.info(f"Removed incomplete file {filepath}")
        except OSError as e:
            self.logger.error(f"Couldn't remove incomplete file {filepath}: {e}", ExportIOError.code)
