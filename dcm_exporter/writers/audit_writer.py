# File: writers/audit_writer.py
# Purpose: 生成 audit.log，记录导出过程中的所有操作、错误、警告
# Notes:
# - 错误码见 core/errors.py（DCM-CFG / DCM-EXP / DCM-MSH / DCM-IO / DCM-MAT / DCM-STR）
# - 严重性：ERROR / WARNING / INFO
# - 格式：时间戳 | 严重性 | 错误码 | 消息 | 对象名

import time
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class AuditEntry:
    """审计日志条目"""
    code: str                           # 错误码（如 DCM-MSH-010）
    message: str
    severity: str                       # ERROR / WARNING / INFO
    object_name: Optional[str] = None
    timestamp: str = ""


class AuditLogger:
    """
    AuditLogger
    -----------
    用于生成 audit.log 文件，记录导出过程的所有操作、错误、警告。

    使用方式:
        audit = AuditLogger("output/mesh.dcm.audit.log")
        audit.info("开始导出", "Cube")
        audit.warning("DCM-MSH-010", "对象没有网格", "Empty")
        audit.error("DCM-IO-020", "无法写入文件")
        audit.save()
    """

    def __init__(self, filepath: str):
        self.filepath = filepath
        self.entries: List[AuditEntry] = []

    def _add_entry(self, severity: str, message: str,
                   code: str = "", object_name: Optional[str] = None) -> None:
        """内部方法：添加日志条目"""
        entry = AuditEntry(
            code=code,
            message=message,
            severity=severity,
            object_name=object_name,
            timestamp=time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        )
        self.entries.append(entry)

    def info(self, message: str, object_name: Optional[str] = None) -> None:
        """记录 INFO 级别日志"""
        self._add_entry("INFO", message, "", object_name)

    def warning(self, code: str, message: str, object_name: Optional[str] = None) -> None:
        """记录 WARNING 级别日志"""
        self._add_entry("WARNING", message, code, object_name)

    def error(self, code: str, message: str, object_name: Optional[str] = None) -> None:
        """记录 ERROR 级别日志"""
        self._add_entry("ERROR", message, code, object_name)

    def save(self) -> None:
        """保存 audit.log 到文件"""
        with open(self.filepath, "w", encoding="utf-8") as f:
            f.write("# DCM Export Audit Log\n")
            f.write(f"# Generated: {time.strftime('%Y-%m-%d %H:%M:%S', time.localtime())}\n")
            f.write("# Format: [Timestamp] [Severity] [Code] Message | Object\n")
            f.write("#" + "=" * 70 + "\n\n")

            for entry in self.entries:
                line = f"[{entry.timestamp}] [{entry.severity}]"
                if entry.code:
                    line += f" [{entry.code}]"
                line += f" {entry.message}"
                if entry.object_name:
                    line += f" | Object: {entry.object_name}"
                f.write(line + "\n")
