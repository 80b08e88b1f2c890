# File: writers/__init__.py
# Purpose: Writers 模块初始化

"""
DCM Exporter Writers Module
导出附属文件写入器
"""

__all__ = [
    'audit_writer',
]
