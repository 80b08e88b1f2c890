# -*- coding: utf-8 -*-
# File: core/__init__.py
# Purpose: Core 模块初始化

"""
DCM Exporter Core Module
包含数据结构、坐标转换、去索引与各记录写入器（不依赖 bpy）
"""

__all__ = [
    'schema',
    'errors',
    'binary_writer',
    'coordinate_converter',
    'mesh_deindexer',
    'vertex_writer',
    'material_writer',
    'submesh_writer',
    'dcm_writer',
]
