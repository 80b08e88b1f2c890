# -*- coding: utf-8 -*-
"""
导出配置数据类
将UI属性转换为内部配置对象
"""

from .constants import (
    TEXTURE_EXT_DTEX,
    TEXTURE_EXT_PNG,
    TEXTURE_EXTENSIONS,
    SCOPE_ACTIVE_OBJECT,
    EXPORT_SCOPES,
    AXIS_MIRROR_X,
    AXIS_MODES,
    SUBMESH_FULL_STREAM,
    SUBMESH_POLICIES,
    LEGACY_LAYOUT,
    RECORD_LAYOUTS,
    RecordLayout,
)
from ..core.errors import ConfigurationError


class ExportSettings:
    """全局导出配置"""

    def __init__(self):
        self.texture_extension = TEXTURE_EXT_DTEX
        self.export_scope = SCOPE_ACTIVE_OBJECT
        self.axis_mode = AXIS_MIRROR_X
        self.submesh_policy = SUBMESH_FULL_STREAM
        self.record_layout = LEGACY_LAYOUT.name
        self.auto_validate = True
        self.write_audit = False

    @classmethod
    def from_preferences(cls, prefs):
        """从Blender偏好设置创建配置对象"""
        settings = cls()
        settings.texture_extension = TEXTURE_EXT_DTEX if prefs.treat_textures_as_dtex else TEXTURE_EXT_PNG
        settings.export_scope = prefs.export_scope
        settings.axis_mode = prefs.axis_mode
        settings.submesh_policy = prefs.submesh_policy
        settings.record_layout = prefs.record_layout
        settings.auto_validate = prefs.auto_validate
        settings.write_audit = prefs.write_audit
        return settings

    @property
    def layout(self) -> RecordLayout:
        return RECORD_LAYOUTS[self.record_layout]

    def validate(self) -> None:
        """校验配置取值，非法时在任何 IO 之前阻断导出"""
        if self.texture_extension not in TEXTURE_EXTENSIONS:
            raise ConfigurationError(f"Unsupported texture extension: {self.texture_extension!r}")
        if self.export_scope not in EXPORT_SCOPES:
            raise ConfigurationError(f"Unsupported export scope: {self.export_scope!r}")
        if self.axis_mode not in AXIS_MODES:
            raise ConfigurationError(f"Unsupported axis mode: {self.axis_mode!r}")
        if self.submesh_policy not in SUBMESH_POLICIES:
            raise ConfigurationError(f"Unsupported submesh policy: {self.submesh_policy!r}")
        if self.record_layout not in RECORD_LAYOUTS:
            raise ConfigurationError(f"Unknown record layout: {self.record_layout!r}")

    def __repr__(self):
        return (
            f"ExportSettings(texture_extension={self.texture_extension!r}, "
            f"export_scope={self.export_scope!r}, axis_mode={self.axis_mode!r}, "
            f"submesh_policy={self.submesh_policy!r}, record_layout={self.record_layout!r})"
        )
