# File: preferences.py
# Purpose: DCM 导出插件偏好设置（AddonPreferences）
# Notes:
# - 定义导出默认行为（纹理扩展名、导出范围、坐标模式、子网格策略、字段宽度、校验与审计）
# - 记住上次导出的目录与文件名（由 export_operator 读写并保存用户偏好）
# - 偏好设置不直接执行导出，仅通过 ExportSettings.from_preferences 提供配置

import os

import bpy
from bpy.types import AddonPreferences
from bpy.props import (
    BoolProperty,
    EnumProperty,
    StringProperty
)

from .config.constants import (
    DEFAULT_FILENAME,
    SCOPE_ACTIVE_OBJECT,
    SCOPE_SELECTED,
    SCOPE_SELECTED_WITH_CHILDREN,
    AXIS_MIRROR_X,
    AXIS_Z_UP_SWAP,
    SUBMESH_FULL_STREAM,
    SUBMESH_PARTITIONED,
    LEGACY_LAYOUT,
    COMPACT_LAYOUT,
)


class DCMAddonPreferences(AddonPreferences):
    bl_idname = __package__ if __package__ else "dcm_exporter"

    # —— 上次导出位置 ——
    prev_folder_path: StringProperty(
        name="上次导出目录",
        subtype='DIR_PATH',
        default=""
    )
    prev_file_name: StringProperty(
        name="上次导出文件名",
        default=DEFAULT_FILENAME
    )

    # —— 纹理与范围 ——
    treat_textures_as_dtex: BoolProperty(
        name="纹理使用 .dtex",
        description="材质纹理路径使用 Dreamcast .dtex 扩展名（否则使用 .png）",
        default=True
    )
    export_scope: EnumProperty(
        name="导出范围",
        items=[
            (SCOPE_ACTIVE_OBJECT, "活动对象", "只导出当前活动对象"),
            (SCOPE_SELECTED, "选中对象", "导出所有选中对象（不含子对象）"),
            (SCOPE_SELECTED_WITH_CHILDREN, "选中对象及子对象", "导出选中对象及其全部子对象"),
        ],
        default=SCOPE_ACTIVE_OBJECT
    )

    # —— 坐标与格式 ——
    axis_mode: EnumProperty(
        name="坐标模式",
        items=[
            (AXIS_Z_UP_SWAP, "Z-up → Y-up", "(x, y, z) → (x, z, y)"),
            (AXIS_MIRROR_X, "X 镜像", "(x, y, z) → (-x, y, z)"),
        ],
        default=AXIS_Z_UP_SWAP
    )
    submesh_policy: EnumProperty(
        name="子网格策略",
        items=[
            (SUBMESH_FULL_STREAM, "整体索引", "每个子网格引用全部顶点（兼容现有输出）"),
            (SUBMESH_PARTITIONED, "按材质划分", "每个子网格只引用自己的顶点区间"),
        ],
        default=SUBMESH_FULL_STREAM
    )
    record_layout: EnumProperty(
        name="字段宽度",
        items=[
            (LEGACY_LAYOUT.name, "兼容 (128)", "网格/子网格名称使用 128 字节"),
            (COMPACT_LAYOUT.name, "紧凑 (32)", "网格/子网格名称使用 32 字节"),
        ],
        default=LEGACY_LAYOUT.name
    )

    # —— 校验与日志 ——
    auto_validate: BoolProperty(
        name="导出后结构校验",
        default=True
    )
    write_audit: BoolProperty(
        name="生成 audit.log",
        default=False
    )

    def draw(self, context):
        layout = self.layout

        box = layout.box()
        box.label(text="导出选项", icon='EXPORT')
        col = box.column(align=True)
        col.prop(self, "export_scope")
        col.prop(self, "treat_textures_as_dtex")

        box = layout.box()
        box.label(text="坐标与格式", icon='ORIENTATION_GLOBAL')
        col = box.column(align=True)
        col.prop(self, "axis_mode")
        col.prop(self, "submesh_policy")
        col.prop(self, "record_layout")

        box = layout.box()
        box.label(text="校验与日志", icon='TEXT')
        col = box.column(align=True)
        col.prop(self, "auto_validate")
        col.prop(self, "write_audit")


def get_preferences(context) -> DCMAddonPreferences:
    return context.preferences.addons[DCMAddonPreferences.bl_idname].preferences


def remember_export_path(context, filepath: str) -> None:
    """记录上次导出位置并保存用户偏好"""
    prefs = get_preferences(context)
    prefs.prev_folder_path = os.path.dirname(filepath)
    prefs.prev_file_name = os.path.basename(filepath)
    bpy.ops.wm.save_userpref()


def register():
    bpy.utils.register_class(DCMAddonPreferences)


def unregister():
    bpy.utils.unregister_class(DCMAddonPreferences)
