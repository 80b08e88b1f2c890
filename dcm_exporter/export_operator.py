# File: export_operator.py
# Purpose: DCM 导出入口 Operator（File → Export → DCM (Dreamcast Mesh)）
# Notes:
# - 读取插件偏好设置构造 ExportSettings
# - 按导出范围收集对象并构建 ExportTarget（export_builders.py）
# - 调用 ExportProcessor 执行导出，按结果 report 到 UI
# - 记住上次导出目录/文件名（偏好设置）

import os

import bpy
from bpy.types import Operator
from bpy.props import StringProperty
from bpy_extras.io_utils import ExportHelper

from .config.constants import EXT_DCM
from .config.export_settings import ExportSettings
from .export_builders import TargetBuilder, collect_objects
from .export_processor import ExportProcessor, ExportStatus, HostState
from .preferences import get_preferences, remember_export_path
from .utils.logger import Logger


class DCM_OT_export(Operator, ExportHelper):
    """Export objects to DCM (Dreamcast Mesh)"""
    bl_idname = "export_scene.dcm"
    bl_label = "Export DCM"
    bl_options = {'PRESET'}

    filename_ext = EXT_DCM

    filter_glob: StringProperty(
        default="*.dcm",
        options={'HIDDEN'}
    )

    def invoke(self, context, event):
        prefs = get_preferences(context)
        if prefs.prev_folder_path:
            self.filepath = os.path.join(prefs.prev_folder_path, prefs.prev_file_name)
        elif not self.filepath:
            self.filepath = prefs.prev_file_name
        context.window_manager.fileselect_add(self)
        return {'RUNNING_MODAL'}

    def execute(self, context):
        prefs = get_preferences(context)
        settings = ExportSettings.from_preferences(prefs)
        logger = Logger()

        host_state = HostState(
            is_playing=bool(context.screen and context.screen.is_animation_playing),
            in_edit_mode=context.mode != 'OBJECT',
        )

        objects = collect_objects(context, settings.export_scope)
        logger.info(f"导出范围: {settings.export_scope}")
        logger.info(f"对象列表: {[obj.name for obj in objects]}")

        targets = TargetBuilder(context).build_all(objects)

        processor = ExportProcessor(settings, logger)
        result = processor.export(self.filepath, targets, host_state)

        if result.status == ExportStatus.SUCCESS:
            remember_export_path(context, self.filepath)
            self.report({'INFO'}, result.message)
            return {'FINISHED'}
        if result.status == ExportStatus.NO_TARGETS:
            self.report({'WARNING'}, result.message)
            return {'CANCELLED'}

        self.report({'ERROR'}, f"[{result.error_code}] {result.message}")
        return {'CANCELLED'}


def menu_func_export(self, context):
    """添加到 File → Export 菜单"""
    self.layout.operator(DCM_OT_export.bl_idname, text="DCM (Dreamcast Mesh) (.dcm)")


def register():
    bpy.utils.register_class(DCM_OT_export)
    bpy.types.TOPBAR_MT_file_export.append(menu_func_export)


def unregister():
    bpy.types.TOPBAR_MT_file_export.remove(menu_func_export)
    bpy.utils.unregister_class(DCM_OT_export)
