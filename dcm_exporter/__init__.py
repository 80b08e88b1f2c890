# File: __init__.py
# Purpose: DCM Exporter 插件主入口
# Notes:
# - 插件注册和注销
# - bpy 相关模块在 register() 中导入，core/ 可脱离 Blender 使用

bl_info = {
    "name": "DCM (Dreamcast Mesh) Exporter",
    "author": "DCM Exporter Team",
    "version": (1, 0, 0),
    "blender": (4, 0, 0),
    "location": "File > Export > DCM (Dreamcast Mesh)",
    "description": "Export meshes and materials to the DCM (Dreamcast Mesh) format",
    "category": "Import-Export",
}


def register():
    """注册插件"""
    from . import preferences, export_operator

    preferences.register()
    export_operator.register()

    print("DCM Exporter 已注册")


def unregister():
    """注销插件"""
    from . import preferences, export_operator

    export_operator.unregister()
    preferences.unregister()

    print("DCM Exporter 已注销")


if __name__ == "__main__":
    register()
