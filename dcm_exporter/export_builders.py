# File: export_builders.py
# Purpose: 从 Blender 对象构建 DCM 导出源数据
# Notes:
# - 按导出范围收集对象（活动对象 / 选中对象 / 选中对象及子对象）
# - 网格展开到 loop（角点）域：每个 loop 一个源顶点，三角形取 loop_triangles
# - 子网格按材质槽分组
# - 材质映射为属性包（ambient/diffuse/specular/emission/shininess）+ 主纹理名

import os
from typing import List, Optional, Tuple

import bpy

from .config.constants import (
    SCOPE_ACTIVE_OBJECT,
    SCOPE_SELECTED,
    SCOPE_SELECTED_WITH_CHILDREN,
)
from .core.schema import ExportTarget, SourceMaterial, SourceMesh, WorldTransform

# 可转换为网格的非网格对象类型（使用求值后的网格）
CONVERTIBLE_TYPES = {'CURVE', 'SURFACE', 'FONT', 'META'}


def collect_objects(context, scope: str) -> List[bpy.types.Object]:
    """
    按导出范围收集对象，过滤掉没有几何的对象
    """
    result: List[bpy.types.Object] = []

    if scope == SCOPE_ACTIVE_OBJECT:
        if context.active_object is not None:
            result.append(context.active_object)
    elif scope == SCOPE_SELECTED:
        result.extend(context.selected_objects)
    elif scope == SCOPE_SELECTED_WITH_CHILDREN:
        for obj in context.selected_objects:
            if obj not in result:
                result.append(obj)
            for child in obj.children_recursive:
                if child not in result:
                    result.append(child)

    return [obj for obj in result if obj.type == 'MESH' or obj.type in CONVERTIBLE_TYPES]


class MaterialBuilder:
    """
    Blender Material → SourceMaterial（按材质身份缓存，保证去重按身份）
    """

    def __init__(self):
        self._cache = {}

    def build(self, mat: Optional[bpy.types.Material]) -> Optional[SourceMaterial]:
        if mat is None:
            return None
        key = mat.as_pointer()
        if key not in self._cache:
            self._cache[key] = self._build(mat)
        return self._cache[key]

    @staticmethod
    def _build(mat: bpy.types.Material) -> SourceMaterial:
        props = {}
        texture_name = None

        # 视口显示属性
        props["diffuse"] = tuple(mat.diffuse_color)
        props["specular"] = tuple(mat.specular_color) + (1.0,)

        bsdf = MaterialBuilder._principled_node(mat)
        if bsdf is not None:
            base = bsdf.inputs.get("Base Color")
            if base is not None:
                props["diffuse"] = tuple(base.default_value)
                texture_name = MaterialBuilder._linked_image_name(base)
            emission = bsdf.inputs.get("Emission Color") or bsdf.inputs.get("Emission")
            if emission is not None:
                props["emission"] = tuple(emission.default_value)

        # 自定义属性覆盖（如 mat["ambient"] = (r, g, b, a)，mat["shininess"] = 32.0）
        for key in ("ambient", "diffuse", "specular", "emission", "shininess"):
            if key in mat.keys():
                value = mat[key]
                props[key] = float(value) if key == "shininess" else tuple(value)

        return SourceMaterial(name=mat.name, properties=props, texture_name=texture_name)

    @staticmethod
    def _principled_node(mat: bpy.types.Material):
        if not mat.use_nodes or mat.node_tree is None:
            return None
        for node in mat.node_tree.nodes:
            if node.type == 'BSDF_PRINCIPLED':
                return node
        return None

    @staticmethod
    def _linked_image_name(socket) -> Optional[str]:
        for link in socket.links:
            node = link.from_node
            if node.type == 'TEX_IMAGE' and node.image is not None:
                return os.path.splitext(node.image.name)[0]
        return None


class TargetBuilder:
    """
    Blender Object → ExportTarget
    """

    def __init__(self, context):
        self.context = context
        self.materials = MaterialBuilder()

    def build_all(self, objects: List[bpy.types.Object]) -> List[ExportTarget]:
        return [self.build(obj) for obj in objects]

    def build(self, obj: bpy.types.Object) -> ExportTarget:
        loc, rot, scale = obj.matrix_world.decompose()
        transform = WorldTransform(
            scale=tuple(scale),
            rotation=(rot.w, rot.x, rot.y, rot.z),
            translation=tuple(loc),
        )

        slot_materials = [self.materials.build(slot.material) for slot in obj.material_slots]
        target = ExportTarget(
            name=obj.name,
            transform=transform,
            materials=list(slot_materials),
            submesh_materials=list(slot_materials),
        )

        if obj.type == 'MESH' and obj.data is not None:
            target.mesh = self._build_mesh(obj.data.name, obj.data)
        elif obj.type in CONVERTIBLE_TYPES:
            # 求值后的网格作为变形网格来源（mesh 留空）
            depsgraph = self.context.evaluated_depsgraph_get()
            obj_eval = obj.evaluated_get(depsgraph)
            mesh = obj_eval.to_mesh()
            if mesh is not None:
                try:
                    target.skinned_mesh = self._build_mesh(obj.data.name, mesh)
                finally:
                    obj_eval.to_mesh_clear()
        return target

    # ====== geometry ======

    def _build_mesh(self, name: str, mesh: bpy.types.Mesh) -> SourceMesh:
        mesh.calc_loop_triangles()
        normals = self._corner_normals(mesh)

        positions = [tuple(mesh.vertices[loop.vertex_index].co) for loop in mesh.loops]

        uvs = None
        uv_layer = mesh.uv_layers.active
        if uv_layer is not None:
            uvs = [tuple(d.uv) for d in uv_layer.data]

        colors = self._corner_colors(mesh)

        triangles: List[int] = []
        slot_count = max(len(mesh.materials), 1)
        buckets: List[List[int]] = [[] for _ in range(slot_count)]
        for lt in mesh.loop_triangles:
            corners = (lt.loops[0], lt.loops[1], lt.loops[2])
            triangles.extend(corners)
            slot = min(lt.material_index, slot_count - 1)
            buckets[slot].extend(corners)

        return SourceMesh(
            name=name,
            triangles=triangles,
            positions=positions,
            normals=normals,
            uvs=uvs,
            colors=colors,
            submesh_count=slot_count,
            submesh_triangles=buckets,
        )

    @staticmethod
    def _corner_normals(mesh: bpy.types.Mesh) -> List[Tuple[float, float, float]]:
        # Blender 4.1+ 提供 corner_normals；旧版本需要先计算 split normals
        if hasattr(mesh, "corner_normals"):
            return [tuple(n.vector) for n in mesh.corner_normals]
        mesh.calc_normals_split()
        return [tuple(loop.normal) for loop in mesh.loops]

    @staticmethod
    def _corner_colors(mesh: bpy.types.Mesh) -> Optional[List[Tuple[float, float, float, float]]]:
        attr = mesh.color_attributes.active_color if hasattr(mesh, "color_attributes") else None
        if attr is None:
            return None
        if attr.domain == 'CORNER':
            return [tuple(d.color) for d in attr.data]
        if attr.domain == 'POINT':
            return [tuple(attr.data[loop.vertex_index].color) for loop in mesh.loops]
        return None
