# File: core/coordinate_converter.py
# Purpose: 坐标系转换（宿主场景空间 → DCM 空间）
# Notes:
# - 顺序固定：缩放 → 旋转 → 平移（仅位置）→ 轴重排/镜像
# - 法线等方向向量不做平移，但同样经过缩放、旋转与镜像
# - 轴重排与符号翻转由 ConversionPolicy 显式给出，便于独立测试

from dataclasses import dataclass
from typing import Sequence, Tuple

from mathutils import Vector, Quaternion

from ..config.constants import AXIS_MIRROR_X, AXIS_Z_UP_SWAP


@dataclass(frozen=True)
class ConversionPolicy:
    """
    轴转换策略

    result[i] = signs[i] * v[axes[i]]
    """
    axes: Tuple[int, int, int] = (0, 1, 2)
    signs: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    def apply(self, v: Sequence[float]) -> Tuple[float, float, float]:
        return (
            self.signs[0] * v[self.axes[0]],
            self.signs[1] * v[self.axes[1]],
            self.signs[2] * v[self.axes[2]],
        )

    @property
    def is_reflection(self) -> bool:
        """奇数次反射会翻转三角形绕序"""
        perm_parity = _permutation_parity(self.axes)
        sign_flips = sum(1 for s in self.signs if s < 0)
        return (perm_parity + sign_flips) % 2 == 1


def _permutation_parity(axes: Sequence[int]) -> int:
    swaps = 0
    order = list(axes)
    for i in range(len(order)):
        while order[i] != i:
            j = order[i]
            order[i], order[j] = order[j], order[i]
            swaps += 1
    return swaps % 2


# 左手 Y-up（X 镜像）
MIRROR_X = ConversionPolicy(axes=(0, 1, 2), signs=(-1.0, 1.0, 1.0))
# Blender Z-up：(x, y, z) → (x, z, y)
Z_UP_SWAP = ConversionPolicy(axes=(0, 2, 1), signs=(1.0, 1.0, 1.0))

POLICIES = {
    AXIS_MIRROR_X: MIRROR_X,
    AXIS_Z_UP_SWAP: Z_UP_SWAP,
}


def policy_for_axis_mode(axis_mode: str) -> ConversionPolicy:
    if axis_mode not in POLICIES:
        raise ValueError(f"Unknown axis mode: {axis_mode}")
    return POLICIES[axis_mode]


def _as_quaternion(rotation) -> Quaternion:
    if isinstance(rotation, Quaternion):
        return rotation
    return Quaternion(rotation)


def _scaled(v: Sequence[float], scale: Sequence[float]) -> Vector:
    return Vector((v[0] * scale[0], v[1] * scale[1], v[2] * scale[2]))


def transform_point(p: Sequence[float],
                    scale: Sequence[float],
                    rotation,
                    translation: Sequence[float],
                    policy: ConversionPolicy = MIRROR_X) -> Tuple[float, float, float]:
    """
    转换位置

    参数:
        p: 局部空间位置
        scale: 世界缩放
        rotation: 世界旋转（Quaternion 或 (w, x, y, z)）
        translation: 世界位置
        policy: 轴转换策略

    返回:
        DCM 空间位置
    """
    v = _as_quaternion(rotation) @ _scaled(p, scale)
    v = v + Vector(translation)
    return policy.apply(v)


def transform_vector(v: Sequence[float],
                     scale: Sequence[float],
                     rotation,
                     policy: ConversionPolicy = MIRROR_X) -> Tuple[float, float, float]:
    """
    转换方向向量（法线），不平移
    """
    r = _as_quaternion(rotation) @ _scaled(v, scale)
    return policy.apply(r)


class CoordinateConverter:
    """
    绑定一个对象世界变换与转换策略的转换器

    去索引时对每个顶点与法线独立调用
    """

    def __init__(self, scale: Sequence[float], rotation, translation: Sequence[float],
                 policy: ConversionPolicy = MIRROR_X):
        self.scale = tuple(scale)
        self.rotation = _as_quaternion(rotation)
        self.translation = tuple(translation)
        self.policy = policy

    @classmethod
    def from_transform(cls, transform, policy: ConversionPolicy = MIRROR_X) -> "CoordinateConverter":
        return cls(transform.scale, transform.rotation, transform.translation, policy)

    def convert_position(self, p: Sequence[float]) -> Tuple[float, float, float]:
        return transform_point(p, self.scale, self.rotation, self.translation, self.policy)

    def convert_normal(self, n: Sequence[float]) -> Tuple[float, float, float]:
        return transform_vector(n, self.scale, self.rotation, self.policy)
