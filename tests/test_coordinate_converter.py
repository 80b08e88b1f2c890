"""Tests for host-space to DCM-space coordinate conversion."""
import math

import pytest

from dcm_exporter.core.coordinate_converter import (
    MIRROR_X,
    Z_UP_SWAP,
    ConversionPolicy,
    CoordinateConverter,
    policy_for_axis_mode,
    transform_point,
    transform_vector,
)
from dcm_exporter.core.schema import WorldTransform

IDENTITY_ROT = (1.0, 0.0, 0.0, 0.0)


def _approx(values):
    return pytest.approx(tuple(values), abs=1e-5)


def test_translate_then_mirror():
    """Should translate before negating X: (1,0,0) + (2,0,0) -> X = -3."""
    result = transform_point((1.0, 0.0, 0.0), (1.0, 1.0, 1.0), IDENTITY_ROT, (2.0, 0.0, 0.0))

    assert result == _approx((-3.0, 0.0, 0.0))


def test_vector_ignores_translation():
    """Should not translate direction vectors but still mirror X."""
    result = transform_vector((1.0, 2.0, 3.0), (1.0, 1.0, 1.0), IDENTITY_ROT)

    assert result == _approx((-1.0, 2.0, 3.0))


def test_scale_applied_before_rotation():
    """Should scale in local space, then rotate."""
    half = math.sqrt(0.5)
    rot_z_90 = (half, 0.0, 0.0, half)

    result = transform_point((1.0, 0.0, 0.0), (2.0, 1.0, 1.0), rot_z_90, (0.0, 0.0, 0.0))

    # (2,0,0) rotated 90 degrees about Z -> (0,2,0), mirrored X stays 0
    assert result == _approx((0.0, 2.0, 0.0))


def test_rotation_then_translation():
    """Should rotate about the origin before translating."""
    half = math.sqrt(0.5)
    rot_z_90 = (half, 0.0, 0.0, half)

    result = transform_point((1.0, 0.0, 0.0), (1.0, 1.0, 1.0), rot_z_90, (5.0, 0.0, 0.0))

    assert result == _approx((-5.0, 1.0, 0.0))


def test_normal_scaled_and_rotated():
    """Should scale and rotate normals like positions."""
    half = math.sqrt(0.5)
    rot_x_90 = (half, half, 0.0, 0.0)

    result = transform_vector((0.0, 1.0, 0.0), (1.0, 3.0, 1.0), rot_x_90)

    assert result == _approx((0.0, 0.0, 3.0))


def test_z_up_swap_policy():
    """Should reorder (x, y, z) -> (x, z, y) without sign flips."""
    result = transform_point((1.0, 2.0, 3.0), (1.0, 1.0, 1.0), IDENTITY_ROT, (0.0, 0.0, 0.0), Z_UP_SWAP)

    assert result == _approx((1.0, 3.0, 2.0))


def test_policy_apply_is_pure():
    """Should combine an axis permutation with sign flips."""
    policy = ConversionPolicy(axes=(2, 0, 1), signs=(1.0, -1.0, 1.0))

    assert policy.apply((1.0, 2.0, 3.0)) == (3.0, -1.0, 2.0)


def test_reflection_detection():
    """Should report policies that flip handedness."""
    assert MIRROR_X.is_reflection
    assert Z_UP_SWAP.is_reflection
    assert not ConversionPolicy().is_reflection
    assert not ConversionPolicy(axes=(1, 2, 0)).is_reflection


def test_policy_lookup():
    assert policy_for_axis_mode("MIRROR_X") is MIRROR_X
    assert policy_for_axis_mode("Z_UP_SWAP") is Z_UP_SWAP
    with pytest.raises(ValueError):
        policy_for_axis_mode("Y_UP")


def test_converter_from_transform():
    """Should bind a world transform and convert positions and normals."""
    transform = WorldTransform(scale=(2.0, 2.0, 2.0), translation=(0.0, 1.0, 0.0))
    converter = CoordinateConverter.from_transform(transform)

    assert converter.convert_position((1.0, 1.0, 1.0)) == _approx((-2.0, 3.0, 2.0))
    assert converter.convert_normal((1.0, 0.0, 0.0)) == _approx((-2.0, 0.0, 0.0))
