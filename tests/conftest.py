"""Shared fixtures for DCM exporter tests."""
import pytest

from dcm_exporter.config.export_settings import ExportSettings
from dcm_exporter.core.schema import ExportTarget, SourceMaterial, SourceMesh, WorldTransform
from dcm_exporter.utils.logger import Logger

CUBE_POSITIONS = [
    (-1.0, -1.0, -1.0), (1.0, -1.0, -1.0), (1.0, 1.0, -1.0), (-1.0, 1.0, -1.0),
    (-1.0, -1.0, 1.0), (1.0, -1.0, 1.0), (1.0, 1.0, 1.0), (-1.0, 1.0, 1.0),
]

CUBE_TRIANGLES = [
    0, 2, 1, 0, 3, 2,
    4, 5, 6, 4, 6, 7,
    0, 1, 5, 0, 5, 4,
    2, 3, 7, 2, 7, 6,
    1, 2, 6, 1, 6, 5,
    0, 4, 7, 0, 7, 3,
]


class RecordingLogger(Logger):
    """Logger that keeps messages instead of printing them."""

    def __init__(self):
        super().__init__(verbose=False)
        self.records = []

    def _log(self, level, message, context=None):
        self.records.append((level, message, context))
        super()._log(level, message, context)

    def messages(self, level):
        return [m for lvl, m, _ in self.records if lvl == level]

    def contexts(self, level):
        return [c for lvl, _, c in self.records if lvl == level]


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def settings():
    s = ExportSettings()
    s.texture_extension = ".dtex"
    return s


@pytest.fixture
def cube_mesh():
    return SourceMesh(
        name="CubeMesh",
        triangles=list(CUBE_TRIANGLES),
        positions=list(CUBE_POSITIONS),
        normals=[(0.0, 1.0, 0.0)] * 8,
        uvs=[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)] * 2,
        colors=[(1.0, 0.0, 0.0, 1.0)] * 8,
        submesh_count=1,
    )


@pytest.fixture
def brick_material():
    return SourceMaterial(
        name="Brick",
        properties={"diffuse": (0.5, 0.25, 0.125, 1.0), "shininess": 16.0},
        texture_name="brick",
    )


@pytest.fixture
def make_target():
    def _make(name="Cube", mesh=None, materials=None, transform=None, skinned_mesh=None,
              submesh_materials=None):
        return ExportTarget(
            name=name,
            transform=transform or WorldTransform(),
            mesh=mesh,
            skinned_mesh=skinned_mesh,
            materials=list(materials or []),
            submesh_materials=list(submesh_materials or []),
        )
    return _make
