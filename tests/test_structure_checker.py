"""Tests for the post-export structure checker."""
import io

import pytest

from dcm_exporter.config.constants import COMPACT_LAYOUT
from dcm_exporter.config.export_settings import ExportSettings
from dcm_exporter.core.dcm_writer import DCMWriter
from dcm_exporter.validators.structure_checker import StructureChecker, validate_dcm_report


@pytest.fixture
def cube_bytes(make_target, cube_mesh, brick_material):
    stream = io.BytesIO()
    DCMWriter().write_stream(stream, [make_target(mesh=cube_mesh, materials=[brick_material])])
    return stream.getvalue()


def test_valid_file_passes(cube_bytes):
    """Should walk every record of a freshly written file without errors."""
    report = StructureChecker().check_dcm_bytes(cube_bytes)

    assert report["errors"] == []
    assert report["header"]["material_count"] == 1
    assert report["materials"][0]["path"] == "brick.dtex"
    assert report["meshes"][0]["name"] == "Cube"
    assert report["meshes"][0]["submeshes"][0]["name"] == "CubeMesh"
    assert validate_dcm_report(report)


def test_short_layout_round_trip(make_target, cube_mesh):
    """Should read files written with the 32-byte name layout."""
    settings = ExportSettings()
    settings.record_layout = COMPACT_LAYOUT.name
    stream = io.BytesIO()
    DCMWriter(settings).write_stream(stream, [make_target(mesh=cube_mesh)])

    report = StructureChecker(COMPACT_LAYOUT).check_dcm_bytes(stream.getvalue())

    assert report["errors"] == []
    assert report["meshes"][0]["vertex_count"] == 36


def test_bad_magic(cube_bytes):
    report = StructureChecker().check_dcm_bytes(b"XYZ" + cube_bytes[3:])

    assert any("Magic" in e for e in report["errors"])
    with pytest.raises(ValueError):
        validate_dcm_report(report)


def test_header_count_mismatch(cube_bytes):
    """Should flag a mesh count that promises more records than the file holds."""
    data = bytearray(cube_bytes)
    data[5] = 2

    report = StructureChecker().check_dcm_bytes(bytes(data))

    assert report["errors"]


def test_truncated_file(cube_bytes):
    report = StructureChecker().check_dcm_bytes(cube_bytes[:-1])

    assert report["errors"]


def test_trailing_bytes(cube_bytes):
    report = StructureChecker().check_dcm_bytes(cube_bytes + b"\x00")

    assert report["errors"]


def test_too_short():
    report = StructureChecker().check_dcm_bytes(b"DCM")

    assert report["header"] is None
    assert report["errors"]


def test_missing_file(tmp_path):
    report = StructureChecker().check_dcm_file(str(tmp_path / "missing.dcm"))

    assert report["errors"]
