# -*- coding: utf-8 -*-
"""
DCM Blender Exporter - Material Writer

- Maps an abstract material (property bag + optional texture) to a MaterialRecord
- Texture path = texture base name (or "material") + configured extension
- Missing color channels fall back to white (ambient/diffuse) or black
  (specular/emission); missing shininess falls back to 0
- Only the diffuse map slot is populated; light/normal/specular maps are empty
- A missing material is logged and skipped, never fatal
"""

from __future__ import annotations
from typing import Optional

from .binary_writer import BinaryWriter
from .errors import MissingMaterialError
from .schema import DataFlags, DataHeader, MaterialRecord, SourceMaterial
from ..config.constants import (
    DATA_LOCAL_ID,
    DEFAULT_COLORS,
    DEFAULT_SHININESS,
    DEFAULT_TEXTURE_NAME,
    TEXTURE_EXT_DTEX,
    LEGACY_LAYOUT,
    RecordLayout,
)


class SPEC:
    # Channel names looked up on the source material
    CH_AMBIENT = "ambient"
    CH_DIFFUSE = "diffuse"
    CH_SPECULAR = "specular"
    CH_EMISSION = "emission"
    CH_SHININESS = "shininess"

    COLOR_CHANNELS = (CH_AMBIENT, CH_DIFFUSE, CH_SPECULAR, CH_EMISSION)


def texture_path_for(material: SourceMaterial, texture_extension: str) -> str:
    base = material.texture_name or DEFAULT_TEXTURE_NAME
    return base + texture_extension


class MaterialWriter:

    def __init__(self, texture_extension: str = TEXTURE_EXT_DTEX,
                 layout: RecordLayout = LEGACY_LAYOUT, logger=None):
        self.texture_extension = texture_extension
        self.layout = layout
        self.logger = logger

    # ====== Record building ======
    def build_record(self, material: SourceMaterial) -> MaterialRecord:
        texture_path = texture_path_for(material, self.texture_extension)
        colors = {}
        for ch in SPEC.COLOR_CHANNELS:
            value = material.get_color(ch)
            colors[ch] = value if value is not None else DEFAULT_COLORS[ch]
        shininess = material.get_float(SPEC.CH_SHININESS)

        return MaterialRecord(
            header=DataHeader(flags=DataFlags.EXTERNAL_LINK, local_id=DATA_LOCAL_ID, path=texture_path),
            texture_path=texture_path,
            ambient=colors[SPEC.CH_AMBIENT],
            diffuse=colors[SPEC.CH_DIFFUSE],
            specular=colors[SPEC.CH_SPECULAR],
            emission=colors[SPEC.CH_EMISSION],
            shininess=DEFAULT_SHININESS if shininess is None else shininess,
            diffuse_map=texture_path,
        )

    # ====== Public: write one material ======
    def write_material(self, binw: BinaryWriter, material: Optional[SourceMaterial]) -> bool:
        """
        Material layout:
        - flags (u8), local id (u8)
        - texture path (fixed string, layout.material_path)
        - ambient, diffuse, specular, emission (4 x f32 each)
        - shininess (f32)
        - diffuse/light/normal/specular map names (fixed string, layout.texture_map each)

        Returns False when the material is missing and nothing was written.
        """
        if material is None:
            if self.logger:
                self.logger.warning(
                    "No material provided for export; skipping material data.",
                    context=MissingMaterialError.code,
                )
            return False

        record = self.build_record(material)
        self.write_record(binw, record)
        return True

    def write_record(self, binw: BinaryWriter, record: MaterialRecord) -> None:
        binw.write_u8(record.header.flags)
        binw.write_u8(record.header.local_id)
        binw.write_fixed_string(record.texture_path, self.layout.material_path)

        binw.write_f32_array(record.ambient)
        binw.write_f32_array(record.diffuse)
        binw.write_f32_array(record.specular)
        binw.write_f32_array(record.emission)
        binw.write_f32(record.shininess)

        binw.write_fixed_string(record.diffuse_map, self.layout.texture_map)
        binw.write_fixed_string(record.light_map, self.layout.texture_map)
        binw.write_fixed_string(record.normal_map, self.layout.texture_map)
        binw.write_fixed_string(record.specular_map, self.layout.texture_map)

    def record_size(self) -> int:
        return 2 + self.layout.material_path + 4 * 4 * 4 + 4 + 4 * self.layout.texture_map
