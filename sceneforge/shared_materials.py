"""Material properties shared by every shader program through one uniform block."""

from __future__ import annotations

import struct
from typing import Any

from sceneforge.material import Material
from sceneforge.uniform_block import ShaderLayout, UniformBlock

MATERIAL_BLOCK_BINDING_POINT = 12
MATERIAL_BLOCK_NAME = "MaterialBlock"

DIFFUSE_SAMPLER_LOCATION = 100
SPECULAR_SAMPLER_LOCATION = 101
NORMAL_MAP_SAMPLER_LOCATION = 102

DIFFUSE_TEXTURE_UNIT = 0
SPECULAR_TEXTURE_UNIT = 1
NORMAL_MAP_TEXTURE_UNIT = 2

# Shader member name, Material attribute, packing format; in buffer order.
_MEMBERS: tuple[tuple[str, str, str], ...] = (
    ("object.ambientMatColor", "ambient_color", "<3f"),
    ("object.diffuseMatColor", "diffuse_color", "<3f"),
    ("object.specularMatColor", "specular_color", "<3f"),
    ("object.emmissiveMatColor", "emissive_color", "<3f"),
    ("object.specularExp", "specular_exponent", "<f"),
    ("object.alpha", "alpha", "<f"),
    ("object.diffuseTextureEnabled", "diffuse_texture_enabled", "<?"),
    ("object.specularTextureEnabled", "specular_texture_enabled", "<?"),
    ("object.normalMapTextureEnabled", "normal_map_enabled", "<?"),
    ("object.textureMode", "texture_mode", "<i"),
)


def _pack(fmt: str, value: Any) -> bytes:
    if isinstance(value, tuple):
        return struct.pack(fmt, *value)
    return struct.pack(fmt, int(value) if fmt == "<i" else value)


class SharedMaterials:
    """Writes a material's properties into the shared material block.

    ``texture_units`` records which texture object is bound to each unit
    and ``blend_enabled`` whether blending is on for a translucent material.
    """

    def __init__(self) -> None:
        self.block = UniformBlock(MATERIAL_BLOCK_BINDING_POINT)
        self.offsets: dict[str, int] = {}
        self.texture_units: dict[int, int] = {}
        self.blend_enabled = False

    def set_uniform_block_for_shader(self, shader: ShaderLayout) -> None:
        """Bind the material block of ``shader`` and record member offsets."""
        offsets = self.block.set_uniform_block_for_shader(
            shader, MATERIAL_BLOCK_NAME, [name for name, _, _ in _MEMBERS]
        )
        self.offsets = {attr: offset for (_, attr, _), offset in zip(_MEMBERS, offsets)}

    def apply(self, material: Material) -> None:
        """Load ``material`` into the block before rendering an object."""
        if self.block.size > 0 and self.block.allocated:
            for _, attr, fmt in _MEMBERS:
                offset = self.offsets.get(attr, -1)
                if offset >= 0:
                    self.block.write(offset, _pack(fmt, getattr(material, attr)))

            if material.diffuse_texture_enabled:
                self.texture_units[DIFFUSE_TEXTURE_UNIT] = material.diffuse_texture
            if material.specular_texture_enabled:
                self.texture_units[SPECULAR_TEXTURE_UNIT] = material.specular_texture
            if material.normal_map_enabled:
                self.texture_units[NORMAL_MAP_TEXTURE_UNIT] = material.normal_map

        if material.alpha < 1.0:
            self.blend_enabled = True

    def clean_up(self, material: Material) -> None:
        """Undo the state ``apply`` set for ``material`` after rendering."""
        if material.alpha < 1.0:
            self.blend_enabled = False