"""Light sources shared by every shader program through one uniform block."""

from __future__ import annotations

import dataclasses
import math
import struct
from dataclasses import dataclass, field
from typing import Any, Iterable

from sceneforge.uniform_block import ShaderLayout, UniformBlock

LIGHT_BLOCK_BINDING_POINT = 24
LIGHT_BLOCK_NAME = "LightBlock"

# The lights array in the shader programs must have this many entries.
MAX_LIGHTS = 16

# Shader member name, Light attribute, packing format; in buffer order.
_LAYOUT: tuple[tuple[str, str, str], ...] = (
    ("ambientColor", "ambient_color", "<3f"),
    ("diffuseColor", "diffuse_color", "<3f"),
    ("specularColor", "specular_color", "<3f"),
    ("positionOrDirection", "position_or_direction", "<4f"),
    ("spotDirection", "spot_direction", "<3f"),
    ("isSpot", "is_spot", "<?"),
    ("spotCutoffCos", "spot_cutoff_cos", "<f"),
    ("spotExponent", "spot_exponent", "<f"),
    ("constant", "constant", "<f"),
    ("linear", "linear", "<f"),
    ("quadratic", "quadratic", "<f"),
    ("enabled", "enabled", "<?"),
)


@dataclass
class Light:
    """Attributes of one light source and their byte offsets in the block.

    ``position_or_direction`` is a position when w is 1 and the negated
    direction of the light when w is 0.
    """

    ambient_color: tuple[float, float, float] = (0.15, 0.15, 0.15)
    diffuse_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    specular_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    position_or_direction: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 0.0)
    spot_direction: tuple[float, float, float] = (0.0, 0.0, -1.0)
    is_spot: bool = False
    spot_cutoff_cos: float = math.radians(180.0)
    spot_exponent: float = 50.0
    constant: float = 1.0
    linear: float = 0.0
    quadratic: float = 0.0
    enabled: bool = False
    in_use: bool = False
    locations: dict[str, int] = field(default_factory=dict)


def build_uniform_block_names() -> list[str]:
    """Names of all light members of the block, light by light."""
    return [
        f"lights[{number}].{member}"
        for number in range(MAX_LIGHTS)
        for member, _, _ in _LAYOUT
    ]


def _vector(values: Iterable[float], size: int) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != size:
        raise ValueError(f"expected {size} components, got {len(result)}")
    return result


def _pack(fmt: str, value: Any) -> bytes:
    if isinstance(value, tuple):
        return struct.pack(fmt, *value)
    return struct.pack(fmt, value)


_FORMATS = {attr: fmt for _, attr, fmt in _LAYOUT}


class SharedLighting:
    """The light sources of a scene, mirrored into a shared uniform buffer."""

    def __init__(self) -> None:
        self.block = UniformBlock(LIGHT_BLOCK_BINDING_POINT)
        self._lights = [Light() for _ in range(MAX_LIGHTS)]

    def set_uniform_block_for_shader(self, shader: ShaderLayout) -> None:
        """Bind the light block of ``shader`` and reset every light."""
        offsets = self.block.set_uniform_block_for_shader(
            shader, LIGHT_BLOCK_NAME, build_uniform_block_names()
        )
        per_light = len(_LAYOUT)
        for index, light in enumerate(self._lights):
            chunk = offsets[index * per_light : (index + 1) * per_light]
            light.locations = {attr: offset for (_, attr, _), offset in zip(_LAYOUT, chunk)}
            self._initialize_attributes(index)

    def _initialize_attributes(self, index: int) -> None:
        self.set_enabled(index, False)
        self.set_ambient_color(index, (0.15, 0.15, 0.15))
        self.set_diffuse_color(index, (1.0, 1.0, 1.0))
        self.set_specular_color(index, (1.0, 1.0, 1.0))
        self.set_position_or_direction(index, (1.0, 1.0, 1.0, 0.0))
        self.set_is_spot(index, False)
        self.set_spot_direction(index, (0.0, 0.0, -1.0))
        self.set_spot_cutoff_cos(index, math.radians(180.0))
        self.set_spot_exponent(index, 50.0)
        self.set_constant_attenuation(index, 1.0)
        self.set_linear_attenuation(index, 0.0)
        self.set_quadratic_attenuation(index, 0.0)

    def _light_at(self, index: int) -> Light:
        if not 0 <= index < MAX_LIGHTS:
            raise IndexError(f"light index {index} outside 0..{MAX_LIGHTS - 1}")
        return self._lights[index]

    def _set(self, index: int, attr: str, value: Any) -> None:
        light = self._light_at(index)
        setattr(light, attr, value)
        offset = light.locations.get(attr, -1)
        if self.block.allocated and offset >= 0:
            self.block.write(offset, _pack(_FORMATS[attr], value))

    def light(self, index: int) -> Light:
        """A snapshot of the light at ``index``."""
        light = self._light_at(index)
        return dataclasses.replace(light, locations=dict(light.locations))

    def set_enabled(self, index: int, on: bool) -> None:
        self._set(index, "enabled", bool(on))

    def set_ambient_color(self, index: int, color: Iterable[float]) -> None:
        self._set(index, "ambient_color", _vector(color, 3))

    def set_diffuse_color(self, index: int, color: Iterable[float]) -> None:
        self._set(index, "diffuse_color", _vector(color, 3))

    def set_specular_color(self, index: int, color: Iterable[float]) -> None:
        self._set(index, "specular_color", _vector(color, 3))

    def set_position_or_direction(self, index: int, value: Iterable[float]) -> None:
        self._set(index, "position_or_direction", _vector(value, 4))

    def set_attenuation_factors(self, index: int, factors: Iterable[float]) -> None:
        """Set constant, linear and quadratic attenuation at once."""
        constant, linear, quadratic = _vector(factors, 3)
        self.set_constant_attenuation(index, constant)
        self.set_linear_attenuation(index, linear)
        self.set_quadratic_attenuation(index, quadratic)

    def set_constant_attenuation(self, index: int, factor: float) -> None:
        self._set(index, "constant", float(factor))

    def set_linear_attenuation(self, index: int, factor: float) -> None:
        self._set(index, "linear", float(factor))

    def set_quadratic_attenuation(self, index: int, factor: float) -> None:
        self._set(index, "quadratic", float(factor))

    def set_is_spot(self, index: int, spot_on: bool) -> None:
        self._set(index, "is_spot", bool(spot_on))

    def set_spot_direction(self, index: int, direction: Iterable[float]) -> None:
        """Set the spotlight direction; it is stored normalised."""
        vector = _vector(direction, 3)
        length = math.sqrt(sum(c * c for c in vector))
        if length == 0.0:
            raise ValueError("spot direction must not be the zero vector")
        self._set(index, "spot_direction", tuple(c / length for c in vector))

    def set_spot_cutoff_cos(self, index: int, cutoff: float) -> None:
        self._set(index, "spot_cutoff_cos", float(cutoff))

    def set_spot_exponent(self, index: int, exponent: float) -> None:
        self._set(index, "spot_exponent", float(exponent))