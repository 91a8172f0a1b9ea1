"""Surface material description used when rendering meshes."""

from __future__ import annotations

import itertools
import math
from enum import IntEnum
from typing import Iterable

Color = tuple[float, float, float]


class TextureMode(IntEnum):
    """How a diffuse texture combines with the material colours."""

    NO_TEXTURE = 0
    DECAL = 1
    REPLACE_AMBIENT_DIFFUSE = 2


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(float(value), low), high)


def _clamp_color(color: Iterable[float]) -> Color:
    r, g, b = color
    return (_clamp(r, 0.0, 1.0), _clamp(g, 0.0, 1.0), _clamp(b, 0.0, 1.0))


class Material:
    """Colours, shininess, transparency and textures of a surface.

    Every colour component is clamped to [0, 1] when assigned, the
    specular exponent to [0, inf) and the alpha value to [0, 1].
    """

    _ids = itertools.count()

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self.id = next(Material._ids)
        self._ambient_color: Color = (0.75, 0.75, 0.75)
        self._diffuse_color: Color = (0.75, 0.75, 0.75)
        self._specular_color: Color = (1.0, 1.0, 1.0)
        self._emissive_color: Color = (0.0, 0.0, 0.0)
        self._specular_exponent = 64.0
        self._alpha = 1.0
        self._texture_mode = TextureMode.NO_TEXTURE
        self.diffuse_texture = 0
        self.diffuse_texture_enabled = False
        self.specular_texture = 0
        self.specular_texture_enabled = False
        self.normal_map = 0
        self.normal_map_enabled = False

    def __repr__(self) -> str:
        return f"Material(name={self.name!r}, id={self.id})"

    @property
    def ambient_color(self) -> Color:
        return self._ambient_color

    @ambient_color.setter
    def ambient_color(self, color: Iterable[float]) -> None:
        self._ambient_color = _clamp_color(color)

    @property
    def diffuse_color(self) -> Color:
        return self._diffuse_color

    @diffuse_color.setter
    def diffuse_color(self, color: Iterable[float]) -> None:
        self._diffuse_color = _clamp_color(color)

    @property
    def specular_color(self) -> Color:
        return self._specular_color

    @specular_color.setter
    def specular_color(self, color: Iterable[float]) -> None:
        self._specular_color = _clamp_color(color)

    @property
    def emissive_color(self) -> Color:
        return self._emissive_color

    @emissive_color.setter
    def emissive_color(self, color: Iterable[float]) -> None:
        self._emissive_color = _clamp_color(color)

    @property
    def specular_exponent(self) -> float:
        return self._specular_exponent

    @specular_exponent.setter
    def specular_exponent(self, shininess: float) -> None:
        self._specular_exponent = _clamp(shininess, 0.0, math.inf)

    @property
    def alpha(self) -> float:
        return self._alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        self._alpha = _clamp(value, 0.0, 1.0)

    @property
    def texture_mode(self) -> TextureMode:
        return self._texture_mode

    def set_ambient_and_diffuse_color(self, color: Iterable[float]) -> None:
        """Give the ambient and diffuse colours the same value."""
        clamped = _clamp_color(color)
        self._ambient_color = clamped
        self._diffuse_color = clamped

    def set_texture_mode(self, mode: int) -> None:
        """Select a texture mode; values outside the known modes are ignored."""
        try:
            self._texture_mode = TextureMode(mode)
        except ValueError:
            pass

    def set_diffuse_texture(self, texture_object: int) -> None:
        """Attach a diffuse texture and let it replace ambient and diffuse colour."""
        self.diffuse_texture = texture_object
        self.set_texture_mode(TextureMode.REPLACE_AMBIENT_DIFFUSE)
        self.diffuse_texture_enabled = True

    def set_specular_texture(self, texture_object: int) -> None:
        """Attach a specular texture."""
        self.specular_texture = texture_object
        self.set_texture_mode(TextureMode.REPLACE_AMBIENT_DIFFUSE)
        self.specular_texture_enabled = True

    def set_normal_map(self, texture_object: int) -> None:
        """Attach a normal map; the texture mode is left unchanged."""
        self.normal_map = texture_object
        self.normal_map_enabled = True