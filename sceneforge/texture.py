"""Image textures, loaded once per file name and shared afterwards."""

from __future__ import annotations

import itertools
from typing import ClassVar

import numpy as np
from PIL import Image


class TextureLoadError(Exception):
    """Raised when a texture image cannot be read or has an unsupported layout."""


def _expand_palette(image: Image.Image) -> Image.Image:
    if image.mode == "P":
        return image.convert("RGBA" if "transparency" in image.info else "RGB")
    if image.mode == "PA":
        return image.convert("RGBA")
    return image


class Texture:
    """A two-dimensional RGBA texture with its mipmap chain.

    Rows are stored bottom first, the order a renderer expects. Use
    :meth:`get_texture` so that each file is loaded only once.
    """

    _loaded: ClassVar[dict[str, "Texture"]] = {}
    _ids: ClassVar[itertools.count] = itertools.count(1)

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        self.texture_object = 0
        self.width = 0
        self.height = 0
        self.pixels: np.ndarray | None = None
        self.mipmaps: tuple[np.ndarray, ...] = ()
        self._load(file_name)

    def __repr__(self) -> str:
        return (
            f"Texture({self.file_name!r}, object={self.texture_object}, "
            f"{self.width}x{self.height})"
        )

    def _load(self, file_name: str) -> None:
        try:
            with Image.open(file_name) as source:
                source.load()
                image = _expand_palette(source)
        except (OSError, ValueError) as exc:
            raise TextureLoadError(f"Unable to load {file_name}!") from exc

        if image.width == 0 or image.height == 0:
            raise TextureLoadError(f"Unable to load {file_name}!")

        channels = len(image.getbands())
        if channels not in (3, 4):
            raise TextureLoadError(f"{file_name} has {channels} channels!")

        try:
            rgba = image.convert("RGBA")
        except ValueError as exc:
            raise TextureLoadError(f"Unable to load {file_name}!") from exc
        rgba = rgba.transpose(Image.Transpose.FLIP_TOP_BOTTOM)

        levels = [np.asarray(rgba, dtype=np.uint8).copy()]
        level = rgba
        while level.width > 1 or level.height > 1:
            size = (max(1, level.width // 2), max(1, level.height // 2))
            level = level.resize(size, Image.Resampling.BOX)
            levels.append(np.asarray(level, dtype=np.uint8).copy())

        self.width, self.height = rgba.size
        self.pixels = levels[0]
        self.mipmaps = tuple(levels)
        self.texture_object = next(Texture._ids)

    @classmethod
    def get_texture(cls, file_name: str) -> "Texture":
        """Return the texture for ``file_name``, loading it on first use."""
        texture = Texture._loaded.get(file_name)
        if texture is None:
            texture = cls(file_name)
            Texture._loaded[file_name] = texture
        return texture

    @classmethod
    def unload_textures(cls) -> None:
        """Unload every texture loaded through :meth:`get_texture`."""
        for texture in list(Texture._loaded.values()):
            texture.unload()
        Texture._loaded.clear()

    def unload(self) -> None:
        """Drop this texture's data and forget it; every user of it loses it."""
        Texture._loaded.pop(self.file_name, None)
        self.texture_object = 0
        self.pixels = None
        self.mipmaps = ()