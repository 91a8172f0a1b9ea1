"""Projection, viewing and modeling matrices shared through uniform blocks."""

from __future__ import annotations

import struct
from typing import Iterable

import numpy as np

from sceneforge.uniform_block import ShaderLayout, UniformBlock

PROJECTION_VIEW_BLOCK_BINDING_POINT = 2
WORLD_EYE_BLOCK_BINDING_POINT = 3

TRANSFORM_BLOCK_NAME = "transformBlock"
EYE_BLOCK_NAME = "worldEyeBlock"

_TRANSFORM_MEMBERS = ("modelMatrix", "viewMatrix", "projectionMatrix", "normalModelMatrix")
_EYE_MEMBERS = ("worldEyePosition",)


def _matrix(value: Iterable) -> np.ndarray:
    m = np.array(value, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
    return m


def _pack_matrix(m: np.ndarray) -> bytes:
    """Little-endian float32 values in column-major order, as a shader reads them."""
    return np.asarray(m, dtype="<f4").tobytes(order="F")


class SharedTransformations:
    """Keeps the transformation block and the eye-position block up to date.

    The shader blocks are laid out as::

        uniform transformBlock { mat4 modelMatrix; mat4 viewMatrix;
                                 mat4 projectionMatrix; mat4 normalModelMatrix; };
        uniform worldEyeBlock { vec3 worldEyePosition; };

    A matrix is only remembered once the transformation block has a size,
    i.e. after a shader declaring it has been registered.
    """

    def __init__(self) -> None:
        self.projection_view_block = UniformBlock(PROJECTION_VIEW_BLOCK_BINDING_POINT)
        self.world_eye_block = UniformBlock(WORLD_EYE_BLOCK_BINDING_POINT)
        self._locations: dict[str, int] = {}
        self._eye_location = -1
        self._projection = np.eye(4)
        self._view = np.eye(4)
        self._model = np.eye(4)

    @property
    def projection_matrix(self) -> np.ndarray:
        return self._projection.copy()

    @property
    def view_matrix(self) -> np.ndarray:
        return self._view.copy()

    @property
    def modeling_matrix(self) -> np.ndarray:
        return self._model.copy()

    def set_uniform_block_for_shader(self, shader: ShaderLayout) -> None:
        """Bind both blocks of ``shader`` and record the member offsets."""
        offsets = self.projection_view_block.set_uniform_block_for_shader(
            shader, TRANSFORM_BLOCK_NAME, _TRANSFORM_MEMBERS
        )
        self._locations = dict(zip(_TRANSFORM_MEMBERS, offsets))
        eye_offsets = self.world_eye_block.set_uniform_block_for_shader(
            shader, EYE_BLOCK_NAME, _EYE_MEMBERS
        )
        self._eye_location = eye_offsets[0] if eye_offsets else -1

    def _write(self, block: UniformBlock, offset: int, data: bytes) -> None:
        if block.allocated and offset >= 0:
            block.write(offset, data)

    def set_view_matrix(self, view_matrix: Iterable) -> None:
        """Set the viewing matrix and the world eye position derived from it."""
        view = _matrix(view_matrix)
        if self.projection_view_block.size > 0:
            self._view = view.copy()
            self._write(
                self.projection_view_block,
                self._locations.get("viewMatrix", -1),
                _pack_matrix(view),
            )
        if self.world_eye_block.size > 0:
            eye = np.linalg.inv(view)[:3, 3]
            self._write(
                self.world_eye_block,
                self._eye_location,
                struct.pack("<3f", *(float(c) for c in eye)),
            )

    def set_projection_matrix(self, projection_matrix: Iterable) -> None:
        """Set the projection matrix."""
        projection = _matrix(projection_matrix)
        if self.projection_view_block.size > 0:
            self._projection = projection.copy()
            self._write(
                self.projection_view_block,
                self._locations.get("projectionMatrix", -1),
                _pack_matrix(projection),
            )

    def set_modeling_matrix(self, modeling_matrix: Iterable) -> None:
        """Set the modeling matrix for positions and, unchanged, for normals."""
        model = _matrix(modeling_matrix)
        if self.projection_view_block.size > 0:
            self._model = model.copy()
            packed = _pack_matrix(model)
            self._write(
                self.projection_view_block, self._locations.get("modelMatrix", -1), packed
            )
            self._write(
                self.projection_view_block,
                self._locations.get("normalModelMatrix", -1),
                packed,
            )