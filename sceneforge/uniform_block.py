"""Uniform blocks shared between shader programs, backed by a byte buffer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

log = logging.getLogger(__name__)

MISSING_OFFSET = -1


@dataclass
class ShaderLayout:
    """The uniform-block layout a shader program reports.

    ``blocks`` maps block names to their size in bytes, ``uniforms`` maps
    block member names to their byte offsets, and ``bindings`` records the
    binding point each block has been assigned to.
    """

    blocks: dict[str, int] = field(default_factory=dict)
    uniforms: dict[str, int] = field(default_factory=dict)
    bindings: dict[str, int] = field(default_factory=dict)

    def block_size(self, block_name: str) -> int | None:
        """Size of the named block in bytes, or None if the shader lacks it."""
        size = self.blocks.get(block_name)
        if size is None:
            log.error("%s not found in shader.", block_name)
        return size

    def member_offsets(self, members: Iterable[str]) -> list[int]:
        """Byte offsets of the named members; missing members give -1."""
        offsets = []
        for name in members:
            offset = self.uniforms.get(name)
            if offset is None:
                log.error("%s not found in shader.", name)
                offset = MISSING_OFFSET
            offsets.append(offset)
        return offsets


class UniformBlock:
    """A buffer feeding one uniform block through a binding point.

    The buffer is allocated and the member offsets are looked up the first
    time a shader is registered; later shaders are only bound to the same
    binding point.
    """

    def __init__(self, binding_point: int) -> None:
        self.binding_point = binding_point
        self.size = 0
        self._buffer: bytearray | None = None
        self._offsets: list[int] = []
        self._configured = False

    @property
    def allocated(self) -> bool:
        return self._buffer is not None

    def set_uniform_block_for_shader(
        self, shader: ShaderLayout, block_name: str, members: Iterable[str]
    ) -> list[int]:
        """Bind the block of ``shader`` and return the member byte offsets."""
        size = shader.block_size(block_name)
        if size is not None:
            self.size = size
            shader.bindings[block_name] = self.binding_point

        if not self._configured:
            if self.size > 0:
                self._buffer = bytearray(self.size)
            self._offsets = shader.member_offsets(members)
            self._configured = True

        return list(self._offsets)

    def _require_buffer(self) -> bytearray:
        if self._buffer is None:
            raise RuntimeError(
                f"uniform block at binding point {self.binding_point} has no buffer"
            )
        return self._buffer

    def _check_range(self, buffer: bytearray, offset: int, size: int) -> None:
        if offset < 0 or size < 0 or offset + size > len(buffer):
            raise ValueError(
                f"range {offset}..{offset + size} outside buffer of {len(buffer)} bytes"
            )

    def write(self, offset: int, data: bytes) -> None:
        """Copy ``data`` into the buffer at ``offset``."""
        buffer = self._require_buffer()
        payload = bytes(data)
        self._check_range(buffer, offset, len(payload))
        buffer[offset : offset + len(payload)] = payload

    def read(self, offset: int, size: int) -> bytes:
        """Return ``size`` bytes of the buffer starting at ``offset``."""
        buffer = self._require_buffer()
        self._check_range(buffer, offset, size)
        return bytes(buffer[offset : offset + size])