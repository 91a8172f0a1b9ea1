"""Sphere meshes built from stacks and slices, with spherical texture mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar

from sceneforge.material import Material

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]

TRIANGLES = "triangles"


@dataclass(frozen=True)
class VertexData:
    """Position, normal, texture coordinate, tangent and bitangent of a vertex."""

    position: Vec4
    normal: Vec3
    tex_coord: Vec2
    tangent: Vec3 = (0.0, 0.0, 0.0)
    bitangent: Vec3 = (0.0, 0.0, 0.0)


@dataclass
class SubMesh:
    """Vertices (and optional indices) drawn with one material."""

    vertices: list[VertexData]
    indices: list[int] = field(default_factory=list)
    primitive_mode: str = TRIANGLES
    material: Material | None = None


def spherical_to_cartesian(slice_angle: float, stack_angle: float, radius: float) -> Vec4:
    """Homogeneous point on a sphere for the given slice and stack angles."""
    return (
        math.cos(stack_angle) * math.sin(slice_angle) * radius,
        math.sin(stack_angle) * radius,
        math.cos(stack_angle) * math.cos(slice_angle) * radius,
        1.0,
    )


def spherical_tex_coords(slice_angle: float, stack_angle: float) -> Vec2:
    """Spherical texture coordinates for the given slice and stack angles."""
    return (slice_angle / (2.0 * math.pi), (stack_angle + math.pi / 2.0) / math.pi)


def _normal(position: Vec4) -> Vec3:
    # The homogeneous w takes part in the normalisation, so normals are
    # parallel to the position but shorter than unit length.
    length = math.sqrt(sum(c * c for c in position))
    x, y, z, _ = (c / length for c in position)
    return (x, y, z)


class SphereMesh:
    """A sphere split into a bottom cap, a body and a top cap.

    Meshes with the same radius and material are built once and shared.
    """

    _loaded: ClassVar[dict[str, tuple[list[SubMesh], float]]] = {}

    def __init__(
        self, material: Material, radius: float = 1.0, stacks: int = 12, slices: int = 16
    ) -> None:
        if stacks <= 0 or slices <= 0:
            raise ValueError("a sphere needs at least one stack and one slice")
        self.material = material
        self.radius = float(radius)
        self.stacks = stacks
        self.slices = slices
        self.slice_inc = 2.0 * math.pi / slices
        self.stack_inc = math.pi / stacks
        self.sub_meshes: list[SubMesh] = []
        self.collision_radius: float | None = None

    @property
    def mesh_name(self) -> str:
        return f"Sphere {self.radius:f} {self.material.id}"

    def __repr__(self) -> str:
        return (
            f"SphereMesh(radius={self.radius}, stacks={self.stacks}, "
            f"slices={self.slices})"
        )

    def build(self) -> list[SubMesh]:
        """Build the sub-meshes, or reuse those of an identical sphere."""
        cached = SphereMesh._loaded.get(self.mesh_name)
        if cached is not None:
            meshes, self.collision_radius = cached
            self.sub_meshes = list(meshes)
            return list(self.sub_meshes)

        self.sub_meshes = [self._bottom(), self._body(), self._top()]
        self.collision_radius = self.radius
        SphereMesh._loaded[self.mesh_name] = (list(self.sub_meshes), self.radius)
        return list(self.sub_meshes)

    def stack_vertex_data(
        self, starting_slice_angle: float, stack_angle: float
    ) -> list[VertexData]:
        """``slices + 1`` vertices around one stack, starting at the given angle."""
        vertices = []
        slice_angle = starting_slice_angle
        for _ in range(self.slices + 1):
            position = spherical_to_cartesian(slice_angle, stack_angle, self.radius)
            vertices.append(
                VertexData(
                    position,
                    _normal(position),
                    spherical_tex_coords(slice_angle, stack_angle),
                )
            )
            slice_angle += self.slice_inc
        return vertices

    def _sub_mesh(self, vertices: list[VertexData]) -> SubMesh:
        return SubMesh(vertices=vertices, primitive_mode=TRIANGLES, material=self.material)

    def _bottom(self) -> SubMesh:
        lower = self.stack_vertex_data(self.slice_inc / 2.0, -math.pi / 2.0)
        upper = self.stack_vertex_data(0.0, -math.pi / 2.0 + self.stack_inc)
        vertices = []
        for j in range(self.slices, 0, -1):
            vertices += [lower[j - 1], upper[j], upper[j - 1]]
        return self._sub_mesh(vertices)

    def _body(self) -> SubMesh:
        stack_angle = -math.pi / 2.0 + self.stack_inc
        lower = self.stack_vertex_data(0.0, stack_angle)
        vertices = []
        for _ in range(self.stacks - 2):
            stack_angle += self.stack_inc
            upper = self.stack_vertex_data(0.0, stack_angle)
            for (u0, u1), (l0, l1) in zip(zip(upper, upper[1:]), zip(lower, lower[1:])):
                vertices += [u0, l0, l1, u0, l1, u1]
            lower = upper
        return self._sub_mesh(vertices)

    def _top(self) -> SubMesh:
        upper = self.stack_vertex_data(self.slice_inc / 2.0, math.pi / 2.0)
        lower = self.stack_vertex_data(0.0, math.pi / 2.0 - self.stack_inc)
        vertices = []
        for apex, l0, l1 in zip(upper, lower, lower[1:]):
            vertices += [apex, l0, l1]
        return self._sub_mesh(vertices)