"""Meshes loaded from model files, split into sub-meshes with their materials."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Sequence

import numpy as np

from sceneforge.material import Material, TextureMode
from sceneforge.sphere_mesh import TRIANGLES, SubMesh, Vec2, Vec3, VertexData
from sceneforge.texture import Texture

Color = tuple[float, float, float]


@dataclass
class MeshData:
    """Vertex attributes and faces of one mesh of a loaded model.

    ``tex_coords``, ``tangents`` and ``bitangents`` may be left empty when the
    model does not provide them. Only the first three indices of each face
    are used.
    """

    positions: list[Vec3]
    normals: list[Vec3]
    faces: list[tuple[int, ...]] = field(default_factory=list)
    tex_coords: list[Vec2] = field(default_factory=list)
    tangents: list[Vec3] = field(default_factory=list)
    bitangents: list[Vec3] = field(default_factory=list)
    material_index: int = 0

    def __post_init__(self) -> None:
        count = len(self.positions)
        if len(self.normals) != count:
            raise ValueError("every vertex needs a normal")
        if self.tex_coords and len(self.tex_coords) != count:
            raise ValueError("texture coordinates do not match the vertex count")
        if self.has_tangents and (
            len(self.tangents) != count or len(self.bitangents) != count
        ):
            raise ValueError("tangents and bitangents do not match the vertex count")

    @property
    def has_tangents(self) -> bool:
        return bool(self.tangents) and bool(self.bitangents)


@dataclass
class MaterialProperties:
    """Material settings as read from a model's material library.

    Attributes left as None were not present in the model file. Texture
    paths are relative to the directory of the model file.
    """

    name: str = "default"
    shininess: float | None = None
    opacity: float | None = None
    ambient_color: Color | None = None
    diffuse_color: Color | None = None
    specular_color: Color | None = None
    emissive_color: Color | None = None
    diffuse_texture: str | None = None
    specular_texture: str | None = None
    normal_texture: str | None = None


@dataclass
class ModelScene:
    """The meshes and materials of a loaded model."""

    meshes: list[MeshData] = field(default_factory=list)
    materials: list[MaterialProperties] = field(default_factory=list)


def directory_path(file_path: str) -> str:
    """The directory part of ``file_path`` including its trailing separator."""
    cut = max(file_path.rfind("/"), file_path.rfind("\\"))
    return file_path[: cut + 1] if cut >= 0 else ""


def _scale_matrix(scale: Iterable | None) -> np.ndarray:
    if scale is None:
        return np.eye(4)
    m = np.array(scale, dtype=float)
    if m.shape == (3,):
        return np.diag([*m, 1.0])
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 scale matrix or three factors, got {m.shape}")
    return m


def _normalized(vector: Sequence[float]) -> Vec3:
    x, y, z = (float(c) for c in vector)
    length = math.sqrt(x * x + y * y + z * z)
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (x / length, y / length, z / length)


def read_vertex_data(
    mesh: MeshData, model_scale: Iterable
) -> tuple[list[VertexData], list[int], list[Vec3]]:
    """Vertices, triangle indices and scaled collision-hull points of ``mesh``."""
    scale = _scale_matrix(model_scale)
    vertices: list[VertexData] = []
    hull: list[Vec3] = []

    for i, (px, py, pz) in enumerate(mesh.positions):
        position = (float(px), float(py), float(pz), 1.0)
        sx, sy, sz, _ = scale @ np.array(position)
        hull.append((float(sx), float(sy), float(sz)))

        normal = tuple(float(c) for c in mesh.normals[i])
        tex_coord = (
            tuple(float(c) for c in mesh.tex_coords[i][:2]) if mesh.tex_coords else (0.0, 0.0)
        )
        if mesh.has_tangents:
            tangent = _normalized(mesh.tangents[i])
            bitangent = _normalized(mesh.bitangents[i])
        else:
            tangent = bitangent = (0.0, 0.0, 0.0)

        vertices.append(VertexData(position, normal, tex_coord, tangent, bitangent))

    indices: list[int] = []
    for face in mesh.faces:
        if len(face) < 3:
            raise ValueError(f"face {face!r} has fewer than three indices")
        indices.extend(int(index) for index in face[:3])

    return vertices, indices, hull


def material_from_properties(properties: MaterialProperties, file_name: str) -> Material:
    """Build a material, loading textures relative to the model file ``file_name``."""
    material = Material(properties.name)

    # A shininess in the file only switches on the standard exponent.
    if properties.shininess is not None:
        material.specular_exponent = 64.0
    if properties.opacity is not None:
        material.alpha = properties.opacity
    if properties.ambient_color is not None:
        material.ambient_color = properties.ambient_color
    if properties.diffuse_color is not None:
        material.diffuse_color = properties.diffuse_color
    if properties.specular_color is not None:
        material.specular_color = properties.specular_color
    if properties.emissive_color is not None:
        material.emissive_color = properties.emissive_color

    directory = directory_path(file_name)
    if properties.diffuse_texture:
        texture = Texture.get_texture(directory + properties.diffuse_texture)
        material.set_diffuse_texture(texture.texture_object)
    if properties.specular_texture:
        texture = Texture.get_texture(directory + properties.specular_texture)
        material.set_specular_texture(texture.texture_object)
    if properties.normal_texture:
        texture = Texture.get_texture(directory + properties.normal_texture)
        material.set_normal_map(texture.texture_object)

    material.set_texture_mode(TextureMode.REPLACE_AMBIENT_DIFFUSE)
    return material


class ModelMesh:
    """A model split into sub-meshes, one per mesh of the loaded scene.

    The scale is applied to the collision hulls only; it must be set before
    the mesh is built. Models with the same file and scale are built once
    and shared.
    """

    _loaded: ClassVar[dict[str, tuple[list[SubMesh], list[list[Vec3]]]]] = {}

    def __init__(self, file_path: str, scale: Iterable | None = None) -> None:
        self.file_path = file_path
        self.model_scale = _scale_matrix(scale)
        self.sub_meshes: list[SubMesh] = []
        self.collision_hulls: list[list[Vec3]] = []

    @property
    def mesh_name(self) -> str:
        s = self.model_scale
        return f"{self.file_path} {s[0, 0]:f} {s[1, 1]:f} {s[2, 2]:f}"

    def __repr__(self) -> str:
        return f"ModelMesh({self.file_path!r}, sub_meshes={len(self.sub_meshes)})"

    def build(self, scene: ModelScene) -> list[SubMesh]:
        """Build the sub-meshes from ``scene``, or reuse those of the same model."""
        cached = ModelMesh._loaded.get(self.mesh_name)
        if cached is not None:
            meshes, hulls = cached
            self.sub_meshes = list(meshes)
            self.collision_hulls = [list(h) for h in hulls]
            return list(self.sub_meshes)

        sub_meshes: list[SubMesh] = []
        hulls: list[list[Vec3]] = []
        for mesh in scene.meshes:
            vertices, indices, hull = read_vertex_data(mesh, self.model_scale)
            if mesh.material_index < 0:
                material = Material()
            elif mesh.material_index >= len(scene.materials):
                raise IndexError(
                    f"material index {mesh.material_index} outside the "
                    f"{len(scene.materials)} materials of {self.file_path}"
                )
            else:
                material = material_from_properties(
                    scene.materials[mesh.material_index], self.file_path
                )
            sub_meshes.append(
                SubMesh(
                    vertices=vertices,
                    indices=indices,
                    primitive_mode=TRIANGLES,
                    material=material,
                )
            )
            hulls.append(hull)

        self.sub_meshes = sub_meshes
        self.collision_hulls = hulls
        ModelMesh._loaded[self.mesh_name] = (list(sub_meshes), [list(h) for h in hulls])
        return list(self.sub_meshes)