import math

import numpy as np
import pytest
from PIL import Image

from sceneforge.material import TextureMode
from sceneforge.model_mesh import (
    MaterialProperties,
    MeshData,
    ModelMesh,
    ModelScene,
    directory_path,
    material_from_properties,
    read_vertex_data,
)
from sceneforge.texture import Texture


def _triangle(material_index=0, **extra):
    return MeshData(
        positions=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)],
        normals=[(0.0, 0.0, 1.0)] * 3,
        faces=[(0, 1, 2)],
        material_index=material_index,
        **extra,
    )


@pytest.mark.parametrize(
    "path, expected",
    [
        ("Assets/Dinosaur/Trex.obj", "Assets/Dinosaur/"),
        ("Assets\\Worm\\monster.obj", "Assets\\Worm\\"),
        ("model.obj", ""),
        ("dir/", "dir/"),
    ],
)
def test_directory_path(path, expected):
    assert directory_path(path) == expected


def test_read_vertex_data_scales_hull_only():
    mesh = _triangle()
    vertices, indices, hull = read_vertex_data(mesh, np.diag([2.0, 3.0, 4.0, 1.0]))
    assert [v.position for v in vertices] == [
        (0.0, 0.0, 0.0, 1.0),
        (1.0, 0.0, 0.0, 1.0),
        (0.0, 1.0, 0.0, 1.0),
    ]
    assert hull == [(0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 3.0, 0.0)]
    assert indices == [0, 1, 2]


def test_read_vertex_data_defaults_tex_coords_and_tangents():
    vertices, _, _ = read_vertex_data(_triangle(), np.eye(4))
    assert all(v.tex_coord == (0.0, 0.0) for v in vertices)
    assert all(v.tangent == (0.0, 0.0, 0.0) for v in vertices)
    assert all(v.bitangent == (0.0, 0.0, 0.0) for v in vertices)


def test_read_vertex_data_normalizes_tangents():
    mesh = _triangle(
        tex_coords=[(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)],
        tangents=[(5.0, 0.0, 0.0)] * 3,
        bitangents=[(0.0, 3.0, 4.0)] * 3,
    )
    vertices, _, _ = read_vertex_data(mesh, None)
    assert vertices[1].tex_coord == (1.0, 0.0)
    for v in vertices:
        assert math.isclose(math.hypot(*v.tangent), 1.0)
        assert math.isclose(math.hypot(*v.bitangent), 1.0)
    assert vertices[0].tangent == (1.0, 0.0, 0.0)


def test_read_vertex_data_uses_first_three_face_indices():
    mesh = MeshData(
        positions=[(0.0, 0.0, 0.0)] * 4,
        normals=[(0.0, 1.0, 0.0)] * 4,
        faces=[(0, 1, 2, 3), (3, 2, 1)],
    )
    _, indices, _ = read_vertex_data(mesh, np.eye(4))
    assert indices == [0, 1, 2, 3, 2, 1]


def test_short_face_rejected():
    mesh = MeshData(positions=[(0.0, 0.0, 0.0)], normals=[(0.0, 1.0, 0.0)], faces=[(0, 0)])
    with pytest.raises(ValueError):
        read_vertex_data(mesh, np.eye(4))


def test_mesh_data_requires_normals():
    with pytest.raises(ValueError):
        MeshData(positions=[(0.0, 0.0, 0.0)], normals=[])


def test_material_shininess_sets_standard_exponent():
    material = material_from_properties(MaterialProperties(shininess=10.0), "m.obj")
    assert material.specular_exponent == 64.0
    assert material.texture_mode is TextureMode.REPLACE_AMBIENT_DIFFUSE


def test_material_colors_and_opacity_are_clamped():
    properties = MaterialProperties(
        name="skin",
        opacity=1.5,
        ambient_color=(0.1, 0.2, 0.3),
        diffuse_color=(2.0, -1.0, 0.5),
        specular_color=(0.0, 0.0, 0.0),
        emissive_color=(0.4, 0.4, 0.4),
    )
    material = material_from_properties(properties, "m.obj")
    assert material.name == "skin"
    assert material.alpha == 1.0
    assert material.ambient_color == (0.1, 0.2, 0.3)
    assert material.diffuse_color == (1.0, 0.0, 0.5)
    assert material.specular_color == (0.0, 0.0, 0.0)
    assert material.emissive_color == (0.4, 0.4, 0.4)
    assert not material.diffuse_texture_enabled


def test_material_loads_textures_relative_to_model(tmp_path):
    Image.new("RGB", (2, 2), (255, 0, 0)).save(tmp_path / "diffuse.png")
    Image.new("RGBA", (2, 2), (0, 0, 255, 255)).save(tmp_path / "normal.png")
    model_file = str(tmp_path / "model.obj")
    properties = MaterialProperties(diffuse_texture="diffuse.png", normal_texture="normal.png")

    material = material_from_properties(properties, model_file)

    diffuse = Texture.get_texture(directory_path(model_file) + "diffuse.png")
    normal = Texture.get_texture(directory_path(model_file) + "normal.png")
    assert material.diffuse_texture_enabled
    assert material.diffuse_texture == diffuse.texture_object
    assert material.normal_map_enabled
    assert material.normal_map == normal.texture_object
    assert not material.specular_texture_enabled


def test_model_mesh_name_uses_scale():
    mesh = ModelMesh("unique/name.obj", scale=(2.0, 1.0, 1.0))
    assert mesh.mesh_name == "unique/name.obj 2.000000 1.000000 1.000000"


def test_build_creates_sub_mesh_per_mesh(tmp_path):
    scene = ModelScene(
        meshes=[_triangle(0), _triangle(-1)],
        materials=[MaterialProperties(name="first", opacity=0.5)],
    )
    model = ModelMesh(str(tmp_path / "build.obj"), scale=(1.0, 2.0, 1.0))
    sub_meshes = model.build(scene)
    assert len(sub_meshes) == 2
    assert sub_meshes[0].material.name == "first"
    assert sub_meshes[0].material.alpha == 0.5
    assert sub_meshes[1].material.name == "default"
    assert sub_meshes[0].indices == [0, 1, 2]
    assert model.collision_hulls[0][2] == (0.0, 2.0, 0.0)


def test_build_reuses_identical_model(tmp_path):
    path = str(tmp_path / "shared.obj")
    first = ModelMesh(path).build(ModelScene(meshes=[_triangle(-1)]))
    second = ModelMesh(path).build(ModelScene(meshes=[]))
    assert len(second) == 1
    assert second[0] is first[0]


def test_build_rejects_missing_material(tmp_path):
    model = ModelMesh(str(tmp_path / "broken.obj"))
    with pytest.raises(IndexError):
        model.build(ModelScene(meshes=[_triangle(3)], materials=[]))