# sceneforge

Building blocks for a real-time 3D renderer, written with NumPy and Pillow.
Everything is kept in Python objects and byte buffers, ready to be handed to
a graphics API.

## Modules

- `sceneforge.scene_graph` — `SceneGraphNode` holds a local transform and a
  local scale relative to its parent. Nodes are joined with `add_child`.
  Positions, rotations and scales can be read and set in `Frame.LOCAL` or
  `Frame.WORLD`; `forward_direction`, `up_direction`, `right_direction` and
  `rotate_to` work with the node's facing. `world_transform` and
  `update_modeling_transformation` give the matrices used to draw the node.
  World-frame updates on a node without a parent raise `SceneGraphError`.
- `sceneforge.material` — `Material` with colours clamped to [0, 1], a
  specular exponent clamped to [0, inf), an alpha value, and diffuse,
  specular and normal-map texture slots. `TextureMode` lists `NO_TEXTURE`,
  `DECAL` and `REPLACE_AMBIENT_DIFFUSE`.
- `sceneforge.uniform_block` — `ShaderLayout` describes the block sizes and
  member offsets a shader reports; `UniformBlock` allocates a byte buffer the
  first time a shader is registered and offers `write` and `read`.
- `sceneforge.shared_materials` — `SharedMaterials.apply` packs a material
  into the `MaterialBlock` buffer, records the texture object bound to each
  texture unit in `texture_units`, and sets `blend_enabled` for translucent
  materials; `clean_up` clears it again.
- `sceneforge.shared_transformations` — `SharedTransformations` writes the
  model, view, projection and normal matrices into `transformBlock` and the
  eye position derived from the view matrix into `worldEyeBlock`.
- `sceneforge.shared_lighting` — `SharedLighting` manages sixteen `Light`
  records in `LightBlock`; `build_uniform_block_names` lists the member
  names it expects (`lights[0].ambientColor`, ...).
- `sceneforge.texture` — `Texture.get_texture` loads an image once and
  caches it by file name, storing RGBA pixels bottom row first and a mipmap
  chain. Images that cannot be read, or that are not three- or four-channel,
  raise `TextureLoadError`. `unload` and `Texture.unload_textures` drop them.
- `sceneforge.sphere_mesh` — `SphereMesh` builds a bottom cap, body and top
  cap as `SubMesh` triangle lists of `VertexData`, with spherical texture
  coordinates; `spherical_to_cartesian` and `spherical_tex_coords` are
  available on their own.
- `sceneforge.model_mesh` — `ModelMesh.build` turns a `ModelScene` made of
  `MeshData` and `MaterialProperties` into one sub-mesh per mesh, scales the
  collision-hull points, and loads textures relative to the model file
  (`directory_path`, `read_vertex_data`, `material_from_properties`).

Sphere and model meshes with the same name (radius and material, or file
and scale) are built once and shared.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Examples

A small scene graph:

```python
import numpy as np
from sceneforge.scene_graph import Frame, SceneGraphNode

root = SceneGraphNode("root")
child = SceneGraphNode("child")
root.add_child(child)

child.set_position(np.array([0.0, 0.0, -40.0]), Frame.WORLD)
print(child.get_position(Frame.WORLD))
print(child.forward_direction(Frame.WORLD))
```

Lights written into a uniform buffer laid out by a shader description:

```python
from sceneforge.shared_lighting import SharedLighting, build_uniform_block_names
from sceneforge.uniform_block import ShaderLayout

names = build_uniform_block_names()
layout = ShaderLayout(
    blocks={"LightBlock": 16 * len(names)},
    uniforms={name: 16 * i for i, name in enumerate(names)},
)

lighting = SharedLighting()
lighting.set_uniform_block_for_shader(layout)
lighting.set_enabled(0, True)
print(lighting.light(0).enabled)
```

A textured sphere:

```python
from sceneforge.material import Material, TextureMode
from sceneforge.sphere_mesh import SphereMesh

material = Material()
material.set_texture_mode(TextureMode.DECAL)
bottom, body, top = SphereMesh(material, radius=10.0, stacks=16, slices=32).build()
print(len(bottom.vertices), len(body.vertices), len(top.vertices))
```

## What the package does not do

- It makes no graphics API calls: it opens no window, compiles no shaders
  and uploads nothing to a GPU. Buffers, texture pixels and vertex lists are
  produced for a renderer to consume.
- It does not parse model files. A `ModelScene` has to be filled in by the
  caller from whatever loader is in use.
- It has no game loop, camera, input handling, physics or sound, and no
  command to run.