"""Scene graph, materials, textures, lighting, uniform blocks and sphere and model meshes for 3D rendering."""

__version__ = "0.1.0"