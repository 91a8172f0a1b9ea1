[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sceneforge"
version = "0.1.0"
description = "Scene graph, material, lighting, uniform block and mesh building blocks for real-time 3D rendering"
requires-python = ">=3.10"
keywords = ["3d", "rendering", "scene-graph", "mesh", "uniform-block", "materials", "lighting", "texture"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
    "numpy",
    "pillow",
]

[tool.hatch.build.targets.wheel]
packages = ["sceneforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
