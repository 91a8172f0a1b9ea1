"""Scene graph nodes holding local transforms, scales and world queries."""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterable

import numpy as np

FORWARD = np.array([0.0, 0.0, -1.0])
UP = np.array([0.0, 1.0, 0.0])
RIGHT = np.array([1.0, 0.0, 0.0])


class Frame(Enum):
    """Coordinate frame a query or update refers to."""

    LOCAL = "local"
    WORLD = "world"


class SceneGraphError(Exception):
    """Raised when a world-frame update is made on a node with no parent."""


def _matrix(value: Iterable) -> np.ndarray:
    m = np.array(value, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
    return m


def _vector3(value: Iterable[float]) -> np.ndarray:
    v = np.array(value, dtype=float).reshape(-1)
    if v.shape != (3,):
        raise ValueError(f"expected three components, got {v.shape[0]}")
    return v


def _scaling(scale: np.ndarray) -> np.ndarray:
    m = np.eye(4)
    m[0, 0], m[1, 1], m[2, 2] = scale
    return m


def _axis_rotation(angle: float, axis: np.ndarray) -> np.ndarray:
    x, y, z = axis / np.linalg.norm(axis)
    c, s = math.cos(angle), math.sin(angle)
    t = 1.0 - c
    m = np.eye(4)
    m[:3, :3] = [
        [t * x * x + c, t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, t * y * y + c, t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, t * z * z + c],
    ]
    return m


def _yaw_pitch_roll(yaw: float, pitch: float, roll: float) -> np.ndarray:
    """Rotation about Y by yaw, then X by pitch, then Z by roll (applied Y * X * Z)."""
    return (
        _axis_rotation(yaw, UP)
        @ _axis_rotation(pitch, RIGHT)
        @ _axis_rotation(roll, np.array([0.0, 0.0, 1.0]))
    )


def _scale_from_transform(transform: np.ndarray) -> np.ndarray:
    return np.linalg.norm(transform[:3, :3], axis=0)


def _rotation_from_transform(transform: np.ndarray) -> np.ndarray:
    scale = _scale_from_transform(transform)
    scale[scale == 0.0] = 1.0
    m = np.eye(4)
    m[:3, :3] = transform[:3, :3] / scale
    return m


def _require_parent(node: "SceneGraphNode", action: str) -> "SceneGraphNode":
    if node.parent is None:
        raise SceneGraphError(
            f"{action} relative to WORLD coordinates with null parent; "
            "first attach the node to a scene graph"
        )
    return node.parent


class SceneGraphNode:
    """A node with a transform relative to its parent and a local scale.

    The world transform of a node is the product of its ancestors' local
    transforms (and their scales where ``apply_scale_to_children`` is set)
    with its own local transform; it excludes the node's own local scale.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.parent: SceneGraphNode | None = None
        self.children: list[SceneGraphNode] = []
        self.local_scale = np.eye(4)
        self.local_transform = np.eye(4)
        self.modeling_transformation = np.eye(4)
        self.apply_scale_to_children = False

    def __repr__(self) -> str:
        return f"SceneGraphNode({self.name!r}, children={len(self.children)})"

    def add_child(self, child: "SceneGraphNode") -> "SceneGraphNode":
        """Attach ``child`` below this node, detaching it from any former parent."""
        if child is self:
            raise SceneGraphError("a node cannot be its own child")
        ancestor = self.parent
        while ancestor is not None:
            if ancestor is child:
                raise SceneGraphError("adding this child would create a cycle")
            ancestor = ancestor.parent
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def world_transform(self) -> np.ndarray:
        """Transform of this node relative to the root, without its own scale."""
        parent = self.parent
        if parent is None:
            return np.eye(4)
        if parent.apply_scale_to_children:
            return parent.world_transform() @ parent.local_scale @ self.local_transform
        return parent.world_transform() @ self.local_transform

    def update_modeling_transformation(self) -> np.ndarray:
        """Recompute and return the transformation used to render this node."""
        if self.parent is not None:
            self.modeling_transformation = self.world_transform() @ self.local_scale
        else:
            self.modeling_transformation = self.local_transform @ self.local_scale
        return self.modeling_transformation.copy()

    def get_position(self, frame: Frame = Frame.WORLD) -> np.ndarray:
        transform = self.local_transform if frame is Frame.LOCAL else self.world_transform()
        return transform[:3, 3].copy()

    def set_position(self, position: Iterable[float], frame: Frame = Frame.WORLD) -> None:
        """Move the node without changing its orientation."""
        position = _vector3(position)
        if frame is Frame.LOCAL:
            self.local_transform[:3, 3] = position
            return
        parent = _require_parent(self, "Setting position")
        world = self.world_transform()
        world[:3, 3] = position
        self.local_transform = np.linalg.inv(parent.world_transform()) @ world

    def get_rotation(self, frame: Frame = Frame.WORLD) -> np.ndarray:
        transform = self.local_transform if frame is Frame.LOCAL else self.world_transform()
        return _rotation_from_transform(transform)

    def set_rotation(self, rotation: Iterable, frame: Frame = Frame.WORLD) -> None:
        """Set the orientation from a 4x4 rotation matrix; position is kept."""
        rotation = _matrix(rotation)
        if frame is Frame.WORLD:
            parent = _require_parent(self, "Setting rotation")
            parent_rotation = parent.get_rotation(Frame.WORLD)
            rotation = np.linalg.inv(parent_rotation) @ rotation
        self.local_transform[:3, :3] = rotation[:3, :3]

    def set_euler_rotation(
        self, rot_x: float, rot_y: float, rot_z: float, frame: Frame = Frame.WORLD
    ) -> None:
        """Set the orientation from yaw ``rot_x``, pitch ``rot_y`` and roll ``rot_z``."""
        self.set_rotation(_yaw_pitch_roll(rot_x, rot_y, rot_z), frame)

    def get_scale(self, frame: Frame = Frame.WORLD) -> np.ndarray:
        if frame is Frame.LOCAL:
            return self.local_scale.copy()
        world_scale = _scale_from_transform(self.world_transform())
        return _scaling(world_scale) @ self.local_scale

    def set_scale(self, scale: Iterable[float], frame: Frame = Frame.WORLD) -> None:
        scale = _vector3(scale)
        if frame is Frame.LOCAL:
            self.local_scale = _scaling(scale)
            return
        parent = _require_parent(self, "Setting scale")
        parent_scale = _scaling(_scale_from_transform(parent.world_transform()))
        self.local_scale = np.linalg.inv(parent_scale) @ _scaling(scale)

    def _direction(self, local: np.ndarray, frame: Frame) -> np.ndarray:
        if frame is Frame.LOCAL:
            return local.copy()
        return self.get_rotation(Frame.WORLD)[:3, :3] @ local

    def forward_direction(self, frame: Frame = Frame.WORLD) -> np.ndarray:
        return self._direction(FORWARD, frame)

    def up_direction(self, frame: Frame = Frame.WORLD) -> np.ndarray:
        return self._direction(UP, frame)

    def right_direction(self, frame: Frame = Frame.WORLD) -> np.ndarray:
        return self._direction(RIGHT, frame)

    def rotate_to(self, direction: Iterable[float], frame: Frame = Frame.WORLD) -> None:
        """Turn the node so that its forward direction faces ``direction``.

        Nothing changes when the direction is parallel to the local forward axis.
        """
        new_direction = _vector3(direction)
        new_direction = new_direction / np.linalg.norm(new_direction)
        if frame is Frame.WORLD:
            parent = _require_parent(self, "Rotating to a direction")
            inverse = np.linalg.inv(parent.world_transform())
            new_direction = (inverse @ np.append(new_direction, 0.0))[:3]

        axis = np.cross(FORWARD, new_direction)
        if np.linalg.norm(axis) > 0.0:
            cosine = float(np.clip(np.dot(FORWARD, new_direction), -1.0, 1.0))
            self.set_rotation(_axis_rotation(math.acos(cosine), axis), Frame.LOCAL)