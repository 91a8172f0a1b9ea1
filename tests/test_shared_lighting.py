import math
import struct

import pytest

from sceneforge.shared_lighting import (
    LIGHT_BLOCK_BINDING_POINT,
    MAX_LIGHTS,
    SharedLighting,
    build_uniform_block_names,
)
from sceneforge.uniform_block import ShaderLayout

STRIDE = 16


def make_layout():
    names = build_uniform_block_names()
    uniforms = {name: i * STRIDE for i, name in enumerate(names)}
    return ShaderLayout(blocks={"LightBlock": len(names) * STRIDE}, uniforms=uniforms)


@pytest.fixture
def lighting():
    shared = SharedLighting()
    layout = make_layout()
    shared.set_uniform_block_for_shader(layout)
    return shared, layout


def read_floats(shared, offset, count):
    return struct.unpack(f"<{count}f", shared.block.read(offset, 4 * count))


def test_block_names_cover_every_light():
    names = build_uniform_block_names()
    assert len(names) == MAX_LIGHTS * 12
    assert names[0] == "lights[0].ambientColor"
    assert names[11] == "lights[0].enabled"
    assert names[-1] == f"lights[{MAX_LIGHTS - 1}].enabled"


def test_binding_point_recorded(lighting):
    _, layout = lighting
    assert layout.bindings["LightBlock"] == LIGHT_BLOCK_BINDING_POINT


def test_initial_values_written_to_buffer(lighting):
    shared, _ = lighting
    light = shared.light(3)
    ambient = read_floats(shared, light.locations["ambient_color"], 3)
    assert ambient == pytest.approx((0.15, 0.15, 0.15), rel=1e-6)
    position = read_floats(shared, light.locations["position_or_direction"], 4)
    assert position == pytest.approx((1.0, 1.0, 1.0, 0.0))
    assert light.spot_cutoff_cos == pytest.approx(math.radians(180.0))
    assert light.spot_exponent == 50.0
    assert light.enabled is False


def test_locations_follow_name_order(lighting):
    shared, _ = lighting
    names = build_uniform_block_names()
    light = shared.light(1)
    assert light.locations["ambient_color"] == names.index("lights[1].ambientColor") * STRIDE
    assert light.locations["enabled"] == names.index("lights[1].enabled") * STRIDE


def test_set_enabled_round_trip(lighting):
    shared, _ = lighting
    shared.set_enabled(2, True)
    light = shared.light(2)
    assert light.enabled is True
    assert shared.block.read(light.locations["enabled"], 1) == b"\x01"


def test_set_diffuse_color_round_trip(lighting):
    shared, _ = lighting
    shared.set_diffuse_color(0, (0.25, 0.5, 0.75))
    light = shared.light(0)
    assert light.diffuse_color == (0.25, 0.5, 0.75)
    assert read_floats(shared, light.locations["diffuse_color"], 3) == (0.25, 0.5, 0.75)


def test_attenuation_factors(lighting):
    shared, _ = lighting
    shared.set_attenuation_factors(5, (2.0, 0.5, 0.25))
    light = shared.light(5)
    assert (light.constant, light.linear, light.quadratic) == (2.0, 0.5, 0.25)
    assert read_floats(shared, light.locations["quadratic"], 1) == (0.25,)


def test_spot_direction_is_normalised(lighting):
    shared, _ = lighting
    shared.set_spot_direction(4, (0.0, 3.0, 0.0))
    assert shared.light(4).spot_direction == pytest.approx((0.0, 1.0, 0.0))


def test_zero_spot_direction_rejected(lighting):
    shared, _ = lighting
    with pytest.raises(ValueError):
        shared.set_spot_direction(0, (0.0, 0.0, 0.0))


@pytest.mark.parametrize("index", [-1, MAX_LIGHTS])
def test_index_out_of_range(lighting, index):
    shared, _ = lighting
    with pytest.raises(IndexError):
        shared.set_enabled(index, True)


def test_wrong_vector_length(lighting):
    shared, _ = lighting
    with pytest.raises(ValueError):
        shared.set_position_or_direction(0, (1.0, 2.0, 3.0))


def test_snapshot_does_not_change_state(lighting):
    shared, _ = lighting
    snapshot = shared.light(0)
    snapshot.enabled = True
    assert shared.light(0).enabled is False


def test_missing_block_keeps_state_only():
    shared = SharedLighting()
    shared.set_uniform_block_for_shader(ShaderLayout())
    shared.set_spot_exponent(0, 10.0)
    assert shared.light(0).spot_exponent == 10.0
    assert shared.block.allocated is False