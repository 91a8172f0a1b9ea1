import copy
import math

from sceneforge.material import Material, TextureMode


def test_defaults():
    mat = Material()
    assert mat.ambient_color == (0.75, 0.75, 0.75)
    assert mat.diffuse_color == (0.75, 0.75, 0.75)
    assert mat.specular_color == (1.0, 1.0, 1.0)
    assert mat.emissive_color == (0.0, 0.0, 0.0)
    assert mat.specular_exponent == 64.0
    assert mat.alpha == 1.0
    assert mat.texture_mode is TextureMode.NO_TEXTURE
    assert not mat.diffuse_texture_enabled
    assert not mat.specular_texture_enabled
    assert not mat.normal_map_enabled


def test_ids_increase():
    first = Material()
    second = Material("other")
    assert second.id > first.id
    assert second.name == "other"


def test_colors_are_clamped():
    mat = Material()
    mat.ambient_color = (2.0, -1.0, 0.5)
    assert mat.ambient_color == (1.0, 0.0, 0.5)
    mat.emissive_color = (0.25, 3.0, -0.5)
    assert mat.emissive_color == (0.25, 1.0, 0.0)
    mat.specular_color = (-2.0, -2.0, 9.0)
    assert mat.specular_color == (0.0, 0.0, 1.0)


def test_specular_exponent_clamped_below_only():
    mat = Material()
    mat.specular_exponent = -5.0
    assert mat.specular_exponent == 0.0
    mat.specular_exponent = 1e9
    assert mat.specular_exponent == 1e9
    mat.specular_exponent = math.inf
    assert mat.specular_exponent == math.inf


def test_alpha_clamped():
    mat = Material()
    mat.alpha = 1.5
    assert mat.alpha == 1.0
    mat.alpha = -0.5
    assert mat.alpha == 0.0


def test_set_ambient_and_diffuse_color():
    mat = Material()
    mat.set_ambient_and_diffuse_color((0.2, 0.4, 1.7))
    assert mat.ambient_color == (0.2, 0.4, 1.0)
    assert mat.diffuse_color == mat.ambient_color


def test_invalid_texture_mode_is_ignored():
    mat = Material()
    mat.set_texture_mode(TextureMode.DECAL)
    mat.set_texture_mode(42)
    assert mat.texture_mode is TextureMode.DECAL
    mat.set_texture_mode(-1)
    assert mat.texture_mode is TextureMode.DECAL


def test_diffuse_texture_switches_mode():
    mat = Material()
    mat.set_diffuse_texture(7)
    assert mat.diffuse_texture == 7
    assert mat.diffuse_texture_enabled
    assert mat.texture_mode is TextureMode.REPLACE_AMBIENT_DIFFUSE


def test_specular_texture_switches_mode():
    mat = Material()
    mat.set_specular_texture(3)
    assert mat.specular_texture == 3
    assert mat.specular_texture_enabled
    assert mat.texture_mode is TextureMode.REPLACE_AMBIENT_DIFFUSE


def test_normal_map_keeps_mode():
    mat = Material()
    mat.set_normal_map(5)
    assert mat.normal_map == 5
    assert mat.normal_map_enabled
    assert mat.texture_mode is TextureMode.NO_TEXTURE


def test_mode_set_after_texture_wins():
    mat = Material()
    mat.set_diffuse_texture(1)
    mat.set_texture_mode(TextureMode.DECAL)
    assert mat.texture_mode is TextureMode.DECAL


def test_copy_is_independent():
    mat = Material()
    clone = copy.copy(mat)
    clone.diffuse_color = (0.0, 0.0, 0.0)
    assert mat.diffuse_color == (0.75, 0.75, 0.75)
    assert clone.id == mat.id