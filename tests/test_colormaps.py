import dataclasses

import numpy as np
import pytest

from mandelbrot_explorer.colormaps import (
    BLACK,
    FIRE_PALETTE_NAME,
    FirePalette,
    Gradient,
    GradientCatalog,
    GradientStrategy,
    as_strategy,
    colorize,
    parse_hex_color,
    resolve_strategy,
    strategy_names,
)
from mandelbrot_explorer.compute import compute_field
from mandelbrot_explorer.params import ImageSpec, RenderParams


@pytest.mark.parametrize("start, end", [
    ((256, 0, 0), (0, 0, 0)),
    ((0, 0, 0), (0, -1, 0)),
    ((0.5, 0, 0), (0, 0, 0)),
    ((0, 0), (0, 0, 0)),
    ((True, 0, 0), (0, 0, 0)),
])
def test_invalid_gradient_rejected(start, end):
    with pytest.raises(ValueError):
        Gradient(start, end)


def test_gradient_is_an_immutable_value(rainbow):
    assert rainbow == Gradient((255, 0, 0), (0, 0, 255))
    with pytest.raises(dataclasses.FrozenInstanceError):
        rainbow.start_color = (0, 0, 0)


def test_gradient_normalizes_channels():
    gradient = Gradient(np.array([1, 2, 3], dtype=np.uint8), [4, 5, 6])
    assert gradient.start_color == (1, 2, 3)
    assert gradient.end_color == (4, 5, 6)
    assert all(type(c) is int for c in gradient.start_color)


@pytest.mark.parametrize("count, max_iter", [(10, 10), (11, 10), (0, 0)])
def test_bounded_is_opaque_black(rainbow, count, max_iter):
    assert colorize(count, max_iter, rainbow) == BLACK
    assert colorize(count, max_iter, FirePalette()) == BLACK


def test_first_iteration_gives_start_color(rainbow):
    assert colorize(0, 100, rainbow) == (255, 0, 0, 255)


def test_last_iteration_approaches_end_color(rainbow):
    r, g, b, a = colorize(999, 1000, rainbow)
    assert abs(r - 0) <= 1
    assert g == 0
    assert abs(b - 255) <= 1
    assert a == 255


def test_interpolation_truncates(rainbow):
    # t = 0.25 -> 191.25 and 63.75
    assert colorize(1, 4, rainbow) == (191, 0, 63, 255)


def test_strategy_and_bare_gradient_agree(rainbow):
    strategy = GradientStrategy(rainbow, name="Rainbow")
    for count in range(0, 21):
        assert colorize(count, 20, rainbow) == strategy.colorize(count, 20)


def test_fire_palette_values():
    assert FirePalette().colorize(1, 2) == (143, 239, 135, 255)
    assert FirePalette().colorize(0, 10) == (0, 0, 0, 255)


def test_fire_palette_differs_from_gradient(rainbow):
    assert FirePalette().colorize(5, 10) != colorize(5, 10, rainbow)


@pytest.mark.parametrize("strategy", [
    GradientStrategy(Gradient((10, 20, 30), (200, 100, 0))),
    FirePalette(),
])
def test_apply_matches_scalar_colorize(strategy):
    max_iter = 12
    counts = np.arange(0, 15, dtype=np.int32).reshape(3, 5)
    rgba = strategy.apply(counts, max_iter)

    assert rgba.shape == (3, 5, 4)
    assert rgba.dtype == np.uint8
    assert np.all(rgba[..., 3] == 255)
    for y in range(3):
        for x in range(5):
            assert tuple(rgba[y, x]) == strategy.colorize(counts[y, x], max_iter)


@pytest.mark.parametrize("strategy", [
    GradientStrategy(Gradient((255, 0, 0), (0, 0, 255))),
    FirePalette(),
])
def test_colorize_accepts_field_results(strategy):
    field = compute_field(ImageSpec(4, 4), RenderParams(max_iter=10))
    rgba = strategy.apply(field.counts, field.max_iter)
    assert field.bounded.any()

    for y in range(field.height):
        for x in range(field.width):
            result = field.result_at(x, y)
            color = colorize(result, field.max_iter, strategy)
            if result is None:
                assert color == BLACK
            assert color == tuple(rgba[y, x])


def test_apply_fills_given_array(rainbow):
    counts = np.zeros((2, 3), dtype=np.int32)
    out = np.zeros((2, 3, 4), dtype=np.uint8)
    result = GradientStrategy(rainbow).apply(counts, 5, out)
    assert result is out
    assert np.all(out[..., 0] == 255)


def test_default_catalog_order(catalog):
    assert catalog.names() == ["Rainbow", "Purple", "Green"]
    assert catalog["Purple"] == Gradient((128, 0, 128), (255, 0, 255))
    assert catalog["Green"] == Gradient((0, 128, 0), (0, 255, 0))


def test_catalog_is_read_only(catalog):
    with pytest.raises(TypeError):
        catalog["Blue"] = Gradient((0, 0, 0), (0, 0, 255))


def test_with_gradient_returns_new_catalog(catalog):
    blue = Gradient((0, 0, 0), (0, 0, 255))
    extended = catalog.with_gradient("Blue", blue)

    assert "Blue" not in catalog
    assert extended["Blue"] == blue
    assert extended.names() == ["Rainbow", "Purple", "Green", "Blue"]


def test_catalog_rejects_non_gradients():
    with pytest.raises(ValueError):
        GradientCatalog([("Bad", ((0, 0, 0), (1, 1, 1)))])


def test_unknown_gradient_raises(catalog):
    with pytest.raises(KeyError):
        catalog["Nope"]
    with pytest.raises(KeyError):
        resolve_strategy("Nope", catalog)


def test_resolve_strategy(catalog):
    fire = resolve_strategy(FIRE_PALETTE_NAME, catalog)
    assert isinstance(fire, FirePalette)

    purple = resolve_strategy("Purple", catalog)
    assert isinstance(purple, GradientStrategy)
    assert purple.name == "Purple"
    assert purple.gradient == catalog["Purple"]


def test_strategy_names(catalog):
    assert strategy_names(catalog) == ["Rainbow", "Purple", "Green", FIRE_PALETTE_NAME]


def test_as_strategy(rainbow):
    assert isinstance(as_strategy(rainbow), GradientStrategy)
    fire = FirePalette()
    assert as_strategy(fire) is fire


@pytest.mark.parametrize("text, expected", [
    ("#ff8800", (255, 136, 0)),
    ("00FF7f", (0, 255, 127)),
    ("  #000000 ", (0, 0, 0)),
])
def test_parse_hex_color(text, expected):
    assert parse_hex_color(text) == expected


@pytest.mark.parametrize("text", ["red", "#fff", "#gg0000", ""])
def test_parse_hex_color_rejects(text):
    with pytest.raises(ValueError):
        parse_hex_color(text)
