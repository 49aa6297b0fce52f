import json
import logging

import pytest

from mandelbrot_explorer.colormaps import Gradient
from mandelbrot_explorer.settings import DEFAULTS, build_catalog, load_settings


@pytest.fixture
def write_settings(tmp_path):
    def write(content):
        path = tmp_path / "settings.json"
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return str(path)
    return write


def test_packaged_settings_load():
    settings = load_settings()
    assert settings["width"] == 800
    assert settings["height"] == 800
    assert settings["max_iter"] == 100
    assert settings["zoom_min"] == 0.1
    assert settings["zoom_max"] == 5.0
    assert settings["default_gradient"] == "Rainbow"


def test_partial_file_keeps_defaults(write_settings):
    settings = load_settings(write_settings({"max_iter": 250, "unknown": 1}))
    assert settings["max_iter"] == 250
    assert settings["width"] == DEFAULTS["width"]
    assert "unknown" not in settings


def test_missing_file_falls_back(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        settings = load_settings(str(tmp_path / "nope.json"))
    assert settings == DEFAULTS
    assert "Could not load" in caplog.text


def test_malformed_file_falls_back(write_settings, caplog):
    with caplog.at_level(logging.WARNING):
        settings = load_settings(write_settings("{not json"))
    assert settings == DEFAULTS
    assert "Could not load" in caplog.text


def test_non_object_file_falls_back(write_settings):
    assert load_settings(write_settings([1, 2, 3])) == DEFAULTS


def test_build_catalog_adds_custom_gradients():
    settings = dict(DEFAULTS, custom_gradients=[
        {"name": "Sunset", "start": "#ff5e00", "end": "#2b1055"},
    ])
    catalog = build_catalog(settings)
    assert catalog.names() == ["Rainbow", "Purple", "Green", "Sunset"]
    assert catalog["Sunset"] == Gradient((255, 94, 0), (43, 16, 85))


def test_build_catalog_skips_invalid_entries(caplog):
    settings = dict(DEFAULTS, custom_gradients=[
        {"name": "NoEnd", "start": "#ffffff"},
        {"name": "BadColor", "start": "white", "end": "#000000"},
        "not a dict",
        {"name": "Ok", "start": "#000000", "end": "#ffffff"},
    ])
    with caplog.at_level(logging.WARNING):
        catalog = build_catalog(settings)
    assert catalog.names() == ["Rainbow", "Purple", "Green", "Ok"]
    assert caplog.text.count("Skipping custom gradient") == 3


@pytest.mark.parametrize("key, value", [
    ("width", "big"),
    ("width", 0),
    ("height", -5),
    ("max_iter", 2.5),
    ("max_iter", True),
    ("band_height", 0),
    ("zoom_min", 0),
    ("zoom_max", "5"),
    ("zoom_step", -0.1),
    ("default_gradient", 3),
    ("custom_gradients", 5),
    ("custom_gradients", {"name": "Sunset"}),
])
def test_invalid_value_falls_back(write_settings, caplog, key, value):
    with caplog.at_level(logging.WARNING):
        settings = load_settings(write_settings({key: value}))
    assert settings[key] == DEFAULTS[key]
    assert f"Ignoring {key}" in caplog.text


def test_valid_values_are_kept_next_to_invalid_ones(write_settings):
    settings = load_settings(write_settings({"width": "big", "height": 600, "zoom_max": 8}))
    assert settings["width"] == DEFAULTS["width"]
    assert settings["height"] == 600
    assert settings["zoom_max"] == 8


@pytest.mark.parametrize("zoom_min, zoom_max", [(2.0, 2.0), (3.0, 1.0), (6.0, DEFAULTS["zoom_max"])])
def test_empty_zoom_range_falls_back(write_settings, caplog, zoom_min, zoom_max):
    with caplog.at_level(logging.WARNING):
        settings = load_settings(write_settings({"zoom_min": zoom_min, "zoom_max": zoom_max}))
    assert (settings["zoom_min"], settings["zoom_max"]) == (DEFAULTS["zoom_min"], DEFAULTS["zoom_max"])
    assert "Ignoring zoom range" in caplog.text


def test_build_catalog_ignores_non_list(caplog):
    with caplog.at_level(logging.WARNING):
        catalog = build_catalog(dict(DEFAULTS, custom_gradients=5))
    assert catalog.names() == ["Rainbow", "Purple", "Green"]
    assert "is not a list" in caplog.text
