"""
Settings for the Mandelbrot explorer.

Values come from settings.json next to this file (or a file given on
the command line) and fall back to DEFAULTS for anything missing.
"""

import json
import logging
import math
import os

from .colormaps import Gradient, default_catalog, parse_hex_color


logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULTS = {
    'width': 800,
    'height': 800,
    'max_iter': 100,
    'zoom_min': 0.1,
    'zoom_max': 5.0,
    'zoom_step': 0.1,
    'default_gradient': 'Rainbow',
    'band_height': 32,
    'custom_gradients': [],
}


# Keys that must hold a value >= 1
_POSITIVE_INTS = ('width', 'height', 'max_iter', 'band_height')


def _check_value(key, value):
    """Raise ValueError unless value fits the type and range of DEFAULTS[key]."""
    expected = type(DEFAULTS[key])
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a {expected.__name__}")
    if expected is float:
        ok = isinstance(value, (int, float))
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ValueError(f"{value!r} is not a {expected.__name__}")

    if key in _POSITIVE_INTS and value < 1:
        raise ValueError(f"{value} is less than 1")
    if expected is float and not (value > 0 and math.isfinite(value)):
        raise ValueError(f"{value} is not a positive finite number")


def load_settings(path=None):
    """
    Load settings from a JSON file.

    Args:
        path: File to read (default: the packaged settings.json)

    Returns:
        dict with every key of DEFAULTS. Unknown keys are ignored; a
        missing or malformed file yields the defaults, and so does any
        value of the wrong type or out of range (with a warning).
    """
    settings = dict(DEFAULTS)
    path = path or SETTINGS_PATH
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s", path, e)
        return settings

    if not isinstance(loaded, dict):
        logger.warning("Ignoring %s: top level is not an object", path)
        return settings

    for key in DEFAULTS:
        if key not in loaded:
            continue
        try:
            _check_value(key, loaded[key])
        except ValueError as e:
            logger.warning("Ignoring %s in %s: %s", key, path, e)
            continue
        settings[key] = loaded[key]

    if not settings['zoom_min'] < settings['zoom_max']:
        logger.warning("Ignoring zoom range %s..%s in %s: zoom_min must be below zoom_max",
                       settings['zoom_min'], settings['zoom_max'], path)
        settings['zoom_min'] = DEFAULTS['zoom_min']
        settings['zoom_max'] = DEFAULTS['zoom_max']
    return settings


def build_catalog(settings):
    """
    Default gradient catalog extended with settings['custom_gradients'].

    Each entry is {"name": ..., "start": "#rrggbb", "end": "#rrggbb"}.
    Invalid entries are skipped with a warning.
    """
    catalog = default_catalog()
    entries = settings.get('custom_gradients') or []
    if not isinstance(entries, list):
        logger.warning("Ignoring custom_gradients: %r is not a list", entries)
        entries = []
    for entry in entries:
        try:
            gradient = Gradient(parse_hex_color(entry['start']), parse_hex_color(entry['end']))
            catalog = catalog.with_gradient(entry['name'], gradient)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            logger.warning("Skipping custom gradient %r: %s", entry, e)
    return catalog
