import os

import pytest

# Widgets are exercised without opening a window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from mandelbrot_explorer.colormaps import default_catalog
from mandelbrot_explorer.params import ImageSpec, RenderParams


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def rainbow(catalog):
    return catalog["Rainbow"]


@pytest.fixture
def small_spec():
    return ImageSpec(24, 16)


@pytest.fixture
def params():
    return RenderParams(max_iter=50, zoom=1.0)
