"""
Mandelbrot Set Explorer Package

An interactive Mandelbrot set explorer using Pygame for display and
Numba for JIT-compiled computation.

Quick Start:
    from mandelbrot_explorer import run
    run()

Or from command line:
    python -m mandelbrot_explorer

Rendering without a window:
    from mandelbrot_explorer import ImageSpec, RenderParams, default_catalog, render
    buffer = render(ImageSpec(800, 800), RenderParams(100, zoom=2.0),
                    default_catalog()['Rainbow'])

Package Structure:
    - params.py: ImageSpec, RenderParams and the GUI's ViewState
    - compute.py: JIT-compiled escape-time computation
    - colormaps.py: Gradients, the gradient catalog and color strategies
    - renderer.py: Synchronous, tiled and background rendering
    - settings.py: settings.json loading
    - menu.py: Zoom slider and gradient selector widgets
    - app.py: Main application, event loop and command line

Controls:
    - Zoom slider / mouse wheel / + and -: Zoom about the view center
    - Gradient buttons: Pick the colorization
    - R: Reset zoom to 1.0
    - ESC: Quit
"""

from .app import run, main, MandelbrotApp
from .colormaps import (
    FIRE_PALETTE_NAME,
    FirePalette,
    Gradient,
    GradientCatalog,
    GradientStrategy,
    colorize,
    default_catalog,
    resolve_strategy,
    strategy_names,
)
from .compute import EscapeField, compute_field, compute_rows, escape_time, pixel_to_complex
from .params import ImageSpec, RenderParams, ViewState
from .renderer import MandelbrotRenderer, PixelBuffer, render, render_tiled

__version__ = "1.0.0"
__all__ = [
    "run",
    "main",
    "MandelbrotApp",
    "FIRE_PALETTE_NAME",
    "FirePalette",
    "Gradient",
    "GradientCatalog",
    "GradientStrategy",
    "colorize",
    "default_catalog",
    "resolve_strategy",
    "strategy_names",
    "EscapeField",
    "compute_field",
    "compute_rows",
    "escape_time",
    "pixel_to_complex",
    "ImageSpec",
    "RenderParams",
    "ViewState",
    "MandelbrotRenderer",
    "PixelBuffer",
    "render",
    "render_tiled",
]
