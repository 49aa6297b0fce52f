"""
Colorization strategies for Mandelbrot escape counts.

Two strategies map an escape count to an RGBA color:
- GradientStrategy: linear ramp between the two colors of a Gradient
- FirePalette: fixed smooth polynomial palette, no gradient needed

Both expose the same interface (name, colorize, apply) so the caller
can pick exactly one per render. Bounded points are always opaque black.

Gradients are collected in a GradientCatalog, an immutable ordered
mapping from display name to Gradient. To add a preset:
1. Add a (name, start_color, end_color) row to DEFAULT_GRADIENTS
2. It shows up in default_catalog() and in the GUI radio group
"""

import numbers
import re
from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np
from numba import jit


FIRE_PALETTE_NAME = 'Fire'
BLACK = (0, 0, 0, 255)

# name, start color, end color
DEFAULT_GRADIENTS = (
    ('Rainbow', (255, 0, 0), (0, 0, 255)),
    ('Purple', (128, 0, 128), (255, 0, 255)),
    ('Green', (0, 128, 0), (0, 255, 0)),
)

_HEX_COLOR = re.compile(r'^#?([0-9a-fA-F]{6})$')


def _check_rgb(color, label):
    channels = tuple(color)
    if len(channels) != 3:
        raise ValueError(f"{label} must have 3 channels, got {len(channels)}")
    for c in channels:
        if isinstance(c, bool) or not isinstance(c, numbers.Integral):
            raise ValueError(f"{label} channel {c!r} is not an integer")
        if not 0 <= c <= 255:
            raise ValueError(f"{label} channel {c} is outside 0..255")
    return tuple(int(c) for c in channels)


@dataclass(frozen=True)
class Gradient:
    """Two-color linear ramp. Channels are integers in 0..255."""

    start_color: tuple
    end_color: tuple

    def __post_init__(self):
        object.__setattr__(self, 'start_color', _check_rgb(self.start_color, 'start_color'))
        object.__setattr__(self, 'end_color', _check_rgb(self.end_color, 'end_color'))


def parse_hex_color(text):
    """Parse '#rrggbb' (leading '#' optional) into an (r, g, b) tuple."""
    match = _HEX_COLOR.match(text.strip())
    if match is None:
        raise ValueError(f"not a hex color: {text!r}")
    value = match.group(1)
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


class GradientCatalog(Mapping):
    """
    Immutable, ordered collection of named gradients.

    Behaves like a read-only dict. with_gradient() returns a new
    catalog instead of modifying this one.
    """

    def __init__(self, items=()):
        gradients = {}
        for name, gradient in items:
            if not isinstance(gradient, Gradient):
                raise ValueError(f"{name!r} is not a Gradient")
            gradients[name] = gradient
        self._gradients = gradients

    def __getitem__(self, name):
        return self._gradients[name]

    def __iter__(self):
        return iter(self._gradients)

    def __len__(self):
        return len(self._gradients)

    def __repr__(self):
        return f"GradientCatalog({list(self._gradients)!r})"

    def with_gradient(self, name, gradient):
        """Return a new catalog with `name` added (or replaced)."""
        items = dict(self._gradients)
        items[name] = gradient
        return GradientCatalog(items.items())

    def names(self):
        return list(self._gradients)


def default_catalog():
    """Catalog with the built-in presets (Rainbow, Purple, Green)."""
    return GradientCatalog(
        (name, Gradient(start, end)) for name, start, end in DEFAULT_GRADIENTS
    )


# ============================================================================
# JIT kernels
# ============================================================================

@jit(nopython=True, nogil=True, cache=True)
def interpolate(start, end, t):
    """Blend two 8-bit channel values, truncating toward zero."""
    return int(start * (1.0 - t) + end * t)


@jit(nopython=True, nogil=True, cache=True)
def gradient_color(count, max_iter, start, end):
    """RGB for one escape count on a two-stop gradient (black if bounded)."""
    if count >= max_iter:
        return 0, 0, 0
    t = count / max_iter
    return (interpolate(start[0], end[0], t),
            interpolate(start[1], end[1], t),
            interpolate(start[2], end[2], t))


@jit(nopython=True, nogil=True, cache=True)
def fire_color(count, max_iter):
    """
    RGB for one escape count on the polynomial fire palette.

    Each channel is a Bernstein-style polynomial in t = count/max_iter
    whose peak stays below 1, so no clipping is needed.
    """
    if count >= max_iter:
        return 0, 0, 0
    t = count / max_iter
    u = 1.0 - t
    r = int(9.0 * u * t * t * t * 255.0)
    g = int(15.0 * u * u * t * t * 255.0)
    b = int(8.5 * u * u * u * t * 255.0)
    return r, g, b


@jit(nopython=True, nogil=True, cache=True)
def _apply_gradient(counts, max_iter, start, end, out):
    height, width = counts.shape
    for py in range(height):
        for px in range(width):
            r, g, b = gradient_color(counts[py, px], max_iter, start, end)
            out[py, px, 0] = r
            out[py, px, 1] = g
            out[py, px, 2] = b
            out[py, px, 3] = 255


@jit(nopython=True, nogil=True, cache=True)
def _apply_fire(counts, max_iter, out):
    height, width = counts.shape
    for py in range(height):
        for px in range(width):
            r, g, b = fire_color(counts[py, px], max_iter)
            out[py, px, 0] = r
            out[py, px, 1] = g
            out[py, px, 2] = b
            out[py, px, 3] = 255


def _output_array(counts, out):
    if out is None:
        out = np.empty(counts.shape + (4,), dtype=np.uint8)
    return out


# ============================================================================
# Strategies
# ============================================================================

class GradientStrategy:
    """Color escaped points along a two-stop Gradient."""

    def __init__(self, gradient, name=None):
        self.gradient = gradient
        self.name = name or 'Gradient'

    def colorize(self, count, max_iter):
        if count is None:
            return BLACK
        r, g, b = gradient_color(int(count), int(max_iter),
                                 self.gradient.start_color, self.gradient.end_color)
        return (r, g, b, 255)

    def apply(self, counts, max_iter, out=None):
        """
        Colorize a (height, width) array of escape counts.

        Args:
            counts: int32 escape counts
            max_iter: Iteration budget the counts were computed with
            out: Optional (height, width, 4) uint8 array to fill

        Returns:
            The filled RGBA array
        """
        out = _output_array(counts, out)
        _apply_gradient(counts, int(max_iter),
                        self.gradient.start_color, self.gradient.end_color, out)
        return out

    def __repr__(self):
        return f"GradientStrategy({self.name!r}, {self.gradient!r})"


class FirePalette:
    """Smooth polynomial palette, independent of any Gradient."""

    name = FIRE_PALETTE_NAME

    def colorize(self, count, max_iter):
        if count is None:
            return BLACK
        r, g, b = fire_color(int(count), int(max_iter))
        return (r, g, b, 255)

    def apply(self, counts, max_iter, out=None):
        out = _output_array(counts, out)
        _apply_fire(counts, int(max_iter), out)
        return out

    def __repr__(self):
        return "FirePalette()"


def as_strategy(gradient_or_strategy):
    """Wrap a bare Gradient in a GradientStrategy; pass strategies through."""
    if isinstance(gradient_or_strategy, Gradient):
        return GradientStrategy(gradient_or_strategy)
    return gradient_or_strategy


def colorize(count, max_iter, gradient_or_strategy):
    """
    Map one escape count to an RGBA tuple.

    Args:
        count: Escape count; None or max_iter (or more) means bounded
        max_iter: Iteration budget
        gradient_or_strategy: A Gradient, GradientStrategy or FirePalette

    Returns:
        (r, g, b, a) with every channel in 0..255
    """
    return as_strategy(gradient_or_strategy).colorize(count, max_iter)


def strategy_names(catalog):
    """Names selectable in the GUI: every catalog gradient, then Fire."""
    return catalog.names() + [FIRE_PALETTE_NAME]


def resolve_strategy(name, catalog):
    """
    Look up a colorization strategy by display name.

    Raises:
        KeyError if the name is neither Fire nor in the catalog
    """
    if name == FIRE_PALETTE_NAME:
        return FirePalette()
    return GradientStrategy(catalog[name], name=name)


def warmup_jit():
    """Compile the colorization kernels on tiny inputs."""
    counts = np.zeros((2, 2), dtype=np.int32)
    out = np.empty((2, 2, 4), dtype=np.uint8)
    _apply_gradient(counts, 4, (0, 0, 0), (255, 255, 255), out)
    _apply_fire(counts, 4, out)
