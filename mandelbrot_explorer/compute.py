"""
Mandelbrot escape-time computation using Numba JIT compilation.

This module contains the performance-critical part of the explorer:
- Mapping pixel coordinates to points of the complex plane
- The escape-time recurrence z -> z² + c
- Full-frame computation (rows spread over cores with prange)
- Row-band computation (serial, releases the GIL for thread pools)

Escape counts are stored as int32. A count below max_iter is the
number of completed iterations when |z| first exceeded the escape
radius; a count equal to max_iter marks a bounded point.

The view is always centered on -0.5 + 0i. At zoom 1 it spans 3.5
units along the real axis and 2.0 along the imaginary axis, and both
spans shrink as 1/zoom.
"""

from dataclasses import dataclass

import numpy as np
from numba import jit, prange


CENTER_REAL = -0.5
VIEW_WIDTH = 3.5       # Real-axis span at zoom 1
VIEW_HEIGHT = 2.0      # Imaginary-axis span at zoom 1
ESCAPE_RADIUS = 2.0
ESCAPE_RADIUS_SQ = ESCAPE_RADIUS * ESCAPE_RADIUS


@jit(nopython=True, nogil=True, cache=True)
def pixel_to_complex(x, y, width, height, zoom):
    """
    Map a pixel to its sample point in the complex plane.

    Returns:
        (real, imag) as float64
    """
    cr = (x / width - 0.5) * VIEW_WIDTH / zoom + CENTER_REAL
    ci = (y / height - 0.5) * VIEW_HEIGHT / zoom
    return cr, ci


@jit(nopython=True, nogil=True, cache=True)
def escape_time(cr, ci, max_iter):
    """
    Iterate z -> z² + c from z = 0 and count completed iterations.

    Stops when |z| > 2 (checked as |z|² > 4) or when the count reaches
    max_iter. A return value equal to max_iter means bounded.
    """
    zr = 0.0
    zi = 0.0
    iteration = 0
    while iteration < max_iter and zr * zr + zi * zi <= ESCAPE_RADIUS_SQ:
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        iteration += 1
    return iteration


@jit(nopython=True, parallel=True, cache=True)
def _escape_field(width, height, max_iter, zoom):
    counts = np.empty((height, width), dtype=np.int32)
    for py in prange(height):
        for px in range(width):
            cr, ci = pixel_to_complex(px, py, width, height, zoom)
            counts[py, px] = escape_time(cr, ci, max_iter)
    return counts


@jit(nopython=True, nogil=True, cache=True)
def _escape_rows(width, height, max_iter, zoom, row_start, row_end):
    counts = np.empty((row_end - row_start, width), dtype=np.int32)
    for py in range(row_start, row_end):
        for px in range(width):
            cr, ci = pixel_to_complex(px, py, width, height, zoom)
            counts[py - row_start, px] = escape_time(cr, ci, max_iter)
    return counts


@dataclass(frozen=True, eq=False)
class EscapeField:
    """
    Per-pixel escape results for one render.

    Attributes:
        counts: (height, width) int32 array of escape counts
        max_iter: Iteration budget the counts were computed with
    """

    counts: np.ndarray
    max_iter: int

    @property
    def width(self):
        return self.counts.shape[1]

    @property
    def height(self):
        return self.counts.shape[0]

    @property
    def flat(self):
        """Escape counts in row-major (y-major, x-minor) order."""
        return self.counts.ravel()

    @property
    def bounded(self):
        """Boolean mask of points that never escaped."""
        return self.counts >= self.max_iter

    def result_at(self, x, y):
        """Escape count at pixel (x, y), or None if the point is bounded."""
        count = int(self.counts[y, x])
        if count >= self.max_iter:
            return None
        return count

    def __len__(self):
        return self.counts.size


def compute_field(spec, params):
    """
    Compute escape counts for every pixel of the image.

    Args:
        spec: ImageSpec with the grid dimensions
        params: RenderParams with max_iter and zoom

    Returns:
        EscapeField covering the whole grid (empty if either size is 0)
    """
    counts = _escape_field(int(spec.width), int(spec.height),
                           int(params.max_iter), float(params.zoom))
    return EscapeField(counts=counts, max_iter=int(params.max_iter))


def compute_rows(spec, params, row_start, row_end):
    """
    Compute escape counts for the rows in [row_start, row_end).

    The range is clipped to the image. Bands computed this way and
    stacked in order equal the full-frame result.

    Returns:
        (rows, width) int32 array
    """
    row_start = max(0, int(row_start))
    row_end = max(row_start, min(int(spec.height), int(row_end)))
    return _escape_rows(int(spec.width), int(spec.height), int(params.max_iter),
                        float(params.zoom), row_start, row_end)


def sample_window(zoom):
    """Width and height of the sampled complex-plane window."""
    return VIEW_WIDTH / zoom, VIEW_HEIGHT / zoom


def view_bounds(zoom):
    """
    Bounds of the sampled window as (re_min, re_max, im_min, im_max).

    Pixel 0 samples the min edge; the max edge is one pixel past the
    last sample.
    """
    w, h = sample_window(zoom)
    return (CENTER_REAL - w / 2, CENTER_REAL + w / 2, -h / 2, h / 2)


def warmup_jit():
    """
    Compile all kernels with small dummy inputs.

    Call once at startup so the first real render is not delayed by
    Numba compilation.
    """
    pixel_to_complex(0, 0, 4, 4, 1.0)
    escape_time(0.0, 0.0, 4)
    _escape_field(4, 4, 4, 1.0)
    _escape_rows(4, 4, 4, 1.0, 0, 2)
