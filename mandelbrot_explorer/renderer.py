"""
Render orchestration: escape counts -> colors -> pixel buffer.

Provides:
- render(): the fused, synchronous full-frame entry point
- render_tiled(): same result, rows split into bands on a thread pool
- MandelbrotRenderer: background rendering for the GUI, where a newer
  request supersedes the one in flight (checked between row bands)
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from .compute import compute_field, compute_rows
from .colormaps import as_strategy


logger = logging.getLogger(__name__)

DEFAULT_BAND_HEIGHT = 32


@dataclass(frozen=True)
class PixelBuffer:
    """
    Row-major RGBA pixels of one rendered frame.

    len() is the size in bytes (width * height * 4).
    """

    width: int
    height: int
    data: bytes

    def __len__(self):
        return len(self.data)

    def as_array(self):
        """Read-only (height, width, 4) uint8 view of the pixels."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)

    def pixel(self, x, y):
        """RGBA tuple of pixel (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        i = (y * self.width + x) * 4
        return tuple(self.data[i:i + 4])

    @classmethod
    def from_array(cls, rgba):
        height, width = rgba.shape[:2]
        return cls(width=width, height=height, data=np.ascontiguousarray(rgba).tobytes())


def _band_ranges(height, band_height):
    band_height = max(1, int(band_height))
    return [(start, min(start + band_height, height))
            for start in range(0, height, band_height)]


def render(spec, params, strategy):
    """
    Render a full frame.

    Args:
        spec: ImageSpec
        params: RenderParams
        strategy: Gradient, GradientStrategy or FirePalette

    Returns:
        PixelBuffer with width * height RGBA pixels
    """
    field = compute_field(spec, params)
    rgba = as_strategy(strategy).apply(field.counts, params.max_iter)
    return PixelBuffer.from_array(rgba)


def render_tiled(spec, params, strategy, band_height=DEFAULT_BAND_HEIGHT, max_workers=None):
    """
    Render a full frame with rows split into disjoint bands.

    Each band is computed by a worker thread; the bands are joined in
    row order before colorization. The output equals render().
    """
    bands = _band_ranges(spec.height, band_height)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        parts = list(pool.map(lambda band: compute_rows(spec, params, *band), bands))
    if parts:
        counts = np.concatenate(parts, axis=0)
    else:
        counts = np.empty((0, spec.width), dtype=np.int32)
    rgba = as_strategy(strategy).apply(counts, params.max_iter)
    return PixelBuffer.from_array(rgba)


class MandelbrotRenderer:
    """
    Renders frames on a background thread.

    Usage:
        renderer = MandelbrotRenderer(ImageSpec(800, 800))
        renderer.request(RenderParams(100, zoom), strategy)

        # In your game loop:
        result = renderer.get_result()
        if result is not None:
            buffer, params, strategy_name = result
            display(buffer)

    Only the newest request is ever delivered. A request made while a
    render is running makes that render stop at the next band boundary
    and be discarded.

    Attributes:
        spec: Image dimensions
        band_height: Rows computed between cancellation checks
    """

    def __init__(self, spec, band_height=DEFAULT_BAND_HEIGHT):
        self.spec = spec
        self.band_height = band_height

        self.computing = False
        self.pending = None      # (params, strategy) waiting to be rendered
        self.result = None       # (PixelBuffer, params, strategy name)
        self.generation = 0      # bumped on every request
        self.lock = threading.Lock()
        self.idle = threading.Event()
        self.idle.set()

    def request(self, params, strategy):
        """Schedule a render, superseding any render in flight."""
        strategy = as_strategy(strategy)
        with self.lock:
            self.generation += 1
            self.pending = (params, strategy)
            if not self.computing:
                self.computing = True
                self.idle.clear()
                thread = threading.Thread(target=self._compute_thread, daemon=True)
                thread.start()

    def _compute_thread(self):
        """Background loop: render pending requests until none remain."""
        while True:
            with self.lock:
                job = self.pending
                self.pending = None
                generation = self.generation
                if job is None:
                    self.computing = False
                    self.idle.set()
                    break

            params, strategy = job
            try:
                buffer = self._render(params, strategy, generation)
            except Exception:
                logger.exception("Render failed for %s", params)
                buffer = None

            if buffer is None:
                continue
            with self.lock:
                if generation == self.generation:
                    self.result = (buffer, params, strategy.name)

    def _render(self, params, strategy, generation):
        """Render band by band; return None if superseded part way."""
        start = time.perf_counter()
        parts = []
        for row_start, row_end in _band_ranges(self.spec.height, self.band_height):
            if self._superseded(generation):
                logger.debug("Render at zoom %.3f superseded after %d rows",
                             params.zoom, row_start)
                return None
            parts.append(compute_rows(self.spec, params, row_start, row_end))

        if parts:
            counts = np.concatenate(parts, axis=0)
        else:
            counts = np.empty((0, self.spec.width), dtype=np.int32)
        rgba = strategy.apply(counts, params.max_iter)
        logger.debug("Rendered %dx%d at zoom %.3f with %s in %.1f ms",
                     self.spec.width, self.spec.height, params.zoom, strategy.name,
                     (time.perf_counter() - start) * 1000)
        return PixelBuffer.from_array(rgba)

    def _superseded(self, generation):
        with self.lock:
            return generation != self.generation

    def get_result(self):
        """
        Get the latest finished frame if one is ready.

        Returns:
            (PixelBuffer, RenderParams, strategy name) once per finished
            frame, otherwise None
        """
        with self.lock:
            result = self.result
            self.result = None
        return result

    def wait(self, timeout=None):
        """Block until no render is running. Returns False on timeout."""
        return self.idle.wait(timeout)
