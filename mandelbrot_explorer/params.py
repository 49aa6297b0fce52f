"""
Value types shared by the computation, colorization and GUI layers.

ImageSpec and RenderParams are immutable and describe one render.
ViewState is the mutable "current settings" object owned by the GUI;
it is turned into a RenderParams each time a frame is requested.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageSpec:
    """Pixel grid dimensions, fixed for a session."""

    width: int
    height: int

    @property
    def pixel_count(self):
        return self.width * self.height


@dataclass(frozen=True)
class RenderParams:
    """Iteration budget and zoom factor for a single render."""

    max_iter: int
    zoom: float = 1.0


@dataclass
class ViewState:
    """
    Current render settings as chosen by the user.

    Attributes:
        zoom: Zoom factor (1.0 shows the classic overview)
        strategy_name: Catalog gradient name or the fire palette name
    """

    zoom: float = 1.0
    strategy_name: str = 'Rainbow'

    def render_params(self, max_iter):
        return RenderParams(max_iter=max_iter, zoom=self.zoom)
