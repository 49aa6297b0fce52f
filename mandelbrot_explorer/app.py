"""
Main application module for the Mandelbrot explorer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- User input (zoom slider, gradient selection, keyboard, mouse wheel)
- Requesting renders and displaying finished frames

and the command-line entry point main().
"""

import logging
from argparse import ArgumentParser

import pygame

from .colormaps import Gradient, parse_hex_color, resolve_strategy, strategy_names
from .colormaps import warmup_jit as warmup_colormaps
from .compute import warmup_jit as warmup_compute
from .menu import ControlPanel
from .params import ImageSpec, ViewState
from .renderer import MandelbrotRenderer, render
from .settings import build_catalog, load_settings


logger = logging.getLogger(__name__)

CUSTOM_GRADIENT_NAME = 'Custom'


class MandelbrotApp:
    """
    Main application class for the Mandelbrot explorer.

    Owns the pygame window and the ViewState, and re-renders the whole
    frame whenever a control changes.
    """

    def __init__(self, settings, catalog, view=None):
        """
        Initialize the application.

        Args:
            settings: dict from load_settings()
            catalog: GradientCatalog offered in the gradient panel
            view: Initial ViewState (default: zoom 1, default gradient)
        """
        self.settings = settings
        self.catalog = catalog
        self.spec = ImageSpec(int(settings['width']), int(settings['height']))
        self.max_iter = int(settings['max_iter'])
        self.zoom_min = float(settings['zoom_min'])
        self.zoom_max = float(settings['zoom_max'])
        self.zoom_step = float(settings['zoom_step'])
        self.view = view or ViewState(zoom=1.0, strategy_name=settings['default_gradient'])

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Components
        self.renderer = None
        self.panel = None

        self.current_surface = None
        self.waiting = False     # a requested frame has not arrived yet
        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            self._handle_events()
            self._check_render_result()
            self._draw()
            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.spec.width, self.spec.height))
        pygame.display.set_caption("Mandelbrot Set")
        self.clock = pygame.time.Clock()

    def _init_components(self):
        """Initialize renderer and control panel."""
        self.renderer = MandelbrotRenderer(self.spec, band_height=int(self.settings['band_height']))
        self.panel = ControlPanel(
            self.spec.width, self.spec.height,
            strategy_names(self.catalog), self.view.strategy_name,
            zoom=self.view.zoom, zoom_min=self.zoom_min, zoom_max=self.zoom_max
        )
        # The slider clamps, keep the view in sync with it
        self.view.zoom = self.panel.zoom

    def _warmup_and_initial_render(self):
        """Warm up JIT and render the first frame synchronously."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_compute()
        warmup_colormaps()

        strategy = resolve_strategy(self.view.strategy_name, self.catalog)
        buffer = render(self.spec, self.view.render_params(self.max_iter), strategy)
        self._show(buffer)
        pygame.display.set_caption("Mandelbrot Set")
        logger.info("Ready: %dx%d, max_iter=%d, gradient=%s",
                    self.spec.width, self.spec.height, self.max_iter, self.view.strategy_name)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                continue

            # Controls get first crack at events
            handled, need_recompute = self.panel.handle_event(event)
            if need_recompute:
                self._apply_panel_settings()
            if handled:
                continue

            if event.type == pygame.MOUSEWHEEL:
                self._step_zoom(1 if event.y > 0 else -1)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _apply_panel_settings(self):
        """Copy the control values into the view and re-render."""
        self.view.zoom = self.panel.zoom
        self.view.strategy_name = self.panel.strategy_name
        self._request_render()

    def _step_zoom(self, direction):
        self.panel.set_zoom(self.view.zoom + direction * self.zoom_step)
        self._apply_panel_settings()

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_r:
            self.panel.set_zoom(1.0)
            self._apply_panel_settings()
        elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._step_zoom(1)
        elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self._step_zoom(-1)
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def _request_render(self):
        strategy = resolve_strategy(self.view.strategy_name, self.catalog)
        self.renderer.request(self.view.render_params(self.max_iter), strategy)
        self.waiting = True
        pygame.display.set_caption("Computing...")

    def _check_render_result(self):
        """
        Pick up a finished background render, if any.

        If the renderer went idle without delivering a frame (the render
        failed), the last good frame stays on screen.
        """
        result = self.renderer.get_result()
        if result is not None:
            buffer, params, name = result
            self._show(buffer)
            self.waiting = False
            pygame.display.set_caption("Mandelbrot Set")
            logger.debug("Displayed zoom %.2f with %s", params.zoom, name)
        elif self.waiting and not self.renderer.computing:
            self.waiting = False
            pygame.display.set_caption("Mandelbrot Set")
            logger.warning("Render finished without a frame; keeping the previous one")

    def _show(self, buffer):
        rgb = buffer.as_array()[:, :, :3]
        self.current_surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))

    def _draw(self):
        """Draw the current frame."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))
        self.panel.draw(self.screen)
        pygame.display.flip()


def build_parser():
    parser = ArgumentParser(prog='mandelbrot-explorer',
                            description='Interactive Mandelbrot set explorer.')

    parser.add_argument('--width', type=int, help='window width in pixels')
    parser.add_argument('--height', type=int, help='window height in pixels')
    parser.add_argument('--max-iter', type=int, dest='max_iter',
                        help='maximum number of iterations per point')
    parser.add_argument('--zoom', type=float, default=1.0,
                        help='initial zoom factor (clamped to the slider range)')
    parser.add_argument('--gradient', type=str,
                        help='initial gradient name, or "Fire" for the polynomial palette')
    parser.add_argument('--custom', nargs=2, metavar=('START', 'END'),
                        help='add a custom gradient from two hex colors and select it')
    parser.add_argument('--settings', type=str, help='path to a settings.json file')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')

    return parser


def configure(args, parser):
    """
    Build (settings, catalog, view) from parsed command-line arguments.

    Command-line values override the settings file.
    """
    settings = load_settings(args.settings)
    for key in ('width', 'height', 'max_iter'):
        value = getattr(args, key)
        if value is not None:
            if value <= 0:
                parser.error(f"--{key.replace('_', '-')} must be positive")
            settings[key] = value

    catalog = build_catalog(settings)
    strategy_name = args.gradient or settings['default_gradient']

    if args.custom:
        try:
            gradient = Gradient(parse_hex_color(args.custom[0]), parse_hex_color(args.custom[1]))
        except ValueError as e:
            parser.error(str(e))
        catalog = catalog.with_gradient(CUSTOM_GRADIENT_NAME, gradient)
        if args.gradient is None:
            strategy_name = CUSTOM_GRADIENT_NAME

    if strategy_name not in strategy_names(catalog):
        parser.error(f"unknown gradient {strategy_name!r}; "
                     f"choose from {', '.join(strategy_names(catalog))}")
    if args.zoom <= 0:
        parser.error("--zoom must be positive")

    return settings, catalog, ViewState(zoom=args.zoom, strategy_name=strategy_name)


def run(settings=None, catalog=None, view=None):
    """
    Run the Mandelbrot explorer.

    Args:
        settings: dict from load_settings() (default: packaged settings)
        catalog: GradientCatalog (default: built from settings)
        view: Initial ViewState
    """
    settings = settings or load_settings()
    catalog = catalog or build_catalog(settings)
    app = MandelbrotApp(settings, catalog, view)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(message)s')
    settings, catalog, view = configure(args, parser)
    run(settings, catalog, view)
