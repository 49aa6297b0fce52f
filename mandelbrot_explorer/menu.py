"""
On-screen controls for the Mandelbrot explorer.

Two small windows are drawn over the fractal:
- "Zoom" (bottom-right): a slider over the allowed zoom range
- "Gradient" (top-right): radio buttons for the colorization strategy
"""

import pygame


TITLE_HEIGHT = 20
PANEL_WIDTH = 200
PANEL_MARGIN = 10


class Slider:
    """A horizontal slider for a float value in [min_value, max_value]."""

    def __init__(self, x, y, width, min_value, max_value, value):
        self.x = x
        self.y = y
        self.width = width
        self.height = 18
        self.min_value = min_value
        self.max_value = max_value
        self.value = min_value
        self.dragging = False
        self.set_value(value)

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def set_value(self, value):
        """Set the value, clamped to the slider range. Returns the new value."""
        self.value = max(self.min_value, min(self.max_value, value))
        return self.value

    def _value_at(self, mx):
        t = (mx - self.x) / self.width
        t = max(0.0, min(1.0, t))
        return self.min_value + t * (self.max_value - self.min_value)

    def handle_event(self, event):
        """Returns (handled, value_changed)."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.get_rect().collidepoint(event.pos):
                self.dragging = True
                old = self.value
                self.set_value(self._value_at(event.pos[0]))
                return True, self.value != old

        elif event.type == pygame.MOUSEMOTION and self.dragging:
            old = self.value
            self.set_value(self._value_at(event.pos[0]))
            return True, self.value != old

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging:
            self.dragging = False
            return True, False

        return False, False

    def draw(self, screen, font, small_font):
        rect = self.get_rect()
        track = pygame.Rect(rect.left, rect.centery - 3, rect.width, 6)
        pygame.draw.rect(screen, (70, 70, 70), track)
        pygame.draw.rect(screen, (100, 100, 100), track, 1)

        t = (self.value - self.min_value) / (self.max_value - self.min_value)
        knob_x = int(rect.left + t * rect.width)
        color = (140, 180, 220) if self.dragging else (200, 200, 200)
        pygame.draw.circle(screen, color, (knob_x, rect.centery), 7)


class RadioGroup:
    """A vertical list of mutually exclusive options."""

    def __init__(self, x, y, width, options, selected_idx=0):
        self.x = x
        self.y = y
        self.width = width
        self.row_height = 22
        self.options = list(options)
        self.selected_idx = selected_idx

    def get_value(self):
        return self.options[self.selected_idx]

    def set_value(self, value):
        if value in self.options:
            self.selected_idx = self.options.index(value)

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, len(self.options) * self.row_height)

    def handle_event(self, event):
        """Returns (handled, value_changed)."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            mx, my = event.pos
            for i in range(len(self.options)):
                row_rect = pygame.Rect(self.x, self.y + i * self.row_height,
                                       self.width, self.row_height)
                if row_rect.collidepoint(mx, my):
                    old_idx = self.selected_idx
                    self.selected_idx = i
                    return True, old_idx != i
        return False, False

    def draw(self, screen, font, small_font):
        for i, opt in enumerate(self.options):
            row_y = self.y + i * self.row_height
            center = (self.x + 9, row_y + self.row_height // 2)
            pygame.draw.circle(screen, (180, 180, 180), center, 6, 1)
            if i == self.selected_idx:
                pygame.draw.circle(screen, (140, 200, 140), center, 3)
            color = (255, 255, 255) if i == self.selected_idx else (180, 180, 180)
            text = small_font.render(str(opt), True, color)
            screen.blit(text, (self.x + 22, row_y + 4))


class ControlPanel:
    """
    The zoom and gradient windows.

    Attributes:
        zoom: Current slider value
        strategy_name: Selected radio option
    """

    def __init__(self, screen_width, screen_height, strategy_names, strategy_name,
                 zoom=1.0, zoom_min=0.1, zoom_max=5.0):
        self.screen_width = screen_width
        self.screen_height = screen_height

        self.font = None
        self.small_font = None

        # Gradient window, anchored top-right
        gradient_height = TITLE_HEIGHT + len(strategy_names) * 22 + 10
        self.gradient_rect = pygame.Rect(
            screen_width - PANEL_WIDTH - PANEL_MARGIN, PANEL_MARGIN,
            PANEL_WIDTH, gradient_height
        )
        selected = strategy_names.index(strategy_name) if strategy_name in strategy_names else 0
        self.radio = RadioGroup(
            self.gradient_rect.x + 8, self.gradient_rect.y + TITLE_HEIGHT + 4,
            PANEL_WIDTH - 16, strategy_names, selected
        )

        # Zoom window, anchored bottom-right
        zoom_height = TITLE_HEIGHT + 50
        self.zoom_rect = pygame.Rect(
            screen_width - PANEL_WIDTH - PANEL_MARGIN,
            screen_height - zoom_height - PANEL_MARGIN,
            PANEL_WIDTH, zoom_height
        )
        self.slider = Slider(
            self.zoom_rect.x + 12, self.zoom_rect.y + TITLE_HEIGHT + 26,
            PANEL_WIDTH - 24, zoom_min, zoom_max, zoom
        )

    @property
    def zoom(self):
        return self.slider.value

    @property
    def strategy_name(self):
        return self.radio.get_value()

    def set_zoom(self, zoom):
        """Move the slider (e.g. from the keyboard). Returns the clamped zoom."""
        return self.slider.set_value(zoom)

    def init_fonts(self):
        pygame.font.init()
        self.font = pygame.font.SysFont('Arial', 14)
        self.small_font = pygame.font.SysFont('Arial', 12)

    def handle_event(self, event):
        """
        Handle a pygame event.
        Returns (handled, need_recompute).
        """
        handled, changed = self.slider.handle_event(event)
        if handled:
            return True, changed

        handled, changed = self.radio.handle_event(event)
        if handled:
            return True, changed

        # Swallow other clicks on the panels so they don't reach the view
        if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            if self.point_in_menu(event.pos):
                return True, False

        return False, False

    def point_in_menu(self, pos):
        return self.gradient_rect.collidepoint(pos) or self.zoom_rect.collidepoint(pos)

    def draw(self, screen):
        if self.font is None:
            self.init_fonts()

        self._draw_window(screen, self.gradient_rect, "Gradient")
        self.radio.draw(screen, self.font, self.small_font)

        self._draw_window(screen, self.zoom_rect, "Zoom")
        label = self.small_font.render(f"Zoom: {self.zoom:.2f}", True, (220, 220, 220))
        screen.blit(label, (self.zoom_rect.x + 10, self.zoom_rect.y + TITLE_HEIGHT + 4))
        self.slider.draw(screen, self.font, self.small_font)

    def _draw_window(self, screen, rect, title):
        pygame.draw.rect(screen, (45, 45, 45), rect)
        pygame.draw.rect(screen, (100, 100, 100), rect, 1)
        title_rect = pygame.Rect(rect.x, rect.y, rect.width, TITLE_HEIGHT)
        pygame.draw.rect(screen, (60, 60, 60), title_rect)
        text = self.font.render(title, True, (230, 230, 230))
        screen.blit(text, (rect.x + 8, rect.y + 2))
