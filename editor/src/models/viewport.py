"""Viewport model: the visible window over the infinite plane.

Holds the viewbox, the initial (natural) canvas dimensions and the zoom
factor derived from them. The zoom is normally recomputed from the viewbox
(initial_width / viewbox.w); set_zoom() writes it directly for callers that
already computed a consistent viewbox.
"""

import logging
from typing import Optional

from constants import (
    DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT,
    ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR, MAX_ZOOM_IN, MAX_ZOOM_OUT,
)
from models.events import EventBus, MODEL_CHANGED, ZOOM_RESET_REQUESTED
from models.transform import CanvasRect, Vec2, ViewBox
from utils.coordinate_transforms import (
    screen_to_plane, plane_to_screen, zoom_view_box, pan_view_box, resize_view_box,
)


class ViewportModel:
    """Viewbox, initial dimensions and derived zoom level"""

    def __init__(self, events: EventBus,
                 initial_width: float = DEFAULT_CANVAS_WIDTH,
                 initial_height: float = DEFAULT_CANVAS_HEIGHT):
        self._logger = logging.getLogger('ViewportModel')
        self._events = events
        self._initial_width = float(initial_width)
        self._initial_height = float(initial_height)
        self._view_box = ViewBox(0.0, 0.0, self._initial_width, self._initial_height)
        self._zoom_level = 1.0

    # ========================================
    # Properties
    # ========================================

    @property
    def view_box(self) -> ViewBox:
        """Current viewbox (frozen, safe to hand out)"""
        return self._view_box

    @property
    def zoom_level(self) -> float:
        return self._zoom_level

    @property
    def initial_width(self) -> float:
        return self._initial_width

    @property
    def initial_height(self) -> float:
        return self._initial_height

    # ========================================
    # Mutations
    # ========================================

    def set_view_box(self, box: ViewBox, notify: bool = True) -> None:
        """Replace the viewbox and recompute zoom = initial_width / box.w"""
        self._view_box = box
        self._zoom_level = self._initial_width / box.w
        if notify:
            self._events.emit(MODEL_CHANGED)

    def set_zoom(self, level: float) -> None:
        """Set the zoom factor without touching the viewbox (no notification)"""
        self._zoom_level = level

    def set_initial_dimensions(self, width: float, height: float) -> None:
        """Record the natural canvas size used by zoom computations"""
        if width <= 0 or height <= 0:
            raise ValueError(f"Initial dimensions must be positive, got {width}x{height}")
        self._initial_width = float(width)
        self._initial_height = float(height)

    def reset_to_fit(self, initial_width: Optional[float] = None,
                     initial_height: Optional[float] = None) -> None:
        """Show the natural canvas at the origin with zoom 1"""
        if initial_width is not None and initial_height is not None:
            self.set_initial_dimensions(initial_width, initial_height)
        self._view_box = ViewBox(0.0, 0.0, self._initial_width, self._initial_height)
        self._zoom_level = 1.0
        self._logger.debug(f"Reset to fit {self._initial_width}x{self._initial_height}")
        self._events.emit(MODEL_CHANGED)

    def request_zoom_reset(self) -> None:
        """Ask the surface to fit the canvas (it answers with reset_to_fit)"""
        self._events.emit(ZOOM_RESET_REQUESTED)

    def handle_canvas_resize(self, width: float, height: float) -> None:
        """Adopt a new canvas size, keeping the on-screen scale of the content"""
        if width <= 0 or height <= 0:
            return
        new_box = resize_view_box(self._view_box, self._initial_width, self._initial_height, width, height)
        self.set_initial_dimensions(width, height)
        self.set_view_box(new_box)

    # ========================================
    # Coordinate helpers
    # ========================================

    def screen_to_plane(self, point: Vec2, canvas_rect: CanvasRect) -> Vec2:
        """Translate a raw pointer position into plane coordinates"""
        return Vec2(*screen_to_plane(point.x, point.y, canvas_rect, self._view_box))

    def plane_to_screen(self, point: Vec2, canvas_rect: CanvasRect) -> Vec2:
        return Vec2(*plane_to_screen(point.x, point.y, canvas_rect, self._view_box))

    def zoom_at(self, screen_point: Vec2, canvas_rect: CanvasRect, zoom_out: bool) -> ViewBox:
        """One wheel notch of zoom keeping the plane point under the cursor fixed"""
        cursor = self.screen_to_plane(screen_point, canvas_rect)
        factor = ZOOM_OUT_FACTOR if zoom_out else ZOOM_IN_FACTOR
        new_box = zoom_view_box(self._view_box, cursor.x, cursor.y, factor,
                                self._initial_width, MAX_ZOOM_IN, MAX_ZOOM_OUT)
        self.set_view_box(new_box)
        self.set_zoom(self._initial_width / new_box.w)
        return new_box

    def pan_from(self, start_box: ViewBox, screen_delta: Vec2, canvas_rect: CanvasRect) -> ViewBox:
        """Pan relative to the viewbox captured at gesture start"""
        new_box = pan_view_box(start_box, screen_delta.x, screen_delta.y, canvas_rect)
        self.set_view_box(new_box)
        return new_box
