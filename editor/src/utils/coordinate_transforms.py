"""Coordinate transformation utilities for the editing surface.

Provides conversion between the two coordinate systems:
- Screen space (pointer pixels, relative to the page/window, Y-down)
- Plane space (the infinite logical plane layers live on, Y-down)

The viewbox is the window of plane space mapped onto the canvas rectangle.
Each axis is mapped independently, so a viewbox whose proportions differ
from the canvas aspect ratio yields a non-uniform scale.
"""

import math

from models.transform import ViewBox


def round_half_up(value):
	"""Round to the nearest integer, halves upward (0.5 -> 1, -0.5 -> 0)"""
	return int(math.floor(value + 0.5))


def screen_to_plane(screen_x, screen_y, canvas_rect, view_box):
	"""Convert a screen pointer position to plane coordinates.
	
	Args:
		screen_x, screen_y: Pointer position in screen pixels
		canvas_rect: CanvasRect of the drawing surface
		view_box: ViewBox currently mapped onto the canvas
		
	Returns:
		(plane_x, plane_y)
	"""
	plane_x = view_box.x + (screen_x - canvas_rect.left) / canvas_rect.width * view_box.w
	plane_y = view_box.y + (screen_y - canvas_rect.top) / canvas_rect.height * view_box.h
	return plane_x, plane_y


def plane_to_screen(plane_x, plane_y, canvas_rect, view_box):
	"""Convert plane coordinates to a screen position (inverse of screen_to_plane).
	
	Args:
		plane_x, plane_y: Point in plane coordinates
		canvas_rect: CanvasRect of the drawing surface
		view_box: ViewBox currently mapped onto the canvas
		
	Returns:
		(screen_x, screen_y)
	"""
	screen_x = canvas_rect.left + (plane_x - view_box.x) / view_box.w * canvas_rect.width
	screen_y = canvas_rect.top + (plane_y - view_box.y) / view_box.h * canvas_rect.height
	return screen_x, screen_y


def screen_delta_to_plane(dx, dy, canvas_rect, view_box):
	"""Convert a screen-pixel delta to a plane delta (no origin offset)."""
	return dx / canvas_rect.width * view_box.w, dy / canvas_rect.height * view_box.h


def clamp_view_width(width, initial_width, max_zoom_in, max_zoom_out):
	"""Clamp a viewbox width to [initial/max_zoom_in, initial*max_zoom_out]."""
	return max(initial_width / max_zoom_in, min(initial_width * max_zoom_out, width))


def zoom_view_box(view_box, cursor_x, cursor_y, factor, initial_width, max_zoom_in, max_zoom_out):
	"""Scale the viewbox around a fixed plane point.
	
	The width is multiplied by factor and clamped; the height follows the
	same ratio (uniform zoom). The origin is recomputed so the plane point
	(cursor_x, cursor_y) stays under the cursor.
	
	Args:
		view_box: ViewBox before zooming
		cursor_x, cursor_y: Plane point under the cursor (computed before resizing)
		factor: Width multiplier (>1 zooms out, <1 zooms in)
		initial_width: Natural canvas width (zoom 1)
		max_zoom_in, max_zoom_out: Zoom limits relative to initial_width
		
	Returns:
		ViewBox after zooming
	"""
	new_w = clamp_view_width(view_box.w * factor, initial_width, max_zoom_in, max_zoom_out)
	scale = new_w / view_box.w
	new_x = cursor_x - (cursor_x - view_box.x) * scale
	new_y = cursor_y - (cursor_y - view_box.y) * scale
	return ViewBox(new_x, new_y, new_w, view_box.h * scale)


def pan_view_box(start_box, screen_dx, screen_dy, canvas_rect):
	"""Shift a viewbox by a screen drag measured from the gesture start.
	
	Dragging right moves the content right, so the origin moves left.
	
	Args:
		start_box: ViewBox captured when the pan started
		screen_dx, screen_dy: Total pointer movement in pixels
		canvas_rect: CanvasRect of the drawing surface
		
	Returns:
		ViewBox after panning
	"""
	dx, dy = screen_delta_to_plane(screen_dx, screen_dy, canvas_rect, start_box)
	return ViewBox(start_box.x - dx, start_box.y - dy, start_box.w, start_box.h)


def resize_view_box(view_box, old_width, old_height, new_width, new_height):
	"""Grow/shrink the viewbox with the canvas so on-screen scale is kept."""
	return ViewBox(view_box.x, view_box.y,
	               view_box.w * (new_width / old_width),
	               view_box.h * (new_height / old_height))
