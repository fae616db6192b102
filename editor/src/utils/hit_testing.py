"""Hit testing of plane points against the layer stack.

Each layer is a rectangle rotated about its center. The whole stack is
tested at once with numpy; the topmost (highest index) hit wins.
"""

import numpy as np


def layer_arrays(layers):
	"""Pack layer geometry into arrays (x, y, w, h, rotation_rad, pickable)"""
	count = len(layers)
	geometry = np.empty((count, 5), dtype=np.float64)
	pickable = np.empty(count, dtype=bool)
	for i, layer in enumerate(layers):
		geometry[i] = (layer.x, layer.y, layer.width, layer.height, np.radians(layer.rotation))
		pickable[i] = layer.visible and not layer.locked
	return geometry, pickable


def contains_point(layers, plane_x, plane_y):
	"""Boolean mask: which layers' rotated rectangles contain the point
	
	Hidden and locked layers never match (they ignore pointer input).
	"""
	if not layers:
		return np.zeros(0, dtype=bool)
	geometry, pickable = layer_arrays(layers)
	x, y, w, h, theta = geometry.T
	cx = x + w / 2.0
	cy = y + h / 2.0
	dx = plane_x - cx
	dy = plane_y - cy
	# Rotate the point into each layer's unrotated frame
	cos_t = np.cos(theta)
	sin_t = np.sin(theta)
	local_x = dx * cos_t + dy * sin_t
	local_y = -dx * sin_t + dy * cos_t
	inside = (np.abs(local_x) <= w / 2.0) & (np.abs(local_y) <= h / 2.0)
	return inside & pickable


def topmost_layer_at(layers, plane_x, plane_y):
	"""Return the id of the topmost pickable layer under the point, or None"""
	hits = np.flatnonzero(contains_point(layers, plane_x, plane_y))
	if hits.size == 0:
		return None
	return layers[int(hits[-1])].id
