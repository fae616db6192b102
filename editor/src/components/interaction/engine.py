"""
Pasteup Layer Editor - Interaction Engine

Turns raw pointer/keyboard input into LayerStore and ViewportModel mutations.

The engine owns exactly one gesture at a time (see transitions.py for the
entry rules). Moves mutate the model directly and rely on the store's change
notification for re-render; history is checkpointed once when a layer
gesture starts and persistence runs once when it ends.

Single-shot commands (wheel zoom, arrow nudge, z-order step) bypass the
state machine.

Usage:
    engine = InteractionEngine(layers, history, viewport, persist=session.persist)
    engine.set_canvas_rect(CanvasRect(0, 0, 800, 600))
    engine.pointer_down(Vec2(120, 80), engine.layer_at(Vec2(120, 80)), Modifiers())
    engine.pointer_move(Vec2(140, 90))
    engine.pointer_up()
"""

import logging
import math
from typing import Callable, Optional, Sequence

from constants import ARROW_KEY_MOVE_NORMAL, ARROW_KEY_MOVE_COARSE, MIN_LAYER_SIZE
from components.interaction.drag_context import DragContext
from components.interaction.states import (
	Effect, GestureState, Modifiers, NO_MODIFIERS, PointerEvent,
)
from components.interaction.transitions import transition
from models.transform import CanvasRect, Vec2
from utils.coordinate_transforms import round_half_up
from utils.hit_testing import topmost_layer_at


# Arrow direction -> unit plane offset (Y-down, so "up" is negative y)
NUDGE_DIRECTIONS = {
	'left': (-1, 0),
	'right': (1, 0),
	'up': (0, -1),
	'down': (0, 1),
}


class InteractionEngine:
	"""Gesture state machine driving the layer and viewport models"""

	def __init__(self, layers, history, viewport,
	             persist: Optional[Callable[[], None]] = None,
	             canvas_rect: Optional[CanvasRect] = None):
		"""
		Args:
			layers: LayerStore
			history: HistoryManager over the same store
			viewport: ViewportModel
			persist: Called after every committed edit (durable metadata write)
			canvas_rect: Screen rectangle of the drawing surface; defaults to
				the viewport's initial dimensions at (0, 0)
		"""
		self._logger = logging.getLogger('InteractionEngine')
		self._layers = layers
		self._history = history
		self._viewport = viewport
		self._persist = persist
		self._canvas_rect = canvas_rect or CanvasRect(
			0.0, 0.0, viewport.initial_width, viewport.initial_height)
		self._state = GestureState.IDLE
		self._drag: Optional[DragContext] = None
		self._modifiers = NO_MODIFIERS

	# ========================================
	# Properties
	# ========================================

	@property
	def state(self) -> GestureState:
		return self._state

	@property
	def drag_context(self) -> Optional[DragContext]:
		"""Data captured for the active gesture (None when idle)"""
		return self._drag

	@property
	def viewport(self):
		return self._viewport

	@property
	def canvas_rect(self) -> CanvasRect:
		return self._canvas_rect

	def set_canvas_rect(self, rect: CanvasRect):
		"""Update the on-screen rectangle of the drawing surface"""
		self._canvas_rect = rect

	def layer_at(self, screen_pos: Vec2) -> Optional[str]:
		"""Id of the topmost visible, unlocked layer under a screen point"""
		plane = self._viewport.screen_to_plane(screen_pos, self._canvas_rect)
		return topmost_layer_at(self._layers.get_layers(), plane.x, plane.y)

	# ========================================
	# Pointer gestures
	# ========================================

	def pointer_down(self, screen_pos: Vec2, target_layer_id: Optional[str],
	                 modifiers: Modifiers = NO_MODIFIERS) -> GestureState:
		"""Start a gesture; modifiers are latched for its whole duration"""
		target = self._layers.get_layer(target_layer_id) if target_layer_id else None
		new_state, effects = transition(self._state, PointerEvent.DOWN, modifiers, target)
		if new_state is self._state and not effects:
			return self._state

		self._modifiers = modifiers
		self._drag = DragContext(
			state=new_state,
			modifiers=modifiers,
			layer_id=target.id if target is not None and new_state.edits_layer else None,
			start_screen=Vec2(screen_pos.x, screen_pos.y),
			start_plane=self._viewport.screen_to_plane(screen_pos, self._canvas_rect),
		)
		self._state = new_state
		self._apply_effects(effects, target)
		self._logger.debug(f"Gesture start: {new_state.value} (layer {self._drag.layer_id})")
		return self._state

	def pointer_move(self, screen_pos: Vec2) -> bool:
		"""Apply a pointer move to the active gesture

		Returns:
			True if the model changed
		"""
		if self._state is GestureState.IDLE or self._drag is None:
			return False

		if self._state is GestureState.PANNING:
			delta = Vec2(screen_pos.x - self._drag.start_screen.x,
			             screen_pos.y - self._drag.start_screen.y)
			self._viewport.pan_from(self._drag.start_view_box, delta, self._canvas_rect)
			return True

		if self._state is GestureState.DRAGGING_LAYER:
			plane = self._viewport.screen_to_plane(screen_pos, self._canvas_rect)
			props = {
				'x': self._drag.start_x + (plane.x - self._drag.start_plane.x),
				'y': self._drag.start_y + (plane.y - self._drag.start_plane.y),
			}
		elif self._state is GestureState.SCALING:
			props = {
				'width': max(MIN_LAYER_SIZE, self._drag.start_width + (screen_pos.x - self._drag.start_screen.x)),
				'height': max(MIN_LAYER_SIZE, self._drag.start_height + (screen_pos.y - self._drag.start_screen.y)),
			}
		elif self._state is GestureState.SCALING_LOCKED:
			ratio = self._drag.start_height / self._drag.start_width
			width = max(MIN_LAYER_SIZE, self._drag.start_width + (screen_pos.x - self._drag.start_screen.x))
			props = {
				'width': width,
				'height': max(MIN_LAYER_SIZE, round_half_up(width * ratio)),
			}
		else:  # ROTATING
			props = self._rotation_towards(screen_pos)
			if props is None:
				return False

		return self._update_if_changed(props)

	def pointer_up(self) -> GestureState:
		"""End the active gesture (commit)"""
		return self._end_gesture(PointerEvent.UP)

	def pointer_cancel(self) -> GestureState:
		"""Pointer left/cancelled: handled exactly like pointer-up"""
		return self._end_gesture(PointerEvent.CANCEL)

	def modifiers_changed(self, modifiers: Modifiers):
		"""Track live modifier state; releasing the pan key ends an active pan"""
		self._modifiers = modifiers
		if self._state is GestureState.PANNING and not modifiers.pan:
			self._end_gesture(PointerEvent.CANCEL)

	# ========================================
	# Touch (single touch = layer drag)
	# ========================================

	def touch_start(self, points: Sequence[Vec2], target_layer_id: Optional[str]) -> GestureState:
		if len(points) != 1:
			return self._state
		return self.pointer_down(points[0], target_layer_id, NO_MODIFIERS)

	def touch_move(self, points: Sequence[Vec2]) -> bool:
		if len(points) != 1 or self._state is not GestureState.DRAGGING_LAYER:
			return False
		return self.pointer_move(points[0])

	def touch_end(self, remaining_points: Sequence[Vec2] = ()) -> GestureState:
		"""Commit once every finger has been lifted"""
		if remaining_points:
			return self._state
		return self.pointer_up()

	# ========================================
	# Single-shot commands
	# ========================================

	def wheel(self, screen_pos: Vec2, delta_y: float) -> bool:
		"""Zoom one notch around the cursor (delta_y > 0 zooms out)

		Returns:
			False for a zero delta (horizontal-only scroll)
		"""
		if delta_y == 0:
			return False
		self._viewport.zoom_at(screen_pos, self._canvas_rect, zoom_out=delta_y > 0)
		return True

	def nudge(self, direction: str, secondary: bool = False) -> bool:
		"""Move the selected layer by a constant on-screen distance

		Args:
			direction: 'left', 'right', 'up' or 'down'
			secondary: Coarse step (10 instead of 1)

		Returns:
			True if a layer was moved
		"""
		try:
			unit_x, unit_y = NUDGE_DIRECTIONS[direction]
		except KeyError:
			raise ValueError(f"Unknown nudge direction '{direction}'") from None

		layer = self._layers.get_selected_layer()
		if layer is None or layer.locked:
			return False

		step = (ARROW_KEY_MOVE_COARSE if secondary else ARROW_KEY_MOVE_NORMAL) / (self._viewport.zoom_level or 1.0)
		self._history.checkpoint()
		self._layers.update_layer(layer.id, {'x': layer.x + unit_x * step, 'y': layer.y + unit_y * step})
		self._commit()
		return True

	def reorder_selected(self, step: int) -> bool:
		"""Move the selected layer up (+1) or down (-1) the stack

		Returns:
			True if the stack order changed
		"""
		layer_id = self._layers.get_selected_layer_id()
		if layer_id is None:
			return False
		index = self._layers.index_of(layer_id)
		if index < 0:
			return False
		new_index = max(0, min(index + step, len(self._layers) - 1))
		if new_index == index:
			return False
		self._history.checkpoint()
		self._layers.reorder_layer(layer_id, new_index)
		self._commit()
		return True

	# ========================================
	# Internals
	# ========================================

	def _apply_effects(self, effects, target):
		for effect in effects:
			if effect is Effect.SELECT_TARGET:
				self._layers.select_layer(target.id)
			elif effect is Effect.CHECKPOINT:
				self._history.checkpoint()
			elif effect is Effect.CAPTURE_VIEWBOX:
				self._drag.start_view_box = self._viewport.view_box
			elif effect is Effect.CAPTURE_POSITION:
				self._drag.start_x = target.x
				self._drag.start_y = target.y
			elif effect is Effect.CAPTURE_GEOMETRY:
				self._drag.start_width = target.width
				self._drag.start_height = target.height
				self._drag.start_rotation = target.rotation
			elif effect is Effect.PERSIST:
				self._commit()

	def _end_gesture(self, event):
		new_state, effects = transition(self._state, event, self._modifiers)
		if self._drag is not None:
			self._logger.debug(f"Gesture end: {self._state.value} (changed: {self._drag.moved})")
		self._state = new_state
		self._apply_effects(effects, None)
		self._drag = None
		return self._state

	def _rotation_towards(self, screen_pos):
		layer = self._layers.get_layer(self._drag.layer_id)
		if layer is None:
			return None
		plane = self._viewport.screen_to_plane(screen_pos, self._canvas_rect)
		cx, cy = layer.center
		angle = math.degrees(math.atan2(plane.y - cy, plane.x - cx))
		return {'rotation': round_half_up(angle)}

	def _update_if_changed(self, props):
		layer = self._layers.get_layer(self._drag.layer_id)
		if layer is None:
			# Layer vanished mid-gesture (external delete)
			return False
		if all(getattr(layer, key) == value for key, value in props.items()):
			return False
		self._layers.update_layer(layer.id, props)
		self._drag.moved = True
		return True

	def _commit(self):
		if self._persist is not None:
			self._persist()
