"""Gesture states, pointer events, side effects and modifier snapshot.

These are plain enums/dataclasses so the transition table can be tested
without any drawing surface.
"""

from dataclasses import dataclass
from enum import Enum


class GestureState(Enum):
	"""Exactly one active gesture at a time"""
	IDLE = 'idle'
	PANNING = 'panning'
	DRAGGING_LAYER = 'dragging_layer'
	SCALING = 'scaling'
	SCALING_LOCKED = 'scaling_locked'
	ROTATING = 'rotating'

	@property
	def edits_layer(self):
		"""True for gestures that mutate layer content (and were checkpointed)"""
		return self in (GestureState.DRAGGING_LAYER, GestureState.SCALING,
		                GestureState.SCALING_LOCKED, GestureState.ROTATING)


class PointerEvent(Enum):
	DOWN = 'down'
	UP = 'up'
	CANCEL = 'cancel'


class Effect(Enum):
	"""Side effects requested by a transition, applied by the engine in order"""
	SELECT_TARGET = 'select_target'
	CHECKPOINT = 'checkpoint'
	CAPTURE_VIEWBOX = 'capture_viewbox'
	CAPTURE_POSITION = 'capture_position'
	CAPTURE_GEOMETRY = 'capture_geometry'
	PERSIST = 'persist'


@dataclass(frozen=True)
class Modifiers:
	"""Modifier keys latched at pointer-down

	pan: pan key (Space) held
	transform: transform key (Alt) held
	rotate: rotate key (R) held, only meaningful with transform
	secondary: Shift held (proportional scale, coarse nudge)
	"""
	pan: bool = False
	transform: bool = False
	rotate: bool = False
	secondary: bool = False


NO_MODIFIERS = Modifiers()
