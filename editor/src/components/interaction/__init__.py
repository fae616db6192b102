"""Pointer/keyboard interaction: gesture state machine and its engine."""

from components.interaction.states import Effect, GestureState, Modifiers, NO_MODIFIERS, PointerEvent
from components.interaction.drag_context import DragContext
from components.interaction.transitions import transition
from components.interaction.engine import InteractionEngine

__all__ = [
	'Effect', 'GestureState', 'Modifiers', 'NO_MODIFIERS', 'PointerEvent',
	'DragContext', 'transition', 'InteractionEngine',
]
