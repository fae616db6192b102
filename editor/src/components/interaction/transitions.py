"""Pure gesture transition table.

transition(state, event, modifiers, target) -> (new_state, effects)

Entry priority on pointer-down (only from IDLE):
1. pan modifier held -> PANNING (no target needed)
2. unlocked target + transform modifier -> ROTATING / SCALING_LOCKED / SCALING
3. unlocked target -> DRAGGING_LAYER
4. otherwise stay IDLE (click-through)

Layer gestures checkpoint at entry, before any move mutates the layer, and
persist on exit. Pan never checkpoints and never persists.
"""

from components.interaction.states import Effect, GestureState, PointerEvent


_LAYER_ENTRY = (Effect.SELECT_TARGET, Effect.CHECKPOINT)


def _enter_from_idle(modifiers, target):
	if modifiers.pan:
		return GestureState.PANNING, (Effect.CAPTURE_VIEWBOX,)

	if target is None or target.locked:
		return GestureState.IDLE, ()

	if modifiers.transform:
		if modifiers.rotate:
			state = GestureState.ROTATING
		elif modifiers.secondary:
			state = GestureState.SCALING_LOCKED
		else:
			state = GestureState.SCALING
		return state, _LAYER_ENTRY + (Effect.CAPTURE_GEOMETRY,)

	return GestureState.DRAGGING_LAYER, _LAYER_ENTRY + (Effect.CAPTURE_POSITION,)


def transition(state, event, modifiers, target=None):
	"""Compute the next gesture state and the effects to apply
	
	Args:
		state: Current GestureState
		event: PointerEvent
		modifiers: Modifiers latched at this event
		target: Layer under the pointer (anything with a ``locked`` flag), or None
		
	Returns:
		(new_state, tuple of Effect) - effects are applied in order
	"""
	if event is PointerEvent.DOWN:
		if state is not GestureState.IDLE:
			# One gesture at a time: a second button/touch is ignored
			return state, ()
		return _enter_from_idle(modifiers, target)

	if event in (PointerEvent.UP, PointerEvent.CANCEL):
		if state.edits_layer:
			return GestureState.IDLE, (Effect.PERSIST,)
		return GestureState.IDLE, ()

	raise ValueError(f"Unknown pointer event {event!r}")
