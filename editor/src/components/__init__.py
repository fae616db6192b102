"""Input-side components for the Pasteup Layer Editor

- interaction: gesture state machine and engine (toolkit independent)
- canvas_input_adapter: optional PyQt5 bridge from widget events to the engine

The Qt adapter is not imported here so the engine stays usable without PyQt5.
"""

from .interaction import InteractionEngine, Modifiers, GestureState

__all__ = [
    'InteractionEngine',
    'Modifiers',
    'GestureState',
]
