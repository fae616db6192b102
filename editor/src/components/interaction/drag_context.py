"""Drag context dataclass for the interaction engine.

Single object holding everything captured at gesture start, replacing
separate start-position/start-size flags.
"""

from dataclasses import dataclass, field
from typing import Optional

from components.interaction.states import GestureState, Modifiers
from models.transform import Vec2, ViewBox


@dataclass
class DragContext:
	"""Unified state for one pointer-down -> move* -> pointer-up gesture"""
	state: GestureState
	modifiers: Modifiers = field(default_factory=Modifiers)
	layer_id: Optional[str] = None
	start_screen: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
	start_plane: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
	start_view_box: Optional[ViewBox] = None
	start_x: float = 0.0
	start_y: float = 0.0
	start_width: float = 0.0
	start_height: float = 0.0
	start_rotation: float = 0.0
	moved: bool = False  # any model change applied during the gesture
