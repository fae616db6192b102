"""
Pasteup Layer Editor - Data Models

This module contains the in-memory model of the editor.
This is the MODEL in MVC architecture.

Public API: Layer, LayerStore, EventBus and the geometry types.
ViewportModel lives in models.viewport (it depends on utils.coordinate_transforms).
"""

from .events import EventBus, MODEL_CHANGED, SELECTION_CHANGED, ZOOM_RESET_REQUESTED
from .layer import Layer, new_id
from .layer_store import LayerStore
from .transform import CanvasRect, Vec2, ViewBox

__all__ = [
    'EventBus', 'MODEL_CHANGED', 'SELECTION_CHANGED', 'ZOOM_RESET_REQUESTED',
    'Layer', 'new_id', 'LayerStore',
    'CanvasRect', 'Vec2', 'ViewBox',
]
