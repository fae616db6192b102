"""
Pasteup Layer Editor - Layer Data Model

A layer is one placed image on the plane:
- Identity (UUID, generated at creation, immutable)
- Reference to a stored image (imageId, never the payload itself)
- Geometry (top-left position, size, rotation in degrees)
- Appearance (opacity, visibility, blend mode) and a lock flag

Stack order is positional (index in the LayerStore list), so there is no
z field here.

This is part of the MODEL layer - pure data, no UI logic.

Usage:
    layer = Layer(name="Layer 1", image_id=image_id, width=640, height=480)
    record = layer.to_dict()          # camelCase JSON record
    same = Layer.from_dict(record)
"""

import math
import uuid as uuid_module
from dataclasses import dataclass, field, replace
from typing import Any, Dict

from constants import (
    BLEND_MODES, DEFAULT_BLEND_MODE,
    DEFAULT_LAYER_X, DEFAULT_LAYER_Y, DEFAULT_ROTATION,
    DEFAULT_OPACITY, DEFAULT_VISIBLE, DEFAULT_LOCKED,
)


def new_id() -> str:
    """Generate an opaque unique identifier (layers and images)"""
    return str(uuid_module.uuid4())


# Python attribute name -> JSON record key
_FIELD_TO_KEY = {
    'id': 'id',
    'name': 'name',
    'image_id': 'imageId',
    'x': 'x',
    'y': 'y',
    'width': 'width',
    'height': 'height',
    'rotation': 'rotation',
    'opacity': 'opacity',
    'visible': 'visible',
    'locked': 'locked',
    'blend_mode': 'blendMode',
}
_KEY_TO_FIELD = {key: attr for attr, key in _FIELD_TO_KEY.items()}


@dataclass
class Layer:
    """Fully specified layer record

    Every field has an explicit default so there is never a "field may be
    missing" branch downstream. Values are validated on construction and on
    every dataclasses.replace().
    """
    name: str = ""
    image_id: str = ""
    x: float = DEFAULT_LAYER_X
    y: float = DEFAULT_LAYER_Y
    width: float = 1.0
    height: float = 1.0
    rotation: float = DEFAULT_ROTATION
    opacity: float = DEFAULT_OPACITY
    visible: bool = DEFAULT_VISIBLE
    locked: bool = DEFAULT_LOCKED
    blend_mode: str = DEFAULT_BLEND_MODE
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Layer id must be a non-empty string")
        for attr in ('name', 'image_id'):
            if not isinstance(getattr(self, attr), str):
                raise ValueError(f"Layer.{attr} must be a string, got {getattr(self, attr)!r}")
        for attr in ('visible', 'locked'):
            if not isinstance(getattr(self, attr), bool):
                raise ValueError(f"Layer.{attr} must be true or false, got {getattr(self, attr)!r}")
        for attr in ('x', 'y', 'width', 'height', 'rotation', 'opacity'):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"Layer.{attr} must be a finite number, got {value!r}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Layer size must be positive, got {self.width}x{self.height}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"Layer opacity must be within [0, 1], got {self.opacity}")
        if self.blend_mode not in BLEND_MODES:
            raise ValueError(f"Unknown blend mode '{self.blend_mode}'")

    # ========================================
    # Derived values
    # ========================================

    @property
    def center(self):
        """Center point (cx, cy) in plane coordinates"""
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    @property
    def display_rotation(self) -> float:
        """Rotation normalized to [0, 360) for display"""
        return self.rotation % 360.0

    def copy(self) -> 'Layer':
        """Independent copy (all fields are immutable scalars)"""
        return replace(self)

    def merged(self, props: Dict[str, Any]) -> 'Layer':
        """Return a copy with ``props`` shallow-merged in

        Raises:
            ValueError: If props tries to change the id or names an unknown field
        """
        if 'id' in props and props['id'] != self.id:
            raise ValueError("Layer id is immutable")
        unknown = set(props) - set(_FIELD_TO_KEY)
        if unknown:
            raise ValueError(f"Unknown layer field(s): {', '.join(sorted(unknown))}")
        return replace(self, **props)

    # ========================================
    # Serialization (JSON record, camelCase keys)
    # ========================================

    def to_dict(self) -> Dict[str, Any]:
        """Export as a JSON-ready record (no image payload)"""
        return {key: getattr(self, attr) for attr, key in _FIELD_TO_KEY.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Layer':
        """Build a layer from a JSON record

        Missing fields take their defaults, unknown keys (e.g. the
        interchange-only ``imageData``) are ignored.

        Raises:
            ValueError: If the record is not a mapping or a value is invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Layer record must be an object, got {type(data).__name__}")
        kwargs = {_KEY_TO_FIELD[key]: value for key, value in data.items() if key in _KEY_TO_FIELD}
        if not kwargs.get('id'):
            kwargs.pop('id', None)
        if kwargs.get('rotation') is None:
            kwargs.pop('rotation', None)
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ValueError(f"Invalid layer record: {e}") from e


