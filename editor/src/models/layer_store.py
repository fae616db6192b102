"""
Pasteup Layer Editor - Layer Store

THE MODEL for layer content. Owns the ordered layer list and the selection.

This class handles:
- Layer CRUD (add on top, remove, shallow-merge update)
- Stack reordering (array index = z-order, 0 = bottommost)
- Selection, including re-selection when the selected layer is removed
- Bulk restore (undo/redo, metadata load, project import)
- Change notification through the EventBus

The store is INDEPENDENT of UI:
- No rendering logic
- No undo stack (HistoryManager snapshots this store)
- Read accessors return copies; mutation only goes through the methods below

Usage:
    store = LayerStore(events)
    store.add_layer(Layer(name="Layer 1", image_id=img, width=64, height=64))
    store.update_layer(layer_id, {'x': 15, 'y': 5})
    store.reorder_layer(layer_id, 0)
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from models.events import EventBus, MODEL_CHANGED, SELECTION_CHANGED
from models.layer import Layer


class LayerStore:
    """Ordered layer collection plus selection

    Unknown ids passed to mutation methods are a silent no-op: stale ids from
    UI races must never raise.
    """

    def __init__(self, events: EventBus):
        self._logger = logging.getLogger('LayerStore')
        self._events = events
        self._layers: List[Layer] = []
        self._selected_id: Optional[str] = None

    # ========================================
    # Read accessors (return copies)
    # ========================================

    def get_layers(self) -> List[Layer]:
        """All layers bottom-to-top, as independent copies"""
        return [layer.copy() for layer in self._layers]

    def get_layer(self, layer_id: str) -> Optional[Layer]:
        index = self.index_of(layer_id)
        return self._layers[index].copy() if index >= 0 else None

    def get_selected_layer(self) -> Optional[Layer]:
        if self._selected_id is None:
            return None
        return self.get_layer(self._selected_id)

    def get_selected_layer_id(self) -> Optional[str]:
        return self._selected_id

    def index_of(self, layer_id: str) -> int:
        """Stack index of a layer, or -1 if unknown"""
        for index, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return index
        return -1

    def image_ids(self) -> List[str]:
        """imageId of every live layer (references, may repeat)"""
        return [layer.image_id for layer in self._layers if layer.image_id]

    def to_records(self) -> List[Dict[str, Any]]:
        """JSON records of every layer, bottom-to-top"""
        return [layer.to_dict() for layer in self._layers]

    def __len__(self) -> int:
        return len(self._layers)

    def __contains__(self, layer_id: str) -> bool:
        return self.index_of(layer_id) >= 0

    # ========================================
    # Mutations
    # ========================================

    def add_layer(self, layer: Union[Layer, Dict[str, Any]]) -> str:
        """Append a layer at the top of the stack

        Args:
            layer: Layer or JSON record (rotation and every other missing
                field take their defaults)

        Returns:
            Id of the added layer

        Raises:
            ValueError: If the id is already used by a live layer
        """
        layer = Layer.from_dict(layer) if isinstance(layer, dict) else layer.copy()
        if layer.id in self:
            raise ValueError(f"Layer with id '{layer.id}' already exists")
        self._layers.append(layer)
        self._logger.debug(f"Added layer {layer.id} at index {len(self._layers) - 1}")
        self.notify_changed()
        return layer.id

    def remove_layer(self, layer_id: str) -> bool:
        """Remove a layer; if it was selected, select its successor at the same index

        Returns:
            True if a layer was removed
        """
        index = self.index_of(layer_id)
        if index < 0:
            return False
        del self._layers[index]
        if self._selected_id == layer_id:
            if self._layers:
                self._selected_id = self._layers[min(index, len(self._layers) - 1)].id
            else:
                self._selected_id = None
        self._logger.debug(f"Removed layer {layer_id} (selection now {self._selected_id})")
        self.notify_changed()
        return True

    def update_layer(self, layer_id: str, props: Dict[str, Any]) -> bool:
        """Shallow-merge ``props`` into a layer

        Returns:
            True if the layer exists and was updated

        Raises:
            ValueError: If a value is invalid, a field is unknown or the id changes
        """
        index = self.index_of(layer_id)
        if index < 0:
            return False
        self._layers[index] = self._layers[index].merged(props)
        self.notify_changed()
        return True

    def reorder_layer(self, layer_id: str, target_index: int) -> bool:
        """Move a layer to ``target_index``, clamped to the list after removal

        Returns:
            True if the layer exists (even when the index is unchanged)
        """
        index = self.index_of(layer_id)
        if index < 0:
            return False
        layer = self._layers.pop(index)
        clamped = max(0, min(int(target_index), len(self._layers)))
        self._layers.insert(clamped, layer)
        self._logger.debug(f"Reordered layer {layer_id}: {index} -> {clamped}")
        self.notify_changed()
        return True

    def select_layer(self, layer_id: Optional[str]) -> bool:
        """Select a layer (None clears the selection)

        Emits 'selection-changed' instead of 'model-changed'.

        Returns:
            True if the selection was applied
        """
        if layer_id is not None and layer_id not in self:
            self._logger.debug(f"Ignoring selection of unknown layer {layer_id}")
            return False
        self._selected_id = layer_id
        self._events.emit(SELECTION_CHANGED, layer_id=layer_id)
        return True

    def restore(self, layers: Iterable[Union[Layer, Dict[str, Any]]],
                selected_id: Optional[str] = None, notify: bool = True) -> None:
        """Replace the whole list (undo/redo, load, import)

        A selection that does not resolve to a restored layer is cleared.

        Raises:
            ValueError: If a record is invalid or ids repeat; the store is
                left untouched in that case
        """
        restored = [Layer.from_dict(item) if isinstance(item, dict) else item.copy() for item in layers]
        ids = [layer.id for layer in restored]
        if len(set(ids)) != len(ids):
            raise ValueError("Duplicate layer ids in restored list")
        self._layers = restored
        self._selected_id = selected_id if selected_id in ids else None
        self._logger.debug(f"Restored {len(restored)} layers (selection {self._selected_id})")
        if notify:
            self.notify_changed()

    def notify_changed(self):
        """Emit 'model-changed' (also used after multi-step restores)"""
        self._events.emit(MODEL_CHANGED)
