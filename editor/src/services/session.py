"""
Pasteup Layer Editor - Editor Session

Composition root: one instance owns every model and service of an editor
window and wires them together. Nothing here is module-global, so tests and
tools can run any number of independent sessions.

Every content edit offered here follows the same pattern:
    checkpoint -> mutate -> persist
so it is undoable and survives a restart. Pan/zoom and selection changes are
persisted but never checkpointed.

Usage:
    session = EditorSession.from_config(load_config())
    session.load()
    layer_id = session.ingest_image(png_bytes)
    session.edit_layer(layer_id, opacity=0.5)
    session.undo()
    session.close()
"""

import logging
from typing import Iterable, List, Optional

from constants import DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT, DEFAULT_VIEWBOX, GEOMETRY_FIELDS, LAYER_NAME_TEMPLATE
from components.interaction.engine import InteractionEngine
from models.events import EventBus
from models.layer import Layer, new_id
from models.layer_store import LayerStore
from models.transform import ViewBox
from models.viewport import ViewportModel
from services.file_operations import load_project_from_file, save_project_to_file
from services.garbage_collector import GarbageCollector
from services.image_ingest import ingest_bytes, ingest_file
from services.image_store import FileImageBackend, ImageContentStore, StorageUnavailable
from services.metadata_store import MetadataStore
from services.project_serializer import ProjectSerializer
from utils.history_manager import HistoryManager, validate_snapshot
from utils.logger import loggerRaise


class EditorSession:
    """All editor state plus the operations external UI may invoke"""

    def __init__(self, image_backend=None, metadata_path=None,
                 canvas_width=DEFAULT_CANVAS_WIDTH, canvas_height=DEFAULT_CANVAS_HEIGHT):
        """
        Args:
            image_backend: Durable image backend, or None for cache-only (degraded) mode
            metadata_path: JSON file for the metadata document, or None for in-memory
            canvas_width, canvas_height: Natural canvas size (zoom 1)
        """
        self._logger = logging.getLogger('EditorSession')
        self.events = EventBus()
        self.layers = LayerStore(self.events)
        self.history = HistoryManager(self.layers)
        self.viewport = ViewportModel(self.events, canvas_width, canvas_height)
        self.images = ImageContentStore(image_backend)
        self.metadata = MetadataStore(metadata_path)
        self.gc = GarbageCollector(self.layers, self.history, self.images)
        self.serializer = ProjectSerializer(self.layers, self.history, self.viewport, self.images)
        self.engine = InteractionEngine(self.layers, self.history, self.viewport, persist=self.persist)

    @classmethod
    def from_config(cls, config):
        """File-backed session rooted at config.data_dir"""
        try:
            backend = FileImageBackend(config.image_dir)
        except StorageUnavailable as e:
            logging.getLogger('EditorSession').warning(f"{e} - images will not be saved")
            backend = None
        return cls(image_backend=backend, metadata_path=config.metadata_path,
                   canvas_width=config.canvas_width, canvas_height=config.canvas_height)

    # ========================================
    # Lifecycle
    # ========================================

    def load(self) -> bool:
        """Restore the persisted document, then pre-fill the image cache

        Missing or corrupted metadata resets to the empty canonical state.

        Returns:
            True if a stored document was restored
        """
        document = self.metadata.load()
        restored = False
        if document is not None:
            try:
                self._apply_metadata(document)
                restored = True
            except (ValueError, TypeError) as e:
                self._logger.warning(f"Discarding corrupted metadata: {e}")
        if not restored:
            self.reset(persist=False)

        cached = self.images.warm_cache().result()
        self._logger.info(f"Loaded {len(self.layers)} layers, {cached} cached images")
        return restored

    def _apply_metadata(self, document):
        records = document.get('layers') or []
        if not isinstance(records, list):
            raise ValueError("layers must be a list")
        layers = [Layer.from_dict(record) for record in records]
        ids = [layer.id for layer in layers]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate layer ids")
        view_box = ViewBox.from_dict(document.get('viewBox') or DEFAULT_VIEWBOX)
        undo_stack = document.get('undoStack') or []
        redo_stack = document.get('redoStack') or []
        for snapshot in list(undo_stack) + list(redo_stack):
            validate_snapshot(snapshot)

        # Everything parsed: apply without intermediate notifications
        self.history.restore(undo_stack, redo_stack)
        self.layers.restore(layers, selected_id=document.get('selectedLayerId'), notify=False)
        self.viewport.set_view_box(view_box, notify=False)
        self.layers.notify_changed()

    def persist(self) -> None:
        """Write the metadata document (layers, viewbox, selection, both stacks)"""
        self.metadata.save({
            'layers': self.layers.to_records(),
            'viewBox': self.viewport.view_box.to_dict(),
            'selectedLayerId': self.layers.get_selected_layer_id(),
            'undoStack': self.history.undo_stack,
            'redoStack': self.history.redo_stack,
        })

    def reset(self, persist: bool = True) -> None:
        """Empty canonical state: no layers, default viewbox, no selection, no history"""
        self.history.clear()
        self.layers.restore([], notify=False)
        self.viewport.set_view_box(ViewBox.from_dict(DEFAULT_VIEWBOX), notify=False)
        self.layers.notify_changed()
        if persist:
            self.persist()

    def close(self) -> None:
        """Flush queued image writes and stop the image worker"""
        self.images.close()

    # ========================================
    # Image ingestion
    # ========================================

    def ingest_image(self, data, name: Optional[str] = None, x: float = 0.0, y: float = 0.0) -> str:
        """Add an image (bytes or data URL) as a new top layer at its natural size

        The new layer is not selected.

        Returns:
            Id of the new layer

        Raises:
            ValueError: If the data is not a recognizable image
        """
        layer_id = self._add_ingested(ingest_bytes(data), name, x, y)
        self.persist()
        return layer_id

    def ingest_files(self, paths: Iterable) -> List[str]:
        """Add one layer per readable image file; unreadable files are skipped

        Returns:
            Ids of the new layers, in input order
        """
        added = []
        for path in paths:
            try:
                payload = ingest_file(path)
            except (OSError, ValueError) as e:
                self._logger.warning(f"Skipping {path}: {e}")
                continue
            added.append(self._add_ingested(payload, None, 0.0, 0.0))
        if added:
            self.persist()
        return added

    def _add_ingested(self, payload, name, x, y):
        image_id = new_id()
        # Cache is updated synchronously; the durable write completes on its own
        self.images.put(image_id, payload.data_url)
        self.history.checkpoint()
        layer = Layer(
            name=name or LAYER_NAME_TEMPLATE.format(index=len(self.layers) + 1),
            image_id=image_id,
            x=x,
            y=y,
            width=payload.width,
            height=payload.height,
        )
        return self.layers.add_layer(layer)

    # ========================================
    # Layer edits
    # ========================================

    def checkpoint(self) -> None:
        """Open an undo step for a series of edit_layer(checkpoint=False) calls"""
        self.history.checkpoint()

    def remove_layer(self, layer_id: str) -> bool:
        """Delete a layer (refused while it is locked)"""
        layer = self.layers.get_layer(layer_id)
        if layer is None:
            return False
        if layer.locked:
            self._logger.warning(f"Refusing to delete locked layer {layer_id}")
            return False
        self.history.checkpoint()
        self.layers.remove_layer(layer_id)
        self.persist()
        return True

    def delete_selected(self) -> bool:
        selected_id = self.layers.get_selected_layer_id()
        if selected_id is None:
            return False
        return self.remove_layer(selected_id)

    def edit_layer(self, layer_id: str, checkpoint: bool = True, **fields) -> bool:
        """Update layer fields from the layer panel or another external editor

        Geometry (x, y, width, height, rotation) is refused on locked layers;
        name, visibility, opacity, blend mode and the lock flag are always
        editable.

        Returns:
            True if the layer was updated

        Raises:
            ValueError: If a field is unknown or a value invalid (nothing changes)
        """
        layer = self.layers.get_layer(layer_id)
        if layer is None or not fields:
            return False
        if layer.locked and GEOMETRY_FIELDS & set(fields):
            self._logger.warning(f"Refusing geometry edit on locked layer {layer_id}")
            return False
        layer.merged(fields)  # validate before opening an undo step
        if checkpoint:
            self.history.checkpoint()
        self.layers.update_layer(layer_id, fields)
        self.persist()
        return True

    def reorder_layer(self, layer_id: str, target_index: int) -> bool:
        """Move a layer in the stack; no undo step when the index is unchanged"""
        index = self.layers.index_of(layer_id)
        if index < 0:
            return False
        clamped = max(0, min(int(target_index), len(self.layers) - 1))
        if clamped == index:
            return False
        self.history.checkpoint()
        self.layers.reorder_layer(layer_id, clamped)
        self.persist()
        return True

    def select_layer(self, layer_id: Optional[str]) -> bool:
        if not self.layers.select_layer(layer_id):
            return False
        self.persist()
        return True

    def clear_project(self) -> bool:
        """Remove every layer as one undoable step"""
        if not len(self.layers):
            return False
        self.history.checkpoint()
        self.layers.restore([], notify=True)
        self.persist()
        return True

    # ========================================
    # History
    # ========================================

    def undo(self) -> bool:
        changed = self.history.undo()
        if changed:
            self.persist()
        return changed

    def redo(self) -> bool:
        changed = self.history.redo()
        if changed:
            self.persist()
        return changed

    # ========================================
    # Project documents and maintenance
    # ========================================

    def export_project(self) -> dict:
        """Self-contained project document with inlined payloads"""
        return self.serializer.export()

    def import_project(self, document) -> int:
        """Replace everything with a project document (clears history)

        Raises:
            ProjectValidationError: If the document is invalid; nothing changes
        """
        count = self.serializer.import_document(document)
        self.persist()
        return count

    def save_project_file(self, path) -> None:
        try:
            save_project_to_file(self.export_project(), path)
        except OSError as e:
            loggerRaise(e, f"Could not save project to {path}")

    def load_project_file(self, path) -> int:
        try:
            document = load_project_from_file(path)
        except OSError as e:
            loggerRaise(e, f"Could not read project {path}")
        return self.import_project(document)

    def collect_garbage(self) -> List[str]:
        """Delete stored images no layer or history snapshot references"""
        return self.gc.collect()
