"""
Pasteup Layer Editor - Project Serializer

Converts between the live model and the self-contained project document:

    {version: 1,
     layers: [{id, name, imageId, imageData, x, y, width, height,
               rotation, opacity, visible, locked, blendMode}],
     viewBox: {x, y, w, h},
     selectedLayerId}

``imageData`` (the inlined data URL) only exists in this document; it is
moved into the ImageContentStore on import and never kept on live layers.
"""

import logging
from typing import Any, Dict, List, Tuple

from constants import DEFAULT_VIEWBOX, PROJECT_FORMAT_VERSION
from models.layer import Layer
from models.transform import ViewBox


class ProjectValidationError(ValueError):
    """The document is not a loadable project; nothing was changed"""


class ProjectSerializer:
    """Export/import of the interchange document"""

    def __init__(self, layers, history, viewport, images):
        self._logger = logging.getLogger('ProjectSerializer')
        self._layers = layers
        self._history = history
        self._viewport = viewport
        self._images = images

    # ========================================
    # Export
    # ========================================

    def export(self) -> Dict[str, Any]:
        """Build the project document with every payload inlined

        A payload missing from both cache and durable store exports as "".
        """
        layer_records = []
        for layer in self._layers.get_layers():
            record = layer.to_dict()
            payload = self._images.get(layer.image_id).result() if layer.image_id else ""
            if not payload:
                self._logger.warning(f"No image content for layer {layer.id} (image {layer.image_id})")
            # Keep imageData next to imageId in the written document
            inlined = {}
            for key, value in record.items():
                inlined[key] = value
                if key == 'imageId':
                    inlined['imageData'] = payload or ""
            layer_records.append(inlined)

        return {
            'version': PROJECT_FORMAT_VERSION,
            'layers': layer_records,
            'viewBox': self._viewport.view_box.to_dict(),
            'selectedLayerId': self._layers.get_selected_layer_id(),
        }

    # ========================================
    # Import
    # ========================================

    def validate(self, document) -> Tuple[List[Layer], Dict[str, str], ViewBox]:
        """Parse a document without touching live state

        Returns:
            (layers, {imageId: payload}, viewbox)

        Raises:
            ProjectValidationError: On a missing or empty version, a non-list layers
                field, a malformed layer record, duplicate ids or a bad viewBox
        """
        if not isinstance(document, dict):
            raise ProjectValidationError("Invalid project file: document must be an object")
        if not document.get('version'):
            raise ProjectValidationError("Invalid project file: missing version")
        if not isinstance(document.get('layers'), list):
            raise ProjectValidationError("Invalid project file: layers must be a list")

        layers = []
        payloads = {}
        for index, record in enumerate(document['layers']):
            try:
                layer = Layer.from_dict(record)
            except ValueError as e:
                raise ProjectValidationError(f"Invalid layer #{index}: {e}") from e
            image_data = record.get('imageData')
            if image_data:
                if not isinstance(image_data, str):
                    raise ProjectValidationError(f"Invalid layer #{index}: imageData must be a string")
                payloads[layer.image_id] = image_data
            layers.append(layer)

        ids = [layer.id for layer in layers]
        if len(set(ids)) != len(ids):
            raise ProjectValidationError("Invalid project file: duplicate layer ids")

        raw_box = document.get('viewBox') or DEFAULT_VIEWBOX
        try:
            view_box = ViewBox.from_dict(raw_box)
        except (ValueError, AttributeError) as e:
            raise ProjectValidationError(f"Invalid viewBox: {e}") from e

        if document['version'] != PROJECT_FORMAT_VERSION:
            self._logger.warning(f"Project format version {document['version']!r}, "
                                 f"expected {PROJECT_FORMAT_VERSION}; loading anyway")
        return layers, payloads, view_box

    def import_document(self, document) -> int:
        """Replace all live state with the document (hard reset, not a merge)

        Both history stacks are cleared, payloads are stored under their
        layer's imageId, the viewbox and selection are restored, then a
        single change notification is emitted. Persisting is left to the
        caller.

        Returns:
            Number of imported layers

        Raises:
            ProjectValidationError: Before any mutation if the document is invalid
        """
        layers, payloads, view_box = self.validate(document)
        selected_id = document.get('selectedLayerId') or None

        for image_id, payload in payloads.items():
            self._images.put(image_id, payload)
        self._history.clear()
        self._layers.restore(layers, selected_id=selected_id, notify=False)
        self._viewport.set_view_box(view_box, notify=False)
        self._logger.info(f"Imported project: {len(layers)} layers, {len(payloads)} images")
        self._layers.notify_changed()
        return len(layers)
