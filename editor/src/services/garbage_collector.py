"""
Pasteup Layer Editor - Image Garbage Collector

Deletes stored images that nothing can resolve any more. An image stays
referenced while it is used by a live layer or by any snapshot on either
history stack (undo of a deletion must still find its image).
"""

import logging

from utils.history_manager import parse_snapshot

logger = logging.getLogger(__name__)


class GarbageCollector:
    """Reconciles the image store against every reachable layer list"""

    def __init__(self, layers, history, images):
        self._layers = layers
        self._history = history
        self._images = images

    def referenced_ids(self):
        """imageIds used by the live list, the undo stack and the redo stack"""
        referenced = set(self._layers.image_ids())
        for snapshot in self._history.undo_stack + self._history.redo_stack:
            try:
                records = parse_snapshot(snapshot)
            except ValueError as e:
                logger.warning(f"Skipping malformed history snapshot: {e}")
                continue
            referenced.update(r['imageId'] for r in records
                              if isinstance(r.get('imageId'), str) and r['imageId'])
        return referenced

    def collect(self):
        """Delete every stored image no reachable state references

        A failed delete leaves the image for a later sweep.

        Returns:
            Sorted list of deleted imageIds
        """
        stored = self._images.list_ids().result()
        # Referenced set is built after enumeration so anything added meanwhile is kept
        referenced = self.referenced_ids()
        pending = {image_id: self._images.delete(image_id)
                   for image_id in stored if image_id not in referenced}
        deleted = sorted(image_id for image_id, future in pending.items() if future.result())
        failed = len(pending) - len(deleted)
        logger.info(f"Image GC: {len(stored)} stored, {len(deleted)} deleted"
                    + (f", {failed} left for a later sweep" if failed else ""))
        return deleted
