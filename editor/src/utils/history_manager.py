"""
Undo/Redo History Manager for Pasteup Layer Editor

Keeps two unbounded stacks of layer-list snapshots on top of the LayerStore.
Callers checkpoint BEFORE an undoable mutation: the snapshot captures the
pre-mutation list. Snapshots hold imageId references only, never payloads.
"""

import json
import logging

from models.layer import Layer


logger = logging.getLogger(__name__)


def serialize_snapshot(records):
	"""Freeze a list of layer records into an immutable snapshot string"""
	return json.dumps(records, separators=(',', ':'))


def parse_snapshot(snapshot):
	"""Decode a snapshot string back into a list of layer records

	Raises:
		ValueError: If the snapshot is not a JSON list of objects
	"""
	if not isinstance(snapshot, str):
		raise ValueError(f"Snapshot must be a string, got {type(snapshot).__name__}")
	records = json.loads(snapshot)
	if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
		raise ValueError("Snapshot must be a JSON list of layer records")
	return records


def validate_snapshot(snapshot):
	"""Check that a snapshot restores to a valid layer list
	
	Returns:
		The parsed layer records
	
	Raises:
		ValueError: On malformed JSON, an invalid layer record or duplicate ids
	"""
	records = parse_snapshot(snapshot)
	ids = [Layer.from_dict(record).id for record in records]
	if len(set(ids)) != len(ids):
		raise ValueError("Snapshot contains duplicate layer ids")
	return records


class HistoryManager:
	"""Manages undo/redo history with full layer-list snapshots"""
	
	def __init__(self, layer_store):
		"""
		Initialize the history manager
		
		Args:
			layer_store: LayerStore whose list is snapshotted and restored
		"""
		self._store = layer_store
		self._undo_stack = []  # Oldest first, most recent last
		self._redo_stack = []
		self._listeners = []  # Callbacks to notify on state changes
	
	def checkpoint(self):
		"""
		Push a snapshot of the current list and discard the redo stack
		
		Must be called before the mutation that should become undoable.
		"""
		self._undo_stack.append(serialize_snapshot(self._store.to_records()))
		self._redo_stack.clear()
		logger.debug(f"Checkpoint (undo: {len(self._undo_stack)}, redo cleared)")
		self._notify_listeners()
	
	def undo(self):
		"""
		Restore the most recent checkpoint
		
		Returns:
			True if a snapshot was restored, False if the undo stack was empty
		"""
		if not self._undo_stack:
			logger.debug("Cannot undo - undo stack empty")
			return False
		return self._step(self._undo_stack, self._redo_stack, "Undo")
	
	def redo(self):
		"""
		Re-apply the most recently undone state
		
		Returns:
			True if a snapshot was restored, False if the redo stack was empty
		"""
		if not self._redo_stack:
			logger.debug("Cannot redo - redo stack empty")
			return False
		return self._step(self._redo_stack, self._undo_stack, "Redo")
	
	def _step(self, source, target, label):
		records = parse_snapshot(source[-1])
		current = serialize_snapshot(self._store.to_records())
		# Restore first so a bad snapshot leaves both stacks untouched
		self._store.restore(records, selected_id=self._store.get_selected_layer_id(), notify=False)
		source.pop()
		target.append(current)
		logger.debug(f"{label} (undo: {len(self._undo_stack)}, redo: {len(self._redo_stack)})")
		self._notify_listeners()
		self._store.notify_changed()
		return True
	
	def can_undo(self):
		"""Check if undo is available"""
		return bool(self._undo_stack)
	
	def can_redo(self):
		"""Check if redo is available"""
		return bool(self._redo_stack)
	
	@property
	def undo_stack(self):
		"""Copy of the undo snapshots, oldest first"""
		return list(self._undo_stack)
	
	@property
	def redo_stack(self):
		"""Copy of the redo snapshots, oldest first"""
		return list(self._redo_stack)
	
	def restore(self, undo_stack, redo_stack):
		"""
		Replace both stacks (metadata load)
		
		Raises:
			ValueError: If any snapshot would not restore; stacks stay untouched
		"""
		for snapshot in list(undo_stack) + list(redo_stack):
			validate_snapshot(snapshot)
		self._undo_stack = list(undo_stack)
		self._redo_stack = list(redo_stack)
		self._notify_listeners()
	
	def clear(self):
		"""Clear all history"""
		self._undo_stack = []
		self._redo_stack = []
		self._notify_listeners()
		logger.debug("History cleared")
	
	def add_listener(self, callback):
		"""
		Add a listener to be notified when history state changes
		
		Args:
			callback: Function to call when history changes (receives can_undo, can_redo)
		"""
		self._listeners.append(callback)
	
	def remove_listener(self, callback):
		"""Remove a listener"""
		if callback in self._listeners:
			self._listeners.remove(callback)
	
	def _notify_listeners(self):
		"""Notify all listeners of history state change"""
		for callback in list(self._listeners):
			try:
				callback(self.can_undo(), self.can_redo())
			except Exception:
				logger.exception("Error notifying history listener")
