"""
Pasteup Layer Editor - Image Content Store

Durable imageId -> payload store with a write-through in-memory cache.
Payloads are data-URL strings ("data:image/png;base64,...") and are never
modified once stored.

Durable I/O runs on a single worker thread, so writes and deletes reach the
backend in submission order and a read queued after a write sees it. Every
operation returns a concurrent.futures.Future.

Cache ordering contract:
- put() updates the cache BEFORE the durable write is queued, so a following
  get_sync() from the caller sees the new payload while the write is still
  in flight
- delete() evicts from the cache BEFORE the durable delete is queued
- a read or warm-up queued before a delete never puts the deleted payload
  back into the cache

Backend failures never cross this boundary: they are logged and turned into
sentinel results ("" for a payload, {} for enumerations, False for writes).
"""

import logging
import os
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

from constants import IMAGE_RECORD_SUFFIX


class StorageUnavailable(Exception):
    """Raised by a backend when its durable storage cannot be used"""


# ========================================
# Backends (synchronous, called from the worker thread)
# ========================================

class MemoryImageBackend:
    """Backend keeping payloads in a dict (tests, throwaway sessions)"""

    def __init__(self):
        self._records: Dict[str, str] = {}

    def read(self, image_id: str) -> Optional[str]:
        return self._records.get(image_id)

    def write(self, image_id: str, payload: str) -> None:
        self._records[image_id] = payload

    def delete(self, image_id: str) -> None:
        self._records.pop(image_id, None)

    def list_ids(self) -> List[str]:
        return list(self._records)

    def read_all(self) -> Dict[str, str]:
        return dict(self._records)


class FileImageBackend:
    """One file per image under ``root``

    The id is percent-encoded into the filename so any opaque id is a safe
    file name. Writes go to a temp file that is then renamed over the target.
    """

    def __init__(self, root):
        self.root = Path(root).expanduser()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create image store at {self.root}: {e}") from e

    def _path(self, image_id: str) -> Path:
        return self.root / (quote(image_id, safe='') + IMAGE_RECORD_SUFFIX)

    def read(self, image_id: str) -> Optional[str]:
        path = self._path(image_id)
        if not path.exists():
            return None
        return path.read_text(encoding='ascii')

    def write(self, image_id: str, payload: str) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.root, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='ascii') as f:
                f.write(payload)
            os.replace(tmp_path, self._path(image_id))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def delete(self, image_id: str) -> None:
        path = self._path(image_id)
        if path.exists():
            path.unlink()

    def list_ids(self) -> List[str]:
        return sorted(
            unquote(entry.name[:-len(IMAGE_RECORD_SUFFIX)])
            for entry in self.root.iterdir()
            if entry.is_file() and entry.name.endswith(IMAGE_RECORD_SUFFIX)
        )

    def read_all(self) -> Dict[str, str]:
        records = {}
        for image_id in self.list_ids():
            payload = self.read(image_id)
            if payload is not None:
                records[image_id] = payload
        return records


# ========================================
# Store
# ========================================

def _completed(value) -> Future:
    future = Future()
    future.set_result(value)
    return future


class ImageContentStore:
    """Write-through cached image store

    Args:
        backend: MemoryImageBackend, FileImageBackend or None. None runs in
            degraded mode: the cache still works for the current process,
            durable reads return the empty sentinel and writes are dropped.
    """

    def __init__(self, backend=None):
        self._logger = logging.getLogger('ImageContentStore')
        self._backend = backend
        self._cache: Dict[str, str] = {}
        # Bumped by delete() so a read queued earlier cannot refill the cache
        self._generations: Dict[str, int] = {}
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='image-store')
        if backend is None:
            self._logger.warning("No durable image storage - running cache-only")

    @property
    def degraded(self) -> bool:
        return self._backend is None

    def _submit(self, label, fn, sentinel, *args) -> Future:
        if self._backend is None:
            return _completed(sentinel)

        def run():
            try:
                return fn(*args)
            except (OSError, StorageUnavailable) as e:
                self._logger.warning(f"Image store {label} failed: {e}")
                return sentinel

        return self._executor.submit(run)

    # ========================================
    # Operations
    # ========================================

    def put(self, image_id: str, payload: str) -> Future:
        """Idempotent upsert; the cache is updated before this returns

        Returns:
            Future resolving to True once the payload is durable
        """
        self._cache[image_id] = payload

        def write():
            self._backend.write(image_id, payload)
            return True

        return self._submit('write', write, False)

    def get(self, image_id: str) -> Future:
        """Cached payload, else a durable read that fills the cache

        Returns:
            Future resolving to the payload, or "" if unknown
        """
        cached = self._cache.get(image_id)
        if cached:
            return _completed(cached)
        generation = self._generations.get(image_id, 0)

        def read():
            payload = self._backend.read(image_id)
            if not payload:
                return ""
            if self._generations.get(image_id, 0) == generation:
                self._cache.setdefault(image_id, payload)
            return payload

        return self._submit('read', read, "")

    def get_sync(self, image_id: str) -> str:
        """Cache-only lookup for render paths; "" on miss"""
        return self._cache.get(image_id, "")

    def delete(self, image_id: str) -> Future:
        """Evict from the cache, then delete durably

        Returns:
            Future resolving to True once the record is gone
        """
        self._cache.pop(image_id, None)
        self._generations[image_id] = self._generations.get(image_id, 0) + 1

        def remove():
            self._backend.delete(image_id)
            return True

        return self._submit('delete', remove, False)

    def get_all(self) -> Future:
        """Enumerate every durable record, bypassing the cache

        Returns:
            Future resolving to {image_id: payload}
        """
        return self._submit('enumeration', self._backend_read_all, {})

    def list_ids(self) -> Future:
        """Future resolving to the ids of every durable record"""
        return self._submit('listing', self._backend_list_ids, [])

    def warm_cache(self) -> Future:
        """Load every durable payload into the cache (startup)

        Entries already cached (e.g. a put still in flight) are kept.

        Returns:
            Future resolving to the number of cached payloads
        """
        generations = dict(self._generations)

        def warm():
            for image_id, payload in self._backend.read_all().items():
                if self._generations.get(image_id, 0) == generations.get(image_id, 0):
                    self._cache.setdefault(image_id, payload)
            return len(self._cache)

        return self._submit('warm-up', warm, 0)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cached_ids(self) -> List[str]:
        return list(self._cache)

    def close(self) -> None:
        """Wait for queued writes, then stop the worker"""
        self._executor.shutdown(wait=True)

    def _backend_read_all(self):
        return self._backend.read_all()

    def _backend_list_ids(self):
        return self._backend.list_ids()
