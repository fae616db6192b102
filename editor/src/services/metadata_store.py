"""
Pasteup Layer Editor - Metadata Store

Small synchronous store for the editor document:
{layers, viewBox, selectedLayerId, undoStack, redoStack}

The whole document is overwritten on every save. On disk it is a single JSON
file replaced atomically; with path=None it only lives in memory.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from utils.logger import loggerRaise

logger = logging.getLogger(__name__)


class MetadataStore:
    """Whole-document JSON persistence"""

    def __init__(self, path: Optional[os.PathLike] = None):
        self.path = Path(path).expanduser() if path is not None else None
        self._memory: Optional[str] = None

    def save(self, document: Dict[str, Any]) -> None:
        """Overwrite the stored document

        Raises:
            OSError: If the file cannot be written (logged first)
        """
        text = json.dumps(document, separators=(',', ':'))
        if self.path is None:
            self._memory = text
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix='.metadata-', suffix='.tmp')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(text)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            loggerRaise(e, f"Could not save editor state to {self.path}")

    def load(self) -> Optional[Dict[str, Any]]:
        """Read the stored document

        Returns:
            The document, or None if nothing is stored or it is unreadable
        """
        if self.path is None:
            text = self._memory
        else:
            if not self.path.exists():
                return None
            try:
                text = self.path.read_text(encoding='utf-8')
            except OSError as e:
                logger.warning(f"Could not read {self.path}: {e}")
                return None
        if text is None:
            return None
        try:
            document = json.loads(text)
        except ValueError as e:
            logger.warning(f"Stored metadata is corrupted ({e})")
            return None
        if not isinstance(document, dict):
            logger.warning("Stored metadata is not an object")
            return None
        return document

    def clear(self) -> None:
        """Forget the stored document"""
        self._memory = None
        if self.path is not None and self.path.exists():
            self.path.unlink()
