"""Editor configuration.

Loaded from a small JSON file; every key is optional. The data directory can
also be overridden with the PASTEUP_DATA_DIR environment variable.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from constants import (
	DEFAULT_DATA_DIR, DATA_DIR_ENV_VAR, CONFIG_FILENAME,
	DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT, METADATA_FILENAME, IMAGE_STORE_DIRNAME,
)

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
	"""Runtime settings for a file-backed editor session"""
	data_dir: str = DEFAULT_DATA_DIR
	canvas_width: float = DEFAULT_CANVAS_WIDTH
	canvas_height: float = DEFAULT_CANVAS_HEIGHT
	log_level: str = 'WARNING'

	@property
	def data_path(self) -> Path:
		"""data_dir with ~ expanded"""
		return Path(self.data_dir).expanduser()

	@property
	def metadata_path(self) -> Path:
		return self.data_path / METADATA_FILENAME

	@property
	def image_dir(self) -> Path:
		return self.data_path / IMAGE_STORE_DIRNAME


def default_config_path() -> Path:
	"""config.json inside the default data directory"""
	return Path(DEFAULT_DATA_DIR).expanduser() / CONFIG_FILENAME


def load_config(path: Optional[os.PathLike] = None, environ=None) -> EditorConfig:
	"""Load settings from JSON, falling back to defaults
	
	Args:
		path: Config file (defaults to ~/.pasteup/config.json)
		environ: Environment mapping (defaults to os.environ)
		
	Returns:
		EditorConfig - defaults for a missing or malformed file, unknown keys ignored
	"""
	environ = os.environ if environ is None else environ
	path = Path(path) if path is not None else default_config_path()
	known = {f.name for f in fields(EditorConfig)}
	values = {}

	if path.exists():
		try:
			with open(path, 'r', encoding='utf-8') as f:
				data = json.load(f)
			if not isinstance(data, dict):
				raise ValueError("config root must be an object")
			values = {key: value for key, value in data.items() if key in known}
			ignored = set(data) - known
			if ignored:
				logger.debug(f"Ignoring unknown config keys: {', '.join(sorted(ignored))}")
		except (OSError, ValueError) as e:
			logger.warning(f"Could not read config {path}: {e} - using defaults")
			values = {}

	config = EditorConfig(**values)
	if environ.get(DATA_DIR_ENV_VAR):
		config.data_dir = environ[DATA_DIR_ENV_VAR]
	return config
