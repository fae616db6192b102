"""
Pasteup Layer Editor - File Operations Service

This module handles file I/O for project documents.
Separates file operations from model logic.
"""

import json
import logging

logger = logging.getLogger(__name__)


def save_project_to_file(document, filename):
    """Save a project document as JSON

    Args:
        document: Project document dictionary (payloads inlined)
        filename: Path to save file

    Raises:
        OSError: If file write fails
    """
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2)

    logger.info(f"Project saved to {filename}")


def load_project_from_file(filename):
    """Load a project document from a JSON file

    Args:
        filename: Path to project file

    Returns:
        Parsed document (not yet validated)

    Raises:
        OSError: If file read fails
        ValueError: If the file is not valid JSON
    """
    with open(filename, 'r', encoding='utf-8-sig') as f:
        text = f.read()

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {filename}: {e}") from e

    logger.info(f"Project loaded from {filename}")
    return document
