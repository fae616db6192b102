"""Image ingestion helpers.

Turns raw image bytes (clipboard, drop, file) into the stored payload form:
a data URL plus the natural pixel size read with Pillow.
"""

import base64
import binascii
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

from PIL import Image, UnidentifiedImageError


DATA_URL_PREFIX = 'data:'


@dataclass(frozen=True)
class ImagePayload:
    """Stored form of one ingested image"""
    data_url: str
    width: int
    height: int


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """Split a base64 data URL into (mime type, raw bytes)

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    if not data_url.startswith(DATA_URL_PREFIX) or ',' not in data_url:
        raise ValueError("Not a data URL")
    header, encoded = data_url[len(DATA_URL_PREFIX):].split(',', 1)
    if not header.endswith(';base64'):
        raise ValueError("Only base64 data URLs are supported")
    try:
        return header[:-len(';base64')], base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def encode_data_url(raw: bytes, mime: str) -> str:
    return f"{DATA_URL_PREFIX}{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def read_image(raw: bytes) -> Tuple[str, int, int]:
    """Identify image bytes with Pillow

    Returns:
        (mime type, natural width, natural height)

    Raises:
        ValueError: If Pillow cannot identify the data as an image
    """
    try:
        with Image.open(io.BytesIO(raw)) as img:
            width, height = img.size
            mime = Image.MIME.get(img.format, 'application/octet-stream')
    except UnidentifiedImageError as e:
        raise ValueError(f"Unrecognized image data: {e}") from e
    return mime, width, height


def ingest_bytes(data: Union[bytes, str]) -> ImagePayload:
    """Build the stored payload from raw bytes or an existing data URL"""
    if isinstance(data, str):
        _, raw = decode_data_url(data)
    else:
        raw = data
    mime, width, height = read_image(raw)
    return ImagePayload(encode_data_url(raw, mime), width, height)


def ingest_file(path) -> ImagePayload:
    """Read an image file from disk

    Raises:
        OSError: If the file cannot be read
        ValueError: If it is not an image
    """
    return ingest_bytes(Path(path).read_bytes())
