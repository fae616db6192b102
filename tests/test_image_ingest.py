"""
Tests for turning image bytes into stored payloads.
"""
import base64
import io

import pytest
from PIL import Image

from services.image_ingest import decode_data_url, encode_data_url, ingest_bytes, ingest_file


class TestIngest:

    def test_png_natural_size(self, png_factory):
        payload = ingest_bytes(png_factory(17, 9))
        assert (payload.width, payload.height) == (17, 9)
        assert payload.data_url.startswith('data:image/png;base64,')

    def test_jpeg_mime(self):
        buf = io.BytesIO()
        Image.new('RGB', (8, 6), (0, 128, 255)).save(buf, format='JPEG')
        payload = ingest_bytes(buf.getvalue())
        assert payload.data_url.startswith('data:image/jpeg;base64,')
        assert (payload.width, payload.height) == (8, 6)

    def test_bytes_preserved(self, png_bytes):
        payload = ingest_bytes(png_bytes)
        assert decode_data_url(payload.data_url) == ('image/png', png_bytes)

    def test_from_data_url(self, png_bytes):
        url = encode_data_url(png_bytes, 'image/png')
        assert ingest_bytes(url).data_url == url

    def test_not_an_image(self):
        with pytest.raises(ValueError):
            ingest_bytes(b'hello')

    def test_file(self, tmp_path, png_factory):
        path = tmp_path / 'pic.png'
        path.write_bytes(png_factory(3, 5))
        assert ingest_file(path).height == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            ingest_file(tmp_path / 'missing.png')


class TestDataUrls:

    @pytest.mark.parametrize('text', [
        'http://example.com/a.png',
        'data:image/png,raw',
        'data:image/png;base64',
        'data:image/png;base64,@@@@',
    ])
    def test_rejected(self, text):
        with pytest.raises(ValueError):
            decode_data_url(text)

    def test_encode(self):
        assert encode_data_url(b'\x00\x01', 'image/gif') == 'data:image/gif;base64,' + base64.b64encode(b'\x00\x01').decode()
