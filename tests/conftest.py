"""
Shared fixtures for Pasteup Layer Editor tests.

Provides fresh in-memory sessions, bare model stacks and tiny PNG payloads.
"""
import io
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

from PIL import Image

from models.events import EventBus
from models.layer import Layer
from models.layer_store import LayerStore
from models.viewport import ViewportModel
from services.image_store import ImageContentStore, MemoryImageBackend
from services.session import EditorSession
from utils.history_manager import HistoryManager


# ── Image payloads ──────────────────────────────────────────────────────

def make_png(width=4, height=3, color=(255, 0, 0, 255)):
    """Encode a solid-color RGBA PNG of the given size"""
    buf = io.BytesIO()
    Image.new('RGBA', (width, height), color).save(buf, format='PNG')
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return make_png(4, 3)


@pytest.fixture
def png_factory():
    return make_png


# ── Model stacks ────────────────────────────────────────────────────────

@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def store(events):
    return LayerStore(events)


@pytest.fixture
def history(store):
    return HistoryManager(store)


@pytest.fixture
def viewport(events):
    return ViewportModel(events, 800, 600)


@pytest.fixture
def make_layer():
    """Factory for layers with small defaults"""
    def _make(**fields):
        fields.setdefault('width', 100)
        fields.setdefault('height', 50)
        fields.setdefault('image_id', 'img-' + fields.get('name', 'x'))
        return Layer(**fields)
    return _make


@pytest.fixture
def recorder():
    """Callable that records every call's kwargs"""
    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, **payload):
            self.calls.append(payload)

    return Recorder()


# ── Sessions ────────────────────────────────────────────────────────────

@pytest.fixture
def session():
    """Fresh session on an in-memory image backend and in-memory metadata"""
    s = EditorSession(image_backend=MemoryImageBackend())
    yield s
    s.close()


@pytest.fixture
def file_session_factory(tmp_path):
    """Build file-backed sessions sharing one data directory"""
    from utils.config import EditorConfig
    created = []

    def _make():
        config = EditorConfig(data_dir=str(tmp_path / 'data'))
        s = EditorSession.from_config(config)
        created.append(s)
        return s

    yield _make
    for s in created:
        s.close()


@pytest.fixture
def image_store():
    store = ImageContentStore(MemoryImageBackend())
    yield store
    store.close()
