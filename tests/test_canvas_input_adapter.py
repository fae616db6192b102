"""
Tests for the Qt event bridge.

Uses lightweight stand-ins exposing the Qt accessors the adapter reads, so no
QApplication or widget is needed.
"""
import pytest

QtCore = pytest.importorskip('PyQt5.QtCore')
Qt = QtCore.Qt

from components.canvas_input_adapter import CanvasInputAdapter
from components.interaction import GestureState, InteractionEngine
from models.transform import CanvasRect, Vec2


class FakeMouseEvent:
    def __init__(self, x, y, button=Qt.LeftButton, buttons=Qt.LeftButton, modifiers=Qt.NoModifier):
        self._pos = QtCore.QPoint(x, y)
        self._button = button
        self._buttons = buttons
        self._modifiers = modifiers

    def pos(self):
        return self._pos

    def button(self):
        return self._button

    def buttons(self):
        return self._buttons

    def modifiers(self):
        return self._modifiers


class FakeWheelEvent(FakeMouseEvent):
    def __init__(self, x, y, angle):
        super().__init__(x, y)
        self._angle = QtCore.QPoint(0, angle)

    def angleDelta(self):
        return self._angle


class FakeKeyEvent:
    def __init__(self, key, modifiers=Qt.NoModifier, auto_repeat=False):
        self._key = key
        self._modifiers = modifiers
        self._auto_repeat = auto_repeat

    def key(self):
        return self._key

    def modifiers(self):
        return self._modifiers

    def isAutoRepeat(self):
        return self._auto_repeat


@pytest.fixture
def engine(store, history, viewport):
    return InteractionEngine(store, history, viewport, canvas_rect=CanvasRect(0, 0, 800, 600))


@pytest.fixture
def adapter(engine):
    return CanvasInputAdapter(engine)


@pytest.fixture
def layer(store, make_layer):
    store.add_layer(make_layer(id='a', x=100, y=100, width=100, height=100))
    return store.get_layer('a')


class TestMouse:

    def test_press_on_layer_drags(self, adapter, engine, layer, store):
        assert adapter.mouse_press(FakeMouseEvent(150, 150))
        assert engine.state is GestureState.DRAGGING_LAYER
        assert store.get_selected_layer_id() == 'a'
        adapter.mouse_move(FakeMouseEvent(160, 170))
        adapter.mouse_release(FakeMouseEvent(160, 170))
        assert engine.state is GestureState.IDLE
        assert (store.get_layer('a').x, store.get_layer('a').y) == (pytest.approx(110), pytest.approx(120))

    def test_alt_press_scales(self, adapter, engine, layer):
        adapter.mouse_press(FakeMouseEvent(150, 150, modifiers=Qt.AltModifier))
        assert engine.state is GestureState.SCALING

    def test_right_button_ignored(self, adapter, engine, layer):
        assert not adapter.mouse_press(FakeMouseEvent(150, 150, button=Qt.RightButton))
        assert engine.state is GestureState.IDLE

    def test_move_without_button_ignored(self, adapter, layer):
        assert not adapter.mouse_move(FakeMouseEvent(10, 10, buttons=Qt.NoButton))

    def test_leave_cancels(self, adapter, engine, layer):
        adapter.mouse_press(FakeMouseEvent(150, 150))
        adapter.leave()
        assert engine.state is GestureState.IDLE

    def test_space_pans(self, adapter, engine, layer, viewport):
        adapter.key_press(FakeKeyEvent(Qt.Key_Space))
        adapter.mouse_press(FakeMouseEvent(150, 150))
        assert engine.state is GestureState.PANNING
        adapter.mouse_move(FakeMouseEvent(170, 150))
        assert viewport.view_box.x == pytest.approx(-20)
        adapter.key_release(FakeKeyEvent(Qt.Key_Space))
        assert engine.state is GestureState.IDLE


class TestWheelAndResize:

    def test_scroll_down_zooms_out(self, adapter, viewport):
        assert adapter.wheel(FakeWheelEvent(400, 300, -120))
        assert viewport.view_box.w == pytest.approx(880)

    def test_scroll_up_zooms_in(self, adapter, viewport):
        adapter.wheel(FakeWheelEvent(400, 300, 120))
        assert viewport.view_box.w == pytest.approx(720)

    def test_horizontal_scroll_ignored(self, adapter, viewport):
        assert not adapter.wheel(FakeWheelEvent(400, 300, 0))
        assert viewport.view_box.w == 800

    def test_resize(self, adapter, engine, viewport):
        adapter.resize(1000, 500)
        assert engine.canvas_rect == CanvasRect(0, 0, 1000, 500)
        assert (viewport.view_box.w, viewport.view_box.h) == (1000, 500)


class TestKeyboard:

    def test_arrow_nudges_selected(self, adapter, store, layer):
        store.select_layer('a')
        assert adapter.key_press(FakeKeyEvent(Qt.Key_Right))
        assert adapter.key_press(FakeKeyEvent(Qt.Key_Down, Qt.ShiftModifier))
        moved = store.get_layer('a')
        assert (moved.x, moved.y) == (pytest.approx(101), pytest.approx(110))

    def test_alt_arrows_reorder(self, adapter, store, layer, make_layer):
        store.add_layer(make_layer(id='b'))
        store.select_layer('a')
        assert adapter.key_press(FakeKeyEvent(Qt.Key_Up, Qt.AltModifier))
        assert store.index_of('a') == 1
        assert adapter.key_press(FakeKeyEvent(Qt.Key_Down, Qt.AltModifier))
        assert store.index_of('a') == 0

    def test_r_with_alt_rotates(self, adapter, engine, layer):
        adapter.key_press(FakeKeyEvent(Qt.Key_R))
        adapter.mouse_press(FakeMouseEvent(150, 150, modifiers=Qt.AltModifier))
        assert engine.state is GestureState.ROTATING
        adapter.mouse_release(FakeMouseEvent(150, 150))
        adapter.key_release(FakeKeyEvent(Qt.Key_R))
        adapter.mouse_press(FakeMouseEvent(150, 150, modifiers=Qt.AltModifier))
        assert engine.state is GestureState.SCALING

    def test_unhandled_key(self, adapter):
        assert not adapter.key_press(FakeKeyEvent(Qt.Key_A))
