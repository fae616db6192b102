"""Bridge from PyQt5 widget events to the InteractionEngine.

A canvas widget forwards its mouse, wheel and key events here:

    def mousePressEvent(self, event):
        self.input_adapter.mouse_press(event)

Modifier mapping:
- Space (held): pan
- R (held, without Ctrl): rotate, together with Alt
- Alt: transform (scale/rotate instead of move)
- Shift: proportional scale, coarse nudge

Only QtCore is needed; events are used through their Qt accessors, so any
object exposing pos()/button()/modifiers()/key()/angleDelta() works.
"""

import logging

from PyQt5.QtCore import Qt

from components.interaction.states import Modifiers
from models.transform import CanvasRect, Vec2


_ARROW_KEYS = {
    Qt.Key_Left: 'left',
    Qt.Key_Right: 'right',
    Qt.Key_Up: 'up',
    Qt.Key_Down: 'down',
}


class CanvasInputAdapter:
    """Translates Qt input events into engine calls"""

    def __init__(self, engine):
        self._logger = logging.getLogger('CanvasInputAdapter')
        self.engine = engine
        self._space_down = False
        self._r_down = False

    def _modifiers(self, qt_modifiers) -> Modifiers:
        return Modifiers(
            pan=self._space_down,
            transform=bool(qt_modifiers & Qt.AltModifier),
            rotate=self._r_down,
            secondary=bool(qt_modifiers & Qt.ShiftModifier),
        )

    @staticmethod
    def _point(event) -> Vec2:
        pos = event.pos()
        return Vec2(float(pos.x()), float(pos.y()))

    # ========================================
    # Mouse
    # ========================================

    def mouse_press(self, event) -> bool:
        """Left button starts a gesture on the layer under the cursor"""
        if event.button() != Qt.LeftButton:
            return False
        point = self._point(event)
        target = None if self._space_down else self.engine.layer_at(point)
        self.engine.pointer_down(point, target, self._modifiers(event.modifiers()))
        return True

    def mouse_move(self, event) -> bool:
        if not event.buttons() & Qt.LeftButton:
            return False
        return self.engine.pointer_move(self._point(event))

    def mouse_release(self, event) -> bool:
        if event.button() != Qt.LeftButton:
            return False
        self.engine.pointer_up()
        return True

    def leave(self):
        """Pointer left the surface"""
        self.engine.pointer_cancel()

    def wheel(self, event) -> bool:
        """Qt reports scroll-up as a positive angle; scroll-up zooms in"""
        delta = event.angleDelta().y()
        return self.engine.wheel(self._point(event), -delta)

    def resize(self, width, height):
        """Surface resized: update the hit-test rectangle and the viewbox"""
        if width <= 0 or height <= 0:
            return
        left, top = self.engine.canvas_rect.left, self.engine.canvas_rect.top
        self.engine.set_canvas_rect(CanvasRect(left, top, float(width), float(height)))
        self.engine.viewport.handle_canvas_resize(float(width), float(height))

    # ========================================
    # Keyboard
    # ========================================

    def key_press(self, event) -> bool:
        """Returns True if the key was consumed"""
        key = event.key()
        mods = event.modifiers()
        if key == Qt.Key_Space:
            if not event.isAutoRepeat():
                self._space_down = True
                self.engine.modifiers_changed(self._modifiers(mods))
            return True
        if key == Qt.Key_R and not mods & Qt.ControlModifier:
            self._r_down = True
            return False

        if key in _ARROW_KEYS and not mods & Qt.ControlModifier:
            if mods & Qt.AltModifier:
                if key == Qt.Key_Up:
                    return self.engine.reorder_selected(1)
                if key == Qt.Key_Down:
                    return self.engine.reorder_selected(-1)
                return False
            return self.engine.nudge(_ARROW_KEYS[key], secondary=bool(mods & Qt.ShiftModifier))
        return False

    def key_release(self, event) -> bool:
        key = event.key()
        if event.isAutoRepeat():
            return False
        if key == Qt.Key_Space:
            self._space_down = False
            self.engine.modifiers_changed(self._modifiers(event.modifiers()))
            return True
        if key == Qt.Key_R:
            self._r_down = False
        return False
