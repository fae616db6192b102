"""
Tests for picking layers under a plane point.
"""
import pytest

from models.layer import Layer
from utils.hit_testing import contains_point, topmost_layer_at


def rect(layer_id, x, y, w, h, **extra):
    return Layer(id=layer_id, x=x, y=y, width=w, height=h, **extra)


class TestTopmost:

    def test_empty_stack(self):
        assert topmost_layer_at([], 0, 0) is None
        assert contains_point([], 0, 0).size == 0

    def test_topmost_wins(self):
        layers = [rect('bottom', 0, 0, 100, 100), rect('top', 50, 50, 100, 100)]
        assert topmost_layer_at(layers, 75, 75) == 'top'
        assert topmost_layer_at(layers, 10, 10) == 'bottom'
        assert topmost_layer_at(layers, 500, 500) is None

    def test_edges_inclusive(self):
        assert topmost_layer_at([rect('a', 0, 0, 10, 10)], 10, 10) == 'a'

    @pytest.mark.parametrize('extra', [{'visible': False}, {'locked': True}])
    def test_hidden_and_locked_are_click_through(self, extra):
        layers = [rect('bottom', 0, 0, 100, 100), rect('top', 0, 0, 100, 100, **extra)]
        assert topmost_layer_at(layers, 50, 50) == 'bottom'

    def test_rotation_about_center(self):
        # 200x20 bar centered at (100, 10), rotated 90 degrees: now vertical
        bar = rect('bar', 0, 0, 200, 20, rotation=90)
        assert topmost_layer_at([bar], 100, 90) == 'bar'
        assert topmost_layer_at([bar], 190, 10) is None

    def test_mask_shape(self):
        layers = [rect('a', 0, 0, 10, 10), rect('b', 20, 0, 10, 10)]
        assert contains_point(layers, 5, 5).tolist() == [True, False]
