"""
Tests for project export/import.

Covers:
- Export inlines payloads next to imageId, preserving list order
- Import is a hard reset: history cleared, payloads stored, viewbox restored
- Validation failures leave live state untouched
- Missing viewBox falls back to the default
"""
import pytest

from models.events import MODEL_CHANGED
from models.transform import ViewBox
from services.project_serializer import ProjectSerializer, ProjectValidationError


@pytest.fixture
def serializer(store, history, viewport, image_store):
    return ProjectSerializer(store, history, viewport, image_store)


def record(layer_id, image_id, image_data='data:image/png;base64,AAAA', **extra):
    base = {
        'id': layer_id, 'name': layer_id, 'imageId': image_id, 'imageData': image_data,
        'x': 0, 'y': 0, 'width': 10, 'height': 10, 'rotation': 0, 'opacity': 1,
        'visible': True, 'locked': False, 'blendMode': 'normal',
    }
    base.update(extra)
    return base


def document(*layers, **extra):
    doc = {
        'version': 1,
        'layers': list(layers),
        'viewBox': {'x': 5, 'y': 6, 'w': 400, 'h': 300},
        'selectedLayerId': None,
    }
    doc.update(extra)
    return doc


# ══════════════════════════════════════════════════════════════════════════
# Export
# ══════════════════════════════════════════════════════════════════════════

class TestExport:

    def test_empty_project(self, serializer):
        assert serializer.export() == {
            'version': 1,
            'layers': [],
            'viewBox': {'x': 0, 'y': 0, 'w': 800, 'h': 600},
            'selectedLayerId': None,
        }

    def test_payloads_inlined_in_order(self, serializer, store, image_store, make_layer):
        image_store.put('img1', 'data:one')
        image_store.put('img2', 'data:two')
        store.add_layer(make_layer(id='a', image_id='img1'))
        store.add_layer(make_layer(id='b', image_id='img2', locked=True))
        store.select_layer('b')

        doc = serializer.export()
        assert [r['id'] for r in doc['layers']] == ['a', 'b']
        assert [r['imageData'] for r in doc['layers']] == ['data:one', 'data:two']
        assert doc['layers'][1]['locked'] is True
        assert doc['selectedLayerId'] == 'b'
        keys = list(doc['layers'][0])
        assert keys.index('imageData') == keys.index('imageId') + 1

    def test_missing_payload_exports_empty(self, serializer, store, make_layer):
        store.add_layer(make_layer(id='a', image_id='gone'))
        assert serializer.export()['layers'][0]['imageData'] == ''

    def test_live_layers_never_carry_payload(self, serializer, store, image_store, make_layer):
        image_store.put('img1', 'data:one')
        store.add_layer(make_layer(id='a', image_id='img1'))
        serializer.export()
        assert 'imageData' not in store.to_records()[0]


# ══════════════════════════════════════════════════════════════════════════
# Import
# ══════════════════════════════════════════════════════════════════════════

class TestImport:

    def test_import_replaces_state(self, serializer, store, history, viewport, image_store, make_layer):
        store.add_layer(make_layer(id='old'))
        history.checkpoint()
        doc = document(record('a', 'img1', 'data:one'), record('b', 'img2', 'data:two'),
                       selectedLayerId='b')

        assert serializer.import_document(doc) == 2
        assert [layer.id for layer in store.get_layers()] == ['a', 'b']
        assert store.get_selected_layer_id() == 'b'
        assert not history.can_undo()
        assert not history.can_redo()
        assert viewport.view_box == ViewBox(5, 6, 400, 300)
        assert image_store.get_sync('img1') == 'data:one'
        assert image_store.get('img2').result() == 'data:two'
        assert 'imageData' not in store.to_records()[0]

    def test_single_change_notification(self, serializer, events):
        seen = []
        events.subscribe(MODEL_CHANGED, lambda: seen.append(1))
        serializer.import_document(document(record('a', 'img1')))
        assert seen == [1]

    def test_missing_viewbox_uses_default(self, serializer, viewport):
        doc = document(record('a', 'img1'))
        del doc['viewBox']
        viewport.set_view_box(ViewBox(1, 2, 3, 4))
        serializer.import_document(doc)
        assert viewport.view_box == ViewBox(0, 0, 800, 600)

    def test_unknown_selection_dropped(self, serializer, store):
        serializer.import_document(document(record('a', 'img1'), selectedLayerId='zzz'))
        assert store.get_selected_layer_id() is None

    def test_round_trip(self, serializer, store, image_store, viewport, make_layer):
        image_store.put('img1', 'data:one')
        store.add_layer(make_layer(id='a', image_id='img1', x=3, y=4, rotation=-45, opacity=0.5,
                                   blend_mode='multiply'))
        store.select_layer('a')
        viewport.set_view_box(ViewBox(-10, -20, 1600, 1200))
        exported = serializer.export()

        store.restore([])
        image_store.clear_cache()
        serializer.import_document(exported)
        assert serializer.export() == exported

    def test_newer_version_loads_with_warning(self, serializer, store, caplog):
        serializer.import_document(document(record('a', 'img1'), version=2))
        assert len(store) == 1
        assert 'version' in caplog.text


class TestValidation:

    @pytest.mark.parametrize('doc', [
        [],
        {'layers': []},
        {'version': None, 'layers': []},
        {'version': 0, 'layers': []},
        {'version': '', 'layers': []},
        {'version': 1},
        document(record('a', ['x'])),
        document(record('a', {'k': 1}, image_data='')),
        document(record(['a'], 'img1')),
        document(record('a', 'img1', name=5)),
        document(record('a', 'img1', locked='false')),
        document(record('a', 'img1', visible=1)),
        {'version': 1, 'layers': {'a': 1}},
        document({'id': 'x', 'width': 0, 'height': 10}),
        document(record('a', 'img1', opacity=2)),
        document(record('a', 'img1', blendMode='dodgy')),
        document(record('a', 'img1', image_data=42)),
        document(record('a', 'img1'), record('a', 'img2')),
        document(record('a', 'img1'), viewBox={'x': 0, 'y': 0, 'w': -1, 'h': 5}),
        document(record('a', 'img1'), viewBox=[0, 0, 10, 10]),
        document('not a layer'),
    ])
    def test_invalid_document_rejected_without_mutation(
            self, serializer, store, history, viewport, image_store, make_layer, doc):
        store.add_layer(make_layer(id='keep', image_id='k'))
        history.checkpoint()
        before = store.to_records()

        with pytest.raises(ProjectValidationError):
            serializer.import_document(doc)

        assert store.to_records() == before
        assert history.can_undo()
        assert viewport.view_box == ViewBox(0, 0, 800, 600)
        assert image_store.cached_ids() == []

    def test_validation_error_is_value_error(self):
        assert issubclass(ProjectValidationError, ValueError)
