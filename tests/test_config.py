"""
Tests for config loading and the data directory layout.
"""
import json
from pathlib import Path

from utils.config import EditorConfig, load_config


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / 'config.json', environ={})
        assert config == EditorConfig()

    def test_values_read(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'data_dir': str(tmp_path / 'd'), 'canvas_width': 1024,
                                    'log_level': 'INFO'}), encoding='utf-8')
        config = load_config(path, environ={})
        assert config.data_dir == str(tmp_path / 'd')
        assert config.canvas_width == 1024
        assert config.canvas_height == 600
        assert config.log_level == 'INFO'

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'theme': 'dark', 'canvas_height': 700}), encoding='utf-8')
        config = load_config(path, environ={})
        assert config.canvas_height == 700
        assert not hasattr(config, 'theme')

    def test_malformed_file_gives_defaults(self, tmp_path, caplog):
        path = tmp_path / 'config.json'
        path.write_text('{"data_dir": ', encoding='utf-8')
        assert load_config(path, environ={}) == EditorConfig()
        assert 'using defaults' in caplog.text

    def test_non_object_root(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('[1, 2]', encoding='utf-8')
        assert load_config(path, environ={}) == EditorConfig()

    def test_environment_overrides_data_dir(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'data_dir': '/from/file'}), encoding='utf-8')
        config = load_config(path, environ={'PASTEUP_DATA_DIR': '/from/env'})
        assert config.data_dir == '/from/env'


class TestPaths:

    def test_layout(self, tmp_path):
        config = EditorConfig(data_dir=str(tmp_path))
        assert config.metadata_path == tmp_path / 'metadata.json'
        assert config.image_dir == tmp_path / 'images'

    def test_home_expanded(self):
        assert '~' not in str(EditorConfig(data_dir='~/pasteup-test').data_path)
        assert EditorConfig(data_dir='~/x').data_path == Path.home() / 'x'
