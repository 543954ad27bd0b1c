import pytest
from pydantic import ValidationError

from ideaboard.core.config import CanvasConfig, load_ideaboard_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        'IDEABOARD_CONFIG',
        'IDEABOARD_FILE_STORE',
        'IDEABOARD_FILE_STORE_PATH',
        'IDEABOARD_API_BASE_URL',
        'IDEABOARD_HOST',
        'IDEABOARD_PORT',
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path):
    config = load_ideaboard_config(str(tmp_path / 'absent.yaml'))
    assert config.file_store == 'local'
    assert config.session_api_keys == {}
    assert config.canvas.drag_threshold == 5.0
    assert config.canvas.persist_debounce == 0.15


def test_yaml_values_and_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / 'config.yaml'
    path.write_text(
        'file_store: local\n'
        'file_store_path: /data/board\n'
        'session_api_keys:\n'
        '  secret-1: alice\n'
        'canvas:\n'
        '  max_zoom: 3\n'
        '  card_width: 300\n'
    )
    monkeypatch.setenv('IDEABOARD_CONFIG', str(path))
    monkeypatch.setenv('IDEABOARD_FILE_STORE', 'memory')
    monkeypatch.setenv('IDEABOARD_PORT', '8080')

    config = load_ideaboard_config()

    assert config.file_store == 'memory'
    assert config.file_store_path == '/data/board'
    assert config.port == 8080
    assert config.session_api_keys == {'secret-1': 'alice'}
    assert config.canvas.max_zoom == 3
    assert config.canvas.card_width == 300


def test_non_mapping_yaml_is_ignored(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('- just\n- a list\n')
    assert load_ideaboard_config(str(path)).file_store == 'local'


def test_zoom_range_is_validated():
    with pytest.raises(ValidationError):
        CanvasConfig(min_zoom=2.0, max_zoom=1.0)
    with pytest.raises(ValidationError):
        CanvasConfig(min_zoom=0)
