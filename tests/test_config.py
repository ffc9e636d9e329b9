import json

import pytest

from honest_pitch.core.config import ConfigManager, DEFAULT_CONFIGS


@pytest.fixture
def manager(tmp_path):
    return ConfigManager(config_dir=str(tmp_path))


def test_defaults_are_written(manager, tmp_path):
    for name in DEFAULT_CONFIGS:
        assert (tmp_path / f"{name}.json").exists()
    assert manager.get_config("history") == {"window_seconds": 15.0}
    assert manager.get_config("audio_input")["frame_size"] == 4096


def test_get_config_returns_a_copy(manager):
    config = manager.get_config("pitch_estimator")
    config["min_lag"] = 1
    assert manager.get_config("pitch_estimator")["min_lag"] == 50


def test_unknown_config_is_empty(manager):
    assert manager.get_config("nope") == {}
    assert not manager.update_config("nope", {"a": 1})
    assert not manager.reset_config("nope")


def test_update_persists(manager, tmp_path):
    assert manager.update_config("display", {"fps": 30})
    reloaded = ConfigManager(config_dir=str(tmp_path))
    assert reloaded.get_config("display")["fps"] == 30
    assert reloaded.get_config("display")["width"] == 1024


def test_reset(manager, tmp_path):
    manager.update_config("history", {"window_seconds": 5.0})
    assert manager.reset_config("history")
    assert manager.get_config("history") == {"window_seconds": 15.0}
    saved = json.loads((tmp_path / "history.json").read_text())
    assert saved == {"window_seconds": 15.0}


def test_missing_keys_are_filled_in(tmp_path):
    (tmp_path / "audio_input.json").write_text(json.dumps({"sample_rate": 48000}))
    config = ConfigManager(config_dir=str(tmp_path)).get_config("audio_input")
    assert config == {"sample_rate": 48000, "frame_size": 4096, "channels": 1}


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_corrupt_file_falls_back_to_defaults(tmp_path, content):
    (tmp_path / "pitch_estimator.json").write_text(content)
    config = ConfigManager(config_dir=str(tmp_path)).get_config("pitch_estimator")
    assert config == DEFAULT_CONFIGS["pitch_estimator"]


def test_unknown_keys_are_dropped(tmp_path):
    stored = {"window_seconds": 5.0, "max_points": 10}
    (tmp_path / "history.json").write_text(json.dumps(stored))
    manager = ConfigManager(config_dir=str(tmp_path))
    assert manager.get_config("history") == {"window_seconds": 5.0}


def test_update_rejects_unknown_keys(manager):
    assert not manager.update_config("history", {"max_points": 10})
    assert manager.get_config("history") == {"window_seconds": 15.0}


def test_terminal_history_length_is_configurable(manager):
    assert manager.get_config("display")["max_history"] == 8
    assert manager.update_config("display", {"max_history": 12})
    assert manager.get_config("display")["max_history"] == 12
