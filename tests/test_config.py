# Area: Shared Tests
"""Tests for GameConfig validation and loading."""

import json

import pytest

from quiz_round.config import ENV_MAPPINGS, GameConfig, load_config, validate_config


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_MAPPINGS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestGameConfig:
    """Tests for the config dataclass."""

    def test_defaults(self):
        config = GameConfig()
        assert config.pre_question_delay_ms == 2000
        assert config.reveal_word_ms == 100
        assert config.after_question_ms == 3000
        assert config.option_selection_ms == 5000
        assert config.reveal_answer_ms == 3000
        assert config.give_points_ms == 500
        assert config.next_round_delay_ms == 1000
        assert config.points_per_correct == 10
        assert config.max_name_length == 20

    def test_from_dict_partial(self):
        config = GameConfig.from_dict({"option_selection_ms": 8000})
        assert config.option_selection_ms == 8000
        assert config.reveal_word_ms == 100

    def test_to_dict_round_trip(self):
        config = GameConfig(points_per_correct=5)
        assert GameConfig.from_dict(config.to_dict()) == config

    def test_scaled_only_touches_timings(self):
        config = GameConfig().scaled(0.1)
        assert config.pre_question_delay_ms == 200
        assert config.reveal_word_ms == 10
        assert config.give_points_ms == 50
        assert config.points_per_correct == 10
        assert config.max_name_length == 20

    def test_frozen(self):
        with pytest.raises(AttributeError):
            GameConfig().reveal_word_ms = 1


class TestValidateConfig:
    """Tests for validate_config."""

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown config keys"):
            validate_config({"warp_speed": 9})

    @pytest.mark.parametrize("value", [-1, "100", 1.5, True, None])
    def test_bad_timing_value(self, value):
        with pytest.raises(ValueError):
            validate_config({"reveal_word_ms": value})

    def test_zero_delay_allowed(self):
        validate_config({"pre_question_delay_ms": 0})

    def test_zero_name_length(self):
        with pytest.raises(ValueError):
            validate_config({"max_name_length": 0})

    def test_empty_avatar(self):
        with pytest.raises(ValueError):
            validate_config({"default_avatar": ""})


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_sources(self, clean_env):
        assert load_config() == GameConfig()

    def test_missing_file_uses_defaults(self, clean_env, tmp_path):
        assert load_config(str(tmp_path / "missing.json")) == GameConfig()

    def test_file_values(self, clean_env, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"option_selection_ms": 7000, "points_per_correct": 20}))
        config = load_config(str(path))
        assert config.option_selection_ms == 7000
        assert config.points_per_correct == 20

    def test_env_overrides_file(self, clean_env, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"option_selection_ms": 7000}))
        clean_env.setenv("QUIZ_OPTION_SELECTION_MS", "9000")
        clean_env.setenv("QUIZ_DEFAULT_AVATAR", "cat-2")
        config = load_config(str(path))
        assert config.option_selection_ms == 9000
        assert config.default_avatar == "cat-2"

    def test_bad_env_value(self, clean_env):
        clean_env.setenv("QUIZ_REVEAL_WORD_MS", "fast")
        with pytest.raises(ValueError, match="QUIZ_REVEAL_WORD_MS"):
            load_config()

    def test_bad_file_value(self, clean_env, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"reveal_word_ms": -5}))
        with pytest.raises(ValueError):
            load_config(str(path))
