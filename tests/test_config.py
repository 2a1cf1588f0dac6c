"""Tests for configuration loading."""

import os

import pytest

from anchor_insight.config import AnalysisConfig, HandlerRules, load_config
from anchor_insight.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for key in list(os.environ):
        if key.startswith("ANCHOR_INSIGHT_"):
            monkeypatch.delenv(key)
    return home, project


class TestAnalysisConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.source_extensions == (".rs",)
        assert config.max_file_size_bytes == 1024 * 1024
        assert config.handlers.entry_attributes == ("instruction", "handler", "anchor_handler")
        assert config.handlers.exact_names == ("validate", "execute")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_file_size_mb": 0},
            {"workers": 0},
            {"parallel_threshold": 0},
            {"timeout_seconds": -1.0},
            {"source_extensions": ()},
            {"source_extensions": ("rs",)},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            AnalysisConfig(**kwargs)

    def test_invalid_handler_rules(self):
        with pytest.raises(ValueError):
            HandlerRules(context_type_prefix="")
        with pytest.raises(ValueError):
            HandlerRules(name_prefixes=("",))


class TestLoadConfig:
    """Merging configuration sources."""

    def test_defaults_without_sources(self):
        assert load_config() == AnalysisConfig()

    def test_project_file(self, isolated):
        _, project = isolated
        (project / "anchor-insight.toml").write_text(
            'max_file_size_mb = 2.5\n\n[handlers]\nname_prefixes = ["init", "close"]\n'
        )
        config = load_config()
        assert config.max_file_size_mb == 2.5
        assert config.handlers.name_prefixes == ("init", "close")
        assert config.handlers.exact_names == ("validate", "execute")

    def test_precedence(self, isolated, tmp_path, monkeypatch):
        home, project = isolated
        (home / ".anchor-insight.toml").write_text("workers = 2\nparallel_threshold = 5\n")
        (project / "anchor-insight.toml").write_text("workers = 3\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("workers = 4\nmax_file_size_mb = 3.0\n")
        monkeypatch.setenv("ANCHOR_INSIGHT_MAX_FILE_SIZE_MB", "4.0")

        config = load_config(config_file=explicit, timeout_seconds=9.0)
        assert config.parallel_threshold == 5
        assert config.workers == 4
        assert config.max_file_size_mb == 4.0
        assert config.timeout_seconds == 9.0

        assert load_config(config_file=explicit, workers=7).workers == 7

    def test_env_bool(self, monkeypatch):
        monkeypatch.setenv("ANCHOR_INSIGHT_PARALLEL", "off")
        assert load_config().parallel is False

    def test_env_invalid(self, monkeypatch):
        monkeypatch.setenv("ANCHOR_INSIGHT_WORKERS", "many")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "ANCHOR_INSIGHT_WORKERS"
        assert exc_info.value.source == "environment"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_malformed_toml(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("workers = [")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_unknown_key(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_invalid_value(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(workers=0)
        assert exc_info.value.key == "workers"
        assert exc_info.value.source == "overrides"

    def test_invalid_file_value(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("max_file_size_mb = -1\n")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(config_file=bad)
        assert exc_info.value.key == "max_file_size_mb"
        assert exc_info.value.source is None

    def test_handler_overrides(self):
        config = load_config(handlers={"exact_names": ["run"]})
        assert config.handlers.exact_names == ("run",)

        rules = HandlerRules(context_type_prefix="Ctx")
        assert load_config(handlers=rules).handlers is rules
