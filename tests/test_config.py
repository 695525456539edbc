"""Tests for TOML-backed analyzer settings."""

import logging

from kairo import config_manager
from kairo.analyzer import MetadataAnalyzer


def test_defaults_without_file():
    settings = config_manager.load_config()
    assert settings == {"progress_log_interval": 100, "log_level": "WARNING"}


def test_save_and_load_roundtrip():
    assert config_manager.save_config(25, "info")
    settings = config_manager.load_config()
    assert settings["progress_log_interval"] == 25
    assert settings["log_level"] == "INFO"


def test_other_sections_preserved():
    config_manager.CONFIG_FILE.write_text('[report]\ntitle = "Org"\n', encoding="utf-8")
    config_manager.save_config(10)
    full = config_manager.load_full_config()
    assert full["report"] == {"title": "Org"}
    assert full["analyzer"]["progress_log_interval"] == 10


def test_env_overrides_log_level(monkeypatch):
    config_manager.save_config(10, "ERROR")
    monkeypatch.setenv("KAIRO_LOG_LEVEL", "debug")
    assert config_manager.load_config()["log_level"] == "DEBUG"


def test_unreadable_config_falls_back(caplog):
    config_manager.CONFIG_FILE.write_text("[analyzer\nbroken", encoding="utf-8")
    assert config_manager.load_config()["progress_log_interval"] == 100


def test_invalid_interval_falls_back(caplog):
    config_manager.CONFIG_FILE.write_text('[analyzer]\nprogress_log_interval = "often"\n', encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="kairo.config_manager"):
        settings = config_manager.load_config()

    assert settings["progress_log_interval"] == 100
    assert any("often" in record.getMessage() for record in caplog.records)


def test_analyzer_ignores_config_file(temp_dir):
    config_manager.CONFIG_FILE.write_text('[analyzer]\nprogress_log_interval = "often"\n', encoding="utf-8")

    analyzer = MetadataAnalyzer()

    assert analyzer.progress_log_interval == 100
    assert analyzer.analyze(temp_dir).stats.total_components == 0
