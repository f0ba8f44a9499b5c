"""Tests for environment-driven settings."""

import logging

import pytest

from infixcalc.config import DEFAULT_PROMPT, Settings, load_settings
from infixcalc.models import FlushPolicy


def test_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.flush_policy is FlushPolicy.LEGACY
    assert settings.prompt == DEFAULT_PROMPT
    assert settings.log_level == logging.WARNING


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("INFIXCALC_FLUSH_POLICY", "Standard")
    monkeypatch.setenv("INFIXCALC_PROMPT", "> ")
    monkeypatch.setenv("INFIXCALC_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.flush_policy is FlushPolicy.STANDARD
    assert settings.prompt == "> "
    assert settings.log_level == logging.DEBUG


def test_invalid_flush_policy():
    with pytest.raises(ValueError, match="INFIXCALC_FLUSH_POLICY"):
        load_settings({"INFIXCALC_FLUSH_POLICY": "fast"})


def test_invalid_log_level():
    with pytest.raises(ValueError, match="INFIXCALC_LOG_LEVEL"):
        load_settings({"INFIXCALC_LOG_LEVEL": "loud"})


def test_flags_override_environment():
    settings = load_settings({"INFIXCALC_LOG_LEVEL": "ERROR"}).override(standard=True, verbose=True)
    assert settings.flush_policy is FlushPolicy.STANDARD
    assert settings.log_level == logging.DEBUG


def test_override_without_flags_keeps_values():
    settings = Settings(prompt="? ")
    assert settings.override() == settings
