import math

import pytest

from gune import config


def test_parse_constants():
    assert config.parse_constants("pi=3.14; e=2.5,g=9") == {"pi": 3.14, "e": 2.5, "g": 9.0}
    assert config.parse_constants("") == {}


@pytest.mark.parametrize("raw", ["x", "1x=2", "x=abc", "=3", "a b=1"])
def test_parse_constants_rejects_malformed_entries(raw):
    with pytest.raises(ValueError):
        config.parse_constants(raw)


def test_constants_default_to_pi(monkeypatch):
    assert config.get_constants() == {"pi": math.pi}
    monkeypatch.setenv("GUNE_CONSTANTS", "")
    assert config.get_constants() == {}


def test_prompt_and_log_level(monkeypatch):
    assert config.get_prompt() == "# "
    assert config.get_log_level() == "WARNING"
    monkeypatch.setenv("GUNE_PROMPT", ">>> ")
    monkeypatch.setenv("GUNE_LOG_LEVEL", "debug")
    assert config.get_prompt() == ">>> "
    assert config.get_log_level() == "DEBUG"


@pytest.mark.parametrize("raw", ["bogus", "verbose", "10"])
def test_unknown_log_level_falls_back(monkeypatch, raw):
    monkeypatch.setenv("GUNE_LOG_LEVEL", raw)
    with pytest.warns(UserWarning, match="GUNE_LOG_LEVEL"):
        assert config.get_log_level() == "WARNING"


def test_repl_address(monkeypatch):
    assert config.get_repl_address() == ("127.0.0.1", 8765)
    monkeypatch.setenv("GUNE_REPL_HOST", "0.0.0.0")
    monkeypatch.setenv("GUNE_REPL_PORT", "9000")
    assert config.get_repl_address() == ("0.0.0.0", 9000)
