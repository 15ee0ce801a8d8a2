import logging

import pytest

from undercroft.logging_config import LOG_LEVEL_ENV_VAR, configure_logging, level_for_verbosity


@pytest.mark.parametrize("count,level", [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)])
def test_level_for_verbosity(count, level):
    assert level_for_verbosity(count) == level


def test_env_var_overrides_default(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "debug")
    assert configure_logging(logging.WARNING) == logging.DEBUG


def test_unknown_env_level_keeps_default(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "chatty")
    assert configure_logging(logging.INFO) == logging.INFO


def test_default_without_env(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    assert configure_logging(logging.ERROR) == logging.ERROR
