import logging

import pytest

from keyfall.logging_setup import ENV_VAR, _parse_level, setup_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    yield
    logging.getLogger("keyfall").setLevel(logging.NOTSET)


@pytest.mark.parametrize("raw, expected", [
    ("debug", logging.DEBUG),
    (" warn ", logging.WARNING),
    ("ERROR", logging.ERROR),
    ("", None),
    (None, None),
    ("loud", None),
])
def test_parse_level(raw, expected):
    assert _parse_level(raw) == expected


def test_default_is_info():
    assert setup_logging() == logging.INFO
    assert logging.getLogger("keyfall").level == logging.INFO


def test_flags():
    assert setup_logging(quiet=True) == logging.WARNING
    assert setup_logging(quiet=True, debug=True) == logging.DEBUG


def test_env_overrides_flags(monkeypatch):
    monkeypatch.setenv(ENV_VAR, "error")
    assert setup_logging(debug=True) == logging.ERROR
