"""
toylang Test Configuration
==========================

Shared fixtures for the toylang test suite.
"""

import io

import pytest

from toylang.config import set_default_config
from toylang.lexer import Lexer
from toylang.parser import Parser


_CONFIG_ENV_VARS = ("TOYLANG_PROMPT", "TOYLANG_SHOW_PROMPT", "TOYLANG_MAX_ERRORS")


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Run every test against a default configuration and a clean environment."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def diagnostics() -> io.StringIO:
    """Fixture: captured diagnostic stream."""
    return io.StringIO()


@pytest.fixture
def make_parser(diagnostics):
    """Fixture: build a parser over a string, writing diagnostics to the capture."""
    def _make(source: str) -> Parser:
        return Parser(Lexer(source, "<test>"), diagnostics=diagnostics)
    return _make
