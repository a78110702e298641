"""Pytest configuration for the TinyLang test suite."""

import io

import pytest

from tl.interpreter import Interpreter
from tl.parser import Parser


@pytest.fixture(scope="session")
def parser():
    """One parser for the whole session, its tables are built once."""
    return Parser()


@pytest.fixture
def run(parser):
    """Run a source text and return the printed lines."""

    def _run(source: str, stdin: str = "") -> list[str]:
        out = io.StringIO()
        interpreter = Interpreter(stdin=io.StringIO(stdin), stdout=out)
        interpreter.run(parser.parse(source))
        return out.getvalue().splitlines()

    return _run
