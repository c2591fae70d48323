"""
Pytest configuration for wiring tests.

Adds --console-spans flag for printing tracing spans while tests run.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent / "src"))


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--console-spans",
        action="store_true",
        default=False,
        help="Export OpenTelemetry spans to the console during tests"
    )


@pytest.fixture(scope="session", autouse=True)
def console_spans(request):
    """Set up console span export when --console-spans is given"""
    enabled = request.config.getoption("--console-spans")
    if not enabled:
        yield False
        return

    from observability.tracing import setup_tracing, shutdown_tracing

    setup_tracing("omnigraph-tests", console_export=True)
    yield True
    shutdown_tracing()
