"""Shared fixtures for qwxml tests."""

import io
import logging

import pytest
from PIL import Image

from qwxml.parser import DEFAULT_REGISTRY


@pytest.fixture
def registry():
    """Independent copy of the default registry, safe to associate into."""
    return DEFAULT_REGISTRY.copy()


@pytest.fixture(autouse=True)
def restore_loggers():
    """The CLI reconfigures the package loggers; put them back after each test."""
    loggers = [logging.getLogger(name) for name in ("qwxml", "qwxmlcli")]
    saved = [(lg.level, list(lg.handlers), lg.propagate) for lg in loggers]
    yield
    for lg, (level, handlers, propagate) in zip(loggers, saved):
        lg.setLevel(level)
        lg.handlers = handlers
        lg.propagate = propagate


def png_bytes(size=(2, 3), color=(255, 0, 0)):
    """Encode a small solid PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png():
    return png_bytes()
