"""Tests for the Diagnostics sink."""

import logging

from qwxml.core import Diagnostic, Diagnostics


def test_records_in_order():
    diagnostics = Diagnostics()
    assert not diagnostics

    diagnostics.warning("attribute-failed", "bad size", "<w> line 2")
    diagnostics.error("child-failed", "bad child")

    assert len(diagnostics) == 2
    assert diagnostics.codes() == ["attribute-failed", "child-failed"]
    assert list(diagnostics)[1] == Diagnostic("error", "child-failed", "bad child")
    assert diagnostics.by_code("attribute-failed")[0].subject == "<w> line 2"


def test_records_are_logged(caplog):
    diagnostics = Diagnostics()

    with caplog.at_level(logging.WARNING, logger="qwxml"):
        diagnostics.warning("attribute-failed", "bad size", "<w> line 2")
        diagnostics.error("child-failed", "bad child")

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.WARNING, logging.ERROR]
    assert "<w> line 2: bad size" in caplog.text
