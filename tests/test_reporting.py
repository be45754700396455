from __future__ import annotations

import logging

import pytest

from mail_categorizer.logging_setup import SUCCESS, VERBOSE, human_kv, resolve_level
from mail_categorizer.reporting import StatusReporter


def test_verbose_events_dropped_unless_enabled():
    quiet = StatusReporter(verbose=False)
    quiet.verbose("per-keyword detail")
    quiet.info("started")
    assert quiet.messages() == ["started"]

    chatty = StatusReporter(verbose=True)
    chatty.verbose("per-keyword detail")
    assert chatty.messages("verbose") == ["per-keyword detail"]


def test_events_are_tagged_and_logged(caplog):
    caplog.set_level(VERBOSE)
    reporter = StatusReporter(logging.getLogger("mail_categorizer.test"), verbose=True)
    reporter.info("a")
    reporter.verbose("b")
    reporter.error("c", {"message_id": "m1"})
    reporter.success("d")

    assert [e.severity for e in reporter.events] == ["info", "verbose", "error", "success"]
    levels = [r.levelno for r in caplog.records if r.name == "mail_categorizer.test"]
    assert levels == [logging.INFO, VERBOSE, logging.ERROR, SUCCESS]


def test_unknown_severity_is_rejected():
    with pytest.raises(ValueError):
        StatusReporter().emit("debug", "nope")


def test_show_status_keeps_latest_line():
    reporter = StatusReporter()
    reporter.show_status("Processing folder...")
    reporter.show_status("Completed")
    assert reporter.status == "Completed"


def test_level_names():
    assert resolve_level("verbose") == VERBOSE
    assert resolve_level("success") == SUCCESS
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level("bogus") == logging.INFO


def test_human_kv_truncates():
    assert human_kv({"a": 1, "b": None}) == "a=1 b=-"
    assert human_kv({"t": "x" * 200}).endswith("...")
