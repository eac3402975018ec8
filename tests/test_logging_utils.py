"""Tests for logging utilities."""

import logging
from pathlib import Path

import pytest

from resumeconvertor.logging_utils import LOG, VERBOSITY_QUIET, fmt_issues, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_fmt_issues_no_errors_or_warnings():
    """Test formatting with no issues."""
    assert fmt_issues([], []) == "-"


def test_fmt_issues_only_errors():
    """Test formatting with only errors."""
    result = fmt_issues(["error1", "error2"], [])
    assert "errors: error1, error2" in result
    assert "warnings:" not in result


def test_fmt_issues_both_errors_and_warnings():
    """Errors come first, separated from warnings by a pipe."""
    assert fmt_issues(["error1"], ["warn1"]) == "errors: error1 | warnings: warn1"


def test_setup_logging_debug_level():
    setup_logging(debug=True)
    assert logging.root.level == logging.DEBUG


def test_setup_logging_quiet_level():
    setup_logging(debug=False, verbosity=VERBOSITY_QUIET)
    assert logging.root.level == logging.WARNING


def test_setup_logging_quiets_http_libraries():
    setup_logging(debug=True)
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("openai").level == logging.WARNING


def test_setup_logging_with_file(tmp_path: Path):
    """The log file receives debug records even at normal verbosity."""
    log_file = tmp_path / "run.log"
    setup_logging(debug=False, log_file=log_file)

    LOG.debug("debug detail")
    LOG.info("test message")
    for handler in logging.root.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "test message" in content
    assert "| DEBUG | debug detail" in content
