"""Tests for procwrap logging configuration."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import pytest

from procwrap.config import DirectoryPermissionError
from procwrap.logging import PACKAGE_LOGGER, format_timestamp, task_log


def test_format_timestamp_is_iso_like():
    when = datetime(2024, 3, 9, 7, 5, 1, tzinfo=timezone.utc)
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{4}", format_timestamp(when))


def test_task_log_writes_prefixed_lines(tmp_path: Path):
    log_file = tmp_path / "job.log"
    logger = logging.getLogger(f"{PACKAGE_LOGGER}.tests")
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.INFO)

    with task_log(log_file, "job"):
        logger.info("Locking process id: 42")
        logger.debug("not recorded")

    content = log_file.read_text()
    assert re.search(r"^\[[^\]]+\]: \[job\] Locking process id: 42$", content, re.MULTILINE)
    assert "not recorded" not in content


def test_task_log_detaches_handler(tmp_path: Path):
    log_file = tmp_path / "job.log"
    with task_log(log_file, "job") as handler:
        assert handler in logging.getLogger(PACKAGE_LOGGER).handlers
    assert handler not in logging.getLogger(PACKAGE_LOGGER).handlers

    logging.getLogger(f"{PACKAGE_LOGGER}.tests").warning("after")
    assert "after" not in log_file.read_text()


def test_task_log_appends(tmp_path: Path):
    log_file = tmp_path / "job.log"
    log_file.write_text("existing\n")
    with task_log(log_file, "job"):
        logging.getLogger(f"{PACKAGE_LOGGER}.tests").warning("new")
    assert log_file.read_text().startswith("existing\n")


def test_task_log_unopenable_file_raises(tmp_path: Path):
    log_file = tmp_path / "job.log"
    log_file.mkdir()
    with pytest.raises(DirectoryPermissionError, match="Cannot open log file"):
        with task_log(log_file, "job"):
            pass
