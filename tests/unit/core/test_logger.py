"""Tests for core/logger.py."""

from __future__ import annotations

import logging

from placecache.core.logger import LoggerConfig


def test_place_id_tag(tmp_path, caplog):
    config = LoggerConfig(env=logging.INFO, logger_name="PLACE-CACHE-TEST", log_directory=str(tmp_path))

    with caplog.at_level(logging.INFO, logger="PLACE-CACHE-TEST"):
        config.log(logging.INFO, "cache hit", place_id="p1")
        config.log(logging.INFO, "purged", extra={"removed": 3})

    assert caplog.messages == ["[p1] cache hit", "purged | {'removed': 3}"]


def test_handlers_added_once(tmp_path):
    LoggerConfig(logger_name="PLACE-CACHE-ONCE", log_directory=str(tmp_path))
    config = LoggerConfig(logger_name="PLACE-CACHE-ONCE", log_directory=str(tmp_path))

    assert len(config.logger.handlers) == 2
    assert (tmp_path / "placecache.log").exists()
