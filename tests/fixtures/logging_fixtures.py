"""Fixtures for capturing loguru output."""

import json
from typing import List

import pytest
from loguru import logger


@pytest.fixture
def captured_logs():
    """Collect log records (level, message, extra) emitted during the test."""
    records: List[dict] = []

    def _sink(message):
        record = message.record
        extra = record["extra"]
        # the stdout sink's filter may already have serialized extra to JSON
        if isinstance(extra, str):
            extra = json.loads(extra)
        records.append({"level": record["level"].name, "message": record["message"], "extra": dict(extra)})

    handler_id = logger.add(_sink, level="DEBUG")
    yield records
    logger.remove(handler_id)
