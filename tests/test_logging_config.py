"""Tests for log record sanitizing."""

import logging
import uuid

from padmasambhava_trips.utils.auth import create_access_token
from padmasambhava_trips.utils.logging_config import SensitiveDataFilter


def _record(msg, **extra):
    record = logging.LogRecord("padmasambhava_trips.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSensitiveDataFilter:

    def test_identifiers_are_kept(self):
        trip_id = str(uuid.uuid4())
        record = _record(f"Custom trip request {trip_id} submitted", custom_trip_id=trip_id)

        SensitiveDataFilter().filter(record)

        assert record.msg == f"Custom trip request {trip_id} submitted"
        assert record.custom_trip_id == trip_id

    def test_tokens_are_masked(self):
        token = create_access_token({"sub": str(uuid.uuid4())})
        record = _record(f"Rejected credential {token}", detail=f"Bearer {token}")

        SensitiveDataFilter().filter(record)

        assert token not in record.msg
        assert "***MASKED***" in record.msg
        assert token not in record.detail

    def test_sensitive_keys_are_masked(self):
        record = _record("login", password="himalaya-2024", access_token="abc")

        SensitiveDataFilter().filter(record)

        assert record.password == "***MASKED***"
        assert record.access_token == "***MASKED***"
