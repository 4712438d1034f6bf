"""Tests for the SumRecord model and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from models import SumRecord
from utils.log import ColorFormatter, setup_logging


# ---------------------------------------------------------------------------
# SumRecord
# ---------------------------------------------------------------------------

class TestSumRecord:
    def test_from_operands(self):
        r = SumRecord.from_operands(2, 3)
        assert r.total == 5
        assert r.id is None
        assert r.as_row() == (2, 3, 5)

    def test_negative(self):
        assert SumRecord.from_operands(-8, 3).total == -5

    def test_missing_total_raises(self):
        with pytest.raises(ValidationError):
            SumRecord(first_number=1, second_number=2)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

class TestSetupLogging:
    def test_idempotent(self):
        root = logging.getLogger()
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        ours = [h for h in root.handlers if isinstance(h.formatter, ColorFormatter)]
        assert len(ours) == 1
        assert root.level == logging.DEBUG
        setup_logging(logging.WARNING)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "server.log"
        setup_logging(logging.INFO, str(log_file))
        logging.getLogger("test").info("hello file")
        for h in logging.getLogger().handlers:
            h.flush()
        assert "hello file" in log_file.read_text()
        setup_logging(logging.WARNING)
