"""
Unit Tests for Logging Module

Run with:
    pytest tests/unit/test_logging.py -v
"""

import logging

from core.logging import get_logger, log_api_request, log_api_response, logger, setup_logging


class TestLogging:
    """Tests for the shared logger helpers"""

    def test_global_logger_name(self):
        assert logger.name == "latoken"

    def test_get_logger_is_child_of_global_logger(self):
        child = get_logger("exchanges.latoken.parsers")
        assert child.name == "latoken.exchanges.latoken.parsers"
        assert child.parent is logger

    def test_setup_logging_levels(self):
        previous = logger.level
        try:
            assert setup_logging("warning").level == logging.WARNING
            assert setup_logging("nonsense").level == logging.INFO
        finally:
            logger.setLevel(previous)

    def test_api_log_helpers(self, caplog):
        previous = logger.level
        logger.setLevel(logging.DEBUG)
        try:
            with caplog.at_level(logging.DEBUG, logger="latoken"):
                log_api_request("latoken", "GET", "https://api.latoken.com/v2/pair", {"limit": 1})
                log_api_response("latoken", "pair", 200, 0.25)
        finally:
            logger.setLevel(previous)

        messages = [record.getMessage() for record in caplog.records]
        assert "API Request: latoken GET https://api.latoken.com/v2/pair | Params: {'limit': 1}" in messages
        assert "API Response: latoken pair | Status: 200 | Time: 0.250s" in messages
