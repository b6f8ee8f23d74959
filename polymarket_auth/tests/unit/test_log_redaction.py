"""
Credential redaction in logs.

Private keys, API secrets and passphrases must never reach log output,
whether they arrive in the message, the %-args or an exception.
"""

import base64
import json
import logging
from io import StringIO

import pytest

from polymarket_auth.logging_config import CredentialRedactionFilter, LOGGER_NAME, setup_logging

from conftest import HARDHAT_ADDRESS, HARDHAT_KEY, TOKEN_ID

SECRET = base64.urlsafe_b64encode(b"super-secret-hmac-key-32-bytes!!").decode()


@pytest.fixture
def capture():
    """Logger with a redacting handler writing to a buffer."""
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(CredentialRedactionFilter())
    logger.addHandler(handler)

    yield logger, stream

    logger.removeHandler(handler)


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = (logger.handlers[:], logger.level, logger.propagate)
    yield logger
    logger.handlers[:], logger.level, logger.propagate = saved


class TestCredentialRedactionFilter:

    def test_redacts_private_key_in_message(self, capture):
        logger, stream = capture
        logger.info(f"Loaded wallet key {HARDHAT_KEY}")

        output = stream.getvalue()
        assert HARDHAT_KEY[2:] not in output
        assert "[REDACTED_KEY]" in output

    def test_redacts_unprefixed_key(self, capture):
        logger, stream = capture
        logger.info(f"key={HARDHAT_KEY[2:]}")
        assert HARDHAT_KEY[2:] not in stream.getvalue()

    def test_redacts_key_in_args(self, capture):
        logger, stream = capture
        logger.info("Loaded wallet key %s", HARDHAT_KEY)
        assert HARDHAT_KEY[2:] not in stream.getvalue()

    def test_redacts_secret_and_passphrase_pairs(self, capture):
        logger, stream = capture
        logger.info(f"creds secret={SECRET} passphrase=a3f9c2e1b7d4")

        output = stream.getvalue()
        assert SECRET not in output
        assert "a3f9c2e1b7d4" not in output
        assert "secret=[REDACTED]" in output

    def test_redacts_json_style_secret(self, capture):
        logger, stream = capture
        logger.info(f'response {{"apiKey": "k", "secret": "{SECRET}"}}')
        assert SECRET not in stream.getvalue()

    def test_redacts_exception_text(self, capture):
        logger, stream = capture
        try:
            raise RuntimeError(f"failed with key {HARDHAT_KEY}")
        except RuntimeError:
            logger.exception("signing failed")

        assert HARDHAT_KEY[2:] not in stream.getvalue()

    def test_keeps_addresses_and_token_ids(self, capture):
        logger, stream = capture
        logger.info(f"Built order for {HARDHAT_ADDRESS} token={TOKEN_ID}")

        output = stream.getvalue()
        assert HARDHAT_ADDRESS in output
        assert TOKEN_ID in output

    def test_never_drops_records(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
        assert CredentialRedactionFilter().filter(record) is True


class TestSetupLogging:

    def test_every_handler_redacts(self, restore_package_logger):
        setup_logging(level="debug")

        logger = restore_package_logger
        assert logger.level == logging.DEBUG
        assert logger.handlers
        for handler in logger.handlers:
            assert any(isinstance(f, CredentialRedactionFilter) for f in handler.filters)

    def test_file_handler(self, restore_package_logger, tmp_path):
        log_file = tmp_path / "auth.log"
        setup_logging(log_file=str(log_file))

        logging.getLogger(f"{LOGGER_NAME}.test").warning(f"key {HARDHAT_KEY}")
        for handler in restore_package_logger.handlers:
            handler.flush()

        content = log_file.read_text()
        assert "key [REDACTED_KEY]" in content
        assert HARDHAT_KEY[2:] not in content

    def test_json_format(self, restore_package_logger, tmp_path):
        log_file = tmp_path / "auth.json.log"
        setup_logging(log_file=str(log_file), json_format=True)

        logging.getLogger(f"{LOGGER_NAME}.test").warning("order posted")
        for handler in restore_package_logger.handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["message"] == "order posted"
        assert record["levelname"] == "WARNING"
