"""Configuration for unit tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Capture client log output at debug level."""
    caplog.set_level(logging.DEBUG, logger="openasset_client")
    yield
