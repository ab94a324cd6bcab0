"""Utility functions for the OpenAsset client."""

from .auth import create_session, get_credentials
from .response import ClassifiedResponse, Outcome, classify_response
from .validator import resolve_id, validate_and_process_url

__all__ = [
    "create_session",
    "get_credentials",
    "ClassifiedResponse",
    "Outcome",
    "classify_response",
    "resolve_id",
    "validate_and_process_url",
]
