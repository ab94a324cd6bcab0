"""Test configuration for pytest."""

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from unittest.mock import MagicMock

import pytest

from openasset_client.api.rest_client import RestClient
from openasset_client.models import Album, Field, Keyword, KeywordCategory

# Add the project root directory to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def build_response(
    status_code: int = 200,
    body: Any = None,
    reason: str = "OK",
    headers: Optional[Dict[str, str]] = None,
) -> MagicMock:
    """Create a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.headers = headers or {}
    if body is None:
        response.text = ""
    elif isinstance(body, str):
        response.text = body
    else:
        response.text = json.dumps(body)
    return response


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for fake HTTP responses."""
    return build_response


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock requests session that answers every call with an empty list."""
    session = MagicMock()
    session.request.return_value = build_response(200, [])
    return session


@pytest.fixture
def client(mock_session) -> RestClient:
    """Create a RestClient backed by the mock session."""
    return RestClient("https://demo.openasset.com", session=mock_session)


@pytest.fixture
def album() -> Album:
    return Album(id=7, name="Spring Shoot", file_ids=[101, 102, 103])


@pytest.fixture
def keyword_category() -> KeywordCategory:
    return KeywordCategory(id=4, name="Building Type", category_id=1)


@pytest.fixture
def keywords() -> list:
    return [
        Keyword(id=40, name="Hospital", keyword_category_id=4),
        Keyword(id=41, name="School", keyword_category_id=4),
        Keyword(id=42, name="Stadium", keyword_category_id=4),
    ]


@pytest.fixture
def text_field() -> Field:
    return Field(id=12, name="Building Types", field_type="image", field_display_type="singleLine")


@pytest.fixture
def restricted_field() -> Field:
    return Field(id=13, name="Primary Type", field_type="image", field_display_type="suggestion")
