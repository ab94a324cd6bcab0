"""Unit tests for argument validation and reference resolution."""

from unittest.mock import MagicMock

import pytest

from openasset_client.models import Album, ArgumentError, Field, FileAsset, PreconditionError
from openasset_client.utils.validator import (
    NounResolver,
    normalize_batch_size,
    resolve_id,
    validate_and_process_request_data,
    validate_and_process_url,
    validate_insert_mode,
)


@pytest.mark.parametrize(
    "reference",
    [
        Field(id=12, name="Caption"),
        12,
        "12",
        "12abc",
        {"id": 12},
        {"id": "12"},
        {"id": 12, "name": "Caption", "field_display_type": "singleLine"},
    ],
)
def test_field_reference_forms_resolve_to_same_id(reference):
    """Test that every accepted reference form yields the canonical id."""
    assert resolve_id(reference, "Fields") == 12


@pytest.mark.parametrize(
    "reference",
    [None, 1.5, "abc", "", "0", 0, -3, True, {"name": "Caption"}, {"id": {"id": 1}}, [12]],
)
def test_invalid_references_raise(reference, caplog):
    """Test that unsupported shapes raise ArgumentError and are logged."""
    with pytest.raises(ArgumentError):
        resolve_id(reference, "Fields")
    assert "Argument Error" in caplog.text


def test_error_message_names_noun_and_value():
    """Test that the error names what was expected and what arrived."""
    with pytest.raises(ArgumentError) as exc_info:
        resolve_id(3.5, "Albums")
    assert "Albums" in str(exc_info.value)
    assert "3.5" in str(exc_info.value)


def test_noun_resolver_returns_record_unchanged():
    """Test that a concrete record is used without a lookup."""
    fetch = MagicMock()
    album = Album(id=7, name="Spring")
    resolver = NounResolver(Album, fetch, "Albums")

    assert resolver.resolve(album) is album
    fetch.assert_not_called()


def test_noun_resolver_fetches_by_id():
    """Test that other reference forms are looked up by id."""
    album = Album(id=7, name="Spring", file_ids=[1, 2])
    fetch = MagicMock(return_value=[album])
    resolver = NounResolver(Album, fetch, "Albums")

    assert resolver.resolve({"id": "7"}) == album
    fetch.assert_called_once_with(7)


def test_noun_resolver_missing_record():
    """Test that an unknown id is a precondition failure."""
    resolver = NounResolver(Album, MagicMock(return_value=[]), "Albums")

    with pytest.raises(PreconditionError) as exc_info:
        resolver.resolve(99)
    assert "99" in str(exc_info.value)


def test_noun_resolver_ignores_records_with_other_ids():
    """Test that a lookup answered with a different record fails."""
    resolver = NounResolver(Album, MagicMock(return_value=[Album(id=8)]), "Albums")

    with pytest.raises(PreconditionError):
        resolver.resolve(7)


def test_resolve_many_accepts_single_and_list():
    """Test that one reference or a list both give a list."""
    fetch = MagicMock(side_effect=lambda record_id: [Album(id=record_id)])
    resolver = NounResolver(Album, fetch, "Albums")

    assert [album.id for album in resolver.resolve_many(3)] == [3]
    assert [album.id for album in resolver.resolve_many([3, "4", {"id": 5}])] == [3, 4, 5]


def test_resolve_many_rejects_empty_list():
    """Test that an empty list is an argument error."""
    resolver = NounResolver(Album, MagicMock(), "Albums")

    with pytest.raises(ArgumentError):
        resolver.resolve_many([])


@pytest.mark.parametrize("mode", ["append", "overwrite"])
def test_valid_insert_modes(mode):
    assert validate_insert_mode(mode) == mode


@pytest.mark.parametrize("mode", ["prepend", "APPEND", None, ""])
def test_invalid_insert_modes(mode):
    """Test that anything but append or overwrite is rejected."""
    with pytest.raises(ArgumentError) as exc_info:
        validate_insert_mode(mode)
    assert "insert_mode" in str(exc_info.value)


@pytest.mark.parametrize(
    "value, expected", [(200, 200), (-50, 50), ("25", 25), ("-10", 10), (1, 1)]
)
def test_normalize_batch_size(value, expected):
    assert normalize_batch_size(value) == expected


@pytest.mark.parametrize("value", [0, "0", "ten", None])
def test_normalize_batch_size_rejects(value):
    with pytest.raises(ArgumentError):
        normalize_batch_size(value)


@pytest.mark.parametrize(
    "uri, expected",
    [
        ("https://demo.openasset.com", "https://demo.openasset.com"),
        ("demo.openasset.com", "https://demo.openasset.com"),
        ("demo.openasset.com/", "https://demo.openasset.com"),
        ("localhost", "http://localhost"),
        ("localhost:8888", "http://localhost:8888"),
        ("http://localhost:8888", "http://localhost:8888"),
        ("192.168.4.142:8888", "http://192.168.4.142:8888"),
        ("10.0.0.5", "http://10.0.0.5"),
        ("http://172.16.1.1", "http://172.16.1.1"),
    ],
)
def test_validate_and_process_url(uri, expected):
    assert validate_and_process_url(uri) == expected


@pytest.mark.parametrize("uri", ["8.8.8.8", "http://172.32.0.1", "not a url", "ftp://x.y.com", 42])
def test_validate_and_process_url_rejects(uri):
    with pytest.raises(ArgumentError):
        validate_and_process_url(uri)


def test_request_data_accepts_nouns_and_dicts():
    """Test the accepted request body shapes."""
    file = FileAsset(id=5, fields={12: ["School"]})

    assert validate_and_process_request_data(file) == {
        "id": 5,
        "fields": [{"id": 12, "values": ["School"]}],
    }
    assert validate_and_process_request_data([file]) == [file.json()]
    assert validate_and_process_request_data({"id": 5}) == {"id": 5}
    assert validate_and_process_request_data([{"id": 5}, {"id": 6}]) == [{"id": 5}, {"id": 6}]


@pytest.mark.parametrize("data", [None, [], "5", [1, 2], [{"id": 5}, FileAsset(id=6)]])
def test_request_data_rejects(data):
    with pytest.raises(ArgumentError):
        validate_and_process_request_data(data)
