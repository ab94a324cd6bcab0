"""Argument validation and reference resolution."""

import logging
import re
from collections.abc import Mapping
from functools import singledispatch
from typing import Any, Callable, Dict, Generic, List, Type, TypeVar, Union

from openasset_client.models import ArgumentError, Noun, PreconditionError

logger = logging.getLogger(__name__)

INSERT_MODES = ("append", "overwrite")

LEADING_DIGITS = re.compile(r"^\s*(\d+)")

URI_WITH_PROTOCOL = re.compile(r"^(https://|http://)[\w-]+\.[\w-]+\.(com)$", re.IGNORECASE)
URI_WITHOUT_PROTOCOL = re.compile(r"^[\w-]+\.[\w-]+\.(com)$", re.IGNORECASE)
URI_IS_IP_ADDRESS = re.compile(r"^(https?://)?(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})(:\d{2,5})?$")
URI_IS_LOCALHOST = re.compile(r"^(https?://)?localhost(:\d{2,5})?$")
PRIVATE_IP_RANGES = (
    re.compile(r"^10\.\d{1,3}\.\d{1,3}\.\d{1,3}$"),
    re.compile(r"^172\.(1[6-9]|2[0-9]|3[01])\.\d{1,3}\.\d{1,3}$"),
    re.compile(r"^192\.168\.\d{1,3}\.\d{1,3}$"),
)

N = TypeVar("N", bound=Noun)


def _fail(message: str) -> ArgumentError:
    logger.error(message)
    return ArgumentError(message)


@singledispatch
def _resolve(reference: Any, noun: str) -> int:
    raise _fail(
        f"Argument Error: Expected one of the following for {noun}:"
        f"\n\t1. A {noun} object"
        f"\n\t2. A {noun} object converted to a dict (e.g) {{'id': 1}}"
        f"\n\t3. An integer id"
        f"\n\t4. A numeric string id"
        f"\n\tInstead got => {reference!r}"
    )


@_resolve.register(Noun)
def _resolve_noun(reference: Noun, noun: str) -> int:
    return _resolve(reference.id, noun)


@_resolve.register(bool)
def _resolve_bool(reference: bool, noun: str) -> int:
    raise _fail(f"Argument Error: Expected an id for {noun}. Instead got => {reference!r}")


@_resolve.register(int)
def _resolve_int(reference: int, noun: str) -> int:
    if reference <= 0:
        raise _fail(f"Argument Error: Invalid {noun} id => {reference!r}")
    return reference


@_resolve.register(str)
def _resolve_str(reference: str, noun: str) -> int:
    # "12abc" resolves to 12
    match = LEADING_DIGITS.match(reference)
    if not match or int(match.group(1)) <= 0:
        raise _fail(f"Argument Error: Invalid {noun} id string => {reference!r}")
    return int(match.group(1))


@_resolve.register(Mapping)
def _resolve_mapping(reference: Mapping, noun: str) -> int:
    keys = {str(key): value for key, value in reference.items()}
    if "id" not in keys or isinstance(keys["id"], Mapping):
        raise _fail(f"Argument Error: Expected a dict with an 'id' key for {noun}. "
                    f"Instead got => {reference!r}")
    return _resolve(keys["id"], noun)


def resolve_id(reference: Any, noun: str = "NOUN") -> int:
    """Resolve a reference to a canonical integer id.

    Args:
        reference: A noun record, an integer, a numeric string or a mapping
            with an ``id`` key
        noun: Name of the expected noun, used in error messages

    Returns:
        The id as an integer

    Raises:
        ArgumentError: If the reference has any other shape
    """
    return _resolve(reference, noun)


class NounResolver(Generic[N]):
    """Turns references of one noun kind into concrete records.

    ``fetch`` receives a canonical id and returns the matching records, so it
    is normally a thin wrapper around a RestClient ``get_*`` method.
    """

    def __init__(self, noun_class: Type[N], fetch: Callable[[int], List[N]], noun: str = ""):
        self.noun_class = noun_class
        self.fetch = fetch
        self.noun = noun or noun_class.__name__

    def resolve_id(self, reference: Any) -> int:
        return resolve_id(reference, self.noun)

    def resolve(self, reference: Any) -> N:
        if isinstance(reference, self.noun_class):
            return reference

        record_id = self.resolve_id(reference)
        found = [item for item in self.fetch(record_id) if item.id == record_id]
        if not found:
            message = f"No {self.noun} found with id {record_id!r}."
            logger.error(message)
            raise PreconditionError(message)
        return found[0]

    def resolve_many(self, references: Any) -> List[N]:
        """Resolve a single reference or a list of references."""
        if not isinstance(references, (list, tuple)):
            references = [references]
        if not references:
            raise _fail(f"Argument Error: Expected at least one {self.noun}. Instead got => []")
        return [self.resolve(reference) for reference in references]


def validate_insert_mode(insert_mode: Any, caller: str = "move_keywords_to_field") -> str:
    """Return the insert mode when it is ``append`` or ``overwrite``."""
    if insert_mode not in INSERT_MODES:
        raise _fail(
            f'Argument Error: Expected "append" or "overwrite" for "insert_mode" in {caller}. '
            f"Instead got {insert_mode!r}"
        )
    return insert_mode


def normalize_batch_size(batch_size: Any) -> int:
    """Coerce a batch size to a positive integer."""
    try:
        size = abs(int(batch_size))
    except (TypeError, ValueError):
        raise _fail(
            f"Argument Error: Expected an integer for batch_size. Instead got {batch_size!r}"
        ) from None
    if size == 0:
        raise _fail("Argument Error: batch_size must not be zero.")
    return size


def validate_and_process_url(uri: Any) -> str:
    """Validate an OpenAsset address and add the scheme when missing.

    Accepts ``https://<sub>.<domain>.com``, ``<sub>.<domain>.com``,
    ``localhost[:port]`` and private IPv4 addresses. Public IPs are rejected
    because they fail SSL certificate validation.
    """
    if not isinstance(uri, str):
        raise _fail(f'Expected a string for "uri": Instead got {type(uri).__name__}')

    uri = uri.strip().rstrip("/")

    if URI_WITH_PROTOCOL.match(uri):
        return uri

    if URI_IS_LOCALHOST.match(uri):
        return uri if URI_IS_LOCALHOST.match(uri).group(1) else "http://" + uri

    if URI_WITHOUT_PROTOCOL.match(uri):
        return "https://" + uri

    match = URI_IS_IP_ADDRESS.match(uri)
    if match:
        if not any(pattern.match(match.group(2)) for pattern in PRIVATE_IP_RANGES):
            raise _fail(
                "Only private IP ranges allowed. Public IPs will trigger an SSL certificate error."
            )
        return uri if match.group(1) else "http://" + uri

    raise _fail(
        f"Invalid url! Expected http(s)://<subdomain>.openasset.com\nInstead got => {uri!r}"
    )


def validate_and_process_request_data(
    data: Union[Noun, Mapping, List[Any], None]
) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """Convert a request body argument to a JSON-ready object.

    Accepts a noun record, a list of records, a dict or a list of dicts.
    """
    if data is None:
        raise _fail("Error: No body provided.")

    if isinstance(data, Mapping):
        return dict(data)

    if isinstance(data, Noun):
        return data.json()

    if isinstance(data, (list, tuple)):
        if not data:
            raise _fail("Oops. Array is empty so there is nothing to send.")
        if all(isinstance(item, Mapping) for item in data):
            return [dict(item) for item in data]
        if all(isinstance(item, Noun) for item in data):
            return [item.json() for item in data]

    raise _fail(
        "Argument Error: Expected either\n1. A NOUN object\n2. A list of NOUN objects"
        f"\n3. A dict\n4. A list of dicts\nInstead got a {type(data).__name__}."
    )
