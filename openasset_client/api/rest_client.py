"""HTTP operations against the OpenAsset REST API."""

import json
import logging
from typing import Any, Callable, List, Optional, Type, TypeVar

import requests

from openasset_client.api.rest_options import QueryOptions
from openasset_client.models import (
    Album,
    ApiError,
    Field,
    FileAsset,
    Keyword,
    KeywordCategory,
    Noun,
)
from openasset_client.utils.auth import create_session
from openasset_client.utils.response import ClassifiedResponse, Outcome, classify_response
from openasset_client.utils.validator import (
    validate_and_process_request_data,
    validate_and_process_url,
)

logger = logging.getLogger(__name__)

API_PATH = "/REST/1"

N = TypeVar("N", bound=Noun)


class RestClient:
    """Manages HTTP calls to an OpenAsset instance."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        dry_run: bool = False,
    ):
        """Initialize the client.

        Args:
            base_url: Address of the OpenAsset instance
            session: Authenticated session; built from the environment if omitted
            dry_run: If True, show update requests without sending them
        """
        self.base_url = validate_and_process_url(base_url)
        self.session = session or create_session()
        self.dry_run = dry_run

    def _url(self, noun: str) -> str:
        return f"{self.base_url}{API_PATH}/{noun}"

    def _execute(
        self,
        method: str,
        noun: str,
        options: Optional[QueryOptions] = None,
        body: Any = None,
    ) -> ClassifiedResponse:
        """Send a request and classify the response.

        Args:
            method: HTTP method
            noun: Endpoint name (e.g. "Files")
            options: Query options
            body: JSON-ready request body

        Raises:
            ApiError: If the request could not be sent at all
        """
        url = self._url(noun)
        params = options.to_params() if options else None
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=json.dumps(body) if body is not None else None,
            )
        except requests.RequestException as e:
            raise ApiError(f"{method} {url} failed: {e}") from e

        return classify_response(response, method)

    def _get(self, noun: str, noun_class: Type[N], options: Optional[QueryOptions]) -> List[N]:
        """List records of one noun.

        Raises:
            ApiError: If the server answers with anything but a 2xx. The
                exception carries the classified response and error record.
        """
        result = self._execute("GET", noun, options)
        if result.outcome != Outcome.SUCCESS:
            error = result.to_error(resource_type=noun)
            message = f"Failed to retrieve {noun}: {error.message} (HTTP {error.status_code})"
            logger.error(message)
            raise ApiError(message, response=result, error=error)

        data = result.json()
        if not isinstance(data, list):
            data = [data] if isinstance(data, dict) else []
        return [noun_class.from_json(item) for item in data]

    def _put(self, noun: str, data: Any) -> Optional[ClassifiedResponse]:
        body = validate_and_process_request_data(data)

        if self.dry_run:
            print(f"[DRY RUN] Would execute: PUT {self._url(noun)} {json.dumps(body)}")
            return None

        return self._execute("PUT", noun, body=body)

    def get_albums(self, options: Optional[QueryOptions] = None) -> List[Album]:
        return self._get("Albums", Album, options)

    def get_fields(self, options: Optional[QueryOptions] = None) -> List[Field]:
        return self._get("Fields", Field, options)

    def get_keyword_categories(
        self, options: Optional[QueryOptions] = None
    ) -> List[KeywordCategory]:
        return self._get("KeywordCategories", KeywordCategory, options)

    def get_keywords(self, options: Optional[QueryOptions] = None) -> List[Keyword]:
        return self._get("Keywords", Keyword, options)

    def get_files(self, options: Optional[QueryOptions] = None) -> List[FileAsset]:
        return self._get("Files", FileAsset, options)

    def update_files(self, files: Any) -> Optional[ClassifiedResponse]:
        """Send field updates for one or more files in a single request.

        Returns:
            The classified response, or None in dry run mode
        """
        return self._put("Files", files)

    def fetch_by_id(
        self, getter: Callable[[QueryOptions], List[N]], **extra: Any
    ) -> Callable[[int], List[N]]:
        """Adapt a ``get_*`` method into a lookup by id."""

        def fetch(record_id: int) -> List[N]:
            options = QueryOptions({"id": record_id})
            options.merge(extra)
            return getter(options)

        return fetch
