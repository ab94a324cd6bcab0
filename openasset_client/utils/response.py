"""Classification of OpenAsset HTTP responses."""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from openasset_client.models import NOT_SET, ClassifiedError

logger = logging.getLogger(__name__)

# Title of the NGINX error page served by OpenAsset instead of a JSON error
ERROR_PAGE_MARKER = "<title>OpenAsset - Something went wrong!</title>"

SERVER_ERROR_MESSAGES = {
    500: "Web Server Error - No idea what happened here.",
    502: "The server received an invalid response from the upstream server",
    503: "The server is currently unavailable (because it is overloaded or down for maintenance)",
}

UNSUPPORTED_FILE_TYPE_MESSAGE = (
    "Possibly unsupported file type: NGINX Error - OpenAsset - Something went wrong!"
)

STALE_IMAGE_SIZE_MESSAGE = (
    "Don't let the error fool you. The image size specified is no longer "
    "available in S3. Go see the Wizard."
)


class Outcome(str, Enum):
    """Classification of an HTTP response."""
    SUCCESS = "success"
    REDIRECT_WARNING = "redirect_warning"
    AUTH_FAILURE = "auth_failure"
    SERVER_ERROR = "server_error"
    GENERIC_ERROR = "generic_error"
    HEURISTIC_ERROR = "heuristic_error"
    HEURISTIC_WARNING = "heuristic_warning"


@dataclass
class ClassifiedResponse:
    """A response together with its classification.

    ``body`` is the response text, rewritten to a JSON error object for the
    error outcomes that carry a human readable message.
    """
    outcome: Outcome
    status_code: int
    reason: str
    body: str
    method: str = "GET"
    location: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.outcome not in (Outcome.SUCCESS, Outcome.REDIRECT_WARNING)

    def json(self) -> Any:
        """Decode the body, returning None when it is not JSON."""
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except ValueError:
            return None

    @property
    def error_message(self) -> str:
        data = self.json()
        if isinstance(data, dict) and data.get("error_message"):
            return str(data["error_message"])
        return self.reason or NOT_SET

    def to_error(
        self,
        resource_id: Any = None,
        resource_name: Optional[str] = None,
        resource_type: Optional[str] = None,
    ) -> ClassifiedError:
        """Build the error record reported for this response."""
        return ClassifiedError(
            id=resource_id if resource_id is not None else NOT_SET,
            resource_name=resource_name or NOT_SET,
            resource_type=resource_type or NOT_SET,
            status_code=str(self.status_code),
            message=self.error_message,
        )


def _error_body(message: str, status_code: int) -> str:
    return json.dumps({"error_message": message, "http_status_code": str(status_code)})


def _strip_angle_brackets(text: str) -> str:
    return re.sub(r"[<>]+", "", text or "")


def _server_message(text: str) -> Optional[str]:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("error_message"):
        return str(data["error_message"])
    return None


def classify_response(response: Any, http_method: str = "GET") -> ClassifiedResponse:
    """Classify a raw HTTP response.

    Args:
        response: Object with ``status_code``, ``reason``, ``headers`` and
            ``text`` attributes (a ``requests.Response``)
        http_method: Method the request was sent with

    Returns:
        ClassifiedResponse. Error outcomes are logged here; this function
        never raises for a non-success status.
    """
    method = (http_method or "GET").upper()
    status = int(response.status_code)
    reason = response.reason or ""
    body = response.text or ""

    def result(outcome: Outcome, new_body: Optional[str] = None, location=None):
        return ClassifiedResponse(
            outcome=outcome,
            status_code=status,
            reason=reason,
            body=body if new_body is None else new_body,
            method=method,
            location=location,
        )

    if 200 <= status < 300:
        logger.info("Success: HTTP => %s %s", status, reason)
        return result(Outcome.SUCCESS)

    if 300 <= status < 400:
        location = response.headers.get("Location")
        logger.warning("Unexpected Redirect to %s", location)
        return result(Outcome.REDIRECT_WARNING, location=location)

    if status == 401:
        logger.error("Error: %s: Invalid Credentials.", reason)
        return result(Outcome.AUTH_FAILURE)

    if status >= 500:
        logger.error("Code: %s", status)
        logger.error("Message: %s", reason)
        if status in SERVER_ERROR_MESSAGES:
            message = f"{reason}: {SERVER_ERROR_MESSAGES[status]}"
            return result(Outcome.SERVER_ERROR, _error_body(message, status))
        return result(Outcome.GENERIC_ERROR, _error_body(_strip_angle_brackets(reason), status))

    if ERROR_PAGE_MARKER in body:
        if method != "GET":
            return result(
                Outcome.HEURISTIC_ERROR, _error_body(UNSUPPORTED_FILE_TYPE_MESSAGE, status)
            )
        if status == 403:
            logger.error(STALE_IMAGE_SIZE_MESSAGE)
            return result(Outcome.HEURISTIC_WARNING)

    message = _server_message(body) or reason
    logger.error("Error: HTTP => %s %s", status, message)
    return result(Outcome.GENERIC_ERROR, _error_body(_strip_angle_brackets(message), status))
