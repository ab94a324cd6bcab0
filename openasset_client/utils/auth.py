"""Session setup for the OpenAsset REST API."""

import os
from typing import Optional, Tuple

import requests

USERNAME_ENV = "OPENASSET_USERNAME"
PASSWORD_ENV = "OPENASSET_PASSWORD"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": "openasset-client",
}


def get_credentials(
    username: Optional[str] = None, password: Optional[str] = None
) -> Tuple[str, str]:
    """Get the username and password for the API.

    Arguments win over the OPENASSET_USERNAME and OPENASSET_PASSWORD
    environment variables.

    Returns:
        Tuple of username and password

    Raises:
        ValueError: If either value is missing
    """
    username = username or os.environ.get(USERNAME_ENV)
    password = password or os.environ.get(PASSWORD_ENV)

    if not username or not password:
        raise ValueError(
            f"Missing credentials. Pass them explicitly or set {USERNAME_ENV} and {PASSWORD_ENV}"
        )

    return username, password


def create_session(
    username: Optional[str] = None, password: Optional[str] = None
) -> requests.Session:
    """Build a requests session that authenticates every call.

    Args:
        username: OpenAsset username
        password: OpenAsset password

    Returns:
        Configured requests.Session
    """
    session = requests.Session()
    session.auth = get_credentials(username, password)
    session.headers.update(DEFAULT_HEADERS)
    return session
