"""Client for the OpenAsset REST API."""

__version__ = "0.1.0"
