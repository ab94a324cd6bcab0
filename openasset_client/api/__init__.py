"""HTTP access to the OpenAsset REST API."""
