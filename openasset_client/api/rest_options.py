"""Query option builder for OpenAsset list requests."""

from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode


class QueryOptions:
    """Ordered mapping of query option names to string values.

    Example:
        options = QueryOptions()
        options.add_option("limit", "0")
        options.add_option("keyword_category_id", "4,7")
        options.to_query_string()  # "?limit=0&keyword_category_id=4%2C7"
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        self.options: Dict[str, str] = {}
        if options:
            self.merge(options)

    def add_option(self, name: str, value: Any) -> None:
        """Add an option, replacing any previous value with the same name."""
        self.options[str(name)] = str(value)

    def merge(self, other: Union["QueryOptions", Mapping[str, Any]]) -> None:
        """Add every option of another QueryOptions or mapping."""
        items = other.options if isinstance(other, QueryOptions) else other
        for name, value in items.items():
            self.add_option(name, value)

    def clear(self) -> None:
        """Remove all options."""
        self.options.clear()

    def get(self, name: str) -> Optional[str]:
        return self.options.get(name)

    def to_params(self) -> Dict[str, str]:
        """Return a copy suitable for the ``params`` argument of requests."""
        return dict(self.options)

    def to_query_string(self) -> str:
        if not self.options:
            return ""
        return "?" + urlencode(self.options)

    def __len__(self) -> int:
        return len(self.options)

    def __repr__(self) -> str:
        return f"QueryOptions({self.options!r})"
