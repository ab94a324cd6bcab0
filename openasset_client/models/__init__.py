"""Models for the OpenAsset client."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

NOT_SET = "Not set"


@dataclass
class Noun:
    """Base class for OpenAsset resource records."""
    id: int

    def json(self) -> Dict[str, Any]:
        """Return the record as a JSON-ready dictionary."""
        return {"id": self.id}


@dataclass
class Album(Noun):
    """Represents an album and the ids of the files it holds."""
    name: str = ""
    file_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Album":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            file_ids=[int(item["id"]) for item in data.get("files") or []],
        )

    def json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "files": [{"id": file_id} for file_id in self.file_ids],
        }


@dataclass
class KeywordCategory(Noun):
    """Represents a file keyword category."""
    name: str = ""
    category_id: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "KeywordCategory":
        category_id = data.get("category_id")
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            category_id=int(category_id) if category_id is not None else None,
        )

    def json(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "category_id": self.category_id}


@dataclass
class Keyword(Noun):
    """Represents a file keyword."""
    name: str = ""
    keyword_category_id: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Keyword":
        category_id = data.get("keyword_category_id")
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            keyword_category_id=int(category_id) if category_id is not None else None,
        )

    def json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "keyword_category_id": self.keyword_category_id,
        }


@dataclass
class Field(Noun):
    """Represents a metadata field.

    ``field_type`` is the level the field lives on (``image`` for file
    fields, ``project`` for project fields) and ``field_display_type`` is the
    widget the web UI renders it with.
    """
    name: str = ""
    field_type: str = ""
    field_display_type: str = ""
    restricted: bool = False

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Field":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            field_type=data.get("field_type", ""),
            field_display_type=data.get("field_display_type", ""),
            restricted=str(data.get("restricted", "0")) == "1",
        )

    def json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "field_type": self.field_type,
            "field_display_type": self.field_display_type,
            "restricted": "1" if self.restricted else "0",
        }


@dataclass
class FileAsset(Noun):
    """Represents a file with its field values and keyword associations."""
    filename: str = ""
    fields: Dict[int, List[str]] = field(default_factory=dict)
    keyword_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "FileAsset":
        fields = {
            int(item["id"]): [str(value) for value in item.get("values") or []]
            for item in data.get("fields") or []
        }
        return cls(
            id=int(data["id"]),
            filename=data.get("filename", ""),
            fields=fields,
            keyword_ids=[int(item["id"]) for item in data.get("keywords") or []],
        )

    def field_value(self, field_id: int) -> str:
        """Return the first stored value of a field, or an empty string."""
        values = self.fields.get(field_id) or []
        return values[0] if values else ""

    def json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fields": [
                {"id": field_id, "values": values} for field_id, values in self.fields.items()
            ],
        }


@dataclass
class ClassifiedError:
    """Error record surfaced to the caller after a failed request."""
    id: Any = NOT_SET
    resource_name: str = NOT_SET
    resource_type: str = NOT_SET
    status_code: str = NOT_SET
    message: str = NOT_SET


class OpenAssetError(Exception):
    """Base exception for OpenAsset client operations."""


class ArgumentError(OpenAssetError):
    """Raised when an argument has an unrecognized shape or value."""


class PreconditionError(OpenAssetError):
    """Raised when the remote data makes an operation meaningless."""


class UserAbort(OpenAssetError):
    """Raised when the operator declines a confirmation prompt."""


class ApiError(OpenAssetError):
    """Raised when a request cannot be sent or the server rejects it.

    ``response`` and ``error`` are set when the server answered with a
    classified error. ``report`` holds the work done before the failure when
    a batch run stops early.
    """

    def __init__(
        self,
        message: str,
        response: Any = None,
        error: Optional[ClassifiedError] = None,
        report: Any = None,
    ):
        super().__init__(message)
        self.response = response
        self.error = error
        self.report = report
