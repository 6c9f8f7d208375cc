"""
Input-side data models: documents discovered at the watched location.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentRef(BaseModel):
    """
    A not-yet-read item observed by a poll of the document source.

    Reading is deferred so that I/O failures happen inside the guarded
    processing attempt rather than during discovery.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1, description="Stable item name (e.g. file name)")
    location: str = Field(..., description="Source-specific locator (e.g. absolute path)")


class Document(BaseModel):
    """
    One unit of input content. Immutable once read.

    resource_type is only known after a successful parse; use with_resource_type()
    to derive a copy rather than mutating.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1)
    location: str = Field(...)
    content: bytes = Field(..., description="Raw bytes exactly as read from the source")
    resource_type: Optional[str] = Field(
        default=None,
        description="Discovered resourceType (None until parsed / when parse fails)",
    )

    def with_resource_type(self, resource_type: str) -> "Document":
        return self.model_copy(update={"resource_type": resource_type})


class ParsedResource(BaseModel):
    """
    Typed view of a parsed document handed to the validator.

    data is the full JSON object (resourceType included).
    """

    model_config = ConfigDict(frozen=True)

    resource_type: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def resource_id(self) -> Optional[str]:
        value = self.data.get("id")
        return value if isinstance(value, str) else None
