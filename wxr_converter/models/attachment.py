from __future__ import annotations

from typing import Any, Dict, Optional

import phpserialize
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _php_array(value: Any) -> Any:
    """PHP arrays decode to dicts with int keys; empty ones may be ``""``."""
    if value in (None, "", False):
        return {}
    if isinstance(value, (list, tuple)):
        return {str(i): v for i, v in enumerate(value)}
    if isinstance(value, dict):
        return {str(k): v for k, v in value.items()}
    return value


class ImageSize(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    file: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    mime_type: Optional[str] = Field(None, alias="mime-type")
    filesize: Optional[int] = None


class AttachmentMetadata(BaseModel):
    """
    The ``_wp_attachment_metadata`` postmeta value: original dimensions,
    the upload-relative file and the generated size variants.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    width: Optional[int] = None
    height: Optional[int] = None
    file: Optional[str] = None
    filesize: Optional[int] = None
    sizes: Dict[str, ImageSize] = Field(default_factory=dict)
    image_meta: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("sizes", "image_meta", mode="before")
    @classmethod
    def _arrays(cls, v: Any):
        return _php_array(v)

    @classmethod
    def from_serialized(cls, blob: str) -> "AttachmentMetadata":
        """Decode a PHP ``serialize()`` string.

        :raises ValueError: for malformed input or a value that is not an
            array (``pydantic.ValidationError`` is a ``ValueError`` too).
        """
        blob = (blob or "").strip()
        if not blob:
            raise ValueError("empty attachment metadata")
        try:
            data = phpserialize.loads(blob.encode("utf-8"), decode_strings=True)
        except (ValueError, IndexError, TypeError, EOFError) as e:
            raise ValueError(f"malformed serialized data: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"expected a serialized array, got {type(data).__name__}")
        return cls.model_validate(_php_array(data))
