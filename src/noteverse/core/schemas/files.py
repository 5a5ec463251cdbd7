"""Attachment upload schemas."""

from pydantic import ConfigDict, Field

from .notes import FileRef


class StoredFile(FileRef):
    """Result of an upload. ``id`` is the stored file name used for download/delete."""

    id: str = Field(description="Stored file name")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "file-1726221000000-482913.pdf",
                "name": "dsa-unit1.pdf",
                "url": "/uploads/file-1726221000000-482913.pdf",
                "type": "application/pdf",
                "size": 482133,
            }
        }
    )
