"""Image resolution result models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LocatedSource(BaseModel):
    """The on-disk file chosen as the source for a logical image."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Absolute path of the source file")
    extension: str = Field(
        ...,
        description="Lower-cased extension without the dot; empty for extension-less files"
    )


class ResolvedImage(BaseModel):
    """Outcome of a successful resolution.

    ``direct`` results point at a file that already existed under the
    requested name. ``generated`` results point at a derived artifact;
    ``created`` tells whether this very call wrote it.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "kind": "generated",
                    "path": "/data/avatars/u1.preview.png",
                    "content_type": "image/png",
                    "created": True,
                }
            ]
        },
    )

    kind: Literal["direct", "generated"] = Field(
        ...,
        description="Whether the file was served as-is or derived"
    )
    path: Path = Field(..., description="Absolute path of the file to stream")
    content_type: str = Field(..., description="MIME type to send with the bytes")
    created: bool = Field(
        default=False,
        description="True when the derived artifact was generated by this request"
    )


class ErrorResponse(BaseModel):
    """JSON body returned for any failed image request."""

    detail: str = Field(..., description="Human readable error message")
