"""Immutable configuration handed to the variant resolver."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ResolverConfig(BaseModel):
    """Values the resolver needs, frozen at construction time.

    Built from :class:`config.Settings` at the edge of the application so
    that the core never reads process-wide state.
    """

    model_config = ConfigDict(frozen=True)

    root: Path = Field(
        ...,
        description="Directory every logical image path is confined to"
    )
    preview_size: int = Field(
        default=256,
        ge=1,
        description="Long-edge size in pixels of the 'preview' variant"
    )
