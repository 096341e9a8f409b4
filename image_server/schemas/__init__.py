"""Pydantic models shared by the resolver and the HTTP layer."""

from .config import ResolverConfig
from .image import ErrorResponse, LocatedSource, ResolvedImage

__all__ = [
    "ResolverConfig",
    "LocatedSource",
    "ResolvedImage",
    "ErrorResponse",
]
