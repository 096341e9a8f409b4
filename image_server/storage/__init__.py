"""Storage module for derived image artifacts."""

from .base import VariantStore
from .local import LocalVariantStore

__all__ = ["VariantStore", "LocalVariantStore"]
