"""FastAPI dependency injection configuration."""

import logging

from config import get_settings
from image_server.resolver import VariantResolver

logger = logging.getLogger(__name__)


# Global instance for the variant resolver
_variant_resolver: VariantResolver | None = None


def get_variant_resolver() -> VariantResolver:
    """Get the process-wide variant resolver.

    The resolver is created on first use from the current settings and
    reused afterwards. Tests replace it through
    ``app.dependency_overrides``.

    Returns:
        VariantResolver: The configured resolver instance
    """
    global _variant_resolver

    if _variant_resolver is None:
        settings = get_settings()
        _variant_resolver = VariantResolver(settings.resolver_config())
        logger.info(f"Created variant resolver with root: {settings.storage_root}")

    return _variant_resolver
