import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import FileResponse, JSONResponse

from config import get_settings
from image_server.dependencies import get_variant_resolver
from image_server.errors import ImageServerError
from image_server.resolver import VariantResolver
from image_server.schemas import ErrorResponse

# Get settings and configure logging before anything else
settings = get_settings()
settings.configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Storage root: {settings.storage_root}")
    logger.info(f"Preview size: {settings.preview_size}")

    settings.storage_root.mkdir(parents=True, exist_ok=True)

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(ImageServerError)
async def image_server_error_handler(request: Request, exc: ImageServerError) -> JSONResponse:
    """Translate resolver errors into JSON responses."""
    if exc.status_code >= 500:
        logger.error(f"Failed to serve {request.url.path}: {exc}")
    else:
        logger.info(f"Rejected {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.get("/health")
def health_check() -> dict[str, str]:
    """Simple health-check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": settings.app_version,
    }


@app.get("/config")
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive values only)."""
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "environment": settings.environment,
        "debug": settings.debug,
        "preview_size": settings.preview_size,
        "cache_control": settings.cache_control,
        "log_level": settings.log_level,
        "log_json": settings.log_json,
    }


@app.get(
    "/{image_path:path}",
    response_class=FileResponse,
    responses={
        201: {"description": "Variant generated by this request"},
        400: {"model": ErrorResponse, "description": "Invalid path or unsupported format"},
        403: {"model": ErrorResponse, "description": "Path outside the image root"},
        404: {"model": ErrorResponse, "description": "Image not found"},
        500: {"model": ErrorResponse, "description": "Decode, encode or I/O failure"},
    },
    tags=["images"],
)
def serve_image(
    image_path: str,
    variant: Optional[str] = Query(None, description="Named transform, e.g. 'preview'"),
    format: Optional[str] = Query(None, description="Output format: png, jpg or jpeg"),
    resolver: VariantResolver = Depends(get_variant_resolver),
) -> FileResponse:
    """Serve an image, generating the requested variant on first use.

    Runs synchronously in FastAPI's thread pool: decoding, resizing and
    writing the artifact all block.

    Returns 200 for files that already existed and 201 when the variant
    was generated by this request.
    """
    resolved = resolver.resolve(image_path, variant=variant, fmt=format)

    status_code = 201 if resolved.created else 200
    logger.debug(f"Serving {resolved.path} ({resolved.kind}, {status_code})")

    return FileResponse(
        resolved.path,
        status_code=status_code,
        media_type=resolved.content_type,
        headers={"Cache-Control": settings.cache_control},
    )
