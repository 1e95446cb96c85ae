import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from campaigndesk.errors import (
    DuplicateAcrossCampaignsError,
    DuplicateInCampaignError,
    NotFoundError,
    UnknownChannelTypeError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, tags: list[str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content: dict[str, Any] = {"message": message}
    if error_type:
        content["type"] = error_type
    if tags is not None:
        content["tags"] = tags
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    tags = None
    if isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, DuplicateInCampaignError):
        status_code = 409
        error_type = "duplicate_in_campaign"
        tags = exc.tags
    elif isinstance(exc, DuplicateAcrossCampaignsError):
        status_code = 409
        error_type = "duplicate_across_campaigns"
        tags = exc.tags
    elif isinstance(exc, UnknownChannelTypeError):
        status_code = 400
        error_type = "unknown_channel_type"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, tags=tags)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
