from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        app.openapi_schema = get_openapi(
            title="Campaigndesk API",
            version="0.1.0",
            summary="Marketing campaign administration with globally unique channel reference codes",
            routes=app.routes,
        )
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")
    tags: list[str] | None = Field(None, description="Colliding reference codes (duplicate errors only)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Campaign not found", "type": "not_found"},
                {"message": "Unknown channel type: Carrier Pigeon.", "type": "unknown_channel_type"},
                {
                    "message": "Reference code(s) already exist: FB00010. Each reference code must be globally unique.",
                    "type": "duplicate_across_campaigns",
                    "tags": ["FB00010"],
                },
            ]
        }
    }
