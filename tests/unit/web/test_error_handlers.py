"""Tests for mapping errors to HTTP responses."""

import json

import pytest

from campaigndesk.errors import (
    DuplicateAcrossCampaignsError,
    DuplicateInCampaignError,
    NotFoundError,
    UnknownChannelTypeError,
    ValidationError,
)
from campaigndesk.web.error_handlers import general_exception_handler, user_error_handler


def body(response):
    return json.loads(response.body)


class TestUserErrorHandler:
    """Tests for user-facing errors."""

    @pytest.mark.asyncio
    async def test_duplicate_in_campaign(self):
        response = await user_error_handler(None, DuplicateInCampaignError(["IG00001"]))
        assert response.status_code == 409
        assert body(response)["type"] == "duplicate_in_campaign"
        assert body(response)["tags"] == ["IG00001"]

    @pytest.mark.asyncio
    async def test_duplicate_across_campaigns(self):
        response = await user_error_handler(None, DuplicateAcrossCampaignsError(["FB00010", "FB00011"]))
        assert response.status_code == 409
        assert body(response) == {
            "message": "Reference code(s) already exist: FB00010, FB00011. Each reference code must be globally unique.",
            "type": "duplicate_across_campaigns",
            "tags": ["FB00010", "FB00011"],
        }

    @pytest.mark.asyncio
    async def test_unknown_channel_type(self):
        response = await user_error_handler(None, UnknownChannelTypeError("Carrier Pigeon"))
        assert response.status_code == 400
        assert body(response)["type"] == "unknown_channel_type"
        assert "tags" not in body(response)

    @pytest.mark.asyncio
    async def test_validation_error(self):
        response = await user_error_handler(None, ValidationError("Impressions must be a positive number"))
        assert response.status_code == 400
        assert body(response) == {"message": "Impressions must be a positive number", "type": "validation_error"}

    @pytest.mark.asyncio
    async def test_not_found(self):
        response = await user_error_handler(None, NotFoundError("Campaign not found"))
        assert response.status_code == 404
        assert body(response)["type"] == "not_found"


class TestGeneralExceptionHandler:
    """Tests for unexpected errors."""

    @pytest.mark.asyncio
    async def test_hides_details(self):
        response = await general_exception_handler(None, RuntimeError("connection refused"))
        assert response.status_code == 500
        assert body(response) == {"message": "An unexpected error occurred.", "type": "internal_server_error"}
