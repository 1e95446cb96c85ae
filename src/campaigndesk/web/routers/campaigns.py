from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from campaigndesk.core.modules.campaign.models import Campaign, CampaignData, TagUsage
from campaigndesk.web.deps import AppDep
from campaigndesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["campaigns"])

DUPLICATE_TAG_RESPONSE = {
    "model": ErrorResponse,
    "description": "Reference code repeated within the campaign or already used by another campaign",
}


class UpdateImpressionsRequest(BaseModel):
    """Request to set impressions of a channel."""

    impressions: int = Field(..., description="Number of impressions")


@router.get(
    "/campaigns",
    summary="List campaigns",
    operation_id="listCampaigns",
    responses={200: {"description": "All campaigns, newest first"}},
)
async def list_campaigns(app: AppDep) -> list[Campaign]:
    return await app.get_campaigns()


@router.post(
    "/campaigns",
    summary="Create campaign",
    description=(
        "Create a campaign. Reference codes of its channels must be unique within the campaign "
        "and across all stored campaigns. A campaign code (`MK_000001`) is assigned automatically."
    ),
    operation_id="createCampaign",
    status_code=201,
    responses={
        201: {"description": "Campaign created"},
        400: {"model": ErrorResponse, "description": "Invalid campaign data"},
        409: DUPLICATE_TAG_RESPONSE,
    },
)
async def create_campaign(request: CampaignData, app: AppDep) -> Campaign:
    return await app.create_campaign(request)


@router.get(
    "/campaigns/code/{campaign_code}",
    summary="Get campaign by code",
    operation_id="getCampaignByCode",
    responses={
        200: {"description": "Campaign details"},
        404: {"model": ErrorResponse, "description": "Campaign not found"},
    },
)
async def get_campaign_by_code(campaign_code: str, app: AppDep) -> Campaign:
    return await app.get_campaign_by_code(campaign_code)


@router.get(
    "/campaigns/tag/{tag_number}",
    summary="Find campaigns by reference code",
    operation_id="getCampaignsByTag",
    responses={
        200: {"description": "Campaigns using the reference code, with only the matching channels"},
        404: {"model": ErrorResponse, "description": "No campaign uses the reference code"},
    },
)
async def get_campaigns_by_tag(tag_number: str, app: AppDep) -> list[TagUsage]:
    return await app.get_campaigns_by_tag(tag_number)


@router.put(
    "/campaigns/impressions/{tag_number}",
    summary="Update channel impressions",
    description="Set impressions of the channel identified by its reference code.",
    operation_id="updateImpressions",
    responses={
        200: {"description": "Updated campaign"},
        400: {"model": ErrorResponse, "description": "Negative impressions"},
        404: {"model": ErrorResponse, "description": "No campaign uses the reference code"},
    },
)
async def update_impressions(tag_number: str, request: UpdateImpressionsRequest, app: AppDep) -> Campaign:
    return await app.update_impressions(tag_number, request.impressions)


@router.get(
    "/campaigns/{campaign_id}",
    summary="Get campaign",
    operation_id="getCampaign",
    responses={
        200: {"description": "Campaign details"},
        404: {"model": ErrorResponse, "description": "Campaign not found"},
    },
)
async def get_campaign(campaign_id: UUID, app: AppDep) -> Campaign:
    return await app.get_campaign(campaign_id)


@router.put(
    "/campaigns/{campaign_id}",
    summary="Update campaign",
    description=(
        "Replace the editable attributes of a campaign. The campaign's own reference codes "
        "do not count as collisions."
    ),
    operation_id="updateCampaign",
    responses={
        200: {"description": "Campaign updated"},
        400: {"model": ErrorResponse, "description": "Invalid campaign data"},
        404: {"model": ErrorResponse, "description": "Campaign not found"},
        409: DUPLICATE_TAG_RESPONSE,
    },
)
async def update_campaign(campaign_id: UUID, request: CampaignData, app: AppDep) -> Campaign:
    return await app.update_campaign(campaign_id, request)


@router.delete(
    "/campaigns/{campaign_id}",
    summary="Delete campaign",
    description="Delete a campaign. Its reference codes are never issued again.",
    operation_id="deleteCampaign",
    status_code=204,
    responses={
        204: {"description": "Campaign deleted"},
        404: {"model": ErrorResponse, "description": "Campaign not found"},
    },
)
async def delete_campaign(campaign_id: UUID, app: AppDep) -> None:
    await app.delete_campaign(campaign_id)


@router.put(
    "/campaigns/{campaign_id}/channels/{channel_index}/impressions",
    summary="Update channel impressions by position",
    description="Set impressions of the channel at a zero-based position, for channels without a reference code.",
    operation_id="updateChannelImpressions",
    responses={
        200: {"description": "Updated campaign"},
        400: {"model": ErrorResponse, "description": "Negative impressions"},
        404: {"model": ErrorResponse, "description": "Campaign or channel not found"},
    },
)
async def update_channel_impressions(
    campaign_id: UUID, channel_index: int, request: UpdateImpressionsRequest, app: AppDep
) -> Campaign:
    return await app.update_channel_impressions(campaign_id, channel_index, request.impressions)
