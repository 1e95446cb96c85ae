from fastapi import APIRouter
from pydantic import BaseModel, Field

from campaigndesk.core.modules.tag.models import GeneratedTag, ReconcileReport, TagCounterView, TagList
from campaigndesk.web.deps import AppDep
from campaigndesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["tags"])


class GenerateTagRequest(BaseModel):
    """Request to allocate a new reference code."""

    channel_type: str = Field(..., description="Channel type, e.g. `Instagram`, `Print Media`, `SMS`")
    platform: str | None = Field(None, description="Optional platform; recorded but does not change the prefix")

    model_config = {"json_schema_extra": {"examples": [{"channel_type": "Instagram"}]}}


@router.get(
    "/tags",
    summary="List reference codes in use",
    description="Get every distinct reference code stored in campaign channels, sorted.",
    operation_id="listTags",
    responses={200: {"description": "Reference codes and their count"}},
)
async def list_tags(app: AppDep) -> TagList:
    return await app.get_all_tags()


@router.get(
    "/tags/counters",
    summary="List tag counters",
    description="Get the counter of every tag prefix with its platform name and the next candidate code.",
    operation_id="listTagCounters",
    responses={200: {"description": "Tag counters"}},
)
async def list_tag_counters(app: AppDep) -> list[TagCounterView]:
    return await app.get_tag_counters()


@router.post(
    "/tags/generate",
    summary="Generate reference code",
    description=(
        "Allocate the next unique reference code for a channel type, e.g. `IG00001`. "
        "The number is consumed immediately, even if the code is never saved in a campaign."
    ),
    operation_id="generateTag",
    responses={
        200: {"description": "Allocated reference code"},
        400: {"model": ErrorResponse, "description": "Unknown or missing channel type"},
    },
)
async def generate_tag(request: GenerateTagRequest, app: AppDep) -> GeneratedTag:
    return await app.generate_tag(request.channel_type, request.platform)


@router.post(
    "/tags/sync",
    summary="Sync tag counters",
    description=(
        "Raise every tag counter to the highest number stored in campaigns. "
        "Counters are never lowered; malformed stored codes are skipped and reported."
    ),
    operation_id="syncTagCounters",
    responses={200: {"description": "Reconciliation report"}},
)
async def sync_tag_counters(app: AppDep) -> ReconcileReport:
    return await app.sync_tag_counters()
