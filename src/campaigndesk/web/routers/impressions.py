from fastapi import APIRouter

from campaigndesk.core.modules.campaign.models import ImpressionStats
from campaigndesk.web.deps import AppDep

router: APIRouter = APIRouter(tags=["impressions"])


@router.get(
    "/impressions/stats",
    summary="Impression statistics",
    description="Total impressions by channel type and platform, plus the ten best performing channels.",
    operation_id="getImpressionStats",
    responses={200: {"description": "Impression statistics"}},
)
async def get_impression_stats(app: AppDep) -> ImpressionStats:
    return await app.get_impression_stats()
