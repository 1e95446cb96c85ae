from campaigndesk.web.routers.campaigns import router as campaigns_router
from campaigndesk.web.routers.impressions import router as impressions_router
from campaigndesk.web.routers.tags import router as tags_router

__all__ = [
    "campaigns_router",
    "impressions_router",
    "tags_router",
]
