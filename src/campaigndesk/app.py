from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from campaigndesk.config import Config
from campaigndesk.core.core import Core
from campaigndesk.core.modules.campaign.models import Campaign, CampaignData, ImpressionStats, TagUsage
from campaigndesk.core.modules.tag.models import GeneratedTag, ReconcileReport, TagCounterView, TagList
from campaigndesk.errors import NotFoundError


class App:
    """Facade for all application operations, delegates to Core services."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Tags ===
    async def generate_tag(self, channel_type: str, platform: str | None = None) -> GeneratedTag:
        """Allocate a new unique reference code for a channel type."""
        return await self._core.services.tag.allocate_tag(channel_type, platform)

    async def sync_tag_counters(self) -> ReconcileReport:
        """Realign tag counters with the reference codes stored in campaigns."""
        return await self._core.services.tag.reconcile_counters()

    async def get_tag_counters(self) -> list[TagCounterView]:
        """Get all tag counters with platform names."""
        return await self._core.services.tag.list_counters()

    async def get_all_tags(self) -> TagList:
        """Get all reference codes in use."""
        return await self._core.services.tag.list_tags()

    # === Campaigns ===
    async def get_campaigns(self) -> list[Campaign]:
        """Get all campaigns."""
        return await self._core.services.campaign.list_campaigns()

    async def get_campaign(self, campaign_id: UUID) -> Campaign:
        """Get campaign by storage ID."""
        return await self._core.services.campaign.get_campaign(campaign_id)

    async def get_campaign_by_code(self, campaign_code: str) -> Campaign:
        """Get campaign by human-readable code."""
        return await self._core.services.campaign.get_campaign_by_code(campaign_code)

    async def get_campaigns_by_tag(self, tag_number: str) -> list[TagUsage]:
        """Get campaigns using a reference code, narrowed to the matching channels. Raises NotFoundError if none."""
        usages = await self._core.services.campaign.find_tag_usage(tag_number)
        if not usages:
            raise NotFoundError(f"No campaigns found using reference code: {tag_number}")
        return usages

    async def create_campaign(self, data: CampaignData) -> Campaign:
        """Create campaign with globally unique reference codes."""
        return await self._core.services.campaign.create_campaign(data)

    async def update_campaign(self, campaign_id: UUID, data: CampaignData) -> Campaign:
        """Update campaign with globally unique reference codes."""
        return await self._core.services.campaign.update_campaign(campaign_id, data)

    async def delete_campaign(self, campaign_id: UUID) -> None:
        """Delete campaign. Reference codes it used are never reissued."""
        await self._core.services.campaign.delete_campaign(campaign_id)

    async def update_impressions(self, tag_number: str, impressions: int) -> Campaign:
        """Set impressions for the channel identified by a reference code."""
        return await self._core.services.campaign.update_impressions_by_tag(tag_number, impressions)

    async def update_channel_impressions(self, campaign_id: UUID, channel_index: int, impressions: int) -> Campaign:
        """Set impressions for the channel at a position within a campaign."""
        return await self._core.services.campaign.update_impressions_by_index(campaign_id, channel_index, impressions)

    # === Impressions ===
    async def get_impression_stats(self) -> ImpressionStats:
        """Get impression totals across all campaigns."""
        return await self._core.services.campaign.get_impression_stats()
