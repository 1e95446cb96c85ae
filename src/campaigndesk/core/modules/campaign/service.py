import re
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from campaigndesk.core.core import Service
from campaigndesk.core.modules.campaign.models import (
    Campaign,
    CampaignData,
    ChannelImpressions,
    ImpressionStats,
    TagRecord,
    TagUsage,
)
from campaigndesk.core.modules.counter.models import CounterType
from campaigndesk.core.modules.tag.utils import normalize_tag
from campaigndesk.errors import NotFoundError, ValidationError
from campaigndesk.utils import now

logger = structlog.get_logger(__name__)


TOP_CHANNELS_LIMIT = 10


def format_campaign_code(number: int) -> str:
    return f"MK_{number:06d}"


def tag_filter(tag_number: str) -> dict[str, Any]:
    """Match channels carrying this reference code, ignoring whitespace around stored values."""
    return {"channels.tag_number": {"$regex": rf"^\s*{re.escape(tag_number)}\s*$"}}


class CampaignService(Service):
    """Manages campaigns and keeps reference codes unique across them."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("campaigns")

    async def on_start(self) -> None:
        """Create indexes for code lookup and tag search."""
        await self._collection.create_index([("campaign_code", 1)], unique=True)
        await self._collection.create_index([("channels.tag_number", 1)])

    async def list_campaigns(self) -> list[Campaign]:
        """Get all campaigns, newest first."""
        return await Campaign.list_cursor(self._collection.find().sort("created_at", -1))

    async def get_campaign(self, campaign_id: UUID) -> Campaign:
        """Get campaign by ID."""
        doc = await self._collection.find_one({"_id": campaign_id})
        if not doc:
            raise NotFoundError(f"Campaign not found: {campaign_id}")
        return Campaign.model_validate(doc)

    async def get_campaign_by_code(self, campaign_code: str) -> Campaign:
        """Get campaign by its human-readable code."""
        doc = await self._collection.find_one({"campaign_code": campaign_code})
        if not doc:
            raise NotFoundError(f"Campaign not found: {campaign_code}")
        return Campaign.model_validate(doc)

    async def find_campaigns_by_tag(self, tag_number: str) -> list[Campaign]:
        """Get campaigns having a channel with this reference code."""
        tag = normalize_tag(tag_number)
        if tag is None:
            return []
        return await Campaign.list_cursor(self._collection.find(tag_filter(tag)))

    async def find_tag_usage(self, tag_number: str) -> list[TagUsage]:
        """Get campaigns using this reference code, each with only its matching channels."""
        tag = normalize_tag(tag_number)
        if tag is None:
            return []
        return [TagUsage.from_domain(campaign, tag) for campaign in await self.find_campaigns_by_tag(tag)]

    async def tag_exists(self, tag_number: str) -> bool:
        """Check if any stored channel carries this reference code, padded or not."""
        doc = await self._collection.find_one(tag_filter(tag_number), {"_id": 1})
        return doc is not None

    async def list_tag_records(self, exclude_campaign_id: UUID | None = None) -> list[TagRecord]:
        """Read the raw tag value of every stored channel.

        Documents are not validated as models so that malformed historical data
        can be inspected without failing the whole read.
        """
        query: dict[str, Any] = {}
        if exclude_campaign_id is not None:
            query["_id"] = {"$ne": exclude_campaign_id}

        records: list[TagRecord] = []
        async for doc in self._collection.find(query, {"campaign_code": 1, "channels.tag_number": 1}):
            channels = doc.get("channels")
            if not isinstance(channels, list):
                continue
            records.extend(
                TagRecord(doc["_id"], doc.get("campaign_code"), channel.get("tag_number"))
                for channel in channels
                if isinstance(channel, dict)
            )
        return records

    async def create_campaign(self, data: CampaignData) -> Campaign:
        """Create campaign after checking its reference codes, then resync tag counters.

        The check and the insert are separate steps: two concurrent saves introducing
        the same new reference code can both pass validation.
        """
        await self.core.services.tag.validate_campaign_tags(data.channels)

        number = await self.core.services.counter.get_next_sequence(CounterType.CAMPAIGN)
        campaign = Campaign(campaign_code=format_campaign_code(number), **data.model_dump())
        res = await self._collection.insert_one(campaign.to_mongo())
        logger.info("campaign_created", campaign_id=res.inserted_id, campaign_code=campaign.campaign_code)

        await self.core.services.tag.reconcile_counters()
        return await self.get_campaign(res.inserted_id)

    async def update_campaign(self, campaign_id: UUID, data: CampaignData) -> Campaign:
        """Replace editable campaign attributes, then resync tag counters.

        The campaign itself is excluded from the cross-campaign uniqueness check
        by its storage ID, so re-saving unchanged channels is allowed. As with
        creation, validation and the write are not atomic with respect to other saves.
        """
        await self.get_campaign(campaign_id)
        await self.core.services.tag.validate_campaign_tags(data.channels, exclude_campaign_id=campaign_id)

        update_doc = data.model_dump()
        update_doc["updated_at"] = now()
        await self._collection.update_one({"_id": campaign_id}, {"$set": update_doc})
        logger.info("campaign_updated", campaign_id=campaign_id)

        await self.core.services.tag.reconcile_counters()
        return await self.get_campaign(campaign_id)

    async def delete_campaign(self, campaign_id: UUID) -> None:
        """Delete a campaign. Tag counters keep their values."""
        result = await self._collection.delete_one({"_id": campaign_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Campaign not found: {campaign_id}")
        logger.info("campaign_deleted", campaign_id=campaign_id)

    async def update_impressions_by_tag(self, tag_number: str, impressions: int) -> Campaign:
        """Set impressions on the channel carrying this reference code."""
        if impressions < 0:
            raise ValidationError("Impressions must be a positive number")
        tag = normalize_tag(tag_number)
        if tag is None:
            raise ValidationError("Reference code is required")

        result = await self._collection.update_one(
            tag_filter(tag),
            {"$set": {"channels.$.impressions": impressions, "updated_at": now()}},
        )
        if result.matched_count == 0:
            raise NotFoundError(f"No campaign found with reference code: {tag}")

        logger.debug("impressions_updated", tag_number=tag, impressions=impressions)
        doc = await self._collection.find_one(tag_filter(tag))
        if not doc:
            raise NotFoundError(f"No campaign found with reference code: {tag}")
        return Campaign.model_validate(doc)

    async def update_impressions_by_index(self, campaign_id: UUID, channel_index: int, impressions: int) -> Campaign:
        """Set impressions on a channel addressed by its position in the campaign."""
        if impressions < 0:
            raise ValidationError("Impressions must be a positive number")
        campaign = await self.get_campaign(campaign_id)
        if not 0 <= channel_index < len(campaign.channels):
            raise NotFoundError(f"Channel not found: {channel_index}")

        await self._collection.update_one(
            {"_id": campaign_id},
            {"$set": {f"channels.{channel_index}.impressions": impressions, "updated_at": now()}},
        )
        logger.debug("impressions_updated", campaign_id=campaign_id, channel_index=channel_index, impressions=impressions)
        return await self.get_campaign(campaign_id)

    async def get_impression_stats(self) -> ImpressionStats:
        """Aggregate impressions by channel type and platform, with the top channels overall."""
        stats = ImpressionStats()
        by_channel, by_platform = stats.impressions_by_channel, stats.impressions_by_platform
        channels: list[ChannelImpressions] = []
        for campaign in await self.list_campaigns():
            counted = [channel for channel in campaign.channels if channel.impressions]
            if counted:
                stats.campaigns_with_impressions += 1
            for channel in counted:
                impressions = channel.impressions or 0
                stats.total_impressions += impressions
                by_channel[channel.type] = by_channel.get(channel.type, 0) + impressions
                if channel.platform:
                    by_platform[channel.platform] = by_platform.get(channel.platform, 0) + impressions
                channels.append(
                    ChannelImpressions(
                        campaign_code=campaign.campaign_code,
                        campaign_name=campaign.name,
                        channel_type=channel.type,
                        platform=channel.platform or "N/A",
                        ad_name=channel.ad_name,
                        impressions=impressions,
                    )
                )

        channels.sort(key=lambda item: item.impressions, reverse=True)
        stats.top_performing_channels = channels[:TOP_CHANNELS_LIMIT]
        return stats
