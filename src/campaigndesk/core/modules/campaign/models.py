"""Marketing campaigns and the channels they run on."""

from datetime import datetime
from typing import NamedTuple
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from campaigndesk.core.db import MongoModel
from campaigndesk.core.modules.tag.utils import normalize_tag
from campaigndesk.utils import now


class Channel(BaseModel):
    """Marketing activity within a campaign, optionally carrying a reference code."""

    type: str = Field(..., description="Channel type, e.g. Instagram, Radio, Print Media")
    platform: str | None = Field(None, description="Platform within the channel type")
    ad_name: str | None = None
    ad_type: str | None = None
    publication: str | None = None  # Print media
    station: str | None = None  # Radio
    cost: float | None = Field(None, ge=0)
    impressions: int | None = Field(None, ge=0)
    tag_number: str | None = Field(None, description="Globally unique reference code, e.g. IG00001")

    @field_validator("tag_number", mode="before")
    @classmethod
    def _normalize_tag_number(cls, value: object) -> str | None:
        return normalize_tag(value)


class CampaignData(BaseModel):
    """Editable campaign attributes."""

    name: str
    description: str = ""
    start_date: str | None = None  # YYYY-MM-DD
    end_date: str | None = None
    budget: float | None = Field(None, ge=0)
    status: str = ""
    job_assigned_to: str | None = None
    channels: list[Channel] = Field(default_factory=list)  # Order matters
    images: list[str] = Field(default_factory=list)


class Campaign(MongoModel, CampaignData):
    """Persisted campaign.

    Indexed on campaign_code - unique, channels.tag_number.
    """

    campaign_code: str  # Human-readable, e.g. MK_000001
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime | None = None


class TagRecord(NamedTuple):
    """Raw tag value of one stored channel, as read for validation and reconciliation."""

    campaign_id: UUID
    campaign_code: str | None
    value: object


class TagUsage(BaseModel):
    """Campaign seen through one reference code: only the channels carrying it."""

    campaign_id: UUID
    campaign_code: str
    name: str
    channels: list[Channel]

    @classmethod
    def from_domain(cls, campaign: Campaign, tag_number: str) -> "TagUsage":
        return cls(
            campaign_id=campaign.id,
            campaign_code=campaign.campaign_code,
            name=campaign.name,
            channels=[channel for channel in campaign.channels if channel.tag_number == tag_number],
        )


class ChannelImpressions(BaseModel):
    campaign_code: str
    campaign_name: str
    channel_type: str
    platform: str = "N/A"
    ad_name: str | None = None
    impressions: int


class ImpressionStats(BaseModel):
    """Impression totals across all campaigns. Channels without impressions are ignored."""

    total_impressions: int = 0
    impressions_by_channel: dict[str, int] = Field(default_factory=dict)  # By channel type
    impressions_by_platform: dict[str, int] = Field(default_factory=dict)
    top_performing_channels: list[ChannelImpressions] = Field(default_factory=list)  # Highest first
    campaigns_with_impressions: int = 0
