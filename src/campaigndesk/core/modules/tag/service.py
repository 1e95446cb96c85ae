from collections.abc import Sequence
from uuid import UUID

import structlog

from campaigndesk.core.core import Service
from campaigndesk.core.modules.campaign.models import Channel
from campaigndesk.core.modules.tag.models import GeneratedTag, MalformedTag, ReconcileReport, TagCounterView, TagList
from campaigndesk.core.modules.tag.prefixes import resolve_prefix
from campaigndesk.core.modules.tag.utils import extract_tags, find_repeated, format_tag, normalize_tag, parse_tag
from campaigndesk.errors import (
    DuplicateAcrossCampaignsError,
    DuplicateInCampaignError,
    MalformedTagError,
    TagAllocationError,
)

logger = structlog.get_logger(__name__)

MAX_ALLOCATION_ATTEMPTS = 100


class TagService(Service):
    """Allocates reference codes and keeps tag counters consistent with stored campaigns."""

    async def allocate_tag(self, channel_type: str, platform: str | None = None) -> GeneratedTag:
        """Allocate the next free tag number for a channel type.

        Each candidate is taken with an atomic counter increment, so concurrent
        allocations for the same prefix never receive the same number. Candidates
        already present in stored campaigns (counter behind the data) are skipped.
        The consumed number stays consumed even if the caller never saves it.

        Args:
            channel_type: Channel type label, e.g. "Instagram"
            platform: Accepted for logging only, does not affect the prefix

        Raises:
            UnknownChannelTypeError: Channel type is empty or has no prefix.
            TagAllocationError: No free number within MAX_ALLOCATION_ATTEMPTS.
        """
        prefix = resolve_prefix(channel_type)

        for _ in range(MAX_ALLOCATION_ATTEMPTS):
            number = await self.core.services.counter.increment_tag_counter(prefix)
            tag_number = format_tag(prefix, number)
            if not await self.core.services.campaign.tag_exists(tag_number):
                logger.info("tag_generated", tag_number=tag_number, channel_type=channel_type, platform=platform)
                return GeneratedTag(tag_number=tag_number, prefix=prefix, counter=number)
            logger.warning("tag_collision_skipped", tag_number=tag_number, prefix=prefix)

        raise TagAllocationError(f"No free tag number for prefix {prefix} after {MAX_ALLOCATION_ATTEMPTS} attempts")

    async def reconcile_counters(self) -> ReconcileReport:
        """Raise tag counters to the highest numbers actually stored in campaigns.

        Counters are never lowered: prefixes whose tags were all deleted keep
        their value. Malformed stored tags are logged and skipped.
        """
        report = ReconcileReport()

        for record in await self.core.services.campaign.list_tag_records():
            tag = normalize_tag(record.value)
            if tag is None:
                continue
            try:
                prefix, number = parse_tag(tag)
            except MalformedTagError as e:
                logger.warning("malformed_tag_skipped", tag_number=tag, campaign_code=record.campaign_code, reason=str(e))
                report.malformed.append(MalformedTag(campaign_code=record.campaign_code, value=tag, reason=str(e)))
                continue
            report.observed[prefix] = max(report.observed.get(prefix, number), number)

        for prefix, number in sorted(report.observed.items()):
            if await self.core.services.counter.raise_tag_counter(prefix, number):
                logger.info("tag_counter_raised", prefix=prefix, last_number=number)
                report.updated.append(prefix)

        logger.debug(
            "tag_counters_reconciled",
            prefixes=len(report.observed),
            updated=report.updated,
            malformed=len(report.malformed),
        )
        return report

    async def validate_campaign_tags(
        self, channels: Sequence[Channel], exclude_campaign_id: UUID | None = None
    ) -> list[str]:
        """Check that a campaign's reference codes are unique before it is saved.

        Duplicates inside the submission are checked first; only then are the
        tags compared with every other stored campaign.

        Args:
            channels: Channels of the campaign being saved
            exclude_campaign_id: Storage ID of the campaign being updated, None on create

        Returns:
            The normalized tag numbers of the submission

        Raises:
            DuplicateInCampaignError: A tag appears more than once in the submission.
            DuplicateAcrossCampaignsError: A tag is already used by another campaign.
        """
        tags = extract_tags(channel.tag_number for channel in channels)
        if not tags:
            return tags

        repeated = find_repeated(tags)
        if repeated:
            logger.info("duplicate_tags_rejected", scope="campaign", tags=repeated)
            raise DuplicateInCampaignError(repeated)

        records = await self.core.services.campaign.list_tag_records(exclude_campaign_id)
        existing = set(extract_tags(record.value for record in records))
        conflicts = [tag for tag in tags if tag in existing]
        if conflicts:
            logger.info("duplicate_tags_rejected", scope="global", tags=conflicts, campaign_id=exclude_campaign_id)
            raise DuplicateAcrossCampaignsError(conflicts)

        return tags

    async def list_counters(self) -> list[TagCounterView]:
        """Get all tag counters with display names and the next candidate tag."""
        counters = await self.core.services.counter.list_tag_counters()
        return [TagCounterView.from_domain(counter) for counter in counters]

    async def list_tags(self) -> TagList:
        """Get all distinct tag numbers stored in campaigns, sorted."""
        records = await self.core.services.campaign.list_tag_records()
        tags = sorted(set(extract_tags(record.value for record in records)))
        return TagList(tags=tags, count=len(tags))
