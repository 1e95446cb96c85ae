from pydantic import BaseModel, Field

from campaigndesk.core.modules.counter.models import TagCounter
from campaigndesk.core.modules.tag.prefixes import platform_name
from campaigndesk.core.modules.tag.utils import format_tag


class GeneratedTag(BaseModel):
    """A freshly allocated tag number."""

    tag_number: str = Field(..., description="Reference code, e.g. IG00001")
    prefix: str = Field(..., description="Tag prefix for the channel type")
    counter: int = Field(..., description="Counter value consumed by this tag")


class TagCounterView(BaseModel):
    """Tag counter with display information (API representation)."""

    prefix: str = Field(..., description="Tag prefix")
    platform_name: str = Field(..., description="Channel type the prefix belongs to")
    last_number: int = Field(..., description="Highest number allocated or observed")
    next_tag: str = Field(..., description="Tag the next allocation will try first")

    @classmethod
    def from_domain(cls, counter: TagCounter) -> "TagCounterView":
        """Create view model from domain model."""
        return cls(
            prefix=counter.prefix,
            platform_name=platform_name(counter.prefix),
            last_number=counter.last_number,
            next_tag=format_tag(counter.prefix, counter.last_number + 1),
        )


class TagList(BaseModel):
    """All distinct tag numbers currently stored in campaigns."""

    tags: list[str]
    count: int


class MalformedTag(BaseModel):
    """Stored tag value skipped during reconciliation."""

    campaign_code: str | None
    value: str
    reason: str


class ReconcileReport(BaseModel):
    """Outcome of a counter reconciliation pass."""

    observed: dict[str, int] = Field(default_factory=dict, description="Highest stored number per prefix")
    updated: list[str] = Field(default_factory=list, description="Prefixes whose counter was raised")
    malformed: list[MalformedTag] = Field(default_factory=list, description="Tag values that could not be parsed")
