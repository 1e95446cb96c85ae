import re
from collections import Counter
from collections.abc import Iterable

from campaigndesk.errors import MalformedTagError

TAG_NUMBER_WIDTH = 5
MIN_TAG_LENGTH = 3  # 2-char prefix + at least one digit

# SMS is the only 3-letter prefix; it wins only when followed by a digit
TAG_RE = re.compile(r"(SMS(?=\d)|[A-Z]{2})(\d+)", re.ASCII)


def format_tag(prefix: str, number: int) -> str:
    """Render a tag number, e.g. ("IG", 1) -> "IG00001"."""
    return f"{prefix}{number:0{TAG_NUMBER_WIDTH}d}"


def parse_tag(tag: str) -> tuple[str, int]:
    """Split a tag number into (prefix, number).

    Raises:
        MalformedTagError: If the tag is too short or has no numeric suffix.
    """
    if len(tag) < MIN_TAG_LENGTH:
        raise MalformedTagError(f"Invalid tag number format (too short): {tag!r}")
    match = TAG_RE.fullmatch(tag)
    if match is None:
        raise MalformedTagError(f"Invalid tag number format (non-numeric): {tag!r}")
    return match.group(1), int(match.group(2))


def normalize_tag(value: object) -> str | None:
    """Trim a raw tag value; None for anything that is not a non-blank string."""
    if not isinstance(value, str):
        return None
    return value.strip() or None


def extract_tags(values: Iterable[object]) -> list[str]:
    """Normalize raw tag values, dropping empty ones. Order is preserved."""
    return [tag for tag in (normalize_tag(value) for value in values) if tag is not None]


def find_repeated(tags: list[str]) -> list[str]:
    """Tags that occur more than once, each reported once in first-seen order."""
    counts = Counter(tags)
    return [tag for tag in counts if counts[tag] > 1]
