from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class UnknownChannelTypeError(ValidationError):
    """Raised when a channel type has no tag prefix."""

    def __init__(self, channel_type: str) -> None:
        if channel_type:
            message = f"Unknown channel type: {channel_type}. Please select a valid channel type."
        else:
            message = "Please select a channel type"
        super().__init__(message)
        self.channel_type = channel_type


class DuplicateTagError(ValidationError):
    """Base class for reference code collisions. Carries the offending tags."""

    def __init__(self, message: str, tags: list[str]) -> None:
        super().__init__(message)
        self.tags = tags


class DuplicateInCampaignError(DuplicateTagError):
    """Raised when the same reference code appears twice in one campaign."""

    def __init__(self, tags: list[str]) -> None:
        super().__init__(
            f"Duplicate reference codes found within the campaign: {', '.join(tags)}. "
            "Each reference code must be unique.",
            tags,
        )


class DuplicateAcrossCampaignsError(DuplicateTagError):
    """Raised when a reference code is already used by another campaign."""

    def __init__(self, tags: list[str]) -> None:
        super().__init__(
            f"Reference code(s) already exist: {', '.join(tags)}. Each reference code must be globally unique.",
            tags,
        )


class MalformedTagError(ValueError):
    """Raised when a stored tag number cannot be split into prefix and number."""


class TagAllocationError(RuntimeError):
    """Raised when no free tag number could be found for a prefix."""
