"""Channel type to tag prefix lookup."""

from types import MappingProxyType

from campaigndesk.errors import UnknownChannelTypeError

CHANNEL_TYPE_PREFIXES: MappingProxyType[str, str] = MappingProxyType(
    {
        "Instagram": "IG",
        "Facebook": "FB",
        "TikTok": "TT",
        "YouTube": "YT",
        "Snapchat": "SC",
        "Google": "GG",
        "WhatsApp Group": "WA",
        "Gold councils": "GT",
        "Residential Community": "RC",
        "Lang/Cultural group": "LC",
        "Religious group": "RG",
        "Bluecollar Camp": "BC",
        "Neighbourhood Community": "NC",
        "Social organisations": "SO",
        "Event": "EV",
        "Exhibition": "EX",
        "Channel Partners": "CP",
        "Corporate Partners": "CO",
        "Hotel": "HT",
        "Tour Driver": "TD",
        "Tours&Travel Agency": "TC",
        "New collection Launch": "PL",
        "Website": "WS",
        "Email": "EM",
        "SMS": "SMS",
        "Print Media": "PM",
        "Radio": "RD",
        "Television": "TV",
        "Referral": "RF",
        "Storefront": "SF",
        "Outdoor Ads": "OA",
        "Others": "OT",
    }
)

# Display only, derived from the table above (prefixes are unique)
PREFIX_PLATFORM_NAMES: MappingProxyType[str, str] = MappingProxyType(
    {prefix: channel_type for channel_type, prefix in CHANNEL_TYPE_PREFIXES.items()}
)


def resolve_prefix(channel_type: str | None) -> str:
    """Map a channel type label to its tag prefix.

    Raises:
        UnknownChannelTypeError: If the label is empty or not a known channel type.
    """
    label = (channel_type or "").strip()
    prefix = CHANNEL_TYPE_PREFIXES.get(label)
    if prefix is None:
        raise UnknownChannelTypeError(label)
    return prefix


def platform_name(prefix: str) -> str:
    """Human-readable platform name for a prefix; unknown prefixes display as-is."""
    return PREFIX_PLATFORM_NAMES.get(prefix, prefix)
