"""Tests for tag number formatting and parsing."""

import pytest

from campaigndesk.core.modules.tag.utils import extract_tags, find_repeated, format_tag, normalize_tag, parse_tag
from campaigndesk.errors import MalformedTagError


class TestFormatTag:
    """Tests for rendering tag numbers."""

    def test_pads_to_five_digits(self):
        assert format_tag("IG", 1) == "IG00001"
        assert format_tag("GG", 42) == "GG00042"

    def test_three_letter_prefix(self):
        assert format_tag("SMS", 7) == "SMS00007"

    def test_zero(self):
        assert format_tag("OT", 0) == "OT00000"

    def test_numbers_beyond_width_are_not_truncated(self):
        assert format_tag("FB", 123456) == "FB123456"


class TestParseTag:
    """Tests for splitting tag numbers into prefix and number."""

    def test_two_letter_prefix(self):
        assert parse_tag("IG00001") == ("IG", 1)

    def test_sms_prefix(self):
        assert parse_tag("SMS00012") == ("SMS", 12)

    def test_sm_prefix_is_not_sms(self):
        assert parse_tag("SM00012") == ("SM", 12)

    def test_minimum_length(self):
        assert parse_tag("TV9") == ("TV", 9)

    def test_unknown_prefix_still_parses(self):
        assert parse_tag("ZZ00003") == ("ZZ", 3)

    @pytest.mark.parametrize(("prefix", "number"), [("IG", 0), ("FB", 1), ("SMS", 500), ("OT", 99999)])
    def test_format_parses_back(self, prefix, number):
        assert parse_tag(format_tag(prefix, number)) == (prefix, number)

    def test_too_short(self):
        with pytest.raises(MalformedTagError, match="too short"):
            parse_tag("IG")

    @pytest.mark.parametrize("tag", ["IGABCDE", "IG0001X", "SMS", "ig00001", "I-00001", "IG 0001", "IG-0001"])
    def test_non_numeric(self, tag):
        with pytest.raises(MalformedTagError, match="non-numeric"):
            parse_tag(tag)

    def test_non_ascii_digits_rejected(self):
        with pytest.raises(MalformedTagError):
            parse_tag("IG٠٠٠١")


class TestNormalizeTag:
    """Tests for raw tag value normalization."""

    def test_trims_whitespace(self):
        assert normalize_tag("  IG00001 ") == "IG00001"

    @pytest.mark.parametrize("value", [None, "", "   ", 42, ["IG00001"], {"tag": "IG00001"}])
    def test_non_values_are_none(self, value):
        assert normalize_tag(value) is None

    def test_extract_tags_preserves_order(self):
        assert extract_tags(["FB00002", None, " IG00001", "", 5, "FB00002"]) == ["FB00002", "IG00001", "FB00002"]


class TestFindRepeated:
    """Tests for duplicate detection."""

    def test_no_duplicates(self):
        assert find_repeated(["IG00001", "IG00002"]) == []

    def test_reports_each_duplicate_once(self):
        assert find_repeated(["IG00001", "FB00001", "IG00001", "IG00001", "FB00001"]) == ["IG00001", "FB00001"]
