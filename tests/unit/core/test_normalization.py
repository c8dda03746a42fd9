"""Tests for address normalization utilities."""

from __future__ import annotations

import pytest

from idresolve.core.normalization import dedupe_addresses, normalize_address

# ============================================================================
# normalize_address Tests
# ============================================================================


class TestNormalizeAddress:
    """Tests for the normalize_address function."""

    def test_lowercases(self):
        """Mixed-case hex should be lowercased."""
        assert normalize_address("0xAbCdEf") == "0xabcdef"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("  0xabc  ", "0xabc"),
            ("\t0xABC\n", "0xabc"),
            ("0xabc", "0xabc"),
        ],
    )
    def test_strips_whitespace(self, raw: str, expected: str):
        """Surrounding whitespace should be removed."""
        assert normalize_address(raw) == expected

    def test_does_not_validate(self):
        """Non-address input passes through normalized, not rejected."""
        assert normalize_address("Not An Address") == "not an address"


# ============================================================================
# dedupe_addresses Tests
# ============================================================================


class TestDedupeAddresses:
    """Tests for the dedupe_addresses function."""

    def test_case_duplicates_collapse(self):
        """Addresses differing only by case are the same address."""
        assert dedupe_addresses(["0xABC", "0xabc", "0xAbC"]) == ["0xabc"]

    def test_keeps_first_seen_order(self):
        """Order of first appearance should be preserved."""
        assert dedupe_addresses(["0xB", "0xA", "0xb", "0xC"]) == ["0xb", "0xa", "0xc"]

    def test_drops_blank_entries(self):
        """Blank strings are not addresses."""
        assert dedupe_addresses(["", "   ", "0xA"]) == ["0xa"]

    def test_accepts_generators(self):
        """Any iterable should be accepted."""
        assert dedupe_addresses(a for a in ("0xA", "0xa")) == ["0xa"]

    def test_empty(self):
        assert dedupe_addresses([]) == []
