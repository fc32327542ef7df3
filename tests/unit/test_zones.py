"""Unit tests for zone matching."""

import logging

from dnshook.models import ZoneCandidate
from dnshook.zones import match_zone


def zones(*names: str) -> list[ZoneCandidate]:
    return [ZoneCandidate(name=name, id=f"id-{name.rstrip('.')}") for name in names]


class TestMatchZone:
    """Tests for match_zone()."""

    def test_host_inside_zone(self):
        """A host matches the zone its trailing labels equal."""
        result = match_zone("www.example.com.", zones("example.com.", "other.com."))

        assert result == "id-example.com"

    def test_apex_exact_match(self):
        """A hostname equal to the zone name matches via the apex branch."""
        assert match_zone("example.com.", zones("example.com.")) == "id-example.com"

    def test_apex_same_length_different_name(self):
        """Same label count but a different name does not match."""
        assert match_zone("example.net", zones("example.com")) is None

    def test_normalizes_missing_trailing_dot(self):
        """Hostname and zone names are compared dot-terminated."""
        candidates = [ZoneCandidate(name="example.com", id="z1")]

        assert match_zone("www.example.com", candidates) == "z1"
        assert candidates[0].name == "example.com."

    def test_suffix_must_align_on_labels(self):
        """A zone matching only part of a label is not a match."""
        assert match_zone("www.myexample.com", zones("example.com")) is None

    def test_deep_subdomain(self):
        """Deeply nested hosts match their zone."""
        assert match_zone("a.b.c.example.org", zones("example.org")) == "id-example.org"

    def test_no_match_returns_none(self):
        """No candidate owning the host returns None."""
        assert match_zone("host.other.com", zones("example.org")) is None

    def test_empty_candidates(self):
        """An empty listing returns None."""
        assert match_zone("example.org", []) is None

    def test_first_listed_match_wins(self):
        """When several zones match, the first in listing order wins."""
        result = match_zone("host.sub.example.org", zones("example.org", "sub.example.org"))

        assert result == "id-example.org"

    def test_more_specific_zone_listed_first(self):
        """A more specific zone listed first is selected."""
        result = match_zone("host.sub.example.org", zones("sub.example.org", "example.org"))

        assert result == "id-sub.example.org"

    def test_case_insensitive(self):
        """DNS names compare case-insensitively."""
        assert match_zone("WWW.Example.COM", zones("example.com.")) == "id-example.com"

    def test_zone_longer_than_host_is_skipped(self, log_capture):
        """A zone with more labels than the host is skipped with a warning."""
        result = match_zone("example.com", zones("sub.example.com", "example.com"))

        assert result == "id-example.com"
        warnings = log_capture.get_messages(logging.WARNING, name="dnshook.zones")
        assert "Zone is longer than hostname, skipping" in warnings
