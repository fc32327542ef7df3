"""Matching a hostname to the provider zone that owns it."""

from collections.abc import Iterable

from dnshook._logging import get_logger
from dnshook.models import ZoneCandidate

logger = get_logger(__name__)


def _labels(name: str) -> list[str]:
    return name.rstrip(".").split(".")


def match_zone(hostname: str, candidates: Iterable[ZoneCandidate]) -> str | None:
    """Return the id of the zone owning a hostname.

    The hostname and zone names are compared as dot-terminated, lowercase
    names. A zone with as many labels as the hostname must equal it exactly
    (certificate for the zone apex); a shorter zone must equal the
    hostname's trailing labels. Candidates are checked in the order the
    provider listed them and the first match wins.

    Args:
        hostname: Hostname to match (trailing dot optional).
        candidates: Zones as listed by the provider.

    Returns:
        The matching zone id, or None.
    """
    host = hostname.rstrip(".").lower() + "."
    host_labels = _labels(host)

    for zone in candidates:
        zone_name = zone.name.lower()
        zone_labels = _labels(zone_name)

        if len(host_labels) == len(zone_labels):
            if host == zone_name:
                return zone.id
        elif len(host_labels) > len(zone_labels):
            suffix = ".".join(host_labels[len(host_labels) - len(zone_labels) :]) + "."
            if suffix == zone_name:
                return zone.id
        else:
            logger.warning(
                "Zone is longer than hostname, skipping",
                extra={"hostname": host, "zone": zone.name},
            )

    return None
