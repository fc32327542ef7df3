"""Authoritative nameserver discovery."""

import dns.exception

from dnshook._logging import get_logger
from dnshook.dns_client import DnsClient
from dnshook.exceptions import QueryError

logger = get_logger(__name__)


def resolve_authoritative(hostname: str, client: DnsClient) -> tuple[str, ...] | None:
    """Find the authoritative nameservers for the zone owning a hostname.

    A challenge hostname is often a CNAME or a host without its own
    delegation, so when a name has no NS records the leftmost label is
    stripped and the parent is queried instead, until a delegation is found
    or no dot is left.

    Args:
        hostname: Hostname to start from (trailing dot optional).
        client: DNS client used for the NS queries.

    Returns:
        Nameserver hostnames in answer order, or None if no level of the
        hierarchy has NS records.
    """
    name = (hostname or "").strip().rstrip(".")
    if not name:
        return None

    while True:
        try:
            nameservers = client.lookup_ns(name)
        except (dns.exception.DNSException, QueryError) as e:
            logger.warning(
                "NS query failed, treating as no answer",
                extra={"qname": name, "error": str(e)},
            )
            nameservers = []

        if nameservers:
            logger.debug(
                "Found authoritative nameservers",
                extra={"hostname": hostname, "zone": name, "nameservers": nameservers},
            )
            return tuple(nameservers)

        if "." not in name:
            break
        name = name.split(".", 1)[1]

    logger.warning(
        "Could not find any authoritative nameserver",
        extra={"hostname": hostname},
    )
    return None
