"""dnshook - dehydrated DNS-01 hook that waits for authoritative propagation."""

from dnshook.challenges import DnsChallengeHook
from dnshook.dns_client import DnsClient
from dnshook.nameservers import resolve_authoritative
from dnshook.polling import ConsensusPoller
from dnshook.zones import match_zone

__all__ = [
    "ConsensusPoller",
    "DnsChallengeHook",
    "DnsClient",
    "match_zone",
    "resolve_authoritative",
]
__version__ = "0.1.0"
