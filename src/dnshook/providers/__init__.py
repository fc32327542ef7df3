"""DNS providers for ACME challenge records."""

from dnshook.providers.base import DnsProvider
from dnshook.providers.cloudflare import CloudflareProvider
from dnshook.providers.powerdns import PowerDnsProvider

__all__ = ["CloudflareProvider", "DnsProvider", "PowerDnsProvider"]
