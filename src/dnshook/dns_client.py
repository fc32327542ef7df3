"""DNS queries used for nameserver discovery and propagation checks."""

import ipaddress

import dns.exception
import dns.flags
import dns.message
import dns.name
import dns.query
import dns.rcode
import dns.rdatatype
import dns.resolver

from dnshook._logging import get_logger
from dnshook.exceptions import QueryError

logger = get_logger(__name__)


def _is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


class DnsClient:
    """Issues NS and TXT queries.

    NS lookups go through a recursive resolver (the configured one, or the
    system resolver when none is given). TXT lookups are sent straight to a
    single nameserver with recursion disabled, so no resolver cache sits
    between the caller and the authoritative answer.

    Args:
        resolver: IP address or hostname of the recursive resolver to use
            for NS lookups. None uses the system configuration.
        lifetime: Total time budget in seconds for one recursive lookup.
    """

    def __init__(self, resolver: str | None = None, lifetime: float = 5.0):
        self.resolver = resolver
        self.lifetime = float(lifetime)
        self._resolver: dns.resolver.Resolver | None = None

    @property
    def recursive_resolver(self) -> dns.resolver.Resolver:
        """Resolver used for NS and address lookups (built on first use)."""
        if self._resolver is None:
            if self.resolver:
                r = dns.resolver.Resolver(configure=False)
                r.nameservers = self._addresses_of(self.resolver, dns.resolver.Resolver())
            else:
                r = dns.resolver.Resolver(configure=True)
            r.cache = None
            r.timeout = self.lifetime
            r.lifetime = self.lifetime
            self._resolver = r
        return self._resolver

    @staticmethod
    def _addresses_of(host: str, resolver: dns.resolver.Resolver) -> list[str]:
        """Resolve a server hostname to its IP addresses.

        Raises:
            QueryError: If the hostname has no A or AAAA records.
        """
        host = host.strip()
        if _is_ip_address(host):
            return [host]

        addresses: list[str] = []
        for rdtype in ("A", "AAAA"):
            try:
                answer = resolver.resolve(host, rdtype, raise_on_no_answer=False)
            except dns.exception.DNSException as e:
                logger.debug(
                    "Address lookup failed",
                    extra={"host": host, "rdtype": rdtype, "error": str(e)},
                )
                continue
            if answer.rrset is not None:
                addresses.extend(r.to_text() for r in answer.rrset)
            if addresses:
                break

        if not addresses:
            raise QueryError(host, str(resolver.nameservers), "cannot resolve server address")
        return addresses

    def lookup_ns(self, name: str) -> list[str]:
        """Look up the NS records of a name.

        CNAMEs are followed by the resolver.

        Args:
            name: Domain name to query.

        Returns:
            Nameserver hostnames (dot-terminated) in answer order, or an
            empty list when the name has no NS records or does not exist.

        Raises:
            dns.exception.DNSException: On timeouts, unreachable resolvers
                or unparseable names.
        """
        try:
            answer = self.recursive_resolver.resolve(name, "NS", raise_on_no_answer=False)
        except dns.resolver.NXDOMAIN:
            return []
        if answer.rrset is None:
            return []
        return [r.target.to_text() for r in answer.rrset]

    def query_txt(self, name: str, nameserver: str, timeout: float = 5.0) -> list[str]:
        """Query a nameserver directly for the TXT records of a name.

        Args:
            name: Record name to query.
            nameserver: Hostname or IP address of the nameserver.
            timeout: Per-query timeout in seconds.

        Returns:
            The TXT strings in the answer. A timeout, an unreachable server or
            a negative answer (NXDOMAIN, SERVFAIL, REFUSED) all count as an
            empty answer, so a silent nameserver agrees with an absence poll.

        Raises:
            QueryError: If the nameserver address cannot be resolved or the
                query name is malformed.
        """
        try:
            qname = dns.name.from_text(name)
        except dns.exception.DNSException as e:
            raise QueryError(name, nameserver, f"malformed name: {e}") from e

        server_ip = nameserver.strip()
        if not _is_ip_address(server_ip):
            try:
                server_ip = self._addresses_of(nameserver, self.recursive_resolver)[0]
            except QueryError as e:
                raise QueryError(name, nameserver, e.detail) from e

        query = dns.message.make_query(qname, dns.rdatatype.TXT)
        query.flags &= ~dns.flags.RD

        try:
            response = dns.query.udp(query, server_ip, timeout=timeout)
            if response.flags & dns.flags.TC:
                response = dns.query.tcp(query, server_ip, timeout=timeout)
        except (dns.exception.Timeout, OSError) as e:
            logger.debug(
                "TXT query got no response",
                extra={"qname": name, "nameserver": nameserver, "error": str(e)},
            )
            return []
        except dns.exception.DNSException as e:
            logger.debug(
                "TXT query got an unusable response",
                extra={"qname": name, "nameserver": nameserver, "error": str(e)},
            )
            return []

        if response.rcode() != dns.rcode.NOERROR:
            return []

        values: list[str] = []
        for rrset in response.answer:
            if rrset.rdtype != dns.rdatatype.TXT:
                continue
            for rdata in rrset:
                values.append(b"".join(rdata.strings).decode("utf-8", errors="replace"))
        return values
