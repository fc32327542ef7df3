"""PowerDNS provider for ACME DNS-01 challenges."""

from typing import Any

import httpx

from dnshook._logging import get_logger
from dnshook.exceptions import ProviderError, ZoneNotFoundError
from dnshook.models import ZoneCandidate, challenge_record_name
from dnshook.providers.base import DnsProvider
from dnshook.zones import match_zone

logger = get_logger(__name__)

_SUCCESS_CODES = (200, 201, 202, 204)


class PowerDnsProvider(DnsProvider):
    """DNS provider for PowerDNS authoritative server.

    This provider manages TXT records for ACME DNS-01 challenges
    via the PowerDNS HTTP API.

    Args:
        api_url: Base URL of the PowerDNS API (e.g., "http://localhost:8081").
        api_key: API key for X-API-Key authentication header.
        server_id: PowerDNS server ID. If None, the first server whose
            daemon type is "authoritative" is used.
        timeout: HTTP request timeout in seconds (default: 30).
        ttl: TTL of the challenge record in seconds (default: 30).
    """

    name = "powerdns"

    def __init__(
        self,
        api_url: str,
        api_key: str,
        server_id: str | None = None,
        timeout: int = 30,
        ttl: int = 30,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.server_id = server_id
        self.timeout = timeout
        self.ttl = ttl

    @property
    def _headers(self) -> dict[str, str]:
        return {"X-API-Key": self.api_key}

    def _get(self, path: str) -> Any:
        response = httpx.get(f"{self.api_url}{path}", headers=self._headers, timeout=self.timeout)
        if response.status_code not in _SUCCESS_CODES:
            raise ProviderError.from_response(response)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {path}: {e}", response.status_code) from e

    def _find_server_id(self) -> str:
        """Find the id of the authoritative server behind the API.

        Returns:
            The configured server id, or the first authoritative one listed.

        Raises:
            ProviderError: If the API has no authoritative server or the
                listing cannot be parsed.
        """
        if self.server_id:
            return self.server_id

        servers = self._get("/api/v1/servers")
        try:
            server_id = next(
                (s["id"] for s in servers if s.get("daemon_type") == "authoritative"), None
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderError(f"Malformed server listing: {e!r}") from e

        if server_id:
            self.server_id = str(server_id)
            logger.debug("Authoritative server found", extra={"server_id": self.server_id})
            return self.server_id

        raise ProviderError("No authoritative server found at PowerDNS API")

    def _find_zone(self, hostname: str) -> str:
        """Find the zone containing the given hostname.

        Lists the zones of the server and picks the one owning the
        hostname.

        Args:
            hostname: The full hostname to find the zone for.

        Returns:
            The zone id (usually the dot-terminated zone name).

        Raises:
            ZoneNotFoundError: If no matching zone is found.
            ProviderError: If the zone listing cannot be parsed.
        """
        server_id = self._find_server_id()
        listing = self._get(f"/api/v1/servers/{server_id}/zones")
        try:
            zones = [ZoneCandidate(name=z["name"], id=z.get("id") or z["name"]) for z in listing]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ProviderError(f"Malformed zone listing: {e!r}") from e

        zone_id = match_zone(hostname, zones)
        if zone_id is None:
            raise ZoneNotFoundError(f"No zone found for hostname: {hostname}")

        logger.debug("Zone found", extra={"hostname": hostname, "zone": zone_id})
        return zone_id

    def _handle_response(self, response: httpx.Response, zone: str) -> None:
        """Handle PowerDNS API response status codes.

        Args:
            response: The httpx Response object.
            zone: The zone name (for error messages).

        Raises:
            ProviderError: For API errors with descriptive messages.
        """
        if response.status_code in _SUCCESS_CODES:
            logger.debug(
                "PowerDNS API request successful",
                extra={"zone": zone, "status_code": response.status_code},
            )
            return

        error = ProviderError.from_response(response, zone)
        logger.error(
            "PowerDNS API error",
            extra={"zone": zone, "status_code": response.status_code, "detail": error.detail},
        )
        raise error

    def _common_dns_record(self, hostname: str, value: str | None, changetype: str) -> None:
        """Execute a DNS record change via PowerDNS API.

        Args:
            hostname: The hostname (without _acme-challenge prefix).
            value: The challenge value (REPLACE only).
            changetype: PowerDNS changetype - "REPLACE" or "DELETE".

        Raises:
            ValueError: If changetype is invalid.
            ProviderError: If zone not found or API error.
        """
        if changetype not in ("REPLACE", "DELETE"):
            raise ValueError(f"Invalid changetype: {changetype}. Must be 'REPLACE' or 'DELETE'.")

        zone = self._find_zone(hostname)

        rrset: dict[str, Any] = {
            "name": challenge_record_name(hostname),
            "type": "TXT",
            "changetype": changetype,
        }

        if changetype == "REPLACE":
            rrset["ttl"] = self.ttl
            rrset["records"] = [{"content": f'"{value}"', "disabled": False}]

        response = httpx.patch(
            f"{self.api_url}/api/v1/servers/{self.server_id}/zones/{zone}",
            headers={**self._headers, "Content-Type": "application/json"},
            json={"rrsets": [rrset]},
            timeout=self.timeout,
        )
        self._handle_response(response, zone)

    def _create(self, hostname: str, value: str) -> None:
        self._common_dns_record(hostname, value, "REPLACE")
        logger.info(
            "TXT record created",
            extra={"hostname": hostname, "record_name": challenge_record_name(hostname)},
        )

    def _delete(self, hostname: str) -> None:
        self._common_dns_record(hostname, None, "DELETE")
        logger.info(
            "TXT record deleted",
            extra={"hostname": hostname, "record_name": challenge_record_name(hostname)},
        )
