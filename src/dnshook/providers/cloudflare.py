"""Cloudflare provider for ACME DNS-01 challenges."""

from typing import Any

import httpx

from dnshook._logging import get_logger
from dnshook.exceptions import ProviderError, ZoneNotFoundError
from dnshook.models import ZoneCandidate, challenge_record_name
from dnshook.providers.base import DnsProvider
from dnshook.zones import match_zone

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.cloudflare.com/client/v4"


class CloudflareProvider(DnsProvider):
    """DNS provider for the Cloudflare v4 API.

    Authenticates either with an API token (Bearer) or with the legacy
    account email and global API key. Creating a record that already
    exists updates it in place, so repeated deploys leave one TXT record.

    Args:
        api_url: Base URL of the Cloudflare API.
        email: Account email for X-Auth-Email.
        api_key: Global API key for X-Auth-Key.
        api_token: Scoped API token; takes precedence over email/api_key.
        timeout: HTTP request timeout in seconds (default: 30).
    """

    name = "cloudflare"

    # Cloudflare treats ttl=1 as "automatic"
    TTL_AUTO = 1
    ZONES_PER_PAGE = 50

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        email: str | None = None,
        api_key: str | None = None,
        api_token: str | None = None,
        timeout: int = 30,
    ):
        if not api_token and not (email and api_key):
            raise ValueError("Either api_token or both email and api_key are required")
        self.api_url = api_url.rstrip("/")
        self.email = email
        self.api_key = api_key
        self.api_token = api_token
        self.timeout = timeout

    @property
    def _headers(self) -> dict[str, str]:
        if self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        return {"X-Auth-Email": self.email or "", "X-Auth-Key": self.api_key or ""}

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send an API request and return the decoded body.

        Raises:
            ProviderError: Unless the status is 200 and the body reports success.
        """
        response = httpx.request(
            method,
            f"{self.api_url}{path}",
            headers=self._headers,
            params=params,
            json=json,
            timeout=self.timeout,
        )
        if response.status_code != 200:
            error = ProviderError.from_response(response)
            logger.error(
                "Cloudflare API error",
                extra={"path": path, "status_code": response.status_code, "detail": error.detail},
            )
            raise error

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {path}: {e}", response.status_code) from e
        if not isinstance(body, dict):
            raise ProviderError(f"Unexpected response body from {path}", response.status_code)
        if not body.get("success"):
            raise ProviderError(f"Request to {path} was not successful: {body.get('errors')}", 200)
        return body

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send an API request and return the "result" member of the body."""
        return self._send(method, path, params=params, json=json).get("result")

    def _find_zone_id(self, hostname: str) -> str:
        """Find the id of the active zone owning the hostname.

        Walks every page of the zone listing.

        Raises:
            ZoneNotFoundError: If no active zone owns the hostname.
            ProviderError: If the listing cannot be parsed.
        """
        zones: list[ZoneCandidate] = []
        page = 1
        while True:
            body = self._send(
                "GET",
                "/zones",
                params={"status": "active", "page": page, "per_page": self.ZONES_PER_PAGE},
            )
            try:
                zones.extend(
                    ZoneCandidate(name=z["name"], id=z["id"]) for z in body.get("result") or []
                )
                total_pages = int((body.get("result_info") or {}).get("total_pages") or 1)
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                raise ProviderError(f"Malformed zone listing: {e!r}") from e
            if page >= total_pages:
                break
            page += 1

        zone_id = match_zone(hostname, zones)
        if zone_id is None:
            raise ZoneNotFoundError(f"No zone found for hostname: {hostname}")
        logger.debug("Zone found", extra={"hostname": hostname, "zone": zone_id})
        return zone_id

    def _find_record_ids(self, zone_id: str, record_name: str) -> list[str]:
        """List the ids of the TXT records with the given name.

        Raises:
            ProviderError: If the listing cannot be parsed.
        """
        records = self._request(
            "GET",
            f"/zones/{zone_id}/dns_records",
            params={"type": "TXT", "name": record_name},
        )
        try:
            return [record["id"] for record in records or []]
        except (KeyError, TypeError) as e:
            raise ProviderError(f"Malformed record listing: {e!r}") from e

    def _create(self, hostname: str, value: str) -> None:
        zone_id = self._find_zone_id(hostname)
        record_name = challenge_record_name(hostname).rstrip(".")
        payload = {
            "type": "TXT",
            "name": record_name,
            "content": value,
            "ttl": self.TTL_AUTO,
        }

        record_ids = self._find_record_ids(zone_id, record_name)
        if record_ids:
            self._request("PUT", f"/zones/{zone_id}/dns_records/{record_ids[0]}", json=payload)
            logger.info(
                "TXT record updated",
                extra={
                    "hostname": hostname,
                    "record_name": record_name,
                    "record_id": record_ids[0],
                },
            )
            return

        self._request("POST", f"/zones/{zone_id}/dns_records", json=payload)
        logger.info(
            "TXT record created",
            extra={"hostname": hostname, "record_name": record_name},
        )

    def _delete(self, hostname: str) -> None:
        zone_id = self._find_zone_id(hostname)
        record_name = challenge_record_name(hostname).rstrip(".")
        record_ids = self._find_record_ids(zone_id, record_name)
        if not record_ids:
            logger.info(
                "No TXT record to delete",
                extra={"hostname": hostname, "record_name": record_name},
            )
            return

        for record_id in record_ids:
            self._request("DELETE", f"/zones/{zone_id}/dns_records/{record_id}")
            logger.info(
                "TXT record deleted",
                extra={"hostname": hostname, "record_name": record_name, "record_id": record_id},
            )
