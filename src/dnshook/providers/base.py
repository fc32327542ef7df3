"""Abstract base class for DNS providers."""

from abc import ABC, abstractmethod

import httpx

from dnshook._logging import get_logger
from dnshook.exceptions import ProviderError

logger = get_logger(__name__)


class DnsProvider(ABC):
    """Abstract interface for DNS providers.

    DNS providers create and delete the TXT records used for ACME DNS-01
    challenge validation. Subclasses implement ``_create`` and ``_delete``
    and may raise ``ProviderError`` or ``httpx.HTTPError``; the public
    methods turn any such failure into ``False``.
    """

    name = "provider"

    def create_challenge_record(self, hostname: str, value: str) -> bool:
        """Create (or replace) the TXT record for an ACME challenge.

        Creates a TXT record at _acme-challenge.{hostname} with the
        provided value.

        Args:
            hostname: The hostname (without _acme-challenge prefix).
            value: The challenge value to set as TXT record.

        Returns:
            True if the provider accepted the change.
        """
        try:
            self._create(hostname, value)
        except (ProviderError, httpx.HTTPError) as e:
            logger.error(
                "Could not create challenge record",
                extra={"provider": self.name, "hostname": hostname, "error": str(e)},
            )
            return False
        return True

    def delete_challenge_record(self, hostname: str) -> bool:
        """Delete the TXT record for an ACME challenge.

        Args:
            hostname: The hostname (without _acme-challenge prefix).

        Returns:
            True if the provider accepted the change.
        """
        try:
            self._delete(hostname)
        except (ProviderError, httpx.HTTPError) as e:
            logger.error(
                "Could not delete challenge record",
                extra={"provider": self.name, "hostname": hostname, "error": str(e)},
            )
            return False
        return True

    @abstractmethod
    def _create(self, hostname: str, value: str) -> None:
        """Create the record.

        Raises:
            ProviderError: If the provider rejects the change.
            httpx.HTTPError: On transport errors.
        """
        ...

    @abstractmethod
    def _delete(self, hostname: str) -> None:
        """Delete the record.

        Raises:
            ProviderError: If the provider rejects the change.
            httpx.HTTPError: On transport errors.
        """
        ...
