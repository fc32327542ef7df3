"""Base class for challenge hooks."""

from abc import ABC, abstractmethod

from dnshook.models import ChallengeOperation, ChallengeRequest


class ChallengeHook(ABC):
    """Abstract base class for ACME challenge hooks."""

    @abstractmethod
    def start(self, hostname: str, value: str) -> bool:
        """Deploy the challenge for a hostname.

        Args:
            hostname: Hostname being validated.
            value: Challenge value to publish.

        Returns:
            True once the challenge is visible to the ACME server.
        """
        ...

    @abstractmethod
    def stop(self, hostname: str) -> bool:
        """Remove the challenge for a hostname.

        Args:
            hostname: Hostname that was validated.

        Returns:
            True once the challenge is gone.
        """
        ...

    def run(self, request: ChallengeRequest) -> bool:
        """Dispatch a request to start() or stop()."""
        if request.operation is ChallengeOperation.START:
            return self.start(request.hostname, request.record_value)
        return self.stop(request.hostname)
