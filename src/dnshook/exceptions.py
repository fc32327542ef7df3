"""dnshook exceptions."""

import httpx


class HookError(Exception):
    """Base exception for dnshook errors."""

    pass


class ConfigurationError(HookError):
    """Hook configuration is missing or invalid."""

    pass


class QueryError(HookError):
    """A single DNS query could not be issued.

    Raised for failures that retrying the same query cannot fix, such as a
    nameserver hostname that does not resolve or a malformed query name.
    Timeouts and empty answers are not query errors.
    """

    def __init__(self, name: str, nameserver: str, detail: str):
        self.name = name
        self.nameserver = nameserver
        self.detail = detail
        super().__init__(f"{name} @ {nameserver}: {detail}")


class ProviderError(HookError):
    """The DNS provider API rejected a request."""

    def __init__(self, detail: str, status_code: int | None = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)

    @classmethod
    def from_response(cls, response: httpx.Response, zone: str | None = None) -> "ProviderError":
        """Create a ProviderError from an HTTP error response.

        The detail is taken from the JSON body when the provider sends one,
        falling back to the raw text.

        Args:
            response: The failed response.
            zone: The zone the request was about (for error messages).

        Returns:
            ProviderError instance (or ZoneNotFoundError for 404).
        """
        try:
            error_data = response.json()
        except ValueError:
            error_data = None

        detail = None
        if isinstance(error_data, dict):
            detail = error_data.get("error")
            errors = error_data.get("errors")
            if detail is None and errors:
                detail = "; ".join(str(e.get("message", e)) for e in errors if isinstance(e, dict))
        if not detail:
            detail = response.text or "Unknown error"

        status_messages = {
            400: f"Bad Request: {detail}",
            404: f"Zone not found: {detail}",
            422: f"Unprocessable Entity: {detail}",
            500: f"Server Error: {detail}",
        }
        message = status_messages.get(
            response.status_code,
            f"Unexpected error ({response.status_code}): {detail}",
        )

        if response.status_code == 404:
            return ZoneNotFoundError(message, status_code=404, zone=zone)
        return cls(message, status_code=response.status_code)


class ZoneNotFoundError(ProviderError):
    """No zone at the provider owns the hostname."""

    def __init__(self, detail: str, status_code: int | None = None, zone: str | None = None):
        self.zone = zone
        super().__init__(detail, status_code=status_code)
