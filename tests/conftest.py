"""Pytest fixtures for dnshook test suite."""

import contextlib
import logging
import logging.handlers
import os
import threading
from collections.abc import Generator

import httpx
import pytest

# Default URLs for local PowerDNS setup
POWERDNS_API_URL = os.environ.get("POWERDNS_API_URL", "http://localhost:8081")
POWERDNS_API_KEY = os.environ.get("POWERDNS_API_KEY", "test-api-key")


class FakeDnsClient:
    """Scripted stand-in for DnsClient.

    Args:
        ns: Mapping of name to NS answer (list) or exception to raise.
        txt: Mapping of nameserver to a list of per-call TXT answers. Each
            entry is a list of strings or an exception to raise; once the
            script runs out, the last entry repeats.
    """

    def __init__(
        self,
        ns: dict[str, list[str] | Exception] | None = None,
        txt: dict[str, list[list[str] | Exception]] | None = None,
    ) -> None:
        self.ns = ns or {}
        self.txt = txt or {}
        self.ns_queries: list[str] = []
        self.txt_queries: list[tuple[str, str, float]] = []
        self._calls: dict[str, int] = {}
        self._lock = threading.Lock()

    def lookup_ns(self, name: str) -> list[str]:
        self.ns_queries.append(name)
        result = self.ns.get(name, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def query_txt(self, name: str, nameserver: str, timeout: float = 5.0) -> list[str]:
        with self._lock:
            self.txt_queries.append((name, nameserver, timeout))
            index = self._calls.get(nameserver, 0)
            self._calls[nameserver] = index + 1

        script = self.txt.get(nameserver, [[]])
        answer = script[min(index, len(script) - 1)]
        if isinstance(answer, Exception):
            raise answer
        return list(answer)

    def calls_to(self, nameserver: str) -> int:
        return self._calls.get(nameserver, 0)


@pytest.fixture
def fake_dns() -> type[FakeDnsClient]:
    """Return the FakeDnsClient class for building scripted clients."""
    return FakeDnsClient


@pytest.fixture
def no_sleep() -> list[float]:
    """A sleep replacement that records the requested durations."""

    class _Recorder(list):
        def __call__(self, seconds: float) -> None:
            self.append(seconds)

    return _Recorder()


@pytest.fixture(scope="session")
def powerdns_api_url() -> str:
    """Return the PowerDNS API URL."""
    return POWERDNS_API_URL


@pytest.fixture(scope="session")
def powerdns_api_key() -> str:
    """Return the PowerDNS API key."""
    return POWERDNS_API_KEY


@pytest.fixture(scope="session", autouse=False)
def powerdns_test_zone(powerdns_api_url: str, powerdns_api_key: str) -> Generator[str]:
    """Create a test zone in PowerDNS for integration tests.

    This fixture creates the example.org zone via the PowerDNS API
    and cleans it up after all tests complete.
    """
    zone_name = "example.org."
    headers = {
        "X-API-Key": powerdns_api_key,
        "Content-Type": "application/json",
    }

    zone_data = {
        "name": zone_name,
        "kind": "Native",
        "nameservers": ["ns1.example.org."],
        "soa_edit_api": "DEFAULT",
    }

    try:
        response = httpx.post(
            f"{powerdns_api_url}/api/v1/servers/localhost/zones",
            headers=headers,
            json=zone_data,
            timeout=30,
        )
        # 201 = created, 409 = already exists (which is fine)
        if response.status_code not in (201, 409):
            response.raise_for_status()
    except httpx.ConnectError:
        pytest.skip("PowerDNS not available")

    yield zone_name

    # Cleanup: delete the zone (best effort)
    with contextlib.suppress(httpx.HTTPError):
        httpx.delete(
            f"{powerdns_api_url}/api/v1/servers/localhost/zones/{zone_name}",
            headers=headers,
            timeout=30,
        )


class LogCapture:
    """Helper class to capture and inspect log records."""

    def __init__(self, handler: logging.handlers.MemoryHandler) -> None:
        self._handler = handler

    @property
    def records(self) -> list[logging.LogRecord]:
        """Get all captured log records."""
        return self._handler.buffer

    def get_records(
        self, level: int | None = None, name: str | None = None
    ) -> list[logging.LogRecord]:
        """Get log records filtered by level and/or logger name.

        Args:
            level: Filter by log level (e.g., logging.INFO).
            name: Filter by logger name prefix (e.g., "dnshook.polling").

        Returns:
            List of matching log records.
        """
        records = self.records
        if level is not None:
            records = [r for r in records if r.levelno == level]
        if name is not None:
            records = [r for r in records if r.name.startswith(name)]
        return records

    def get_messages(self, level: int | None = None, name: str | None = None) -> list[str]:
        """Get log messages filtered by level and/or logger name."""
        return [r.getMessage() for r in self.get_records(level, name)]

    def clear(self) -> None:
        """Clear all captured log records."""
        self._handler.buffer.clear()


@pytest.fixture
def log_capture() -> Generator[LogCapture]:
    """Capture logs from the dnshook package during a test.

    Usage:
        def test_something(log_capture):
            # do something that logs
            assert "Done polling nameservers" in log_capture.get_messages(logging.INFO)
    """
    handler = logging.handlers.MemoryHandler(capacity=1000)
    handler.setLevel(logging.DEBUG)

    dnshook_logger = logging.getLogger("dnshook")
    original_level = dnshook_logger.level
    dnshook_logger.setLevel(logging.DEBUG)
    dnshook_logger.addHandler(handler)

    try:
        yield LogCapture(handler)
    finally:
        dnshook_logger.removeHandler(handler)
        dnshook_logger.setLevel(original_level)
        handler.close()
