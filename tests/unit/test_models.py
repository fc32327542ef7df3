"""Unit tests for models and exceptions."""

import httpx
import pytest
from pydantic import ValidationError

from dnshook.exceptions import (
    ConfigurationError,
    HookError,
    ProviderError,
    QueryError,
    ZoneNotFoundError,
)
from dnshook.models import (
    ChallengeOperation,
    ChallengeRequest,
    PollOutcome,
    ZoneCandidate,
    challenge_record_name,
)


class TestChallengeRequest:
    def test_record_name(self):
        request = ChallengeRequest(
            hostname="test.example.com", record_value="abc", operation="start"
        )

        assert request.operation is ChallengeOperation.START
        assert request.record_name == "_acme-challenge.test.example.com."

    def test_is_frozen(self):
        request = ChallengeRequest(hostname="example.com", operation=ChallengeOperation.STOP)

        with pytest.raises(ValidationError):
            request.hostname = "other.com"

    def test_hostname_required(self):
        with pytest.raises(ValidationError):
            ChallengeRequest(hostname="", operation="start")

    def test_unknown_operation(self):
        with pytest.raises(ValidationError):
            ChallengeRequest(hostname="example.com", operation="restart")


class TestZoneCandidate:
    def test_adds_trailing_dot(self):
        assert ZoneCandidate(name="example.com", id="1").name == "example.com."

    def test_keeps_trailing_dot(self):
        assert ZoneCandidate(name="example.com.", id="1").name == "example.com."


class TestPollOutcome:
    def test_negative_tries_rejected(self):
        with pytest.raises(ValidationError):
            PollOutcome(all_agreed=False, tries_used=-1)


class TestChallengeRecordName:
    @pytest.mark.parametrize("hostname", ["example.com", "example.com."])
    def test_single_trailing_dot(self, hostname):
        assert challenge_record_name(hostname) == "_acme-challenge.example.com."


class TestExceptions:
    def test_hierarchy(self):
        assert issubclass(ConfigurationError, HookError)
        assert issubclass(ProviderError, HookError)
        assert issubclass(ZoneNotFoundError, ProviderError)
        assert issubclass(QueryError, HookError)

    def test_query_error_message(self):
        error = QueryError("_acme-challenge.example.com.", "ns1.example.com.", "boom")

        assert str(error) == "_acme-challenge.example.com. @ ns1.example.com.: boom"
        assert error.nameserver == "ns1.example.com."

    def test_from_response_404(self):
        error = ProviderError.from_response(
            httpx.Response(404, json={"error": "Not Found"}), zone="example.org."
        )

        assert isinstance(error, ZoneNotFoundError)
        assert error.zone == "example.org."
        assert error.status_code == 404

    def test_from_response_cloudflare_errors(self):
        error = ProviderError.from_response(
            httpx.Response(
                400,
                json={"success": False, "errors": [{"code": 9005, "message": "Bad content"}]},
            )
        )

        assert str(error) == "Bad Request: Bad content"
