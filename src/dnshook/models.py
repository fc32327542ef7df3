"""Pydantic models for challenge requests and DNS resources."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

# Prefix of every DNS-01 challenge record name
ACME_CHALLENGE_PREFIX = "_acme-challenge."


class ChallengeOperation(StrEnum):
    """What a challenge invocation does to the TXT record."""

    START = "start"
    STOP = "stop"


class ChallengeState(StrEnum):
    """Orchestrator states for one challenge invocation."""

    IDLE = "idle"
    MUTATING = "mutating"
    AWAITING_PROPAGATION = "awaiting_propagation"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ChallengeRequest(BaseModel):
    """One deploy or clean request coming from the ACME client."""

    hostname: str = Field(min_length=1)
    record_value: str = ""
    operation: ChallengeOperation

    model_config = {"frozen": True}

    @property
    def record_name(self) -> str:
        """Fully qualified name of the challenge TXT record."""
        return challenge_record_name(self.hostname)


class ZoneCandidate(BaseModel):
    """A zone as listed by a DNS provider."""

    name: str
    id: str

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def _dot_terminated(cls, value: str) -> str:
        return value if value.endswith(".") else value + "."


class PollOutcome(BaseModel):
    """Result of one consensus poll."""

    all_agreed: bool
    tries_used: int = Field(ge=0)

    model_config = {"frozen": True}


def challenge_record_name(hostname: str) -> str:
    """Return the dot-terminated challenge record name for a hostname.

    Args:
        hostname: Hostname with or without trailing dot.

    Returns:
        "_acme-challenge.<hostname>." with a single trailing dot.
    """
    return f"{ACME_CHALLENGE_PREFIX}{hostname.rstrip('.')}."
