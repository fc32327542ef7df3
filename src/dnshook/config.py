"""Hook configuration.

The configuration file uses ``KEY=VALUE`` lines (comments start with
``#``), e.g.::

    HOOK=powerdns
    PDNS_API_ENDPOINT=http://127.0.0.1:8081
    PDNS_API_KEY=secret
    DNS_PROPAGATION_WAIT_SECS=30
    DNS_RESOLUTION_TIMEOUT_SECS=10
    DNS_RESOLVER=9.9.9.9

Environment variables with the same names override values from the file.
"""

import os
from enum import StrEnum
from pathlib import Path

from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from dnshook.dns_client import DnsClient
from dnshook.exceptions import ConfigurationError
from dnshook.providers import CloudflareProvider, DnsProvider, PowerDnsProvider
from dnshook.providers.cloudflare import DEFAULT_API_URL


class ProviderType(StrEnum):
    """Supported DNS providers."""

    POWERDNS = "powerdns"
    CLOUDFLARE = "cloudflare"


class HookConfig(BaseModel):
    """Validated hook configuration."""

    hook: ProviderType = Field(alias="HOOK")
    propagation_wait_secs: int = Field(alias="DNS_PROPAGATION_WAIT_SECS", ge=0)
    resolution_timeout_secs: int = Field(alias="DNS_RESOLUTION_TIMEOUT_SECS", ge=0)
    resolver: str | None = Field(default=None, alias="DNS_RESOLVER")
    log_level: str = Field(default="info", alias="LOG_LEVEL")

    pdns_api_endpoint: str | None = Field(default=None, alias="PDNS_API_ENDPOINT")
    pdns_api_key: str | None = Field(default=None, alias="PDNS_API_KEY")
    pdns_server_id: str | None = Field(default=None, alias="PDNS_SERVER_ID")

    cloudflare_api_endpoint: str = Field(default=DEFAULT_API_URL, alias="CLOUDFLARE_API_ENDPOINT")
    cloudflare_api_email: str | None = Field(default=None, alias="CLOUDFLARE_API_EMAIL")
    cloudflare_api_key: str | None = Field(default=None, alias="CLOUDFLARE_API_KEY")
    cloudflare_api_token: str | None = Field(default=None, alias="CLOUDFLARE_API_TOKEN")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("hook", mode="before")
    @classmethod
    def _lowercase_hook(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("debug", "info", "warn", "warning", "error"):
            raise ValueError(f"unknown log level {value!r}")
        return value

    @model_validator(mode="after")
    def _provider_settings(self) -> "HookConfig":
        if self.hook is ProviderType.POWERDNS:
            missing = [
                key
                for key, value in (
                    ("PDNS_API_ENDPOINT", self.pdns_api_endpoint),
                    ("PDNS_API_KEY", self.pdns_api_key),
                )
                if not value
            ]
            if missing:
                raise ValueError(f"powerdns hook requires {', '.join(missing)}")
        elif self.hook is ProviderType.CLOUDFLARE:
            if not self.cloudflare_api_token and not (
                self.cloudflare_api_email and self.cloudflare_api_key
            ):
                raise ValueError(
                    "cloudflare hook requires CLOUDFLARE_API_TOKEN or "
                    "CLOUDFLARE_API_EMAIL and CLOUDFLARE_API_KEY"
                )
        return self

    def build_provider(self) -> DnsProvider:
        """Create the DNS provider selected by HOOK."""
        if self.hook is ProviderType.POWERDNS:
            return PowerDnsProvider(
                api_url=self.pdns_api_endpoint or "",
                api_key=self.pdns_api_key or "",
                server_id=self.pdns_server_id,
            )
        return CloudflareProvider(
            api_url=self.cloudflare_api_endpoint,
            email=self.cloudflare_api_email,
            api_key=self.cloudflare_api_key,
            api_token=self.cloudflare_api_token,
        )

    def build_dns_client(self) -> DnsClient:
        """Create the DNS client using the configured resolver."""
        return DnsClient(resolver=self.resolver)


def load_config(path: str | Path, environ: dict[str, str] | None = None) -> HookConfig:
    """Load and validate the hook configuration.

    Args:
        path: Path of the KEY=VALUE configuration file.
        environ: Environment overriding the file (default: os.environ).

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file {path} does not exist")
    if not os.access(path, os.R_OK):
        raise ConfigurationError(f"Configuration file {path} is not readable")

    values: dict[str, str] = {
        key: value for key, value in dotenv_values(path).items() if value not in (None, "")
    }

    env = os.environ if environ is None else environ
    for field in HookConfig.model_fields.values():
        key = field.alias
        if key and env.get(key):
            values[key] = env[key]

    try:
        return HookConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e
