"""DNS-01 challenge orchestration."""

import logging
import time
from collections.abc import Callable

from dnshook._logging import get_logger, reset_hostname, set_hostname
from dnshook.challenges.base import ChallengeHook
from dnshook.dns_client import DnsClient
from dnshook.models import ChallengeState, challenge_record_name
from dnshook.nameservers import resolve_authoritative
from dnshook.polling import ConsensusPoller
from dnshook.providers.base import DnsProvider

_logger = get_logger(__name__)


class DnsChallengeHook(ChallengeHook):
    """Publishes or removes a DNS-01 record and waits for all nameservers.

    Each call makes exactly one provider request, then finds the
    authoritative nameservers of the hostname, sleeps for the propagation
    wait and polls the nameservers until they all agree. Failures are
    reported as False; nothing is raised to the caller.

    Args:
        provider: DNS provider used to change the record.
        client: DNS client for nameserver discovery and polling.
        propagation_wait_secs: Sleep between the change and the first poll.
        resolution_timeout_secs: Wait per disagreeing nameserver while polling.
        poller: Consensus poller (default: one built on ``client``).
        sleep: Function used for the propagation wait.
        logger: Logger to report progress to.
    """

    def __init__(
        self,
        provider: DnsProvider,
        client: DnsClient,
        propagation_wait_secs: float,
        resolution_timeout_secs: float,
        poller: ConsensusPoller | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ):
        self.provider = provider
        self.client = client
        self.propagation_wait_secs = propagation_wait_secs
        self.resolution_timeout_secs = resolution_timeout_secs
        self.logger = logger or _logger
        self.poller = poller or ConsensusPoller(client, sleep=sleep, logger=self.logger)
        self._sleep = sleep
        self.state = ChallengeState.IDLE

    def _transition(self, state: ChallengeState) -> None:
        self.logger.debug("Challenge state change", extra={"from": self.state, "to": state})
        self.state = state

    def start(self, hostname: str, value: str) -> bool:
        """Deploy the record and wait until every nameserver serves ``value``.

        A nameserver answering with other TXT strings does not count as
        agreeing; with an empty ``value`` any non-empty answer does.
        """
        token = set_hostname(hostname)
        try:
            self.logger.info("Starting challenge", extra={"hostname": hostname, "value": value})
            return self._execute(hostname, value, presence=True)
        finally:
            reset_hostname(token)

    def stop(self, hostname: str) -> bool:
        token = set_hostname(hostname)
        try:
            self.logger.info("Stopping challenge", extra={"hostname": hostname})
            return self._execute(hostname, None, presence=False)
        finally:
            reset_hostname(token)

    def _execute(self, hostname: str, value: str | None, presence: bool) -> bool:
        self.state = ChallengeState.IDLE
        self._transition(ChallengeState.MUTATING)
        if presence:
            mutated = self.provider.create_challenge_record(hostname, value or "")
        else:
            mutated = self.provider.delete_challenge_record(hostname)

        if not mutated:
            self.logger.error(
                "Could not change challenge record",
                extra={"hostname": hostname, "presence": presence},
            )
            self._transition(ChallengeState.FAILED)
            return False

        self._transition(ChallengeState.AWAITING_PROPAGATION)
        nameservers = resolve_authoritative(hostname, self.client)
        self.logger.debug(
            "Found nameservers",
            extra={"hostname": hostname, "nameservers": list(nameservers or ())},
        )

        self.logger.info(
            f"Waiting {self.propagation_wait_secs} seconds for record propagation",
            extra={"hostname": hostname},
        )
        self._sleep(self.propagation_wait_secs)

        self._transition(ChallengeState.POLLING)
        record_name = challenge_record_name(hostname)
        if presence:
            agreed = self.poller.poll_presence(
                record_name, nameservers, self.resolution_timeout_secs, expected=value or None
            )
        else:
            agreed = self.poller.poll_absence(record_name, nameservers, self.resolution_timeout_secs)

        self._transition(ChallengeState.SUCCEEDED if agreed else ChallengeState.FAILED)
        return agreed
