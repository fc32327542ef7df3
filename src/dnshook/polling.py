"""Consensus polling of authoritative nameservers."""

import concurrent.futures
import logging
import time
from collections.abc import Callable, Sequence

from dnshook._logging import Timer, get_hostname_extra, get_logger
from dnshook.dns_client import DnsClient
from dnshook.exceptions import QueryError
from dnshook.models import PollOutcome

_logger = get_logger(__name__)


class ConsensusPoller:
    """Polls a set of nameservers until all of them agree on a TXT record.

    Every round queries each nameserver directly and in parallel; a round
    succeeds only when every nameserver gave the wanted answer in that same
    round. After a failed round the poller waits ``timeout_secs`` for each
    nameserver that disagreed, then tries again, up to ``max_tries`` rounds.

    Args:
        client: DNS client used for the direct TXT queries.
        query_timeout: Timeout in seconds of a single TXT query.
        max_tries: Maximum number of rounds.
        max_workers: Size of the query pool (default: one per nameserver).
        sleep: Function used to wait between rounds.
        logger: Logger to report progress to.
    """

    QUERY_TIMEOUT = 5.0
    MAX_TRIES = 10

    def __init__(
        self,
        client: DnsClient,
        query_timeout: float = QUERY_TIMEOUT,
        max_tries: int = MAX_TRIES,
        max_workers: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ):
        self.client = client
        self.query_timeout = query_timeout
        self.max_tries = max_tries
        self.max_workers = max_workers
        self._sleep = sleep
        self.logger = logger or _logger

    def poll_presence(
        self,
        record_name: str,
        nameservers: Sequence[str] | None,
        timeout_secs: float,
        expected: str | None = None,
    ) -> bool:
        """Wait until every nameserver serves the TXT record.

        Args:
            record_name: Name of the TXT record.
            nameservers: Authoritative nameservers to poll.
            timeout_secs: Wait per disagreeing nameserver between rounds.
            expected: If given, the TXT value each nameserver must return.

        Returns:
            True if all nameservers had the record in the same round.
        """
        return self.poll(record_name, nameservers, timeout_secs, True, expected).all_agreed

    def poll_absence(
        self,
        record_name: str,
        nameservers: Sequence[str] | None,
        timeout_secs: float,
    ) -> bool:
        """Wait until no nameserver serves the TXT record any more.

        Returns:
            True if all nameservers answered empty in the same round.
        """
        return self.poll(record_name, nameservers, timeout_secs, False).all_agreed

    def poll(
        self,
        record_name: str,
        nameservers: Sequence[str] | None,
        timeout_secs: float,
        presence: bool,
        expected: str | None = None,
    ) -> PollOutcome:
        """Run the consensus poll for presence or absence of a record."""
        if not record_name or not nameservers:
            return PollOutcome(all_agreed=False, tries_used=0)

        nameservers = tuple(nameservers)
        extra = {**get_hostname_extra(), "record_name": record_name, "presence": presence}
        self.logger.info(
            "Polling nameservers for challenge record",
            extra={**extra, "nameservers": list(nameservers)},
        )

        outcome = PollOutcome(all_agreed=False, tries_used=0)
        workers = self.max_workers or len(nameservers)
        with Timer() as timer, concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
            for attempt in range(1, self.max_tries + 1):
                try:
                    disagreeing = self._poll_round(pool, record_name, nameservers, presence, expected)
                except QueryError as e:
                    self.logger.error(
                        "DNS query failed, aborting poll",
                        extra={**extra, "attempt": attempt, "error": str(e)},
                    )
                    outcome = PollOutcome(all_agreed=False, tries_used=attempt)
                    break

                if not disagreeing:
                    outcome = PollOutcome(all_agreed=True, tries_used=attempt)
                    break

                outcome = PollOutcome(all_agreed=False, tries_used=attempt)
                self.logger.info(
                    "Nameservers not in agreement",
                    extra={**extra, "attempt": attempt, "disagreeing": disagreeing},
                )
                if attempt < self.max_tries:
                    self._sleep(timeout_secs * len(disagreeing))

        self.logger.info(
            "Done polling nameservers",
            extra={
                **extra,
                "all_agreed": outcome.all_agreed,
                "tries_used": outcome.tries_used,
                "duration_ms": timer.elapsed_ms,
            },
        )
        return outcome

    def _poll_round(
        self,
        pool: concurrent.futures.Executor,
        record_name: str,
        nameservers: tuple[str, ...],
        presence: bool,
        expected: str | None,
    ) -> list[str]:
        """Query every nameserver once.

        Returns:
            The nameservers that did not give the wanted answer.

        Raises:
            QueryError: If any query of the round failed.
        """
        futures = [
            pool.submit(self.client.query_txt, record_name, ns, self.query_timeout)
            for ns in nameservers
        ]
        concurrent.futures.wait(futures)

        disagreeing = []
        for ns, future in zip(nameservers, futures, strict=True):
            values = future.result()
            if presence:
                agreed = bool(values) if expected is None else expected in values
            else:
                agreed = not values
            self.logger.debug(
                "Polled nameserver",
                extra={"nameserver": ns, "agreed": agreed, "values": values},
            )
            if not agreed:
                disagreeing.append(ns)
        return disagreeing
