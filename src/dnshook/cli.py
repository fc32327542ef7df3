"""Command line entry point for the dehydrated hook.

Usage:
    dnshook -config hook.conf -command deploy_challenge -hostname example.com -value TOKEN
    dnshook -config hook.conf -command clean_challenge -hostname example.com

Exit codes:
    0   success, or a lifecycle command this hook does not act on
    1   the challenge could not be deployed or cleaned
    2   invalid command line
    3   missing or invalid configuration
    42  unrecognized command
"""

import argparse
import sys

from dnshook._logging import configure_logging, get_logger
from dnshook.challenges import DnsChallengeHook
from dnshook.config import HookConfig, load_config
from dnshook.exceptions import ConfigurationError
from dnshook.models import ChallengeOperation, ChallengeRequest

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_CHALLENGE_FAILED = 1
EXIT_USAGE = 2
EXIT_CONFIG_ERROR = 3
EXIT_UNKNOWN_COMMAND = 42

COMMANDS = {
    "deploy_challenge": ChallengeOperation.START,
    "clean_challenge": ChallengeOperation.STOP,
}

# dehydrated lifecycle commands that need no work from a DNS hook
OTHER_COMMANDS = frozenset(
    {
        "deploy_cert",
        "unchanged_cert",
        "invalid_challenge",
        "request_failure",
        "startup_hook",
        "exit_hook",
        "generate_csr",
    }
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dnshook",
        description="dehydrated DNS-01 hook that waits for all authoritative nameservers",
    )
    p.add_argument(
        "-config",
        "--config",
        dest="config",
        help="Configuration file with the hook type and hook-specific values, such as API keys",
    )
    p.add_argument(
        "-command",
        "--command",
        dest="command",
        required=True,
        help="The dehydrated hook command, e.g. deploy_challenge or clean_challenge",
    )
    p.add_argument(
        "-hostname",
        "--hostname",
        dest="hostname",
        help="The hostname for which to start or end the challenge",
    )
    p.add_argument(
        "-value",
        "--value",
        dest="value",
        default="",
        help="The text value to set the record to (deploy_challenge only)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def build_hook(config: HookConfig) -> DnsChallengeHook:
    """Create the challenge hook described by the configuration."""
    return DnsChallengeHook(
        provider=config.build_provider(),
        client=config.build_dns_client(),
        propagation_wait_secs=config.propagation_wait_secs,
        resolution_timeout_secs=config.resolution_timeout_secs,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    operation = COMMANDS.get(args.command)
    if operation is None:
        if args.command in OTHER_COMMANDS:
            return EXIT_OK
        print(f"Unrecognized command: {args.command}", file=sys.stderr)
        return EXIT_UNKNOWN_COMMAND

    if not args.hostname:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: -hostname is required for {args.command}", file=sys.stderr)
        return EXIT_USAGE

    if not args.config:
        parser.print_help(sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging("debug" if args.verbose else config.log_level)

    request = ChallengeRequest(
        hostname=args.hostname,
        record_value=args.value or "",
        operation=operation,
    )
    hook = build_hook(config)

    if hook.run(request):
        if operation is ChallengeOperation.START:
            logger.info("Successfully deployed challenge", extra={"hostname": request.hostname})
        else:
            logger.info("Successfully deleted challenge", extra={"hostname": request.hostname})
        return EXIT_OK

    if operation is ChallengeOperation.START:
        logger.warning("Could not deploy challenge", extra={"hostname": request.hostname})
    else:
        logger.warning("Could not delete challenge", extra={"hostname": request.hostname})
    return EXIT_CHALLENGE_FAILED


if __name__ == "__main__":
    sys.exit(main())
