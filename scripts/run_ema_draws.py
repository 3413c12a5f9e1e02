from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from emadraw.config import load_settings
from emadraw.directory import DirectoryClient
from emadraw.exceptions import AuthenticationError, ConfigurationError
from emadraw.models import BoundScope
from emadraw.workflows import run_assignment

logger = logging.getLogger("emadraw.run")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assign the next non-repeating EMA draw to every participant."
    )
    parser.add_argument(
        "--env",
        default=None,
        help="Deployment mode; 'production' reads credentials from AWS Secrets Manager.",
    )
    parser.add_argument(
        "--abort-on-invalid",
        action="store_true",
        help="Stop the whole run at the first participant with an invalid category count.",
    )
    parser.add_argument(
        "--bound-scope",
        choices=[scope.value for scope in BoundScope],
        default=BoundScope.PARTICIPANT.value,
    )
    parser.add_argument("--max-attempts", type=int, default=10)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load credentials, connect to the directory and run one assignment pass."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    try:
        settings = load_settings(args.env)
        client = DirectoryClient(settings)
    except (ConfigurationError, AuthenticationError) as e:
        logger.critical(f"Fatal error: {e}")
        return 2

    report = run_assignment(
        client,
        bound_scope=BoundScope(args.bound_scope),
        max_attempts=args.max_attempts,
        abort_on_invalid=args.abort_on_invalid,
    )
    for failure in report.failures:
        logger.warning(f"Participant {failure.participant_id}: {failure.message}")
    return 0 if report.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
