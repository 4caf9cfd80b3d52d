"""Process entrypoint for the hcheck probe.

Wire logging, configuration and the health check together and map the
outcome to a process exit status.

Exit Codes:
    0: Healthy - Target answered with the expected status code.
    1: Unhealthy - Invalid configuration, unreachable target or unexpected status.
    2: Usage error - Malformed command-line flags.
"""

import sys
from typing import Optional, Sequence

from hcheck.config import Settings, resolve
from hcheck.core.logging_config import configure_logging, get_logger
from hcheck.errors import CheckError, ConfigError
from hcheck.healthcheck import build_client, check

EXIT_OK = 0
EXIT_FAILURE = 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one health check and return the process exit status.

    Args:
        argv: Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns:
        int: `EXIT_OK` on success, `EXIT_FAILURE` otherwise.
    """
    # Defaults only, so configuration errors are still logged as JSON.
    configure_logging(Settings.model_construct())
    logger = get_logger("hcheck")

    try:
        settings = resolve(argv)
    except ConfigError as exc:
        logger.error("Error loading config", error=str(exc))
        return EXIT_FAILURE

    configure_logging(settings)

    with build_client(settings) as client:
        try:
            check(settings, client)
        except CheckError as exc:
            logger.error("Health check failed", error=str(exc))
            return EXIT_FAILURE

    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
