"""Health check configuration via pydantic-settings and command-line flags.

Resolve the check configuration from three layers, later layers winning:

    1. Built-in defaults declared on `Settings`.
    2. Environment variables prefixed with ``HC_`` (``HC_URL``,
       ``HC_EXPECTED_STATUS_CODE``, ``HC_TIMEOUT``, ...).
    3. Command-line flags ``-url``, ``-status`` and ``-timeout``.

Invalid environment values raise `ConfigError`. Malformed flags are usage
errors handled by argparse (message on stderr, exit status 2).
"""

import argparse
import re
from datetime import timedelta
from typing import Any, Literal, Optional, Sequence

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hcheck.core.duration import MAX_DURATION, format_duration, parse_duration
from hcheck.errors import ConfigError

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_status_code(value: str) -> int:
    """Parse a base-10 integer with an optional sign.

    Raises:
        ValueError: If `value` contains anything besides sign and digits.
    """
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"parsing {value!r}: invalid syntax")
    return int(value)


def parse_timeout(value: str) -> timedelta:
    """Parse a nonnegative duration expression.

    Raises:
        ValueError: If `value` is not a duration or is negative.
    """
    duration = parse_duration(value)
    if duration < timedelta(0):
        raise ValueError(f"negative duration {value!r}")
    return duration


class Settings(BaseSettings):
    """Resolved health check configuration.

    Instances are immutable once built.

    Attributes:
        URL: Target URL for the health check. Validated when the check runs.
        EXPECTED_STATUS_CODE: HTTP status considered healthy.
        TIMEOUT: Request timeout. Zero disables the timeout.
        LOG_LEVEL: Minimum logging verbosity level.
        LOG_FORMAT: ``json`` for one JSON object per line, ``console`` for
            colored human-readable output.
    """

    model_config = SettingsConfigDict(
        env_prefix="HC_",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # ==========================================================================
    # CHECK TARGET
    # ==========================================================================
    URL: str = "http://localhost"
    EXPECTED_STATUS_CODE: int = 200
    TIMEOUT: timedelta = timedelta(seconds=2)

    # ==========================================================================
    # LOGGING
    # ==========================================================================
    LOG_LEVEL: Literal["debug", "info", "warning", "error", "critical"] = "info"
    LOG_FORMAT: Literal["json", "console"] = "json"

    @field_validator("EXPECTED_STATUS_CODE", mode="before")
    @classmethod
    def validate_status_code(cls, v: Any) -> Any:
        """Accept only plain integer strings from the environment."""
        if isinstance(v, str):
            return parse_status_code(v)
        return v

    @field_validator("TIMEOUT", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Any:
        """Parse duration expressions such as ``3s`` or ``1m30s``."""
        if isinstance(v, str):
            return parse_timeout(v)
        return v

    @field_validator("TIMEOUT")
    @classmethod
    def validate_timeout_range(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("timeout must not be negative")
        if v > MAX_DURATION:
            raise ValueError(f"timeout must not exceed {format_duration(MAX_DURATION)}")
        return v


# ==============================================================================
# ENVIRONMENT LAYER
# ==============================================================================


def _config_error(exc: ValidationError) -> ConfigError:
    """Translate the first validation failure into a `ConfigError`."""
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "settings"
    reason = error.get("ctx", {}).get("error") or error["msg"]
    return ConfigError(
        f"{Settings.model_config['env_prefix']}{field}",
        error.get("input"),
        str(reason),
    )


def load_env_settings() -> Settings:
    """Build settings from defaults and ``HC_*`` environment variables.

    Returns:
        Settings: Defaults overridden by the environment.

    Raises:
        ConfigError: If a variable fails to parse. Only the first failure, in
            field declaration order, is reported.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise _config_error(exc) from exc


# ==============================================================================
# FLAG LAYER
# ==============================================================================


def _status_arg(value: str) -> int:
    try:
        return parse_status_code(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _timeout_arg(value: str) -> timedelta:
    try:
        return parse_timeout(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the flag parser, defaulting every flag to the value in `settings`.

    Args:
        settings: Settings resolved from defaults and environment.

    Returns:
        argparse.ArgumentParser: Parser whose namespace maps onto `Settings`
            field names.
    """
    parser = argparse.ArgumentParser(
        prog="hcheck",
        description="Perform a single HTTP health check.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-url",
        "--url",
        dest="URL",
        default=settings.URL,
        metavar="URL",
        help="Target URL for health check (env: HC_URL, default: %(default)s)",
    )
    parser.add_argument(
        "-status",
        "--status",
        dest="EXPECTED_STATUS_CODE",
        type=_status_arg,
        default=settings.EXPECTED_STATUS_CODE,
        metavar="CODE",
        help="Expected HTTP status code (env: HC_EXPECTED_STATUS_CODE, default: %(default)s)",
    )
    parser.add_argument(
        "-timeout",
        "--timeout",
        dest="TIMEOUT",
        type=_timeout_arg,
        default=settings.TIMEOUT,
        metavar="DURATION",
        help=(
            "Request timeout duration, e.g. 500ms, 3s, 1m30s "
            f"(env: HC_TIMEOUT, default: {format_duration(settings.TIMEOUT)})"
        ),
    )
    return parser


def apply_flags(settings: Settings, argv: Optional[Sequence[str]] = None) -> Settings:
    """Override `settings` with command-line flags.

    Args:
        settings: Settings resolved from defaults and environment.
        argv: Arguments to parse. Defaults to ``sys.argv[1:]``.

    Returns:
        Settings: A new instance carrying the flag values.

    Raises:
        SystemExit: With status 2 when the flags are malformed.
    """
    args = build_parser(settings).parse_args(argv)
    return settings.model_copy(update=vars(args))


def resolve(argv: Optional[Sequence[str]] = None) -> Settings:
    """Resolve the final configuration: defaults < environment < flags.

    Raises:
        ConfigError: If an environment override is invalid.
        SystemExit: If the flags are malformed.
    """
    return apply_flags(load_env_settings(), argv)
