"""Exceptions raised while configuring and running a health check."""


class HealthCheckError(Exception):
    """Base class for hcheck exceptions."""

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description, logged verbatim by the entrypoint.
        """
        super().__init__(message)
        self.message = message


class ConfigError(HealthCheckError):
    """Raised when an environment override cannot be parsed."""

    def __init__(self, variable: str, value: object, reason: str) -> None:
        """Initialize the exception.

        Args:
            variable: Name of the offending environment variable.
            value: The raw value that failed to parse.
            reason: Parse failure description.
        """
        super().__init__(f"invalid value for {variable} ({value}): {reason}")
        self.variable = variable
        self.value = value


class CheckError(HealthCheckError):
    """Base class for failures of the check itself."""


class InvalidURLError(CheckError):
    """Raised when the target is not an absolute URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"invalid URL {url!r}: {reason}")
        self.url = url


class UnreachableError(CheckError):
    """Raised when the request could not be completed (DNS, connect, timeout)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"unable to reach {url}: {reason}")
        self.url = url


class UnexpectedStatusError(CheckError):
    """Raised when the target answers with a status other than the expected one."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"unexpected status code received: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual
