"""HTTP health check execution.

Issue a single GET request against the configured target and classify the
outcome. The HTTP client is injected so the check can run against any object
implementing `HTTPClient`, such as an `httpx.Client` backed by a mock
transport.
"""

from contextlib import closing
from typing import Protocol

import httpx

from hcheck import __version__
from hcheck.config import Settings
from hcheck.core.duration import format_duration
from hcheck.core.logging_config import get_logger
from hcheck.errors import InvalidURLError, UnexpectedStatusError, UnreachableError

USER_AGENT = f"hcheck/{__version__}"


class HTTPClient(Protocol):
    """Anything able to issue a GET request and return an `httpx.Response`."""

    def get(self, url: str) -> httpx.Response:
        ...


def build_client(settings: Settings) -> httpx.Client:
    """Create the HTTP client used by the entrypoint.

    A zero TIMEOUT disables the timeout. Redirects follow the httpx default
    (not followed).

    Args:
        settings: Resolved configuration.

    Returns:
        httpx.Client: Client to be closed by the caller.
    """
    seconds = settings.TIMEOUT.total_seconds()
    return httpx.Client(
        timeout=seconds or None,
        headers={"User-Agent": USER_AGENT},
    )


def parse_target(raw: str) -> str:
    """Validate the target URL and return its normalized form.

    Raises:
        InvalidURLError: If `raw` does not parse or is not absolute.
    """
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise InvalidURLError(raw, str(exc)) from exc

    if not url.is_absolute_url or not url.host:
        raise InvalidURLError(raw, "missing scheme or host")
    return str(url)


def check(settings: Settings, client: HTTPClient) -> None:
    """Run the health check once.

    Args:
        settings: Resolved configuration providing URL and EXPECTED_STATUS_CODE.
        client: Client used to issue the GET request.

    Raises:
        InvalidURLError: The target URL is malformed. No request is sent.
        UnreachableError: The request failed at the transport level.
        UnexpectedStatusError: The response status differs from the expected one.
    """
    logger = get_logger(__name__)
    target = parse_target(settings.URL)

    logger.debug(
        "Sending health check request",
        target=target,
        timeout=format_duration(settings.TIMEOUT),
    )
    try:
        response = client.get(target)
    except httpx.HTTPError as exc:
        raise UnreachableError(target, str(exc) or type(exc).__name__) from exc

    with closing(response):
        if response.status_code != settings.EXPECTED_STATUS_CODE:
            raise UnexpectedStatusError(
                settings.EXPECTED_STATUS_CODE, response.status_code
            )

    logger.info(
        "Health check successful",
        target=target,
        statusCode=response.status_code,
    )
