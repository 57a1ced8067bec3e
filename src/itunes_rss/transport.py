"""
HTTP transport used to execute resolver requests.

Anything with a requests.Session-style send() method can be used, which
lets tests and callers substitute canned responses or instrumented clients.
"""

import logging
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Optional, Protocol, runtime_checkable

import requests

# Seconds, same as the downloader defaults.
DEFAULT_TIMEOUT = 30


@runtime_checkable
class Transport(Protocol):
    """Protocol for objects that execute prepared HTTP requests."""

    def send(
        self, request: requests.PreparedRequest, **kwargs: Any
    ) -> requests.Response:
        """Execute request and return the response.

        Raise an exception when no response could be obtained; the
        resolver reports any exception raised here as a FetchError.
        """
        ...  # pylint: disable=unnecessary-ellipsis


class SessionTransport:
    """Transport backed by a requests.Session.

    The session never stores cookies, so each hop is sent exactly as the
    request builder made it. Requests are sent with a default timeout
    unless the caller passes one.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        """Initialize with an optional session and request timeout."""
        if session is None:
            session = requests.Session()
            session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self.session = session
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def send(
        self, request: requests.PreparedRequest, **kwargs: Any
    ) -> requests.Response:
        """Send request through the session."""
        kwargs.setdefault("timeout", self.timeout)
        self.logger.debug("Sending %s %s", request.method, request.url)
        return self.session.send(request, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()


def default_transport() -> SessionTransport:
    """Create the transport used when the caller does not supply one."""
    return SessionTransport()
