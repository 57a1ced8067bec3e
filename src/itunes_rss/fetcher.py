"""
Request building and fetching for directory pages and plists.
"""

import http
import logging
import re
from urllib.parse import urlsplit

import requests

from .errors import BadHTTPStatusError, BadRequestError, FetchError
from .transport import Transport

# Make requests look like they come from iTunes.
USER_AGENT = "iTunes/10.1"

# RFC 3986 scheme followed by its colon
_SCHEME = re.compile(r"([A-Za-z][A-Za-z0-9+.-]*):")

# A percent sign not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _innermost_error(exc: BaseException) -> BaseException:
    """Follow the exception chain down to the original error."""
    while True:
        inner = exc.__cause__ or exc.__context__
        if inner is None:
            return exc
        exc = inner


def _check_url(url: str) -> None:
    """Raise BadRequestError if url can't be used for an HTTP request."""
    if not url:
        raise BadRequestError("empty url")

    match = _SCHEME.match(url)
    if not match:
        raise BadRequestError("missing protocol scheme")

    scheme = match.group(1).lower()
    if scheme not in ("http", "https"):
        raise BadRequestError(f'unsupported protocol scheme "{scheme}"')

    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise BadRequestError(str(e)) from e

    # The query string is sent as given, stray percent signs included.
    userinfo = parts.netloc.rpartition("@")[0]
    for component in (userinfo, parts.path, parts.fragment):
        match = _BAD_ESCAPE.search(component)
        if match:
            escape = component[match.start():match.start() + 3]
            raise BadRequestError(f'invalid URL escape "{escape}"')

    if not parts.netloc:
        raise BadRequestError("no Host in request URL")


def build_request(url: str) -> requests.PreparedRequest:
    """Build a GET request for url with the iTunes User-Agent.

    Raises:
        BadRequestError: If url is malformed. The reason is the underlying
            parse error, without any URL-specific wrapping.
    """
    _check_url(url)

    request = requests.Request("GET", url, headers={"User-Agent": USER_AGENT})
    try:
        return request.prepare()
    except (requests.exceptions.RequestException, ValueError) as e:
        raise BadRequestError(str(_innermost_error(e))) from e


def status_text(status_code: int) -> str:
    """Get the standard reason phrase for status_code."""
    try:
        return http.HTTPStatus(status_code).phrase
    except ValueError:
        return f"status code {status_code}"


def fetch(transport: Transport, url: str) -> requests.Response:
    """Fetch url and return the open, streaming response.

    The caller owns the returned response and must close it.

    Raises:
        BadRequestError: If url is malformed.
        FetchError: If the transport raises any exception.
        BadHTTPStatusError: If the status code is not 200.
    """
    logger = logging.getLogger(__name__)

    request = build_request(url)
    logger.debug("Fetching %s", url)
    try:
        response = transport.send(request, stream=True, allow_redirects=False)
    except Exception as e:  # pylint: disable=broad-except
        logger.debug("Transport error for %s: %s", url, e)
        raise FetchError(str(e)) from e

    if response.status_code != http.HTTPStatus.OK:
        response.close()
        raise BadHTTPStatusError(
            response.status_code, status_text(response.status_code)
        )

    return response
