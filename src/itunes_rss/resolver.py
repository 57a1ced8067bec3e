"""
Resolution of iTunes podcast pages to their RSS feeds.
"""

import logging
from contextlib import closing
from typing import Callable, Optional, TypeVar

import requests

from .errors import (
    BadContentTypeError,
    EndOfInput,
    FetchError,
    NoFeedError,
    UnexpectedContentTypeError,
)
from .fetcher import fetch
from .mediatype import MediaTypeError, parse_media_type
from .models import MediaType, ResolutionRequest
from .parser import find_feed_url, find_redirect_url, split_lines
from .transport import Transport, default_transport

CHUNK_SIZE = 8192

HTML_TYPES = frozenset(["text/html"])
XML_TYPES = frozenset(["text/xml", "application/xml"])

T = TypeVar("T")


def _read_body(extract: Callable[..., T], *args: object) -> T:
    """Run an extractor, reporting body read failures as FetchError."""
    try:
        return extract(*args)
    except requests.exceptions.RequestException as e:
        raise FetchError(str(e)) from e


def _parse_content_type(content_type: str) -> MediaType:
    try:
        return parse_media_type(content_type)
    except MediaTypeError as e:
        raise BadContentTypeError(content_type, str(e)) from e


class FeedResolver:
    """
    Finds the RSS feed behind an iTunes podcast URL, following plist
    redirects along the way.

    A resolver keeps no state between calls other than its transport, so
    one instance can be shared if the transport can.
    """

    def __init__(self, transport: Optional[Transport] = None):
        """Initialize with a transport, or a new default one."""
        self.logger = logging.getLogger(__name__)
        self._owns_transport = transport is None
        self.transport: Transport = (
            default_transport() if transport is None else transport
        )

    def __enter__(self) -> "FeedResolver":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this resolver created it."""
        if self._owns_transport:
            close = getattr(self.transport, "close", None)
            if close is not None:
                close()

    def resolve(self, url: str) -> str:
        """Get the RSS feed URL for an iTunes page URL.

        Raises:
            NoFeedError: If no feed URL was found. This usually means
                the URL is not a podcast page.
            TooManyRedirectsError: If more than MAX_REDIRECTS plist
                redirects were followed.
            ResolveError: For request, transport, status and content
                type errors.
        """
        self.logger.info("Resolving RSS feed for %s", url)
        try:
            feed_url = self._resolve(ResolutionRequest(url=url))
        except EndOfInput:
            self.logger.info("No feed found for %s", url)
            raise NoFeedError() from None

        self.logger.info("Found RSS feed %s for %s", feed_url, url)
        return feed_url

    def _resolve(self, request: ResolutionRequest) -> str:
        while True:
            with closing(fetch(self.transport, request.url)) as response:
                content_type = response.headers.get("Content-Type", "")
                media = _parse_content_type(content_type)
                self.logger.debug(
                    "Got %s from %s (redirects so far: %d)",
                    media.media_type,
                    request.url,
                    request.redirects,
                )

                if media.media_type in HTML_TYPES:
                    return _read_body(
                        find_feed_url,
                        response.iter_content(CHUNK_SIZE),
                        media.charset,
                    )

                if media.media_type not in XML_TYPES:
                    raise UnexpectedContentTypeError(content_type)

                lines = split_lines(response.iter_content(CHUNK_SIZE))
                target = _read_body(find_redirect_url, lines)

            self.logger.debug("Following plist redirect to %s", target)
            request = request.follow(target)


def resolve_with_transport(transport: Optional[Transport], url: str) -> str:
    """Get the RSS feed URL for an iTunes page URL using transport.

    A None transport is replaced by a default one, closed afterwards.
    """
    with FeedResolver(transport) as resolver:
        return resolver.resolve(url)


def resolve(url: str) -> str:
    """Get the RSS feed URL for an iTunes page URL.

    Uses a default requests-based transport.
    """
    with FeedResolver() as resolver:
        return resolver.resolve(url)
