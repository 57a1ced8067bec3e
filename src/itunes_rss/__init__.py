"""
iTunes RSS package - Finds the underlying RSS feed of an iTunes podcast
page.

Pages are fetched with an iTunes User-Agent. HTML pages carry the feed URL
on their subscribe button; plist pages redirect to another iTunes URL,
which is followed up to a fixed number of times.
"""

from .errors import (
    BadContentTypeError,
    BadHTTPStatusError,
    BadRequestError,
    FetchError,
    NoFeedError,
    ResolveError,
    TooManyRedirectsError,
    UnexpectedContentTypeError,
)
from .models import MAX_REDIRECTS
from .resolver import FeedResolver, resolve, resolve_with_transport
from .transport import SessionTransport, Transport

__all__ = [
    "resolve",
    "resolve_with_transport",
    "FeedResolver",
    "Transport",
    "SessionTransport",
    "MAX_REDIRECTS",
    "ResolveError",
    "BadRequestError",
    "FetchError",
    "BadHTTPStatusError",
    "BadContentTypeError",
    "UnexpectedContentTypeError",
    "TooManyRedirectsError",
    "NoFeedError",
]
