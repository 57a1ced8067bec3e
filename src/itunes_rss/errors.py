"""
Exceptions raised while resolving a directory page to its feed.

Every public error derives from ResolveError. EndOfInput is internal: the
extractors raise it when a document ends without a match and the resolver
turns it into NoFeedError before it reaches a caller.
"""


class ResolveError(Exception):
    """Base exception for feed resolution errors."""


class BadRequestError(ResolveError):
    """Raised when the target URL cannot be turned into a request."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class FetchError(ResolveError):
    """Raised when the transport fails to deliver a response."""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"fetch error: {cause}")


class BadHTTPStatusError(ResolveError):
    """Raised when a response comes back with a status other than 200."""

    def __init__(self, status_code: int, status_text: str):
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(f"bad HTTP Status: {status_code} {status_text}")


class BadContentTypeError(ResolveError):
    """Raised when the Content-Type header is not a valid media type."""

    def __init__(self, content_type: str, cause: str):
        self.content_type = content_type
        self.cause = cause
        super().__init__(f'bad Content Type "{content_type}": {cause}')


class UnexpectedContentTypeError(ResolveError):
    """Raised for media types other than HTML or XML."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f'unexpected Content Type "{content_type}"')


class TooManyRedirectsError(ResolveError):
    """Raised when a redirect chain is longer than allowed."""

    def __init__(self) -> None:
        super().__init__("too many redirects")


class NoFeedError(ResolveError):
    """Raised when no feed URL could be found.

    This usually means the page is not a podcast page (an iTunes U page or
    a page for some other kind of media), or that the podcast is no longer
    available.
    """

    def __init__(self) -> None:
        super().__init__("no feed found")


class EndOfInput(Exception):
    """A document ended without containing what the extractor looked for."""
