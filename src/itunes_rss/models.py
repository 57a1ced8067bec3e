"""
Data models for a single resolution call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .errors import TooManyRedirectsError

# Number of plist redirects followed before giving up.
MAX_REDIRECTS = 3


@dataclass(frozen=True)
class ResolutionRequest:
    """A URL to fetch and the number of redirects that led to it."""

    url: str
    redirects: int = 0

    def __post_init__(self) -> None:
        if self.redirects < 0 or self.redirects > MAX_REDIRECTS:
            raise ValueError(
                f"redirects must be between 0 and {MAX_REDIRECTS}"
            )

    def follow(self, url: str) -> "ResolutionRequest":
        """Create the request for the next hop of a redirect chain."""
        redirects = self.redirects + 1
        if redirects > MAX_REDIRECTS:
            raise TooManyRedirectsError()
        return ResolutionRequest(url=url, redirects=redirects)


@dataclass(frozen=True)
class MediaType:
    """Parsed Content-Type header value."""

    media_type: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def charset(self) -> Optional[str]:
        """Get the charset parameter, if one was given."""
        return self.params.get("charset")
