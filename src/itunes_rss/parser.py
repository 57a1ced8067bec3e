"""
Feed URL extraction from iTunes pages and plist redirects.

iTunes serves two kinds of document for a podcast URL. An HTML page has a
subscribe button carrying the feed URL in its feed-url attribute. A plist
(served as XML) may instead contain a Goto action whose url key points to
another iTunes URL, which has to be fetched in turn.

Both extractors read their input incrementally and stop as soon as they
find a match. When the input runs out first they raise EndOfInput.
"""

import codecs
import logging
import re
from html import unescape
from html.parser import HTMLParser
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import EndOfInput

DEFAULT_ENCODING = "utf-8"

_FEED_TAG = "button"
_FEED_ATTR = "feed-url"

# The line before a redirect URL
_GOTO_MARKER = b"<key>kind</key><string>Goto</string>"

# Matches <key>url</key><string>path/to/itunes-page</string>
_GOTO_URL = re.compile(rb"<key>url</key><string>(\S+)</string>")


class FeedButtonParser(HTMLParser):
    """HTML tokenizer that records the first feed-url button attribute."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.feed_url: Optional[str] = None

    def handle_starttag(
        self, tag: str, attrs: List[Tuple[str, Optional[str]]]
    ) -> None:
        """Check button tags for a non-empty feed-url attribute."""
        if self.feed_url is not None or tag != _FEED_TAG:
            return

        for name, value in attrs:
            if name == _FEED_ATTR and value:
                self.feed_url = value
                return

    def handle_startendtag(
        self, tag: str, attrs: List[Tuple[str, Optional[str]]]
    ) -> None:
        """Ignore self-closing tags, they are not start tags."""


def _incremental_decoder(encoding: Optional[str]) -> codecs.IncrementalDecoder:
    """Get a decoder for encoding, falling back to UTF-8."""
    try:
        factory = codecs.getincrementaldecoder(encoding or DEFAULT_ENCODING)
    except LookupError:
        logger = logging.getLogger(__name__)
        logger.warning(
            "Unknown charset %r, decoding as %s", encoding, DEFAULT_ENCODING
        )
        factory = codecs.getincrementaldecoder(DEFAULT_ENCODING)
    return factory(errors="replace")


def find_feed_url(
    chunks: Iterable[bytes], encoding: Optional[str] = None
) -> str:
    """Find the feed URL in an iTunes podcast page.

    Args:
        chunks: The HTML document as a stream of byte chunks
        encoding: Character encoding of the document, UTF-8 if None

    Returns:
        The value of the first non-empty feed-url attribute on a
        button start tag.

    Raises:
        EndOfInput: If the document has no such attribute.
    """
    decoder = _incremental_decoder(encoding)
    parser = FeedButtonParser()

    for chunk in chunks:
        parser.feed(decoder.decode(chunk))
        if parser.feed_url:
            return parser.feed_url

    parser.feed(decoder.decode(b"", final=True))
    parser.close()
    if parser.feed_url:
        return parser.feed_url

    raise EndOfInput()


def split_lines(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Split a stream of byte chunks into lines.

    Lines end at b"\\n" and lose one trailing b"\\r", wherever the chunk
    boundaries fall. A final line without a newline is kept unless empty.
    """
    pending = b""
    for chunk in chunks:
        pending += chunk
        *lines, pending = pending.split(b"\n")
        for line in lines:
            yield line[:-1] if line.endswith(b"\r") else line

    if pending:
        yield pending[:-1] if pending.endswith(b"\r") else pending


def find_redirect_url(lines: Iterable[bytes]) -> str:
    """Find the redirect URL in an iTunes plist.

    Looks for a Goto action and returns the url on the line after it,
    e.g. https://itunes.apple.com/WebObjects/DZR.woa/wa/viewPodcast?urlDesc=&amp;id=1234567890
    comes back as https://itunes.apple.com/WebObjects/DZR.woa/wa/viewPodcast?urlDesc=&id=1234567890

    Raises:
        EndOfInput: If the plist has no Goto action with a url.
    """
    line_iter = iter(lines)

    for line in line_iter:
        while line == _GOTO_MARKER:
            next_line = next(line_iter, None)
            if next_line is None:
                raise EndOfInput()

            match = _GOTO_URL.fullmatch(next_line)
            if match:
                return unescape(match.group(1).decode(DEFAULT_ENCODING, "replace"))

            line = next_line

    raise EndOfInput()
