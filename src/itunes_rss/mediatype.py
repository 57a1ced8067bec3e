"""
Content-Type header parsing.

Follows the token grammar of RFC 2045 and RFC 2616. Only enough of it is
implemented to find the media type and its parameters; RFC 2231 parameter
continuations are not decoded.
"""

from typing import Dict, Tuple

from .models import MediaType

# RFC 2045 tspecials
_TSPECIALS = frozenset('()<>@,;:\\"/[]?=')


class MediaTypeError(ValueError):
    """Raised when a header value is not a valid media type."""


def _is_token_char(char: str) -> bool:
    return (
        " " < char < "\x7f" and char not in _TSPECIALS
    )


def _consume_token(value: str) -> Tuple[str, str]:
    """Split a leading token off value. Returns (token, rest)."""
    end = 0
    while end < len(value) and _is_token_char(value[end]):
        end += 1
    return value[:end], value[end:]


def _consume_value(value: str) -> Tuple[str, str]:
    """Split a leading token or quoted string off value."""
    if not value.startswith('"'):
        return _consume_token(value)

    chars = []
    i = 1
    while i < len(value):
        char = value[i]
        if char == '"':
            return "".join(chars), value[i + 1:]
        if char == "\\" and i + 1 < len(value):
            i += 1
            char = value[i]
        elif char in "\r\n":
            break
        chars.append(char)
        i += 1

    # Unterminated quoted string
    return "", value


def _consume_param(value: str) -> Tuple[str, str, str]:
    """Split a leading "; key=value" pair off value.

    Returns (key, value, rest). key is empty when value does not start
    with a well-formed parameter, in which case rest is value unchanged.
    """
    rest = value.lstrip()
    if not rest.startswith(";"):
        return "", "", value

    rest = rest[1:].lstrip()
    key, rest = _consume_token(rest)
    if not key:
        return "", "", value

    rest = rest.lstrip()
    if not rest.startswith("="):
        return "", "", value

    rest = rest[1:].lstrip()
    param_value, remainder = _consume_value(rest)
    if not param_value and remainder == rest:
        return "", "", value

    return key.lower(), param_value, remainder


def _check_media_type(media_type: str) -> None:
    main_type, rest = _consume_token(media_type)
    if not main_type:
        raise MediaTypeError("no media type")
    if not rest:
        # A lone token is accepted, as for Content-Disposition values.
        return
    if not rest.startswith("/"):
        raise MediaTypeError("expected slash after first token")

    subtype, rest = _consume_token(rest[1:])
    if not subtype:
        raise MediaTypeError("expected token after slash")
    if rest:
        raise MediaTypeError("unexpected content after media subtype")


def parse_media_type(value: str) -> MediaType:
    """Parse a Content-Type header value.

    Args:
        value: Raw header value, e.g. "text/html; charset=utf-8"

    Returns:
        MediaType with a lower-cased media type and parameter names.

    Raises:
        MediaTypeError: If the value is not a valid media type.
    """
    base = value.split(";", 1)[0]
    media_type = base.lower().strip()
    _check_media_type(media_type)

    params: Dict[str, str] = {}
    rest = value[len(base):]
    while rest:
        rest = rest.lstrip()
        if not rest:
            break

        key, param_value, remainder = _consume_param(rest)
        if not key:
            if rest.strip() == ";":
                # Trailing semicolon
                break
            raise MediaTypeError("invalid media parameter")
        if key in params:
            raise MediaTypeError("duplicate parameter name")

        params[key] = param_value
        rest = remainder

    return MediaType(media_type=media_type, params=params)
