import re
from urllib.parse import urlsplit

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

# RFC 3986 unreserved + reserved characters, plus '%' for escapes
_URI_CHARS = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*$")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_TEMPLATE_BRACES = re.compile(r"[{}]")

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def is_well_formed_uri(value: str) -> bool:
    """
    Check that a string is a well-formed absolute or relative URI.

    Used for resolved paths and URI templates, which are usually relative.
    Mirrors a strict reading of RFC 3986: no whitespace, no characters outside
    the reserved/unreserved sets and no dangling percent escapes.
    """
    if not value or not _URI_CHARS.match(value) or _BAD_ESCAPE.search(value):
        return False

    try:
        parts = urlsplit(value)
    except ValueError:
        return False

    if parts.scheme and not parts.netloc and not parts.path:
        return False
    return True


def is_absolute_http_url(value: str) -> bool:
    # pydantic escapes whitespace instead of rejecting it
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError:
        return False
    return True


def strip_template_braces(template: str) -> str:
    return _TEMPLATE_BRACES.sub("", template)
