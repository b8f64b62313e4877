"""
Content classifier — picks a rendering strategy from response headers.
"""

from __future__ import annotations

import codecs
import re
from enum import Enum
from typing import Mapping


class ContentKind(str, Enum):
    STRUCTURED = "structured"
    TEXTUAL = "textual"
    IMAGE = "image"
    OPAQUE = "opaque"


_STRUCTURED_RE = re.compile(r"^(application/json|text/json|application/[^/]*\+json)$")

# Same family playwright treats as textual
_TEXTUAL_RE = re.compile(
    r"^(text/.*"
    r"|application/(json|(x-)?javascript|xml.*|ecmascript|graphql|x-www-form-urlencoded)"
    r"|image/svg(\+xml)?"
    r"|application/.*\+json"
    r"|application/.*\+xml)$"
)


def header(headers: Mapping[str, str], name: str) -> str:
    """Case-insensitive header lookup; '' when absent."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value or ""
    return ""


def content_type(headers: Mapping[str, str]) -> str:
    return header(headers, "content-type").strip()


def media_type(raw: str) -> str:
    """Lowercased media type with parameters stripped."""
    return raw.split(";", 1)[0].strip().lower()


def charset(headers: Mapping[str, str], default: str = "utf-8") -> str:
    """Declared charset if Python knows the codec, else the default."""
    for param in content_type(headers).split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            name = value.strip().strip('"').strip("'")
            try:
                return codecs.lookup(name).name
            except LookupError:
                return default
    return default


def is_structured(mime: str) -> bool:
    return bool(_STRUCTURED_RE.match(media_type(mime)))


def is_textual(mime: str) -> bool:
    return bool(_TEXTUAL_RE.match(media_type(mime)))


def classify(headers: Mapping[str, str]) -> ContentKind:
    """
    Map the content-type header to a ContentKind.

    Textual is checked before Image, so SVG renders as text. A missing or
    empty content type is OPAQUE.
    """
    raw = content_type(headers)
    if not raw:
        return ContentKind.OPAQUE
    if is_structured(raw):
        return ContentKind.STRUCTURED
    if is_textual(raw):
        return ContentKind.TEXTUAL
    if raw.lower().startswith("image/"):
        return ContentKind.IMAGE
    return ContentKind.OPAQUE
