"""Resolve user input (URI, web link, or free text) to a playlist/album reference.

Accepted shapes::

    spotify:playlist:6fCOzHcpq7P25OZC8Mikxr
    spotify:user:someone:playlist:6fCOzHcpq7P25OZC8Mikxr
    https://open.spotify.com/album/7yQ3jgoi8fLV4RnD83cqzo?si=xyz
    https://open.spotify.com/intl-de/album/7yQ3jgoi8fLV4RnD83cqzo
    album: 7yQ3jgoi8fLV4RnD83cqzo

Ids are opaque and case-sensitive; only the kind token is matched
case-insensitively.
"""
import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from tracklister.models.reference import ReferenceKind, ResolvedReference

logger = logging.getLogger(__name__)

URI_SCHEME = "spotify"
WEB_HOST = "open.spotify.com"

_FREE_TEXT_REGEX = re.compile(r"\b(album|playlist)\b\s*:\s*([A-Za-z0-9]+)(?=\s|$)", re.IGNORECASE)
_KIND_WORD_REGEX = re.compile(r"album|playlist", re.IGNORECASE)


def _from_segments(segments: List[str]) -> Optional[Tuple[str, str]]:
    """(kind token, id) from ``[kind, id, ...]`` or the legacy ``[user, name, kind, id]``."""
    if len(segments) >= 4 and segments[0].lower() == "user":
        return segments[2], segments[3]
    if len(segments) >= 2:
        return segments[0], segments[1]
    return None


def _parse_uri(raw: str) -> Optional[Tuple[str, str]]:
    parsed = urlparse(raw)
    if parsed.scheme != URI_SCHEME:
        return None
    # spotify:<kind>:<id> has no netloc; everything after the scheme lands in path
    return _from_segments(parsed.path.split(":"))


def _parse_web_link(raw: str) -> Optional[Tuple[str, str]]:
    parsed = urlparse(raw)
    if parsed.scheme != "https" or (parsed.hostname or "").lower() != WEB_HOST:
        return None
    segments = parsed.path.split("/")
    # localized links: /intl-de/album/<id>
    if len(segments) > 1 and segments[1].lower().startswith("intl-"):
        segments = segments[:1] + segments[2:]
    if len(segments) < 3:
        return None
    return _from_segments(segments[1:])


def _parse_free_text(raw: str) -> Tuple[str, str]:
    """Best-effort: a kind word, plus an id only when written as ``kind: id``."""
    match = _FREE_TEXT_REGEX.search(raw)
    if match:
        return match.group(1), match.group(2)
    word = _KIND_WORD_REGEX.search(raw)
    return (word.group(0) if word else ""), ""


def resolve(raw: str) -> ResolvedReference:
    """Parse ``raw`` into a reference. Never raises; check ``is_blank`` / ``is_valid``."""
    text = (raw or "").strip()
    if not text:
        return ResolvedReference(ReferenceKind.UNKNOWN, "", "")

    parts: Optional[Tuple[str, str]] = None
    try:
        parts = _parse_uri(text) or _parse_web_link(text)
    except ValueError as e:
        logger.debug("url parsing failed for %r: %s", text, e)
    if parts is None:
        parts = _parse_free_text(text)

    kind_token, id_ = parts
    reference = ResolvedReference(ReferenceKind.from_token(kind_token), id_.strip(), text)
    if not reference.is_valid:
        logger.debug("unresolvable reference %r", text)
    return reference
