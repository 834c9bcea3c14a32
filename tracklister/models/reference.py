"""Catalog references: the (kind, id) pair a user's input resolves to."""
from dataclasses import dataclass
from enum import Enum


class ReferenceKind(str, Enum):
    PLAYLIST = "playlist"
    ALBUM = "album"
    UNKNOWN = "unknown"

    @classmethod
    def from_token(cls, token: str) -> "ReferenceKind":
        """Map a kind token ("Album", "playlist", ...) to a kind; anything else is UNKNOWN."""
        token = (token or "").strip().lower()
        if token == "playlist":
            return cls.PLAYLIST
        if token == "album":
            return cls.ALBUM
        return cls.UNKNOWN


@dataclass(frozen=True)
class ResolvedReference:
    kind: ReferenceKind
    id: str
    raw: str = ""

    @property
    def is_blank(self) -> bool:
        """No search submitted yet."""
        return not self.raw

    @property
    def is_valid(self) -> bool:
        return self.kind is not ReferenceKind.UNKNOWN and bool(self.id)

    @property
    def uri(self) -> str | None:
        if not self.is_valid:
            return None
        return f"spotify:{self.kind.value}:{self.id}"
