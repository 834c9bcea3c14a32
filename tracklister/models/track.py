"""Track rows: the kind-independent shape rendered on the search page."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TrackRow:
    """One flattened track from a playlist or album response."""
    title: str
    artists: Tuple[str, ...]
    duration_ms: int
    track_number: int
    disc_number: int
    explicit: bool
    track_id: str | None
    url: str | None

    @property
    def artist_names(self) -> str:
        return ", ".join(self.artists)

    @property
    def duration(self) -> str:
        seconds = max(0, self.duration_ms) // 1000
        return f"{seconds // 60}:{seconds % 60:02d}"
