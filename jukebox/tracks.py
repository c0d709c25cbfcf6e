"""In-memory track list backing the leaderboard."""

import logging
from typing import Iterable

from fastapi import Request
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Track(BaseModel):
    """A song on the leaderboard."""
    id: int
    title: str
    artist: str
    votes: int = 0


SAMPLE_TRACKS = (
    Track(id=1, title="Sample Song 1", artist="Artist A", votes=5),
    Track(id=2, title="Sample Song 2", artist="Artist B", votes=3),
    Track(id=3, title="Sample Song 3", artist="Artist C", votes=7),
)


class TrackNotFound(Exception):
    """Raised when no track has the requested id."""

    def __init__(self, track_id: int | str):
        self.track_id = track_id
        super().__init__(f"Track {track_id} not found")


def _clean(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{field} is required")
    return value


class TrackStore:
    """
    Mutable track list.

    Ids are allocated from a counter and never reused, even after deletes.
    """

    def __init__(self, tracks: Iterable[Track] = ()):
        self._tracks = [track.model_copy() for track in tracks]
        self._next_id = max((t.id for t in self._tracks), default=0) + 1

    @classmethod
    def seeded(cls) -> "TrackStore":
        return cls(SAMPLE_TRACKS)

    def __len__(self) -> int:
        return len(self._tracks)

    def leaderboard(self) -> list[Track]:
        """Tracks ordered by votes, most voted first; ties keep id order."""
        return sorted(self._tracks, key=lambda t: (-t.votes, t.id))

    def get(self, track_id: int) -> Track:
        for track in self._tracks:
            if track.id == track_id:
                return track
        raise TrackNotFound(track_id)

    def add(self, title: str, artist: str) -> Track:
        track = Track(
            id=self._next_id,
            title=_clean(title, "Title"),
            artist=_clean(artist, "Artist"),
        )
        self._next_id += 1
        self._tracks.append(track)
        logger.info(f"Added track {track.id}: {track.title} by {track.artist}")
        return track

    def update(self, track_id: int, title: str, artist: str) -> Track:
        track = self.get(track_id)
        title, artist = _clean(title, "Title"), _clean(artist, "Artist")
        track.title = title
        track.artist = artist
        return track

    def delete(self, track_id: int) -> Track:
        track = self.get(track_id)
        self._tracks.remove(track)
        logger.info(f"Deleted track {track_id}")
        return track

    def vote(self, track_id: int) -> Track:
        track = self.get(track_id)
        track.votes += 1
        return track


def get_track_store(request: Request) -> TrackStore:
    """Get the process-wide track store."""
    return request.app.state.tracks
