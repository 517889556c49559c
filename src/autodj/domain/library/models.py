"""
Music library domain models.

Contains data structures for representing music tracks.
"""

from typing import NamedTuple, Optional


class Track(NamedTuple):
    """Represents a music track available to the AutoDJ.

    The id is the stable song identifier used for repeat detection; the
    file_path is what the playout engine is told to play.
    """
    id: str
    file_path: str
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[float] = None  # in seconds

    @property
    def display_text(self) -> str:
        """'Artist - Title', falling back to the file path."""
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.file_path
