"""Stored playlist model."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Playlist:
    """A stored playlist, identified by its name."""

    name: str

    @property
    def id(self) -> str:
        """Return the playlist name."""
        return self.name
