"""Player status and database statistics records."""

from dataclasses import dataclass

from mpdkit.models.media import Song
from mpdkit.models.types import PlayerState


@dataclass(frozen=True, slots=True)
class Status:
    """Combined result of ``status`` and ``currentsong``.

    Fields are None when the server did not report them.

    Attributes:
        state: Play, pause or stop.
        is_consume: Consume mode enabled.
        is_random: Random mode enabled.
        is_repeat: Repeat mode enabled.
        elapsed: Elapsed time of the current song in seconds.
        volume: Mixer volume (0-100).
        playlist_version: Version of the queue, bumped on every change.
        playlist_length: Number of songs in the queue.
        song: The current song.
    """

    state: PlayerState | None = None
    is_consume: bool | None = None
    is_random: bool | None = None
    is_repeat: bool | None = None
    elapsed: float | None = None
    volume: int | None = None
    playlist_version: int | None = None
    playlist_length: int | None = None
    song: Song | None = None

    @property
    def is_playing(self) -> bool:
        """Return True if currently playing."""
        return self.state is PlayerState.PLAY

    @property
    def progress(self) -> float:
        """Return playback progress as a fraction (0.0 to 1.0)."""
        if self.song is None or self.elapsed is None or self.song.duration <= 0:
            return 0.0
        return min(1.0, self.elapsed / self.song.duration)


@dataclass(frozen=True, slots=True)
class Stats:
    """Database and daemon statistics from ``stats``."""

    artists: int | None = None
    albums: int | None = None
    songs: int | None = None
    uptime: int | None = None
    playtime: int | None = None
    update: int | None = None
