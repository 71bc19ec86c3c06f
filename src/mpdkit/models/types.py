"""Small enumerations shared across the MPD client.

These mirror fixed vocabularies of the MPD protocol: subsystem names reported
by ``idle``, the ``state`` field of ``status``, and the commands used to fetch
cover art.
"""

from enum import Enum


class MediaType(Enum):
    """Kinds of media the parser and the list views deal with."""

    ALBUM = "album"
    ARTIST = "artist"
    SONG = "song"
    PLAYLIST = "playlist"


class PlayerState(Enum):
    """Playback state as reported by the ``state`` status field."""

    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"


class IdleEvent(Enum):
    """Subsystems MPD reports through the ``idle`` command.

    The values are the raw subsystem names used on the wire.
    """

    DATABASE = "database"
    PLAYLISTS = "stored_playlist"
    QUEUE = "playlist"
    OPTIONS = "options"
    PLAYER = "player"
    MIXER = "mixer"
    OUTPUT = "output"


class ArtworkGetter(Enum):
    """Strategy for retrieving cover art from the server.

    ``albumart`` reads cover files from the music directory, ``readpicture``
    reads pictures embedded in the song's tags.
    """

    LIBRARY = "library"
    METADATA = "metadata"
    LIBRARY_THEN_METADATA = "library_then_metadata"
    METADATA_THEN_LIBRARY = "metadata_then_library"

    @property
    def commands(self) -> list[str]:
        """Return the MPD commands to try, in order."""
        return _ARTWORK_COMMANDS[self]


_ARTWORK_COMMANDS: dict[ArtworkGetter, list[str]] = {
    ArtworkGetter.LIBRARY: ["albumart"],
    ArtworkGetter.METADATA: ["readpicture"],
    ArtworkGetter.LIBRARY_THEN_METADATA: ["albumart", "readpicture"],
    ArtworkGetter.METADATA_THEN_LIBRARY: ["readpicture", "albumart"],
}
