"""Media entities: artists, albums and songs.

All three are immutable and compare by identifier only. Two snapshots of the
same file with different tags are the same song.
"""

from dataclasses import dataclass

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"
UNKNOWN_TITLE = "Unknown Title"


class Mediable:
    """Identity behaviour shared by every media entity.

    Subclasses provide ``id`` and ``file``; equality and hashing use ``id``
    alone.
    """

    __slots__ = ()

    @property
    def id(self) -> str:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True, eq=False)
class Artist(Mediable):
    """An artist in the MPD database.

    Attributes:
        file: File the artist was read from.
        name: Display name, also the identifier.
        name_sort: Sort name (``albumartistsort``), often a romanized form.
    """

    file: str
    name: str
    name_sort: str | None = None

    @property
    def id(self) -> str:
        """Return the artist name."""
        return self.name


@dataclass(frozen=True, slots=True, eq=False)
class Album(Mediable):
    """An album, identified by its artist and title.

    Attributes:
        file: File the album was read from.
        title: Album title.
        artist: The owning (album) artist.
        title_sort: Sort title (``albumsort``).
    """

    file: str
    title: str
    artist: Artist
    title_sort: str | None = None

    @property
    def id(self) -> str:
        """Return ``"<artist> - <title>"``."""
        return f"{self.artist.name} - {self.title}"

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Song(Mediable):
    """A song in the database, the queue or a stored playlist.

    Attributes:
        file: Path relative to MPD's music directory, the identifier.
        album: The album the song belongs to.
        identifier: Queue-assigned song id, if the song is queued.
        position: Position in the queue or playlist.
        artist: Track artist.
        artist_sort: Track artist sort name.
        title: Track title.
        title_sort: Track title sort name.
        duration: Length in seconds.
        disc: Disc number.
        track: Track number within the disc.
    """

    file: str
    album: Album
    identifier: int | None = None
    position: int | None = None
    artist: str = UNKNOWN_ARTIST
    artist_sort: str | None = None
    title: str = UNKNOWN_TITLE
    title_sort: str | None = None
    duration: float = 0.0
    disc: int = 1
    track: int = 1
    genre: str | None = None
    composer: str | None = None
    performer: str | None = None
    conductor: str | None = None
    ensemble: str | None = None
    mood: str | None = None
    comment: str | None = None

    @property
    def id(self) -> str:
        """Return the file path."""
        return self.file

    def __str__(self) -> str:
        return f"{self.artist} - {self.title}"

    def is_in(self, album: Album) -> bool:
        """Return True if the song belongs to ``album``."""
        return self.album == album

    def is_by(self, artist: Artist) -> bool:
        """Return True if the song's album artist is ``artist``."""
        return self.album.artist == artist


Media = Song | Album | Artist
