"""Where a list of media comes from.

A source decides which operations make sense (reordering, sorting) and which
search and sort fields a list view may offer. It is a pure lookup table.
"""

from dataclasses import dataclass
from enum import Enum

from mpdkit.models.playlist import Playlist
from mpdkit.models.search import SearchField, SearchFields
from mpdkit.models.sorting import SortOption
from mpdkit.models.types import MediaType

FAVORITES_PLAYLIST = "Favorites"


class SourceKind(Enum):
    """The closed set of media sources."""

    DATABASE = "database"
    QUEUE = "queue"
    PLAYLIST = "playlist"
    FAVORITES = "favorites"


_SEARCH_FIELDS: dict[MediaType, list[SearchField]] = {
    MediaType.ALBUM: [SearchField.TITLE, SearchField.ARTIST],
    MediaType.ARTIST: [SearchField.ARTIST],
    MediaType.SONG: [
        SearchField.TITLE,
        SearchField.ARTIST,
        SearchField.GENRE,
        SearchField.COMPOSER,
        SearchField.PERFORMER,
        SearchField.CONDUCTOR,
        SearchField.ENSEMBLE,
        SearchField.MOOD,
        SearchField.COMMENT,
    ],
    MediaType.PLAYLIST: [],
}

_DEFAULT_SEARCH_FIELDS: dict[MediaType, SearchFields] = {
    MediaType.ALBUM: SearchFields.of(SearchField.TITLE, SearchField.ARTIST),
    MediaType.ARTIST: SearchFields.of(SearchField.ARTIST),
    MediaType.SONG: SearchFields.of(SearchField.TITLE, SearchField.ARTIST),
    MediaType.PLAYLIST: SearchFields.DEFAULT,
}

_SORT_OPTIONS: dict[MediaType, list[SortOption]] = {
    MediaType.ALBUM: [SortOption.ARTIST, SortOption.ALBUM, SortOption.MODIFIED],
    MediaType.ARTIST: [SortOption.ARTIST, SortOption.MODIFIED],
    MediaType.SONG: [SortOption.ALBUM, SortOption.SONG, SortOption.ARTIST, SortOption.MODIFIED],
    MediaType.PLAYLIST: [],
}


@dataclass(frozen=True, slots=True)
class Source:
    """A media source: the database, the queue, a playlist or favorites.

    Use the ``database()``, ``queue()``, ``favorites()`` and ``of()``
    constructors rather than building instances by hand.
    """

    kind: SourceKind
    stored_playlist: Playlist | None = None

    @classmethod
    def database(cls) -> "Source":
        return cls(SourceKind.DATABASE)

    @classmethod
    def queue(cls) -> "Source":
        return cls(SourceKind.QUEUE)

    @classmethod
    def favorites(cls) -> "Source":
        return cls(SourceKind.FAVORITES)

    @classmethod
    def of(cls, playlist: Playlist) -> "Source":
        """Return the source for a stored playlist."""
        return cls(SourceKind.PLAYLIST, playlist)

    @property
    def playlist(self) -> Playlist | None:
        """Return the backing playlist, if any."""
        if self.kind is SourceKind.FAVORITES:
            return Playlist(FAVORITES_PLAYLIST)
        if self.kind is SourceKind.PLAYLIST:
            return self.stored_playlist
        return None

    @property
    def is_reorderable(self) -> bool:
        """Return True if items can be moved around."""
        return self.kind is not SourceKind.DATABASE

    @property
    def is_sortable(self) -> bool:
        """Return True if items can be sorted server side."""
        return self.kind is SourceKind.DATABASE

    def available_search_fields(self, media_type: MediaType) -> list[SearchField]:
        """Return the searchable fields for ``media_type``."""
        return list(_SEARCH_FIELDS[media_type])

    def default_search_fields(self, media_type: MediaType) -> SearchFields:
        """Return the initially selected search fields for ``media_type``."""
        return _DEFAULT_SEARCH_FIELDS[media_type]

    def available_sort_options(self, media_type: MediaType) -> list[SortOption]:
        """Return the sort options offered for ``media_type``."""
        return list(_SORT_OPTIONS[media_type])
