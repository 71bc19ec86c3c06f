"""Async MPD client base.

``MpdClient`` wraps one :class:`~mpdkit.api.connection.Connection` and offers
the read-only queries every connection mode may issue. The command, idle and
artwork clients build on it.

Example:
    async with CommandClient(Server("192.168.1.100")) as client:
        status = await client.get_status()
        if status.is_playing and status.song:
            print(f"Playing: {status.song.title} by {status.song.artist}")
"""

import logging
from typing import Self, cast

from mpdkit.api.codec import escape, filter_clause
from mpdkit.api.connection import COMMAND_MODE, Connection, ConnectionMode, StateObserver
from mpdkit.api.errors import UnsupportedOperationError
from mpdkit.api.protocol import (
    parse_media_response_array,
    parse_outputs,
    parse_playlists,
    parse_stats,
    parse_status,
)
from mpdkit.core.config import ConnectionConfiguration
from mpdkit.models.media import Album, Artist, Song
from mpdkit.models.output import Output
from mpdkit.models.playlist import Playlist
from mpdkit.models.server import Server
from mpdkit.models.sorting import SortDescriptor
from mpdkit.models.source import Source, SourceKind
from mpdkit.models.status import Stats, Status
from mpdkit.models.types import MediaType

logger = logging.getLogger(__name__)


def album_filter(album: Album) -> str:
    """Return a filter matching the songs of ``album`` by title and album artist."""
    title = filter_clause("album", album.title, quote=False)
    artist = filter_clause("albumartist", album.artist.name, quote=False)
    return f'"({title} AND {artist})"'


class MpdClient:
    """Shared MPD queries on top of one connection.

    Subclasses set ``mode`` to choose the connection profile.
    """

    mode: ConnectionMode = COMMAND_MODE

    def __init__(
        self,
        server: Server | None = None,
        *,
        configuration: ConnectionConfiguration | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            server: Server to talk to; the configured one when omitted.
            configuration: Shared configuration, the process-wide default
                when omitted.
        """
        self._connection = Connection(server, self.mode, configuration)

    @property
    def connection(self) -> Connection:
        """Return the underlying connection."""
        return self._connection

    @property
    def is_connected(self) -> bool:
        """Return True if connected to MPD."""
        return self._connection.is_connected

    @property
    def version(self) -> str:
        """Return MPD protocol version from initial handshake."""
        return self._connection.version

    async def connect(self, on_state_change: StateObserver | None = None) -> None:
        """Connect to the server. See :meth:`Connection.connect`."""
        await self._connection.connect(on_state_change)

    async def disconnect(self) -> None:
        """Disconnect from the server."""
        await self._connection.disconnect()

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        """Async context manager exit."""
        await self.disconnect()

    async def _run(self, *commands: str) -> list[str]:
        return await self._connection.run(list(commands))

    async def ping(self) -> None:
        """Ping MPD server to check connection."""
        await self._run("ping")

    # -------------------------------------------------------------------------
    # Status & Info
    # -------------------------------------------------------------------------

    async def get_status(self) -> Status:
        """Get player status and the current song in one round trip."""
        lines = await self._run("status", "currentsong")
        return parse_status(lines)

    async def get_stats(self) -> Stats:
        """Get database statistics."""
        lines = await self._run("stats")
        return parse_stats(lines)

    async def get_playlists(self) -> list[Playlist]:
        """Get stored playlists."""
        lines = await self._run("listplaylists")
        return parse_playlists(lines)

    async def get_outputs(self) -> list[Output]:
        """Get audio outputs."""
        lines = await self._run("outputs")
        return parse_outputs(lines)

    # -------------------------------------------------------------------------
    # Library & Queue
    # -------------------------------------------------------------------------

    async def get_albums(self, sort: SortDescriptor = SortDescriptor.DEFAULT) -> list[Album]:
        """Get every album in the database.

        Albums are found through their first track, so each album appears
        once even on multi-disc releases.
        """
        lines = await self._run(f"find {filter_clause('track', '1')} sort {sort.argument}")
        albums = cast(list[Album], parse_media_response_array(lines, MediaType.ALBUM))
        return list(dict.fromkeys(albums))

    async def get_artist_albums(
        self, artist: Artist, source: Source | None = None
    ) -> list[Album]:
        """Get the albums of ``artist`` from the database or the queue.

        Raises:
            UnsupportedOperationError: For playlist sources.
        """
        source = source or Source.database()
        albumartist = filter_clause("albumartist", artist.name)
        match source.kind:
            case SourceKind.DATABASE:
                lines = await self._run(f"find {albumartist} sort date")
            case SourceKind.QUEUE:
                lines = await self._run(f"playlistfind {albumartist} sort date")
            case _:
                raise UnsupportedOperationError(
                    "Only database and queue sources are supported for retrieving albums by artist"
                )

        albums = cast(list[Album], parse_media_response_array(lines, MediaType.ALBUM))
        return list(dict.fromkeys(albums))

    async def get_artists(self, sort: SortDescriptor = SortDescriptor.DEFAULT) -> list[Artist]:
        """Get every album artist, in album order."""
        albums = await self.get_albums(sort)
        return list(dict.fromkeys(album.artist for album in albums))

    async def get_songs(
        self, source: Source, sort: SortDescriptor = SortDescriptor.DEFAULT
    ) -> list[Song]:
        """Get the songs of a source.

        Songs without a ``pos`` field get their index in the response as
        position. ``sort`` only applies to the database.
        """
        match source.kind:
            case SourceKind.DATABASE:
                title = filter_clause("title", "", comparator="!=")
                lines = await self._run(f"find {title} sort {sort.argument}")
            case SourceKind.QUEUE:
                lines = await self._run("playlistinfo")
            case _:
                playlist = source.playlist
                if playlist is None:
                    raise UnsupportedOperationError("Playlist source has no associated playlist")
                lines = await self._run(f"listplaylistinfo {escape(playlist.name)}")

        return cast(list[Song], parse_media_response_array(lines, MediaType.SONG, index=True))

    async def get_album_songs(self, album: Album, source: Source | None = None) -> list[Song]:
        """Get the songs of ``album`` from the database or the queue.

        Raises:
            UnsupportedOperationError: For playlist sources.
        """
        source = source or Source.database()
        match source.kind:
            case SourceKind.DATABASE:
                lines = await self._run(f"find {album_filter(album)} sort track")
            case SourceKind.QUEUE:
                lines = await self._run(f"playlistfind {album_filter(album)}")
            case _:
                raise UnsupportedOperationError(
                    "Only database and queue sources are supported for retrieving songs in an album"
                )

        return cast(list[Song], parse_media_response_array(lines, MediaType.SONG))

    async def get_artist_songs(self, artist: Artist) -> list[Song]:
        """Get every song whose track artist is ``artist``."""
        lines = await self._run(f"find {filter_clause('artist', artist.name)}")
        return cast(list[Song], parse_media_response_array(lines, MediaType.SONG))
