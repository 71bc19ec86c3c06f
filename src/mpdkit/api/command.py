"""MPD client for queue, playlist and playback commands."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from mpdkit.api.client import MpdClient
from mpdkit.api.codec import escape
from mpdkit.api.connection import COMMAND_MODE
from mpdkit.api.errors import MalformedResponseError, UnsupportedOperationError
from mpdkit.api.protocol import find_field
from mpdkit.core.config import ConnectionConfiguration
from mpdkit.models.media import Album, Artist, Media, Song
from mpdkit.models.output import Output
from mpdkit.models.playlist import Playlist
from mpdkit.models.server import Server
from mpdkit.models.source import Source, SourceKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _group_positions(positions: list[int]) -> list[tuple[int, int]]:
    """Group descending positions into (start, end) runs, start >= end."""
    runs: list[tuple[int, int]] = []
    for position in positions:
        if runs and runs[-1][1] == position + 1:
            runs[-1] = (runs[-1][0], position)
        else:
            runs.append((position, position))
    return runs


class CommandClient(MpdClient):
    """Client for everything that changes server state.

    Example:
        async with CommandClient() as client:
            await client.load_playlist(Playlist("Evening"))
            await client.pause(False)
    """

    mode = COMMAND_MODE

    @classmethod
    async def execute(
        cls,
        operation: Callable[["CommandClient"], Awaitable[T]],
        server: Server | None = None,
        *,
        configuration: ConnectionConfiguration | None = None,
    ) -> T:
        """Run ``operation`` on a fresh connection that is closed afterwards."""
        async with cls(server, configuration=configuration) as client:
            return await operation(client)

    def _playlist_of(self, source: Source) -> Playlist:
        playlist = source.playlist
        if playlist is None:
            raise UnsupportedOperationError("Playlist is required for this operation")
        return playlist

    # -------------------------------------------------------------------------
    # Queue & Playlists
    # -------------------------------------------------------------------------

    async def load_playlist(self, playlist: Playlist | None = None) -> None:
        """Replace the queue with ``playlist``, or with the whole database."""
        if playlist is not None:
            await self._run("clear", f"load {escape(playlist.name)}")
        else:
            await self._run("clear", "add /")

    async def clear_queue(self) -> None:
        """Remove every song from the queue."""
        await self._run("clear")

    async def create_playlist(self, name: str) -> None:
        """Create an empty stored playlist."""
        await self._run(f"save {escape(name)}", f"playlistclear {escape(name)}")

    async def rename_playlist(self, playlist: Playlist, name: str) -> None:
        """Rename a stored playlist."""
        await self._run(f"rename {escape(playlist.name)} {escape(name)}")

    async def remove_playlist(self, playlist: Playlist) -> None:
        """Delete a stored playlist."""
        await self._run(f"rm {escape(playlist.name)}")

    async def update(self, force: bool = False) -> None:
        """Update the database; ``force`` rescans unmodified files too."""
        await self._run("rescan" if force else "update")

    async def add_songs(self, songs: list[Song], source: Source) -> None:
        """Append songs to the queue or a playlist, skipping those already there.

        Raises:
            UnsupportedOperationError: For the database source.
        """
        if not songs:
            return
        if source.kind is SourceKind.DATABASE:
            raise UnsupportedOperationError("Cannot add songs to the database")

        existing = {song.file for song in await self.get_songs(source)}
        missing = [song for song in songs if song.file not in existing]
        if not missing:
            logger.debug("All %d songs already present, nothing to add", len(songs))
            return

        if source.kind is SourceKind.QUEUE:
            commands = [f"add {escape(song.file)}" for song in missing]
        else:
            name = escape(self._playlist_of(source).name)
            commands = [f"playlistadd {name} {escape(song.file)}" for song in missing]

        await self._run(*commands)

    async def remove_songs(self, songs: list[Song], source: Source) -> None:
        """Remove songs from the queue or a playlist.

        Positions are removed from the end backwards; consecutive queue
        positions collapse into one ``delete start:end`` range.

        Raises:
            UnsupportedOperationError: For the database source.
        """
        if not songs:
            return
        if source.kind is SourceKind.DATABASE:
            raise UnsupportedOperationError(
                "Only queue and playlist sources are supported for removing songs"
            )

        files = {song.file for song in songs}
        positions = sorted(
            (
                song.position
                for song in await self.get_songs(source)
                if song.file in files and song.position is not None
            ),
            reverse=True,
        )
        if not positions:
            return

        commands: list[str] = []
        if source.kind is SourceKind.QUEUE:
            for start, end in _group_positions(positions):
                if start == end:
                    commands.append(f"delete {start}")
                else:
                    commands.append(f"delete {end}:{start + 1}")
        else:
            name = escape(self._playlist_of(source).name)
            commands = [f"playlistdelete {name} {position}" for position in positions]

        await self._run(*commands)

    async def move(self, song: Song, position: int, source: Source) -> None:
        """Move ``song`` to ``position`` within the queue or a playlist.

        Raises:
            UnsupportedOperationError: If the song has no position or the
                source is the database.
        """
        if song.position is None:
            raise UnsupportedOperationError("Cannot move song without a position")

        match source.kind:
            case SourceKind.QUEUE:
                await self._run(f"move {song.position} {position}")
            case SourceKind.PLAYLIST | SourceKind.FAVORITES:
                name = escape(self._playlist_of(source).name)
                await self._run(f"playlistmove {name} {song.position} {position}")
            case _:
                raise UnsupportedOperationError(
                    "Only queue and playlist sources are supported for moving media"
                )

    # -------------------------------------------------------------------------
    # Playback Control
    # -------------------------------------------------------------------------

    async def _songs_for(self, media: Media) -> list[Song]:
        match media:
            case Album():
                return await self.get_album_songs(media)
            case Artist():
                return await self.get_artist_songs(media)
            case Song():
                return [media]
            case _:
                raise UnsupportedOperationError(
                    "Only Album, Artist and Song types are supported for playback"
                )

    async def play(self, media: Media) -> None:
        """Play a song, an album or everything by an artist.

        A queued song is played directly. Otherwise the songs missing from
        the queue are appended and playback starts at the first one.

        Raises:
            MalformedResponseError: If no songs were found or no song id
                could be determined.
        """
        if isinstance(media, Song) and media.identifier is not None:
            await self._run(f"playid {media.identifier}")
            return

        songs = await self._songs_for(media)
        if not songs:
            raise MalformedResponseError("No songs found for the specified media")

        queued = {song.file: song for song in await self.get_songs(Source.queue())}

        song_id: int | None = None
        commands: list[str] = []
        for index, song in enumerate(songs):
            existing = queued.get(song.file)
            if existing is None:
                commands.append(f"addid {escape(song.file)}")
            elif index == 0:
                song_id = existing.identifier

        if commands:
            responses = await self._run(*commands)
            if song_id is None:
                value = find_field(responses, "id")
                song_id = int(value) if value is not None and value.isdigit() else None

        if song_id is None:
            raise MalformedResponseError("Failed to determine song ID to play")

        await self._run(f"playid {song_id}")

    async def pause(self, value: bool) -> None:
        """Pause (True) or resume (False) playback."""
        await self._run("pause 1" if value else "pause 0")

    async def previous(self) -> None:
        """Skip to previous track."""
        await self._run("previous")

    async def next(self) -> None:
        """Skip to next track."""
        await self._run("next")

    async def stop(self) -> None:
        """Stop playback."""
        await self._run("stop")

    async def consume(self, value: bool) -> None:
        """Enable or disable consume mode (played songs leave the queue)."""
        await self._run("consume 1" if value else "consume 0")

    async def random(self, value: bool) -> None:
        """Enable or disable random playback order."""
        await self._run("random 1" if value else "random 0")

    async def repeat(self, value: bool) -> None:
        """Enable or disable repeating the queue."""
        await self._run("repeat 1" if value else "repeat 0")

    async def seek(self, time: float) -> None:
        """Seek to position in current track.

        Args:
            time: Position in seconds.
        """
        await self._run(f"seekcur {time}")

    async def set_volume(self, volume: int) -> None:
        """Set volume.

        Args:
            volume: Volume level, clamped to 0-100.
        """
        await self._run(f"setvol {max(0, min(100, volume))}")

    async def toggle_output(self, output: Output) -> None:
        """Enable a disabled output or disable an enabled one."""
        await self._run(f"toggleoutput {output.id}")
