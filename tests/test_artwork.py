"""Tests for the artwork client."""

import pytest

from mpdkit.api.artwork import ArtworkClient
from mpdkit.api.errors import MalformedResponseError, ProtocolViolationError
from mpdkit.models.server import Server
from mpdkit.models.types import ArtworkGetter

NO_FILE = b"ACK [50@0] {albumart} No file exists\n"


class TestGetArtwork:
    """Tests for chunked artwork retrieval."""

    @pytest.mark.asyncio
    async def test_chunks_assembled(self, connected_client) -> None:
        """Test successive offsets are requested until the size is reached."""
        client, _, writer = await connected_client(
            ArtworkClient,
            [b"size: 6\nbinary: 4\nabcd\nOK\n", b"size: 6\nbinary: 2\nef\nOK\n"],
        )

        data = await client.get_artwork_data("a/song.flac")

        assert data == b"abcdef"
        assert writer.lines == ['albumart "a/song.flac" 0', 'albumart "a/song.flac" 4']

    @pytest.mark.asyncio
    async def test_binary_with_newlines(self, connected_client) -> None:
        """Test image bytes are never split into lines."""
        payload = b"\x89PNG\r\n\x1a\n\x00OK\n"
        response = b"size: %d\nbinary: %d\n%s\nOK\n" % (len(payload), len(payload), payload)
        client, _, _ = await connected_client(ArtworkClient, [response])

        assert await client.get_artwork_data("a.flac") == payload

    @pytest.mark.asyncio
    async def test_falls_back_on_server_error(self, connected_client) -> None:
        """Test the next command is tried when the first is rejected."""
        client, _, writer = await connected_client(
            ArtworkClient, [NO_FILE, b"size: 3\ntype: image/jpeg\nbinary: 3\nxyz\nOK\n"]
        )

        artwork = await client.get_artwork("a.flac")

        assert artwork.data == b"xyz"
        assert artwork.mime_type == "image/jpeg"
        assert artwork.file == "a.flac"
        assert writer.lines == ['albumart "a.flac" 0', 'readpicture "a.flac" 0']

    @pytest.mark.asyncio
    async def test_getter_order(self, connected_client) -> None:
        """Test the configured getter decides the command order."""
        server = Server(host="mpd.test", artwork_getter=ArtworkGetter.METADATA)
        client, _, writer = await connected_client(
            ArtworkClient, [b"size: 1\nbinary: 1\nz\nOK\n"], client_server=server
        )

        await client.get_artwork_data("a.flac")

        assert writer.lines == ['readpicture "a.flac" 0']

    @pytest.mark.asyncio
    async def test_all_commands_rejected(self, connected_client) -> None:
        """Test the last server error is raised when nothing worked."""
        client, _, _ = await connected_client(
            ArtworkClient, [NO_FILE, b"ACK [50@0] {readpicture} No file exists\n"]
        )

        with pytest.raises(ProtocolViolationError) as excinfo:
            await client.get_artwork_data("a.flac")
        assert excinfo.value.command == "readpicture"

    @pytest.mark.asyncio
    async def test_malformed_response_not_retried(self, connected_client) -> None:
        """Test only server errors trigger the fallback."""
        client, _, writer = await connected_client(ArtworkClient, [b"OK\n"])

        with pytest.raises(MalformedResponseError):
            await client.get_artwork_data("a.flac")
        assert writer.lines == ['albumart "a.flac" 0']

    @pytest.mark.asyncio
    async def test_empty_chunk_stops(self, connected_client) -> None:
        """Test a zero length chunk ends the download."""
        client, _, writer = await connected_client(
            ArtworkClient, [b"size: 10\nbinary: 0\n\nOK\n"]
        )

        assert await client.get_artwork_data("a.flac") == b""
        assert len(writer.lines) == 1
