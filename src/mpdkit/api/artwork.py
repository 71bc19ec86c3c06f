"""MPD client for cover art.

MPD returns cover art in chunks (8 KiB by default). Each response carries the
total ``size`` and the length of its own ``binary`` block, and the client asks
again at the next offset until everything has arrived.
"""

import logging

from mpdkit.api.client import MpdClient
from mpdkit.api.codec import escape
from mpdkit.api.connection import ARTWORK_MODE
from mpdkit.api.errors import MalformedResponseError, ProtocolViolationError
from mpdkit.models.artwork import Artwork

logger = logging.getLogger(__name__)


class ArtworkClient(MpdClient):
    """Client downloading cover art on its own connection.

    Example:
        async with ArtworkClient() as client:
            artwork = await client.get_artwork(song.file)
    """

    mode = ARTWORK_MODE

    async def _fetch_chunks(self, file: str, command: str) -> tuple[bytes, str]:
        data = bytearray()
        mime_type = ""
        offset = 0

        while True:
            fields, chunk = await self._connection.run_binary(
                f"{command} {escape(file)} {offset}"
            )
            mime_type = fields.get("type", mime_type)
            try:
                total = int(fields.get("size", "0"))
            except ValueError as e:
                raise MalformedResponseError(f"Invalid artwork size: {fields['size']}") from e

            data.extend(chunk)
            offset += len(chunk)
            if not chunk or offset >= total:
                return bytes(data), mime_type

    async def _fetch(self, file: str) -> tuple[bytes, str]:
        last_error: ProtocolViolationError | None = None
        for command in self._connection.server.artwork_getter.commands:
            try:
                return await self._fetch_chunks(file, command)
            except ProtocolViolationError as e:
                logger.debug("%s failed for %s: %s", command, file, e.message)
                last_error = e

        if last_error is not None:
            raise last_error
        raise MalformedResponseError("No artwork found")

    async def get_artwork_data(self, file: str) -> bytes:
        """Return the cover art bytes of ``file``.

        Commands of the configured artwork getter are tried in order; only a
        server error (``ACK``) moves on to the next one.

        Raises:
            ProtocolViolationError: If every command was rejected.
        """
        data, _ = await self._fetch(file)
        return data

    async def get_artwork(self, file: str) -> Artwork:
        """Return the cover art of ``file`` with its MIME type, if known."""
        data, mime_type = await self._fetch(file)
        return Artwork(data=data, file=file, mime_type=mime_type)
