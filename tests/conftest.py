"""Test fixtures for mpdkit tests."""

import asyncio
from collections.abc import Callable
from unittest.mock import patch

import pytest

from mpdkit.api.client import MpdClient
from mpdkit.api.connection import COMMAND_MODE, Connection, ConnectionMode
from mpdkit.core.config import ConnectionConfiguration
from mpdkit.models.server import Server


class MockStreamReader:
    """Mock asyncio StreamReader serving canned responses in order.

    Each entry of ``responses`` is delivered by at most one ``read`` call, so
    tests control how the server splits its output. Once exhausted, ``read``
    returns b"" (peer closed) or, with ``block``, waits forever.
    """

    def __init__(self, responses: list[bytes], block: bool = False) -> None:
        self._responses = list(responses)
        self._pending = b""
        self._block = block
        self.read_sizes: list[int] = []

    async def read(self, n: int = -1) -> bytes:
        """Read up to n bytes."""
        self.read_sizes.append(n)
        if not self._pending:
            if not self._responses:
                if self._block:
                    await asyncio.Event().wait()
                return b""
            self._pending = self._responses.pop(0)

        data, self._pending = self._pending[:n], self._pending[n:]
        return data

    def feed(self, data: bytes) -> None:
        """Queue more server output."""
        self._responses.append(data)


class MockStreamWriter:
    """Mock asyncio StreamWriter recording what was sent."""

    def __init__(self, sock: object = None) -> None:
        self.data: list[bytes] = []
        self._closed = False
        self._socket = sock

    def write(self, data: bytes) -> None:
        """Record written data."""
        self.data.append(data)

    async def drain(self) -> None:
        """Mock drain."""

    def close(self) -> None:
        """Mark as closed."""
        self._closed = True

    async def wait_closed(self) -> None:
        """Mock wait_closed."""

    def is_closing(self) -> bool:
        """Check if closing."""
        return self._closed

    def get_extra_info(self, name: str, default: object = None) -> object:
        """Return the fake socket, if any."""
        if name == "socket" and self._socket is not None:
            return self._socket
        return default

    @property
    def lines(self) -> list[str]:
        """Return everything written, split into lines."""
        return b"".join(self.data).decode().splitlines()


GREETING = b"OK MPD 0.23.5\n"


@pytest.fixture
def server() -> Server:
    """A server that is never actually contacted."""
    return Server(host="mpd.test", port=6600)


@pytest.fixture
def configuration(server: Server) -> ConnectionConfiguration:
    """An isolated configuration, so tests never touch the default one."""
    return ConnectionConfiguration(server)


@pytest.fixture
def mock_streams() -> Callable[..., tuple[MockStreamReader, MockStreamWriter]]:
    """Create a reader/writer pair; the greeting is prepended unless disabled."""

    def _mock_streams(
        responses: list[bytes],
        greeting: bool = True,
        block: bool = False,
        sock: object = None,
    ) -> tuple[MockStreamReader, MockStreamWriter]:
        if greeting:
            responses = [GREETING, *responses]
        return MockStreamReader(responses, block=block), MockStreamWriter(sock)

    return _mock_streams


@pytest.fixture
def open_connection():
    """Patch asyncio.open_connection to hand out the given streams."""

    def _open_connection(reader: MockStreamReader, writer: MockStreamWriter):
        return patch("asyncio.open_connection", return_value=(reader, writer))

    return _open_connection


@pytest.fixture
def connected(mock_streams, open_connection, server, configuration):
    """Open a Connection over mock streams; returns (connection, reader, writer)."""

    async def _connected(
        responses: list[bytes], mode: ConnectionMode = COMMAND_MODE, greeting: bool = True
    ) -> tuple[Connection, MockStreamReader, MockStreamWriter]:
        reader, writer = mock_streams(responses, greeting=greeting)
        with open_connection(reader, writer):
            connection = Connection(server, mode, configuration)
            await connection.connect()
        return connection, reader, writer

    return _connected


@pytest.fixture
def connected_client(mock_streams, open_connection, server, configuration):
    """Connect a client class over mock streams; returns (client, reader, writer)."""

    async def _connected_client(
        client_cls: type[MpdClient],
        responses: list[bytes],
        client_server: Server | None = None,
        block: bool = False,
    ):
        reader, writer = mock_streams(responses, block=block)
        with open_connection(reader, writer):
            client = client_cls(client_server or server, configuration=configuration)
            await client.connect()
        return client, reader, writer

    return _connected_client
