"""Async MPD connection.

One ``Connection`` owns exactly one TCP socket, the negotiated protocol
version and a byte buffer of input that has not been consumed yet. Three
connection modes exist so that idle waits, artwork downloads and regular
commands each get their own socket.

Example:
    async with Connection(Server("192.168.1.100")) as connection:
        lines = await connection.run(["status"])
"""

import asyncio
import logging
import socket
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Self

from mpdkit.api.codec import build_command_line, encode, format_command
from mpdkit.api.errors import (
    AuthenticationError,
    ConnectionClosedError,
    HandshakeError,
    MalformedResponseError,
    MpdConfigurationError,
    MpdConnectionError,
    MpdError,
    ProtocolViolationError,
    ReadUntilConditionNotMetError,
    UnsupportedServerVersionError,
)
from mpdkit.api.protocol import parse_line
from mpdkit.core.config import ConnectionConfiguration, default_configuration
from mpdkit.models.server import Server

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 3.0
MINIMUM_VERSION = "0.22"

GREETING_MARKER = "OK MPD"
SUCCESS_MARKER = "OK"
ERROR_MARKER = "ACK"


class ConnectionState(Enum):
    """Lifecycle of a connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ConnectionMode:
    """Traffic profile of a connection.

    Attributes:
        name: Short name used in log messages.
        buffer_size: Maximum bytes requested per receive.
        keepalive: Enable TCP keepalive (for long silent idle waits).
    """

    name: str
    buffer_size: int
    keepalive: bool = False


IDLE_MODE = ConnectionMode("idle", 4096, keepalive=True)
ARTWORK_MODE = ConnectionMode("artwork", 8192)
COMMAND_MODE = ConnectionMode("command", 4096)

StateObserver = Callable[[ConnectionState], None]


def _parse_version(version: str) -> tuple[int, ...]:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError as e:
        raise HandshakeError(f"Invalid MPD version: {version}") from e


def is_supported_version(version: str, minimum: str = MINIMUM_VERSION) -> bool:
    """Return True if ``version`` is at least ``minimum``, compared numerically."""
    return _parse_version(version) >= _parse_version(minimum)


def _validate(server: Server) -> None:
    if not server.host or not server.host.strip():
        raise MpdConfigurationError("Host must not be empty")
    if not 1 <= server.port <= 65535:
        raise MpdConfigurationError(f"Port out of range: {server.port}")


class Connection:
    """A single MPD session.

    Commands are serialised by an internal lock, so one ``run`` completes
    (write and full response) before the next one starts.

    Attributes:
        mode: The traffic profile of this connection.
    """

    def __init__(
        self,
        server: Server | None = None,
        mode: ConnectionMode = COMMAND_MODE,
        configuration: ConnectionConfiguration | None = None,
    ) -> None:
        """Initialize the connection.

        Args:
            server: Server to connect to. When omitted, the server of
                ``configuration`` is read at connect time.
            mode: Traffic profile.
            configuration: Shared configuration, the process-wide default
                when omitted.
        """
        self.mode = mode
        self._server = server
        self._configuration = configuration or default_configuration
        self._configuration.register(self)

        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._buffer = bytearray()
        self._version = ""
        self._state = ConnectionState.DISCONNECTED
        self._observer: StateObserver | None = None
        self._lock = asyncio.Lock()

    @property
    def server(self) -> Server:
        """Return the server this connection talks to."""
        return self._server or self._configuration.server

    @property
    def state(self) -> ConnectionState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Return True if connected to MPD."""
        return self._writer is not None and not self._writer.is_closing()

    @property
    def version(self) -> str:
        """Return MPD protocol version from initial handshake."""
        return self._version

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        logger.debug("MPD %s connection: %s -> %s", self.mode.name, self._state.value, state.value)
        self._state = state
        if self._observer is not None:
            self._observer(state)

    async def connect(self, on_state_change: StateObserver | None = None) -> None:
        """Connect to the server and perform the handshake.

        Does nothing if already connected.

        Args:
            on_state_change: Called with the new state on every transition.

        Raises:
            MpdConfigurationError: If host or port are invalid.
            MpdConnectionError: If the server cannot be reached.
            HandshakeError: If the greeting, version or password is rejected.
        """
        if self.is_connected:
            return
        if on_state_change is not None:
            self._observer = on_state_change

        server = self.server
        _validate(server)

        self._set_state(ConnectionState.CONNECTING)
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(server.host, server.port),
                timeout=CONNECT_TIMEOUT,
            )
        except TimeoutError as e:
            self._fail()
            raise MpdConnectionError(f"Connection to {server.address} timed out") from e
        except OSError as e:
            self._fail()
            raise MpdConnectionError(f"Failed to connect to {server.address}: {e}") from e
        except asyncio.CancelledError:
            self._fail()
            raise

        self._configure_socket()

        try:
            await self._handshake(server)
        except (MpdError, asyncio.CancelledError):
            self._fail()
            raise

        self._set_state(ConnectionState.READY)
        logger.info(
            "Connected to MPD %s at %s (%s mode)", self._version, server.address, self.mode.name
        )

    def _configure_socket(self) -> None:
        if self._writer is None:
            return
        sock = self._writer.get_extra_info("socket")
        if sock is None:
            return
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        if self.mode.keepalive:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)

    async def _handshake(self, server: Server) -> None:
        while True:
            greeting = await self._read_line()
            if greeting.startswith(SUCCESS_MARKER):
                break

        if not greeting.startswith(GREETING_MARKER):
            raise HandshakeError(f"Invalid MPD greeting: {greeting}")

        version = greeting.split()[-1]
        if not is_supported_version(version):
            raise UnsupportedServerVersionError(version, MINIMUM_VERSION)
        self._version = version

        if server.password:
            await self._write(format_command("password", server.password))
            try:
                await self.read_until_ok()
            except ProtocolViolationError as e:
                raise AuthenticationError(f"Authentication failed: {e.message}") from e

    def _release(self) -> asyncio.StreamWriter | None:
        writer = self._writer
        if writer is not None:
            writer.close()
        self._writer = None
        self._reader = None
        self._version = ""
        self._buffer.clear()
        return writer

    def _fail(self) -> None:
        self._release()
        self._set_state(ConnectionState.FAILED)

    def close(self) -> None:
        """Close the socket without waiting; used when a pending read is cancelled."""
        if self._release() is not None:
            logger.info("Closed MPD %s connection", self.mode.name)
        self._set_state(ConnectionState.DISCONNECTED)

    async def disconnect(self) -> None:
        """Disconnect from the server. Safe to call when not connected."""
        writer = self._release()
        if writer is not None:
            try:
                await writer.wait_closed()
            except (OSError, TimeoutError) as e:
                logger.debug("Expected error during MPD disconnect: %s", e)
            logger.info("Disconnected from MPD (%s mode)", self.mode.name)
        self._set_state(ConnectionState.DISCONNECTED)

    async def reconnect(self) -> None:
        """Drop the current session and open a new one."""
        await self.disconnect()
        await self.connect()

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        """Async context manager exit."""
        await self.disconnect()

    async def _write(self, line: str) -> None:
        if self._writer is None:
            raise MpdConnectionError("Not connected")
        try:
            data = encode(line)
        except UnicodeEncodeError as e:
            raise ProtocolViolationError(f"Cannot encode command: {line!r}") from e

        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as e:
            self._fail()
            raise MpdConnectionError(f"Failed to write to MPD: {e}") from e

    async def _receive(self, max_bytes: int) -> int:
        """Append at most ``max_bytes`` (bounded by the mode) to the buffer."""
        if self._reader is None:
            raise ReadUntilConditionNotMetError()
        size = max(1, min(max_bytes, self.mode.buffer_size))
        try:
            data = await self._reader.read(size)
        except OSError as e:
            self._fail()
            raise MpdConnectionError(f"Failed to read from MPD: {e}") from e

        if not data:
            self._fail()
            raise ConnectionClosedError("Connection closed by MPD")

        self._buffer.extend(data)
        return len(data)

    def _extract_line(self) -> str | None:
        index = self._buffer.find(b"\n")
        if index < 0:
            return None
        raw = bytes(self._buffer[:index])
        del self._buffer[: index + 1]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedResponseError(f"Response line is not valid UTF-8: {raw!r}") from e

    async def _read_line(self) -> str:
        """Read one line, raising on ``ACK`` error lines."""
        line = self._extract_line()
        while line is None:
            await self._receive(self.mode.buffer_size)
            line = self._extract_line()

        if line.startswith(ERROR_MARKER):
            raise ProtocolViolationError(line)
        return line

    async def read_until_ok(self) -> list[str]:
        """Read response lines up to and including the ``OK`` terminator.

        Raises:
            ProtocolViolationError: If the server answers with ``ACK``.
            ReadUntilConditionNotMetError: If the connection goes away first.
        """
        lines: list[str] = []
        while True:
            line = await self._read_line()
            lines.append(line)
            if line.startswith(SUCCESS_MARKER):
                return lines

    async def read_fixed_length_data(self, length: int) -> bytes:
        """Read exactly ``length`` bytes, draining the buffer first.

        Raises:
            ValueError: If ``length`` is negative.
        """
        if length < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {length}")
        if length == 0:
            return b""

        while len(self._buffer) < length:
            await self._receive(length - len(self._buffer))

        data = bytes(self._buffer[:length])
        del self._buffer[:length]
        return data

    def _ensure_connected(self) -> None:
        if not self.is_connected:
            raise MpdConnectionError("Not connected")

    async def run(self, commands: list[str]) -> list[str]:
        """Send commands and return the response lines, ``OK`` included.

        Several commands are sent as one command list.

        Raises:
            MpdConnectionError: If not connected.
            ProtocolViolationError: If the server answers with ``ACK``.
        """
        async with self._lock:
            self._ensure_connected()
            command_line = build_command_line(commands)
            logger.debug("MPD command: %s", command_line)
            await self._write(command_line)
            return await self.read_until_ok()

    async def run_binary(self, command: str) -> tuple[dict[str, str], bytes]:
        """Send a command answering with a binary block.

        Binary response format:
            size: <total bytes>
            type: <mime_type>  (readpicture only)
            binary: <chunk bytes>
            <binary data>
            OK

        Returns:
            Tuple of (header fields, binary data).

        Raises:
            MalformedResponseError: If the response ends before ``binary:``.
        """
        async with self._lock:
            self._ensure_connected()
            logger.debug("MPD binary command: %s", command)
            await self._write(command)

            fields: dict[str, str] = {}
            while True:
                line = await self._read_line()
                if line.startswith(SUCCESS_MARKER):
                    raise MalformedResponseError(f"No binary data in response to {command}")
                key, value = parse_line(line)
                if key == "binary":
                    break
                fields[key] = value

            try:
                length = int(value)
            except ValueError as e:
                raise MalformedResponseError(f"Invalid binary length: {value}") from e

            data = await self.read_fixed_length_data(length)
            await self.read_until_ok()
            return fields, data

    async def ping(self) -> None:
        """Ping MPD server to check connection."""
        await self.run(["ping"])
