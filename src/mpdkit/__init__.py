"""Asyncio client core for the Music Player Daemon (MPD) protocol."""

from mpdkit.api.artwork import ArtworkClient
from mpdkit.api.client import MpdClient
from mpdkit.api.command import CommandClient
from mpdkit.api.connection import (
    ARTWORK_MODE,
    COMMAND_MODE,
    IDLE_MODE,
    Connection,
    ConnectionMode,
    ConnectionState,
)
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
    UnsupportedOperationError,
    UnsupportedServerVersionError,
)
from mpdkit.api.idle import IdleClient
from mpdkit.core.config import ConnectionConfiguration, default_configuration

__version__ = "0.1.0"

__all__ = [
    "ARTWORK_MODE",
    "COMMAND_MODE",
    "IDLE_MODE",
    "ArtworkClient",
    "AuthenticationError",
    "CommandClient",
    "Connection",
    "ConnectionClosedError",
    "ConnectionConfiguration",
    "ConnectionMode",
    "ConnectionState",
    "HandshakeError",
    "IdleClient",
    "MalformedResponseError",
    "MpdClient",
    "MpdConfigurationError",
    "MpdConnectionError",
    "MpdError",
    "ProtocolViolationError",
    "ReadUntilConditionNotMetError",
    "UnsupportedOperationError",
    "UnsupportedServerVersionError",
    "default_configuration",
]
