"""Shared server configuration for MPD connections.

Every connection reads the configured server when it connects. The server can
only be replaced while none of the connections that use it are connected.

Example:
    configuration = ConnectionConfiguration(Server("192.168.1.100"))
    connection = Connection(configuration=configuration)
    ...
    await connection.disconnect()
    configuration.reconfigure(Server("192.168.1.200", password="secret"))
"""

import logging
import weakref
from typing import Protocol

from mpdkit.api.errors import MpdConfigurationError
from mpdkit.models.server import Server

logger = logging.getLogger(__name__)


class Session(Protocol):
    """Anything that reports whether it currently holds a connection."""

    @property
    def is_connected(self) -> bool: ...


class ConnectionConfiguration:
    """Holds the server every registered session connects to."""

    def __init__(self, server: Server | None = None) -> None:
        """Initialize the configuration.

        Args:
            server: Initial server, localhost:6600 when omitted.
        """
        self._server = server or Server()
        self._sessions: weakref.WeakSet[Session] = weakref.WeakSet()

    @property
    def server(self) -> Server:
        """Return the active server."""
        return self._server

    @property
    def has_active_sessions(self) -> bool:
        """Return True if any registered session is connected."""
        return any(session.is_connected for session in self._sessions)

    def register(self, session: Session) -> None:
        """Track a session so reconfiguration can check it."""
        self._sessions.add(session)

    def reconfigure(self, server: Server) -> None:
        """Replace the server.

        Raises:
            MpdConfigurationError: If a registered session is still connected.
        """
        if self.has_active_sessions:
            raise MpdConfigurationError("Disconnect all sessions before changing the server")
        logger.info("MPD server changed: %s -> %s", self._server.address, server.address)
        self._server = server


default_configuration = ConnectionConfiguration()
