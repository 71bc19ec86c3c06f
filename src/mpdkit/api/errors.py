"""Exceptions raised by the MPD client.

Each class is one failure kind. Connection errors are usually worth a retry;
an unsupported server version is not.
"""

import re

# ACK [error@command_listNum] {current_command} message_text
ACK_PATTERN = re.compile(r"ACK \[(\d+)@\d+\] \{(\w*)\} ?(.*)")


class MpdError(Exception):
    """Base class for every MPD client error."""


class MpdConfigurationError(MpdError):
    """Invalid connection settings, detected before opening a socket."""


class HandshakeError(MpdError):
    """The server greeting or session setup failed."""


class UnsupportedServerVersionError(HandshakeError):
    """The server speaks a protocol version older than the supported floor."""

    def __init__(self, version: str, minimum: str) -> None:
        self.version = version
        self.minimum = minimum
        super().__init__(
            f"Unsupported MPD server version {version}. Minimum required version is {minimum}."
        )


class AuthenticationError(HandshakeError):
    """The server rejected the configured password."""


class MpdConnectionError(MpdError):
    """Failed to reach the server, or the connection broke."""


class ConnectionClosedError(MpdConnectionError):
    """The server closed the connection while a response was expected."""


class ProtocolViolationError(MpdError):
    """The server answered with an ``ACK`` error line.

    Attributes:
        line: The full error line as received.
        code: MPD error code (0 if the line could not be parsed).
        command: The command that failed.
        message: The server's error text.
    """

    def __init__(self, line: str) -> None:
        self.line = line
        match = ACK_PATTERN.match(line)
        if match:
            self.code = int(match.group(1))
            self.command = match.group(2)
            self.message = match.group(3)
        else:
            self.code = 0
            self.command = ""
            self.message = line
        super().__init__(line)


class MalformedResponseError(MpdError):
    """The server sent something the client cannot interpret."""


class UnsupportedOperationError(MpdError):
    """The requested operation is not available for the given arguments."""


class ReadUntilConditionNotMetError(MpdError):
    """The connection went away before the response terminator arrived."""

    def __init__(self) -> None:
        super().__init__("Failed to locate expected response termination sequence.")
