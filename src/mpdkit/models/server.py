"""MPD server connection settings."""

from dataclasses import dataclass

from mpdkit.models.types import ArtworkGetter

DEFAULT_PORT = 6600


@dataclass(frozen=True, slots=True)
class Server:
    """Connection settings for one MPD server.

    Attributes:
        host: Server hostname or IP address.
        port: TCP control port (default 6600).
        password: Password sent after the greeting, empty for none.
        artwork_getter: How cover art is retrieved.
        name: Human-readable name for this server.
        streaming_port: Port of an httpd output, if the server streams.
    """

    host: str = "localhost"
    port: int = DEFAULT_PORT
    password: str = ""
    artwork_getter: ArtworkGetter = ArtworkGetter.LIBRARY_THEN_METADATA
    name: str = ""
    streaming_port: int | None = None

    @property
    def display_name(self) -> str:
        """Return the name, falling back to the host."""
        return self.name or self.host

    @property
    def address(self) -> str:
        """Return the server address (host:port)."""
        return f"{self.host}:{self.port}"

    @property
    def stream_url(self) -> str | None:
        """Return the HTTP stream URL, or None without a streaming port."""
        if self.streaming_port is None:
            return None
        return f"http://{self.host}:{self.streaming_port}/"
