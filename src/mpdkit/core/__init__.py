"""Process-wide configuration and server discovery.

Classes:
    ConnectionConfiguration: Server shared by connections, with gated replacement.
    ServerScanner: Finds MPD servers on the local network via mDNS.
"""

from mpdkit.core.config import ConnectionConfiguration, default_configuration
from mpdkit.core.discovery import DiscoveredServer, ServerScanner, discover_all, discover_one

__all__ = [
    "ConnectionConfiguration",
    "DiscoveredServer",
    "ServerScanner",
    "default_configuration",
    "discover_all",
    "discover_one",
]
