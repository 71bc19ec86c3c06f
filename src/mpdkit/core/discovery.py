"""mDNS/Zeroconf discovery for MPD servers.

A scan browses ``_mpd._tcp`` for a fixed time. Every announced service is
resolved to one address, IPv4 preferred, and the result list is only
replaced when the set of servers actually changed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from zeroconf import IPVersion, ServiceBrowser, ServiceListener, Zeroconf

from mpdkit.models.server import DEFAULT_PORT, Server

logger = logging.getLogger(__name__)

# MPD mDNS service type (advertised when zeroconf_enabled is set in mpd.conf)
MPD_SERVICE_TYPE = "_mpd._tcp.local."

SCAN_DURATION = 5.0
RESOLVE_TIMEOUT = 3.0

ServersChanged = Callable[[list["DiscoveredServer"]], None]


@dataclass(frozen=True, slots=True)
class DiscoveredServer:
    """An MPD server announced on the local network.

    Attributes:
        id: Full mDNS service name, unique per announcement.
        name: Instance part of the service name.
        host: Resolved IP address.
        port: Advertised control port.
    """

    id: str
    name: str
    host: str
    port: int

    @property
    def display_name(self) -> str:
        return self.name or self.host

    def to_server(self) -> Server:
        """Return connection settings for this server."""
        return Server(host=self.host, port=self.port, name=self.display_name)


def _instance_name(service_name: str) -> str:
    suffix = f".{MPD_SERVICE_TYPE}"
    if service_name.endswith(suffix):
        return service_name[: -len(suffix)]
    return service_name


def _strip_interface_scope(address: str) -> str:
    # fe80::1%eth0 -> fe80::1
    return address.partition("%")[0]


def resolve_service(zc: Zeroconf, type_: str, name: str) -> DiscoveredServer | None:
    """Resolve a browsed service to a server, or None if it has no usable address."""
    info = zc.get_service_info(type_, name, timeout=int(RESOLVE_TIMEOUT * 1000))
    if info is None:
        logger.debug("Could not resolve service: %s", name)
        return None

    for version in (IPVersion.V4Only, IPVersion.V6Only):
        addresses = info.parsed_addresses(version)
        if addresses:
            return DiscoveredServer(
                id=name,
                name=_instance_name(name),
                host=_strip_interface_scope(addresses[0]),
                port=info.port or DEFAULT_PORT,
            )

    logger.debug("No addresses found for service: %s", name)
    return None


class MpdServiceListener(ServiceListener):
    """Keeps the resolved servers of one browse session."""

    def __init__(self, on_change: ServersChanged | None = None) -> None:
        self._on_change = on_change
        self._servers: dict[str, DiscoveredServer] = {}
        self._lock = threading.Lock()

    @property
    def servers(self) -> list[DiscoveredServer]:
        with self._lock:
            return list(self._servers.values())

    def _replace(self, name: str, server: DiscoveredServer | None) -> None:
        with self._lock:
            if self._servers.get(name) == server:
                return
            if server is None:
                del self._servers[name]
            else:
                self._servers[name] = server
            servers = list(self._servers.values())

        if self._on_change:
            self._on_change(servers)

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        server = resolve_service(zc, type_, name)
        if server is None:
            return
        logger.info("Discovered MPD server: %s at %s:%d", server.name, server.host, server.port)
        self._replace(name, server)

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        self.add_service(zc, type_, name)

    def remove_service(self, zc: Zeroconf, type_: str, name: str) -> None:  # noqa: ARG002
        with self._lock:
            known = name in self._servers
        if known:
            logger.info("MPD server removed: %s", name)
            self._replace(name, None)


class ServerScanner:
    """Scans the local network for MPD servers.

    Example:
        servers = ServerScanner().scan()
        if servers:
            configuration.reconfigure(servers[0].to_server())
    """

    def __init__(self) -> None:
        self._zeroconf: Zeroconf | None = None
        self._browser: ServiceBrowser | None = None
        self._listener: MpdServiceListener | None = None
        self._servers: list[DiscoveredServer] = []

    @property
    def is_scanning(self) -> bool:
        return self._zeroconf is not None

    @property
    def servers(self) -> list[DiscoveredServer]:
        """Return the servers of the running or most recent scan."""
        if self._listener is not None:
            return self._listener.servers
        return list(self._servers)

    def start(self, on_change: ServersChanged | None = None) -> None:
        """Start browsing in the background, clearing earlier results.

        Does nothing while a scan is already running.
        """
        if self.is_scanning:
            return

        self._servers = []
        self._zeroconf = Zeroconf()
        self._listener = MpdServiceListener(on_change=on_change)
        self._browser = ServiceBrowser(self._zeroconf, MPD_SERVICE_TYPE, self._listener)
        logger.debug("Started mDNS scan for MPD servers")

    def stop(self) -> None:
        """Stop browsing; the servers found so far stay available."""
        if self._listener is not None:
            self._servers = self._listener.servers
            self._listener = None
        if self._browser is not None:
            self._browser.cancel()
            self._browser = None
        if self._zeroconf is not None:
            self._zeroconf.close()
            self._zeroconf = None
            logger.debug("Stopped mDNS scan, %d servers found", len(self._servers))

    def scan(
        self, duration: float = SCAN_DURATION, *, first: bool = False
    ) -> list[DiscoveredServer]:
        """Browse for ``duration`` seconds and return what was found.

        With ``first`` the scan ends as soon as one server resolved.
        """
        found = threading.Event()

        def on_change(servers: list[DiscoveredServer]) -> None:
            if first and servers:
                found.set()

        self.start(on_change=on_change)
        try:
            found.wait(timeout=duration)
        finally:
            self.stop()
        return self.servers


def discover_one(timeout: float = SCAN_DURATION) -> DiscoveredServer | None:
    """Return the first MPD server found within ``timeout`` seconds, or None."""
    servers = ServerScanner().scan(timeout, first=True)
    return servers[0] if servers else None


def discover_all(timeout: float = SCAN_DURATION) -> list[DiscoveredServer]:
    """Return every MPD server announced within ``timeout`` seconds."""
    return ServerScanner().scan(timeout)
