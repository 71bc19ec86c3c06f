"""Tests for mDNS/Zeroconf discovery of MPD servers."""

from unittest.mock import MagicMock, patch

from zeroconf import IPVersion

from mpdkit.core.discovery import (
    MPD_SERVICE_TYPE,
    DiscoveredServer,
    MpdServiceListener,
    ServerScanner,
    discover_all,
    discover_one,
    resolve_service,
)
from mpdkit.models.server import Server

SERVICE_NAME = f"Music Player @ pi.{MPD_SERVICE_TYPE}"


def service_info(
    port: int = 6600, ipv4: list[str] | None = None, ipv6: list[str] | None = None
) -> MagicMock:
    by_version = {
        IPVersion.V4Only: ["192.168.1.20"] if ipv4 is None else ipv4,
        IPVersion.V6Only: ipv6 or [],
    }
    info = MagicMock()
    info.port = port
    info.parsed_addresses.side_effect = lambda version: by_version[version]
    return info


def zeroconf_with(info: MagicMock | None) -> MagicMock:
    zc = MagicMock()
    zc.get_service_info.return_value = info
    return zc


class TestDiscoveredServer:
    """Tests for DiscoveredServer dataclass."""

    def test_display_name_falls_back_to_host(self) -> None:
        """Test an empty name shows the host."""
        server = DiscoveredServer(SERVICE_NAME, "", "192.168.1.20", 6600)
        assert server.display_name == "192.168.1.20"

    def test_to_server(self) -> None:
        """Test conversion to connection settings."""
        server = DiscoveredServer(SERVICE_NAME, "Music Player @ pi", "192.168.1.20", 6601)
        assert server.to_server() == Server(
            host="192.168.1.20", port=6601, name="Music Player @ pi"
        )

    def test_hashable(self) -> None:
        """Test equal announcements collapse in a set."""
        first = DiscoveredServer(SERVICE_NAME, "pi", "192.168.1.20", 6600)
        second = DiscoveredServer(SERVICE_NAME, "pi", "192.168.1.20", 6600)
        assert {first, second} == {first}


class TestResolveService:
    """Tests for resolve_service function."""

    def test_resolves_ipv4(self) -> None:
        """Test the instance name, first IPv4 address and port are used."""
        zc = zeroconf_with(service_info(ipv4=["192.168.1.20", "10.0.0.2"]))

        server = resolve_service(zc, MPD_SERVICE_TYPE, SERVICE_NAME)

        assert server == DiscoveredServer(SERVICE_NAME, "Music Player @ pi", "192.168.1.20", 6600)
        zc.get_service_info.assert_called_once_with(MPD_SERVICE_TYPE, SERVICE_NAME, timeout=3000)

    def test_ipv4_preferred_over_ipv6(self) -> None:
        """Test IPv6 is ignored when an IPv4 address exists."""
        zc = zeroconf_with(service_info(ipv6=["fd00::20"]))

        server = resolve_service(zc, MPD_SERVICE_TYPE, SERVICE_NAME)

        assert server is not None
        assert server.host == "192.168.1.20"

    def test_ipv6_fallback_strips_scope(self) -> None:
        """Test an IPv6-only service resolves without its interface scope."""
        zc = zeroconf_with(service_info(ipv4=[], ipv6=["fe80::1%eth0"]))

        server = resolve_service(zc, MPD_SERVICE_TYPE, SERVICE_NAME)

        assert server is not None
        assert server.host == "fe80::1"

    def test_missing_port_uses_default(self) -> None:
        """Test a service without port falls back to 6600."""
        server = resolve_service(zeroconf_with(service_info(port=0)), MPD_SERVICE_TYPE, "x")

        assert server is not None
        assert server.port == 6600
        assert server.name == "x"

    def test_unresolvable(self) -> None:
        """Test missing info or addresses give None."""
        assert resolve_service(zeroconf_with(None), MPD_SERVICE_TYPE, SERVICE_NAME) is None
        no_addresses = zeroconf_with(service_info(ipv4=[]))
        assert resolve_service(no_addresses, MPD_SERVICE_TYPE, SERVICE_NAME) is None


class TestMpdServiceListener:
    """Tests for MpdServiceListener."""

    def test_add_service_reports_change(self) -> None:
        """Test a new server is recorded and the full list reported."""
        on_change = MagicMock()
        listener = MpdServiceListener(on_change=on_change)

        listener.add_service(zeroconf_with(service_info()), MPD_SERVICE_TYPE, SERVICE_NAME)

        assert len(listener.servers) == 1
        on_change.assert_called_once_with(listener.servers)

    def test_unchanged_update_not_reported(self) -> None:
        """Test re-announcing the same server does not report a change."""
        on_change = MagicMock()
        listener = MpdServiceListener(on_change=on_change)
        zc = zeroconf_with(service_info())

        listener.add_service(zc, MPD_SERVICE_TYPE, SERVICE_NAME)
        listener.update_service(zc, MPD_SERVICE_TYPE, SERVICE_NAME)

        assert on_change.call_count == 1

    def test_changed_update_reported(self) -> None:
        """Test a new address for a known service replaces the old entry."""
        on_change = MagicMock()
        listener = MpdServiceListener(on_change=on_change)

        listener.add_service(zeroconf_with(service_info()), MPD_SERVICE_TYPE, SERVICE_NAME)
        listener.update_service(
            zeroconf_with(service_info(ipv4=["192.168.1.21"])), MPD_SERVICE_TYPE, SERVICE_NAME
        )

        assert on_change.call_count == 2
        assert [server.host for server in listener.servers] == ["192.168.1.21"]

    def test_unresolved_service_ignored(self) -> None:
        """Test services without info are not recorded."""
        on_change = MagicMock()
        listener = MpdServiceListener(on_change=on_change)

        listener.add_service(zeroconf_with(None), MPD_SERVICE_TYPE, SERVICE_NAME)

        assert listener.servers == []
        on_change.assert_not_called()

    def test_remove_service(self) -> None:
        """Test removal reports only for known services."""
        on_change = MagicMock()
        listener = MpdServiceListener(on_change=on_change)
        zc = zeroconf_with(service_info())
        listener.add_service(zc, MPD_SERVICE_TYPE, SERVICE_NAME)

        listener.remove_service(zc, MPD_SERVICE_TYPE, "unknown")
        listener.remove_service(zc, MPD_SERVICE_TYPE, SERVICE_NAME)

        assert on_change.call_count == 2
        on_change.assert_called_with([])
        assert listener.servers == []


class TestServerScanner:
    """Tests for ServerScanner class."""

    def test_servers_empty_when_not_started(self) -> None:
        """Test servers returns empty list when never started."""
        scanner = ServerScanner()
        assert scanner.servers == []
        assert not scanner.is_scanning

    @patch("mpdkit.core.discovery.Zeroconf")
    @patch("mpdkit.core.discovery.ServiceBrowser")
    def test_start_browses_mpd_service(
        self, mock_browser_cls: MagicMock, mock_zc_cls: MagicMock
    ) -> None:
        """Test start browses for the MPD service type once."""
        scanner = ServerScanner()
        scanner.start()
        scanner.start()

        assert mock_zc_cls.call_count == 1
        assert mock_browser_cls.call_args.args[1] == MPD_SERVICE_TYPE
        assert scanner.is_scanning

        scanner.stop()

        assert not scanner.is_scanning
        mock_zc_cls.return_value.close.assert_called_once()
        mock_browser_cls.return_value.cancel.assert_called_once()

    @patch("mpdkit.core.discovery.Zeroconf")
    @patch("mpdkit.core.discovery.ServiceBrowser")
    def test_results_survive_stop(
        self, mock_browser_cls: MagicMock, mock_zc_cls: MagicMock  # noqa: ARG002
    ) -> None:
        """Test found servers stay available after the scan ends."""
        scanner = ServerScanner()
        scanner.start()
        listener = mock_browser_cls.call_args.args[2]
        listener.add_service(zeroconf_with(service_info()), MPD_SERVICE_TYPE, SERVICE_NAME)

        scanner.stop()

        assert [server.id for server in scanner.servers] == [SERVICE_NAME]

    @patch("mpdkit.core.discovery.Zeroconf")
    @patch("mpdkit.core.discovery.ServiceBrowser")
    def test_scan_first_returns_early(
        self, mock_browser_cls: MagicMock, mock_zc_cls: MagicMock  # noqa: ARG002
    ) -> None:
        """Test a first-only scan ends once a server resolved."""

        def announce(zc: MagicMock, type_: str, listener: MpdServiceListener) -> MagicMock:
            listener.add_service(zeroconf_with(service_info()), type_, SERVICE_NAME)
            return MagicMock()

        mock_browser_cls.side_effect = announce

        server = discover_one(timeout=30.0)

        assert server is not None
        assert server.host == "192.168.1.20"

    def test_discover_one_timeout(self) -> None:
        """Test discover_one returns None when nothing answers."""
        with patch("mpdkit.core.discovery.Zeroconf"), patch("mpdkit.core.discovery.ServiceBrowser"):
            assert discover_one(timeout=0.1) is None

    def test_discover_all_returns_list(self) -> None:
        """Test discover_all returns a list."""
        with patch("mpdkit.core.discovery.Zeroconf"), patch("mpdkit.core.discovery.ServiceBrowser"):
            assert discover_all(timeout=0.1) == []
