"""Tests for the central update and IP client."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

from autodj import __version__
from autodj.core.config import CentralConfig
from autodj.domain.central.client import check_for_updates, get_ip, get_unique_identifier
from autodj.domain.central.settings import AppSettings, read_settings, write_settings


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"


@pytest.fixture
def central() -> CentralConfig:
    return CentralConfig(base_url="https://central.test", timeout_seconds=3)


def _response(payload) -> Mock:
    response = Mock()
    response.json.return_value = payload
    return response


class TestSettings:
    """Tests for settings persistence."""

    def test_missing_file_gives_defaults(self, settings_path: Path) -> None:
        assert read_settings(settings_path) == AppSettings()

    def test_write_then_read(self, settings_path: Path) -> None:
        write_settings(AppSettings(app_unique_identifier="abc", external_ip="1.2.3.4"), settings_path)
        assert read_settings(settings_path).external_ip == "1.2.3.4"

    def test_corrupt_file_gives_defaults(self, settings_path: Path, log_records: list) -> None:
        """Unreadable settings are reported and replaced by defaults."""
        settings_path.write_text("{not json", encoding="utf-8")

        assert read_settings(settings_path) == AppSettings()
        assert any(r["level"].name == "WARNING" for r in log_records)


class TestGetUniqueIdentifier:
    """Tests for get_unique_identifier function."""

    def test_generated_once(self, settings_path: Path) -> None:
        """The identifier is generated on first use and reused afterwards."""
        first = get_unique_identifier(settings_path)
        second = get_unique_identifier(settings_path)

        assert first == second
        assert read_settings(settings_path).app_unique_identifier == first


class TestCheckForUpdates:
    """Tests for check_for_updates function."""

    def test_disabled(self, settings_path: Path) -> None:
        with patch("autodj.domain.central.client.requests.post") as mock_post:
            assert check_for_updates(CentralConfig(enabled=False), settings_path=settings_path) is None
        mock_post.assert_not_called()

    def test_returns_updates(self, central: CentralConfig, settings_path: Path) -> None:
        """The request reports the release and returns the server's updates."""
        with patch("autodj.domain.central.client.requests.post") as mock_post:
            mock_post.return_value = _response({"updates": {"needs_release_update": True}})

            result = check_for_updates(central, settings_path=settings_path)

        assert result == {"needs_release_update": True}
        args, kwargs = mock_post.call_args
        assert args[0] == "https://central.test/api/update"
        assert kwargs["timeout"] == 3
        body = kwargs["json"]
        assert body["release"] == __version__
        assert body["release_channel"] == "rolling"
        assert body["environment"] == "production"
        assert body["is_docker"] is False
        assert body["id"] == read_settings(settings_path).app_unique_identifier

    def test_version_replaces_release(self, central: CentralConfig, settings_path: Path) -> None:
        """A known commit hash is sent instead of the release number."""
        with patch("autodj.domain.central.client.requests.post") as mock_post:
            mock_post.return_value = _response({"updates": None})

            check_for_updates(central, version="abc123", settings_path=settings_path)

        body = mock_post.call_args.kwargs["json"]
        assert body["version"] == "abc123"
        assert "release" not in body

    def test_request_error(
        self, central: CentralConfig, settings_path: Path, log_records: list
    ) -> None:
        """Network failures are logged, not raised."""
        with patch("autodj.domain.central.client.requests.post") as mock_post:
            mock_post.side_effect = requests.ConnectionError("down")

            assert check_for_updates(central, settings_path=settings_path) is None

        assert any(r["level"].name == "ERROR" for r in log_records)

    def test_unexpected_payload(self, central: CentralConfig, settings_path: Path) -> None:
        with patch("autodj.domain.central.client.requests.post") as mock_post:
            mock_post.return_value = _response(["not", "a", "dict"])
            assert check_for_updates(central, settings_path=settings_path) is None


class TestGetIp:
    """Tests for get_ip function."""

    def test_fetches_and_caches(self, central: CentralConfig, settings_path: Path) -> None:
        """A fetched IP is remembered for later calls."""
        with patch("autodj.domain.central.client.requests.get") as mock_get:
            mock_get.return_value = _response({"ip": "203.0.113.7"})

            assert get_ip(central, settings_path=settings_path) == "203.0.113.7"
            assert get_ip(central, settings_path=settings_path) == "203.0.113.7"

        mock_get.assert_called_once_with("https://central.test/ip", timeout=3)
        assert read_settings(settings_path).external_ip == "203.0.113.7"

    def test_refresh_ignores_cache(self, central: CentralConfig, settings_path: Path) -> None:
        """Uncached lookups always ask and do not overwrite the stored IP."""
        write_settings(AppSettings(external_ip="198.51.100.1"), settings_path)

        with patch("autodj.domain.central.client.requests.get") as mock_get:
            mock_get.return_value = _response({"ip": "203.0.113.7"})
            assert get_ip(central, cached=False, settings_path=settings_path) == "203.0.113.7"

        assert read_settings(settings_path).external_ip == "198.51.100.1"

    def test_disabled_without_cache(self, settings_path: Path) -> None:
        with patch("autodj.domain.central.client.requests.get") as mock_get:
            assert get_ip(CentralConfig(enabled=False), settings_path=settings_path) is None
        mock_get.assert_not_called()

    def test_request_error(self, central: CentralConfig, settings_path: Path) -> None:
        with patch("autodj.domain.central.client.requests.get") as mock_get:
            mock_get.side_effect = requests.Timeout("slow")
            assert get_ip(central, settings_path=settings_path) is None

        assert read_settings(settings_path).external_ip is None
