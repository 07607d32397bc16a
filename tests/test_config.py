"""Tests for stitch.config — AppConfig and build time parsing."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from stitch.config import AppConfig, parse_build_time
from stitch.errors import ConfigurationError


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000
        assert cfg.debug is False
        assert cfg.site_dir == "public"
        assert cfg.not_found_page == "404.html"
        assert cfg.assets_dir is None
        assert cfg.assets_url is None
        assert cfg.build_time is None
        assert cfg.debug_marker == ("X-Stitch-Injected", "1")

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            AppConfig().debug = True  # type: ignore[misc]


class TestValidate:
    def test_valid(self, tmp_path) -> None:
        AppConfig(site_dir=tmp_path).validate()

    def test_missing_site_dir(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="site_dir"):
            AppConfig(site_dir=tmp_path / "nope").validate()

    def test_missing_assets_dir(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="assets_dir"):
            AppConfig(site_dir=tmp_path, assets_dir=tmp_path / "nope").validate()

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_bad_port(self, tmp_path, port: int) -> None:
        with pytest.raises(ConfigurationError, match="port"):
            AppConfig(site_dir=tmp_path, port=port).validate()

    def test_assets_url_must_be_http(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="assets_url"):
            AppConfig(site_dir=tmp_path, assets_url="ftp://assets").validate()

    def test_https_assets_url(self, tmp_path) -> None:
        AppConfig(site_dir=tmp_path, assets_url="https://assets.example.com").validate()


class TestParseBuildTime:
    def test_z_suffix(self) -> None:
        assert parse_build_time("2025-08-27T14:03:09Z") == datetime(
            2025, 8, 27, 14, 3, 9, tzinfo=UTC
        )

    def test_offset(self) -> None:
        parsed = parse_build_time("2025-08-27T16:03:09+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)
        assert parsed.astimezone(UTC).hour == 14

    def test_date_only_is_naive(self) -> None:
        assert parse_build_time("2025-08-27") == datetime(2025, 8, 27)

    def test_surrounding_whitespace(self) -> None:
        assert parse_build_time(" 2025-08-27T00:00:00z\n").tzinfo == timezone.utc

    def test_invalid(self) -> None:
        with pytest.raises(ConfigurationError, match="invalid build time"):
            parse_build_time("last tuesday")
