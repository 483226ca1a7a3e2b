"""Tests de configuración (pydantic-settings)."""

import pytest

from core.config import AppSettings, ConfigurationError, write_user_env_vars


class TestAppSettings:
    def test_reads_prefixed_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TSOFT_BASE_URL", "https://shop.example.test/rest1/")
        monkeypatch.setenv("TSOFT_API_TOKEN", "abc")
        monkeypatch.setenv("TSOFT_DEBUG", "true")
        monkeypatch.setenv("TSOFT_BULK_MAX_CONCURRENCY", "7")

        settings = AppSettings(_env_file=None)

        assert settings.debug is True
        assert settings.bulk_max_concurrency == 7
        assert settings.require_connection() == ("https://shop.example.test/rest1", "abc")

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("TSOFT_BASE_URL", "TSOFT_API_TOKEN", "TSOFT_DEBUG"):
            monkeypatch.delenv(name, raising=False)

        settings = AppSettings(_env_file=None)

        assert settings.enhanced_image_limit == 20
        assert settings.enhanced_image_concurrency == 3
        assert settings.http_timeout_seconds == 20.0

    @pytest.mark.parametrize(
        ("base_url", "token"),
        [(None, "abc"), ("https://shop.example.test", None), ("", "")],
    )
    def test_require_connection_fails_without_url_or_token(self, base_url, token) -> None:
        settings = AppSettings(_env_file=None, base_url=base_url, api_token=token)

        with pytest.raises(ConfigurationError):
            settings.require_connection()


def test_write_user_env_vars_merges_existing(tmp_path) -> None:
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# comment\nTSOFT_DEBUG=true\nTSOFT_API_TOKEN='old'\n", encoding="utf-8")

    written = write_user_env_vars({"TSOFT_API_TOKEN": "new", "TSOFT_BASE_URL": "https://x"}, env_path=env_path)

    assert written == env_path
    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == [
        "TSOFT_API_TOKEN=new",
        "TSOFT_BASE_URL=https://x",
        "TSOFT_DEBUG=true",
    ]
