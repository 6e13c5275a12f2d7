from __future__ import annotations

from core.config import AppSettings, _parse_env_lines, write_user_env_vars


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("NIMBUS_ENDPOINTS", '{"network": "https://cloud.test:9696/"}')
    monkeypatch.setenv("NIMBUS_PAGE_SIZE", "20")
    monkeypatch.setenv("NIMBUS_VERIFY_TLS", "false")

    settings = AppSettings(_env_file=None)

    assert settings.endpoints == {"network": "https://cloud.test:9696/"}
    assert settings.page_size == 20
    assert settings.verify_tls is False
    assert settings.auth_token is None


def test_write_user_env_vars_merges_and_skips_none(tmp_path):
    env_path = tmp_path / "nimbus" / ".env"
    write_user_env_vars({"NIMBUS_AUTH_TOKEN": "old", "NIMBUS_PAGE_SIZE": "10"}, env_path)

    write_user_env_vars({"NIMBUS_AUTH_TOKEN": "new", "NIMBUS_ENDPOINTS": None}, env_path)

    values = _parse_env_lines(env_path.read_text(encoding="utf-8"))
    assert values == {"NIMBUS_AUTH_TOKEN": "new", "NIMBUS_PAGE_SIZE": "10"}
