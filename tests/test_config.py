import pytest

from performance_engine.config import Settings, load_settings


def test_load_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setenv("PERFORMANCE_TIMEZONE", "UTC")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings(str(tmp_path / "missing.env"))
    assert settings.require_credentials() == ("https://example.supabase.co", "anon-key")
    assert settings.timezone == "UTC"
    assert settings.log_level == "DEBUG"


def test_load_settings_reads_env_file(monkeypatch, tmp_path):
    for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "PERFORMANCE_TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("SUPABASE_URL=https://file.supabase.co\n", encoding="utf-8")

    settings = load_settings(str(env_file))
    assert settings.supabase_url == "https://file.supabase.co"
    assert settings.timezone == "Europe/Copenhagen"
    assert settings.log_level == "INFO"
    monkeypatch.delenv("SUPABASE_URL", raising=False)


def test_missing_credentials_raise():
    with pytest.raises(ValueError, match="SUPABASE_ANON_KEY"):
        Settings(supabase_url="https://example.supabase.co", supabase_key=None).require_credentials()
