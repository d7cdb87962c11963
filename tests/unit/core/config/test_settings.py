"""Unit tests for settings, provider resolution and the bind guard."""

from __future__ import annotations

import pytest

from futurehealth.core.config.settings import Settings, get_settings
from futurehealth.core.server.app import resolve_provider
from futurehealth.core.server.main import _check_bind, _is_loopback_host, run


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        settings = Settings(_env_file=None)
        assert settings.fh_host == "127.0.0.1"
        assert settings.fh_port == 8011
        assert settings.llm_provider == "gemini"
        assert settings.gemini_model == "gemini-2.5-flash"
        assert settings.llm_timeout_seconds == 60.0

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FH_PORT", "9100")
        monkeypatch.setenv("LLM_TEMPERATURE", "0.1")
        settings = get_settings()
        assert settings.fh_port == 9100
        assert settings.llm_temperature == 0.1
        assert settings.llm_provider == "mock"

    def test_unknown_provider_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LLM_PROVIDER", "llama")
        with pytest.raises(ValueError):
            get_settings()


class TestResolveProvider:
    def test_mock(self):
        assert resolve_provider(Settings(llm_provider="mock")) == ("mock", "", "")

    def test_missing_key_degrades_to_mock(self):
        settings = Settings(llm_provider="gemini", gemini_api_key="")
        assert resolve_provider(settings) == ("mock", "", "")

    def test_configured_provider(self):
        settings = Settings(llm_provider="openai", openai_api_key="sk-test", openai_model="gpt-4o-mini")
        assert resolve_provider(settings) == ("openai", "sk-test", "gpt-4o-mini")


class TestBindGuard:
    @pytest.mark.parametrize(
        "host, loopback",
        [("127.0.0.1", True), ("localhost", True), ("::1", True), ("0.0.0.0", False), ("example.com", False)],
    )
    def test_is_loopback_host(self, host, loopback):
        assert _is_loopback_host(host) is loopback

    def test_refuses_public_bind(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FH_HOST", "0.0.0.0")
        with pytest.raises(RuntimeError, match="FH_ALLOW_INSECURE_BIND"):
            run()

    def test_insecure_bind_allowed_when_opted_in(self):
        settings = Settings(fh_host="0.0.0.0", fh_allow_insecure_bind=True)
        _check_bind(settings)

    def test_loopback_needs_no_opt_in(self):
        _check_bind(Settings(fh_host="::1"))
