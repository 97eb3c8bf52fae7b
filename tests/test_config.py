"""Tests for settings loading."""

from __future__ import annotations

from src.call_sync.config import Settings, UnansweredPolicy


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("UNANSWERED_NEW_CONTACT_POLICY", raising=False)
        settings = Settings(_env_file=None)

        assert settings.POLL_INTERVAL_SECONDS == 60.0
        assert settings.PAGE_SIZE == 100
        assert settings.TIMEZONE == "America/Sao_Paulo"
        assert settings.UNANSWERED_NEW_CONTACT_POLICY == UnansweredPolicy.create

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("UNANSWERED_NEW_CONTACT_POLICY", "ignore")
        monkeypatch.setenv("THREEC_VERIFY_TLS", "false")
        monkeypatch.setenv("VOICEMAIL_LABELS", '["Caixa Postal"]')

        settings = Settings(_env_file=None)

        assert settings.UNANSWERED_NEW_CONTACT_POLICY == UnansweredPolicy.ignore
        assert settings.THREEC_VERIFY_TLS is False
        assert settings.VOICEMAIL_LABELS == ["Caixa Postal"]

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("THREEC_API_TOKEN", raising=False)
        monkeypatch.delenv("HUBSPOT_TOKEN", raising=False)

        assert Settings(_env_file=None).missing_credentials() == [
            "THREEC_API_TOKEN",
            "HUBSPOT_TOKEN",
        ]
        assert Settings(_env_file=None, THREEC_API_TOKEN="a", HUBSPOT_TOKEN="b").missing_credentials() == []
