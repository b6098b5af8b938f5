from unittest.mock import patch

from sg_sync.sentry import setup_sentry


def test_disabled_without_dsn(monkeypatch):
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    with patch("sg_sync.sentry.sentry_sdk.init") as init:
        assert setup_sentry() is False
    init.assert_not_called()


def test_enabled_from_environment(monkeypatch):
    monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example/1")
    monkeypatch.setenv("ENVIRONMENT", "prd")
    with patch("sg_sync.sentry.sentry_sdk.init") as init:
        assert setup_sentry() is True
    kwargs = init.call_args.kwargs
    assert kwargs["dsn"] == "https://key@sentry.example/1"
    assert kwargs["environment"] == "prd"
    assert kwargs["send_default_pii"] is False
