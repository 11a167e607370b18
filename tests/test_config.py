"""Tests for settings validation, redaction and the YAML config file."""

import pytest

from reelnotify.core import (
    REELNOTIFY_CONFIG_FILE,
    REELNOTIFY_HOME,
    ReelConfig,
    load_config,
    save_config,
)
from reelnotify.notifications.config import DeliveryMode, NotifierSettings
from reelnotify.notifications.redact import redact_api_key, redact_text, redact_webhook


class TestRedaction:
    def test_webhook(self, webhook_url):
        assert redact_webhook(webhook_url) == "https://discord.com/api/webhooks/123456789/***"

    def test_discordapp_webhook(self):
        url = "https://discordapp.com/api/webhooks/1/tok"
        assert redact_webhook(url) == "https://discordapp.com/api/webhooks/1/***"

    def test_foreign_url(self):
        assert redact_webhook("https://example.com/hook/secret") == "***[INVALID_WEBHOOK]***"

    def test_invalid_values(self):
        assert redact_webhook(None) == "[INVALID]"
        assert redact_api_key("") == "[INVALID]"

    def test_api_key(self):
        assert redact_api_key("abcd1234efgh") == "abcd***gh"
        assert redact_api_key("short") == "***"

    def test_text(self):
        assert redact_text("apikey=abcd1234efgh&t=x", "abcd1234efgh") == "apikey=abcd***gh&t=x"


class TestNotifierSettings:
    def test_defaults(self):
        settings = NotifierSettings()
        assert settings.mode == DeliveryMode.UPDATES.value
        assert settings.kind == "started"
        assert settings.timeouts.metadata == 5.0
        assert settings.timeouts.webhook == 10.0

    def test_valid(self, webhook_url):
        settings = NotifierSettings(
            webhook_url=webhook_url,
            omdb_api_key="abcd1234",
            server_url="http://localhost:8265",
            mode="sequential",
            kind="failed",
        )
        assert settings.collect_errors() == []

    def test_missing_webhook(self):
        assert NotifierSettings().collect_errors() == ["Discord webhook URL is required"]

    @pytest.mark.parametrize(
        "url",
        [
            "discord.com/api/webhooks/1/abc",
            "http://discord.com/api/webhooks/1/abc",
            "https://discord.com/api/webhooks/abc/def",
            "https://discord.com/api/webhooks/1/abc/extra",
        ],
    )
    def test_bad_webhook(self, url):
        errors = NotifierSettings(webhook_url=url).collect_errors()
        assert len(errors) == 1
        assert "Invalid" in errors[0]
        assert "abc" not in errors[0]

    def test_webhook_with_trailing_newline(self, webhook_url):
        errors = NotifierSettings(webhook_url=webhook_url + "\n").collect_errors()
        assert len(errors) == 1
        assert "Invalid Discord webhook URL format" in errors[0]
        assert "s3cr3t" not in errors[0]

    def test_api_key_with_trailing_newline(self, webhook_url):
        settings = NotifierSettings(webhook_url=webhook_url, omdb_api_key="abcd1234\n")
        errors = settings.collect_errors()
        assert len(errors) == 1
        assert "invalid characters" in errors[0]

    @pytest.mark.parametrize(
        "key,message",
        [
            ("   ", "cannot be empty"),
            ("abc123", "invalid length"),
            ("abcd-1234-efgh", "invalid characters"),
        ],
    )
    def test_bad_api_key(self, webhook_url, key, message):
        errors = NotifierSettings(webhook_url=webhook_url, omdb_api_key=key).collect_errors()
        assert len(errors) == 1
        assert message in errors[0]

    def test_bad_api_key_is_redacted(self, webhook_url):
        errors = NotifierSettings(webhook_url=webhook_url, omdb_api_key="abcd-1234-efgh").collect_errors()
        assert "abcd-1234-efgh" not in errors[0]

    def test_bad_server_url(self, webhook_url):
        errors = NotifierSettings(webhook_url=webhook_url, server_url="localhost").collect_errors()
        assert errors == ["Invalid server URL format: localhost"]

    def test_errors_are_collected(self):
        errors = NotifierSettings(kind="paused", mode="burst").collect_errors()
        assert len(errors) == 3


class TestConfigFile:
    def test_paths(self):
        assert REELNOTIFY_HOME.name == ".reelnotify"
        assert REELNOTIFY_CONFIG_FILE.parent == REELNOTIFY_HOME

    def test_missing_file_gives_defaults(self, temp_dir):
        config = load_config(temp_dir / "missing.yaml")
        assert config == ReelConfig()

    def test_round_trip(self, temp_dir, webhook_url):
        path = temp_dir / "config.yaml"
        config = ReelConfig(
            notifier=NotifierSettings(webhook_url=webhook_url, mode="sequential"),
            library_name="Anime",
        )
        save_config(config, path)

        loaded = load_config(path)
        assert loaded.notifier.webhook_url == webhook_url
        assert loaded.notifier.mode == "sequential"
        assert loaded.library_name == "Anime"

    def test_corrupt_file_gives_defaults(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("notifier: [unclosed")
        assert load_config(path) == ReelConfig()
