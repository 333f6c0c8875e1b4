import logging

from forbidden403.config import DEFAULT_SINK_FORMAT, Settings, configure_logging, get_settings


def test_defaults(settings):
    assert settings.log_file is None
    assert settings.log_format == DEFAULT_SINK_FORMAT
    assert settings.debug is False
    assert settings.trust_forwarded_for is False


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("FORBIDDEN403_LOG_FILE", "/var/log/app/forbidden.log")
    monkeypatch.setenv("FORBIDDEN403_TRUST_FORWARDED_FOR", "true")
    settings = Settings(_env_file=None)
    assert settings.log_file == "/var/log/app/forbidden.log"
    assert settings.trust_forwarded_for is True


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


def test_configure_logging_debug(settings):
    configure_logging(settings.model_copy(update={"debug": True}))
    assert logging.getLogger("forbidden403").level == logging.DEBUG
    configure_logging(settings)
    assert logging.getLogger("forbidden403").level == logging.INFO
