import pytest

from forbidden403.config import Settings, get_settings
from forbidden403.error_log import configure_error_log, sink_logger


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def lines():
    return []


@pytest.fixture
def log_file(tmp_path, settings):
    """Point the diagnostic sink at a temp file, restore afterwards."""
    path = tmp_path / "forbidden403.log"
    configure_error_log(settings.model_copy(update={"log_file": str(path)}), force=True)
    yield path
    for handler in list(sink_logger.handlers):
        sink_logger.removeHandler(handler)
        handler.close()
    get_settings.cache_clear()
