import pytest

from spaify.config import Config, loader


@pytest.fixture(autouse=True)
def reset_config():
    """
    Reset the global configuration before each test.

    The CLI modifies the loaded configuration in place, so tests
    would otherwise leak settings to each other.
    """
    loader.config = Config()
    loader.config_path = None
    yield
    loader.config = Config()
    loader.config_path = None
