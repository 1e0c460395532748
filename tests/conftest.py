import pytest

from fazuh.vknet.config import Config


def pytest_addoption(parser):
    parser.addoption("--run-manual", action="store_true", default=False, help="run manual tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "manual: mark test as manual to run")


def pytest_collection_modifyitems(config, items):
    skip_manual = pytest.mark.skip(reason="need --run-manual option to run")

    run_manual = config.getoption("--run-manual")

    for item in items:
        if "manual" in item.keywords and not run_manual:
            item.add_marker(skip_manual)


@pytest.fixture
def fresh_config():
    """Drops the Config singleton so each test loads its own environment."""
    Config._instance = None
    yield
    Config._instance = None
