import pytest

from zenpak.utils import close_logging, init_logging


@pytest.fixture(scope="session", autouse=True)
def _log_to_tmp(tmp_path_factory):
    close_logging()
    init_logging(tmp_path_factory.mktemp("logs") / "convert.log")
    yield
    close_logging()
