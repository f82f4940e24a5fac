import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger():
    # the CLI callback reconfigures the root logger onto CliRunner's captured stderr
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
