import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logger():
    # setup_logging replaces the root handlers; drop whatever a test installed
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
