import logging
import stat
import sys
import textwrap

import pytest


@pytest.fixture(autouse=True)
def _reset_cmdsweep_logger():
    """The CLI installs its own handler; undo it so caplog keeps working."""
    yield
    logger = logging.getLogger("cmdsweep")
    logger.handlers[:] = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_cli(tmp_path):
    """Write an executable script into tmp_path and return its path.

    The script body is Python; ``sys.argv[1:]`` holds the command arguments
    including the appended ``--format json``.
    """

    def make(name: str, body: str) -> str:
        path = tmp_path / name
        path.write_text(f"#!{sys.executable}\nimport sys\n" + textwrap.dedent(body))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return make
