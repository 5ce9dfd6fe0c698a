"""Pytest configuration and fixtures for effectport tests."""

import logging

import pytest

from effectport.adapter import OsAdapter
from effectport.dispatcher import Dispatcher

MISSING_GIT = "effectport-no-such-git-executable"


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo global logging changes made by setup_logging()."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.disable(logging.NOTSET)


@pytest.fixture
def adapter():
    """OS adapter bound to the (captured) process streams."""
    return OsAdapter()


@pytest.fixture
def dispatcher(adapter):
    return Dispatcher(adapter)


@pytest.fixture
def strict_dispatcher(adapter):
    return Dispatcher(adapter, strict_protocol=True)


@pytest.fixture
def missing_git():
    """Executable name that cannot be spawned, so the branch query fails."""
    return MISSING_GIT


@pytest.fixture
def fake_git(tmp_path):
    """Build a stand-in git executable that prints a fixed branch name."""

    def _make(output: str = "main\n", status: int = 0) -> str:
        script = tmp_path / f"fake-git-{status}"
        script.write_text(
            "#!/bin/sh\n"
            f"printf '%s' '{output}'\n"
            f"exit {status}\n",
            encoding="utf-8",
        )
        script.chmod(0o755)
        return str(script)

    return _make
