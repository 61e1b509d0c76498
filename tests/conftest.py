"""Shared fixtures for dver tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop handlers installed by configure_logging so they never outlive a test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_dver_handler", False):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point config and working directory at an empty temporary tree."""
    monkeypatch.setenv("DVER_CONFIG", str(tmp_path / "no-config.yml"))
    monkeypatch.delenv("DVER_INSTALL_DIR", raising=False)
    monkeypatch.delenv("DVER_RELEASES_INDEX_URL", raising=False)
    monkeypatch.delenv("DVER_LOG_LEVEL", raising=False)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return tmp_path
