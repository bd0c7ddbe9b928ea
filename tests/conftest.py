"""Pytest configuration and fixtures."""

from __future__ import annotations

import os

import pytest

from linkos.config.settings import LinkOSSettings, clear_settings
from linkos.core.manager import WindowManager
from linkos.core.scheduler import ManualClock, Scheduler
from linkos.geometry.viewport import Viewport


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep user config files and LINKOS_* variables out of every test."""
    for name in list(os.environ):
        if name.startswith("LINKOS_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings()
    yield
    clear_settings()


@pytest.fixture
def settings() -> LinkOSSettings:
    return LinkOSSettings()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler(clock) -> Scheduler:
    return Scheduler(clock)


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(1920, 1080)


@pytest.fixture
def wm(viewport, scheduler, settings):
    manager = WindowManager(viewport, scheduler=scheduler, settings=settings)
    yield manager
    manager.shutdown()


@pytest.fixture
def make_window(wm):
    """Create and show a window through the manager."""

    def _make(title: str = "Untitled", app_id: str = "unknown", **config):
        window = wm.create_window({"title": title, "app_id": app_id, **config})
        assert window is not None
        window.show()
        return window

    return _make
