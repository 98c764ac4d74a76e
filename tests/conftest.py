"""Shared pytest fixtures for Speedrunner tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from speedrunner.database.db import SqlKeyValueStore, configure_engine, init_db
from speedrunner.timer.engine import TimerEngine

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def kv():
    """Key/value store backed by the per-test database."""
    return SqlKeyValueStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(qapp, kv, clock):
    """Fresh TimerEngine persisting into the test database."""
    return TimerEngine(parent=None, store=kv, clock=clock)


@pytest.fixture
def engine_no_db(qapp, clock):
    """Fresh TimerEngine without persistence (pure state-machine tests)."""
    return TimerEngine(parent=None, clock=clock)
