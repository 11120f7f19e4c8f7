"""
Pytest configuration for the sourcepin test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Temporary directories and a small TSX project
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from sourcepin.logging_config import setup_logging
from sourcepin.paths import reset_paths


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Keep tests independent of the developer's environment."""
    os.environ.setdefault("SOURCEPIN_MACHINE_MODE", "1")
    os.environ.pop("SOURCEPIN_ATTRIBUTE_PREFIX", None)
    os.environ.pop("SOURCEPIN_CONFIG", None)


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, force=True)
    reset_paths()


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="sourcepin_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


APP_SOURCE = """import React from 'react';

export default function App({ items }) {
  return (
    <main className="app">
      <h1 className="title">Welcome</h1>
      <p>Edit me</p>
      <ul>{items.map((item) => <li key={item}>{item}</li>)}</ul>
      <button onClick={() => {}}>Go</button>
    </main>
  );
}
"""

CARD_SOURCE = """export const Card = ({ title }) => (
  <div className={title ? "card" : "empty"} id="card">
    <span>{title}</span>
  </div>
);
"""


@pytest.fixture
def tsx_project(temp_dir):
    """
    Create a temporary project with two TSX components.

    Element coordinates in src/App.tsx:
        main 5:4, h1 6:6, p 7:6, ul 8:6, li 8:31, button 9:6
    """
    src = temp_dir / "src"
    src.mkdir()
    (src / "App.tsx").write_text(APP_SOURCE, encoding="utf-8")
    (src / "Card.tsx").write_text(CARD_SOURCE, encoding="utf-8")
    yield temp_dir


