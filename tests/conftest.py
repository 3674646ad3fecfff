"""
Pytest configuration for the symloader test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Temp directory fixtures with sample plugin trees and archives
- A counting constructor for asserting how often definitions are built
"""

import os
import shutil
import tempfile
import threading
import time
import zipfile
from pathlib import Path

import pytest

from symloader.config import reset_resolver_config
from symloader.constructors import ModuleConstructor
from symloader.logging_config import reset_logging, setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for quiet operation."""
    os.environ.setdefault("SYMLOADER_MACHINE_MODE", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False)


@pytest.fixture(autouse=True)
def clean_resolver_config(monkeypatch):
    """Drop SYMLOADER_* overrides and the cached global config around each test."""
    for key in list(os.environ):
        if key.startswith("SYMLOADER_") and key != "SYMLOADER_MACHINE_MODE":
            monkeypatch.delenv(key, raising=False)
    reset_resolver_config()
    yield
    reset_resolver_config()


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="symloader_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def plugin_dirs(temp_dir):
    """
    Create two search directories, A and B.

    A defines:  shapes.circle, shared
    B defines:  shapes.circle (shadowed by A), shapes.square, pkg (package)

    Returns:
        Tuple of (dir_a, dir_b)
    """
    dir_a = temp_dir / "a"
    dir_b = temp_dir / "b"
    (dir_a / "shapes").mkdir(parents=True)
    (dir_b / "shapes").mkdir(parents=True)
    (dir_b / "pkg").mkdir(parents=True)

    (dir_a / "shapes" / "circle.py").write_text('SOURCE = "a"\n\ndef area(r):\n    return 3 * r * r\n')
    (dir_a / "shared.py").write_text('SOURCE = "a"\n')
    (dir_b / "shapes" / "circle.py").write_text('SOURCE = "b"\n')
    (dir_b / "shapes" / "square.py").write_text('SOURCE = "b"\n\ndef area(s):\n    return s * s\n')
    (dir_b / "pkg" / "__init__.py").write_text('SOURCE = "b-package"\n')

    yield dir_a, dir_b


@pytest.fixture
def plugin_zip(temp_dir):
    """
    Create a zip archive defining tools.hammer and tools (package).

    Returns:
        Path to the archive
    """
    archive = temp_dir / "plugins.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("tools/__init__.py", 'SOURCE = "zip-package"\n')
        zf.writestr("tools/hammer.py", 'SOURCE = "zip"\n')
    yield archive


# ============================================================================
# SPY COLLABORATORS
# ============================================================================

class CountingConstructor:
    """ModuleConstructor that counts calls and can be slowed down."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()
        self._inner = ModuleConstructor()

    def construct(self, raw):
        with self._lock:
            self.calls.append(raw.name)
        if self.delay:
            time.sleep(self.delay)
        return self._inner.construct(raw)


@pytest.fixture
def counting_constructor():
    return CountingConstructor()

