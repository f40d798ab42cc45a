"""
Pytest configuration and fixtures for pykook tests.
"""

import os
import sys
import tempfile
import textwrap
from pathlib import Path

import pytest

# Keep session logs out of the working tree; must happen before pykook.util.logger is imported
os.environ.setdefault("PYKOOK_LOGS_DIR", str(Path(tempfile.gettempdir()) / "pykook-test-logs"))

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


@pytest.fixture
def yaml_text():
    """Dedent a YAML snippet written inline in a test."""
    return lambda text: textwrap.dedent(text).lstrip("\n")
