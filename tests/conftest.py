"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local commitcov package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of commitcov modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("commitcov"):
        del sys.modules[module_name]

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Variables the loader reads that a CI runner (or a developer shell) may set
_AMBIENT_ENV_PREFIXES = ("INPUT_", "GITHUB_", "COMMITCOV__")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate every test from the runner's Actions variables and global config."""
    import os

    for name in list(os.environ):
        if name.startswith(_AMBIENT_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)

    from commitcov.config import loader

    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "no-global-config.yaml")
