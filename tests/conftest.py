import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'agentpro' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from agentpro.core.resources import KeyValueState, ResourceInstaller, VersionMarker
from agentpro.core.resources.state import STATE_FILENAME
from agentpro.core.stdlib_logging import reset_stdlib_logging_for_tests
from agentpro.data import clear_caches
from helpers.fakes import FakeHost
from helpers.trees import make_tree

SAMPLE_TREE = {
    "alpha/doc1.md": "# Doc 1\n",
    "beta/doc2.md": "# Doc 2\n",
    "beta/notes.txt": "not a document\n",
    "README.md": "root level file\n",
}


@pytest.fixture(autouse=True)
def isolated_user_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Point the user config dir and HOME into a per-test temporary directory.

    CRITICAL: nothing under the developer's real ~/.agentpro (or ~/.github)
    may be touched by tests.
    """
    for key in list(os.environ):
        if key.startswith("AGENTPRO_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("AGENTPRO_paths__user_config_dir", str(home / ".agentpro"))

    clear_caches()
    reset_stdlib_logging_for_tests()
    yield home
    reset_stdlib_logging_for_tests()
    clear_caches()


@pytest.fixture
def bundled(tmp_path: Path) -> Path:
    """Bundled source tree: alpha/doc1.md, beta/doc2.md plus non-document noise."""
    return make_tree(tmp_path / "bundled", SAMPLE_TREE)


@pytest.fixture
def storage(tmp_path: Path) -> Path:
    return tmp_path / "storage"


@pytest.fixture
def marker(storage: Path) -> VersionMarker:
    return VersionMarker(KeyValueState(storage / STATE_FILENAME))


@pytest.fixture
def installer(storage: Path, bundled: Path, marker: VersionMarker, isolated_user_env: Path) -> ResourceInstaller:
    return ResourceInstaller(
        storage_path=storage,
        bundled_path=bundled,
        marker=marker,
        home_dir=isolated_user_env,
    )


@pytest.fixture
def host() -> FakeHost:
    return FakeHost.create()
