from __future__ import annotations

import shutil
import threading
import time
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from agentpro.core.config import InstallConfig
from agentpro.core.exceptions import CopyFailureError, SourceMissingError
from agentpro.core.resources import ResourceInstaller, VersionMarker, copy_recursive
from agentpro.core.utils.io import LockTimeoutError, acquire_file_lock
from helpers.trees import make_tree, snapshot


class CountingCopier:
    def __init__(self, delay: float = 0.0) -> None:
        self.calls: List[Tuple[Path, Path]] = []
        self.delay = delay

    def __call__(self, source: Path, destination: Path) -> int:
        self.calls.append((source, destination))
        if self.delay:
            time.sleep(self.delay)
        return copy_recursive(source, destination)


def _install_config(**overrides) -> InstallConfig:
    section: Dict[str, object] = {"lock_timeout_seconds": 5}
    section.update(overrides)
    return InstallConfig({"install": section})


def _make_installer(storage: Path, bundled: Path, marker: VersionMarker, home: Path, **kwargs) -> ResourceInstaller:
    kwargs.setdefault("install_config", _install_config())
    return ResourceInstaller(storage_path=storage, bundled_path=bundled, marker=marker, home_dir=home, **kwargs)


def _fingerprint(root: Path) -> Dict[str, int]:
    return {p.relative_to(root).as_posix(): p.stat().st_mtime_ns for p in root.rglob("*")}


def test_fresh_install_mirrors_bundled_tree(installer: ResourceInstaller, bundled: Path, marker: VersionMarker) -> None:
    result = installer.ensure_installed("1.0.0")

    assert result.installed is True
    assert result.previous_version is None
    assert result.files_copied == 4
    assert snapshot(installer.resources_path) == snapshot(bundled)
    assert marker.get() == "1.0.0"
    assert installer.is_current("1.0.0")


def test_creates_missing_storage_directory(installer: ResourceInstaller, storage: Path) -> None:
    assert not storage.exists()

    installer.ensure_installed("1.0.0")

    assert storage.is_dir()
    assert (storage / "resources").is_dir()


def test_second_activation_does_not_copy(storage, bundled, marker, isolated_user_env) -> None:
    copier = CountingCopier()
    installer = _make_installer(storage, bundled, marker, isolated_user_env, copier=copier)

    first = installer.ensure_installed("1.0.0")
    second = installer.ensure_installed("1.0.0")

    assert first.installed is True
    assert second.installed is False
    assert second.previous_version == "1.0.0"
    assert len(copier.calls) == 1


def test_warm_path_performs_no_writes(installer: ResourceInstaller, storage: Path) -> None:
    installer.ensure_installed("1.0.0")
    before = _fingerprint(storage)

    result = installer.ensure_installed("1.0.0")

    assert result.installed is False
    assert _fingerprint(storage) == before


def test_version_bump_reinstalls_and_drops_removed_documents(installer, bundled: Path, marker) -> None:
    installer.ensure_installed("1.0.0")
    (bundled / "beta" / "doc2.md").unlink()
    make_tree(bundled, {"gamma/new.md": "# New\n"})

    result = installer.ensure_installed("1.1.0")

    assert result.installed is True
    assert result.previous_version == "1.0.0"
    assert not (installer.resources_path / "beta" / "doc2.md").exists()
    assert (installer.resources_path / "gamma" / "new.md").is_file()
    assert snapshot(installer.resources_path) == snapshot(bundled)
    assert marker.get() == "1.1.0"


def test_missing_tree_with_current_marker_reinstalls(installer: ResourceInstaller) -> None:
    installer.ensure_installed("1.0.0")
    shutil.rmtree(installer.resources_path)

    result = installer.ensure_installed("1.0.0")

    assert result.installed is True
    assert (installer.resources_path / "alpha" / "doc1.md").is_file()


def test_force_reinstalls_current_version(storage, bundled, marker, isolated_user_env) -> None:
    copier = CountingCopier()
    installer = _make_installer(storage, bundled, marker, isolated_user_env, copier=copier)
    installer.ensure_installed("1.0.0")

    result = installer.ensure_installed("1.0.0", force=True)

    assert result.installed is True
    assert len(copier.calls) == 2


def test_source_missing_leaves_marker_unchanged(storage, tmp_path, marker, isolated_user_env) -> None:
    installer = _make_installer(storage, tmp_path / "absent", marker, isolated_user_env)

    with pytest.raises(SourceMissingError) as excinfo:
        installer.ensure_installed("1.0.0")

    assert "Extension resources not found at:" in str(excinfo.value)
    assert marker.get() is None


def test_source_missing_on_upgrade_keeps_previous_marker(installer, bundled: Path, marker) -> None:
    installer.ensure_installed("1.0.0")
    shutil.rmtree(bundled)

    with pytest.raises(SourceMissingError):
        installer.ensure_installed("2.0.0")

    assert marker.get() == "1.0.0"
    assert not installer.is_current("2.0.0")
    # The 1.0.0 tree was wiped, so it no longer counts as installed either.
    assert not installer.is_current("1.0.0")


def test_copy_failure_leaves_marker_unchanged(storage, bundled, marker, isolated_user_env) -> None:
    def failing_copier(source: Path, destination: Path) -> int:
        make_tree(destination, {"alpha/partial.md": "half"})
        raise CopyFailureError("Failed to copy resources: disk full")

    installer = _make_installer(storage, bundled, marker, isolated_user_env, copier=failing_copier)

    with pytest.raises(CopyFailureError):
        installer.ensure_installed("1.0.0")

    assert marker.get() is None
    # The next activation retries from scratch.
    installer._copy = copy_recursive
    result = installer.ensure_installed("1.0.0")
    assert result.installed is True
    assert not (installer.resources_path / "alpha" / "partial.md").exists()


def _partial_copier(source: Path, destination: Path) -> int:
    make_tree(destination, {"alpha/doc1.md": "# Doc 1\n"})
    raise CopyFailureError("Failed to copy resources: disk full")


@pytest.mark.parametrize("scenario", ["force", "tree_removed"])
def test_failed_reinstall_of_current_version_is_retried(scenario, storage, bundled, marker, isolated_user_env) -> None:
    installer = _make_installer(storage, bundled, marker, isolated_user_env)
    installer.ensure_installed("1.0.0")
    installer._copy = _partial_copier

    with pytest.raises(CopyFailureError):
        if scenario == "force":
            installer.ensure_installed("1.0.0", force=True)
        else:
            shutil.rmtree(installer.resources_path)
            installer.ensure_installed("1.0.0")

    assert marker.get() == "1.0.0"
    assert installer.pending_path.exists()
    assert not installer.is_current("1.0.0")
    assert sorted(snapshot(installer.resources_path)) == ["alpha/doc1.md"]

    installer._copy = copy_recursive
    result = installer.ensure_installed("1.0.0")

    assert result.installed is True
    assert snapshot(installer.resources_path) == snapshot(bundled)
    assert marker.get() == "1.0.0"
    assert not installer.pending_path.exists()


def test_concurrent_activations_copy_once(storage, bundled, marker, isolated_user_env) -> None:
    copier = CountingCopier(delay=0.2)
    installer = _make_installer(storage, bundled, marker, isolated_user_env, copier=copier)
    results = []

    def run() -> None:
        results.append(installer.ensure_installed("1.0.0"))

    threads = [threading.Thread(target=run) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(copier.calls) == 1
    assert sorted(r.installed for r in results) == [False, False, True]
    assert snapshot(installer.resources_path) == snapshot(bundled)


def test_lock_timeout_is_raised_when_install_lock_is_held(storage, bundled, marker, isolated_user_env) -> None:
    installer = _make_installer(
        storage, bundled, marker, isolated_user_env, install_config=_install_config(lock_timeout_seconds=0.2)
    )

    with acquire_file_lock(storage / "install", timeout=1):
        with pytest.raises(LockTimeoutError):
            installer.ensure_installed("1.0.0")

    assert marker.get() is None


def test_external_discovery_copies_configured_categories(storage, bundled, marker, isolated_user_env) -> None:
    make_tree(bundled, {"agents/a.agent.md": "a", "prompts/p.prompt.md": "p"})
    config = _install_config(external_discovery={"enabled": True, "dir": ".github", "categories": ["agents", "prompts", "skills"]})
    installer = _make_installer(storage, bundled, marker, isolated_user_env, install_config=config)

    result = installer.ensure_installed("1.0.0")

    assert result.warnings == []
    assert (isolated_user_env / ".github" / "agents" / "a.agent.md").read_text(encoding="utf-8") == "a"
    assert (isolated_user_env / ".github" / "prompts" / "p.prompt.md").is_file()
    assert not (isolated_user_env / ".github" / "skills").exists()


def test_external_discovery_failure_is_only_a_warning(storage, bundled, marker, isolated_user_env) -> None:
    make_tree(bundled, {"agents/a.agent.md": "a"})
    # A file where the discovery directory should be makes the copy fail.
    (isolated_user_env / ".github").write_text("not a directory", encoding="utf-8")
    config = _install_config(external_discovery={"enabled": True, "categories": ["agents"]})
    installer = _make_installer(storage, bundled, marker, isolated_user_env, install_config=config)

    result = installer.ensure_installed("1.0.0")

    assert result.installed is True
    assert marker.get() == "1.0.0"
    assert len(result.warnings) == 1
    assert "agents" in result.warnings[0]


def test_external_discovery_disabled_by_default(installer: ResourceInstaller, bundled: Path, isolated_user_env: Path) -> None:
    make_tree(bundled, {"agents/a.agent.md": "a"})

    installer.ensure_installed("1.0.0")

    assert not (isolated_user_env / ".github").exists()


def test_reset_forgets_version_and_optionally_purges(installer: ResourceInstaller, marker) -> None:
    installer.ensure_installed("1.0.0")

    installer.reset()
    assert marker.get() is None
    assert installer.resources_path.is_dir()

    installer.ensure_installed("1.0.0")
    installer.reset(purge=True)
    assert marker.get() is None
    assert not installer.resources_path.exists()


def test_install_result_to_dict_uses_camel_case(installer: ResourceInstaller) -> None:
    payload = installer.ensure_installed("1.0.0").to_dict()

    assert payload["installed"] is True
    assert payload["version"] == "1.0.0"
    assert payload["previousVersion"] is None
    assert payload["filesCopied"] == 4
    assert payload["resourcesPath"].endswith("resources")
