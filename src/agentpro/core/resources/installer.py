"""Version-gated installation of the bundled resource tree.

On activation the installed-version marker is compared with the running
package version. When they differ, or nothing is installed yet, the resource
subtree under the per-user storage directory is wiped and recopied from the
bundled source, and only then is the marker updated. An `install.pending`
file brackets the wipe and copy so a half-written tree is never mistaken for
the version the marker names.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from agentpro.core.config import InstallConfig
from agentpro.core.exceptions import AgentProError, SourceMissingError
from agentpro.core.utils.io import acquire_file_lock, ensure_directory, write_text
from agentpro.core.utils.paths import get_home_dir

from .copier import copy_recursive
from .state import VersionMarker

logger = logging.getLogger(__name__)

RESOURCES_DIRNAME = "resources"
INSTALL_LOCK_NAME = "install"
INSTALL_PENDING_NAME = "install.pending"

Copier = Callable[[Path, Path], int]


@dataclass
class InstallResult:
    """Outcome of ``ResourceInstaller.ensure_installed``."""

    installed: bool
    version: str
    previous_version: Optional[str]
    resources_path: Path
    files_copied: int = 0
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "installed": self.installed,
            "version": self.version,
            "previousVersion": self.previous_version,
            "resourcesPath": str(self.resources_path),
            "filesCopied": self.files_copied,
            "warnings": list(self.warnings),
        }


class ResourceInstaller:
    """Installs the bundled tree into ``<storage>/resources`` once per version.

    The installer is the only writer of the storage directory and of the
    version marker. Installation runs under an advisory lock keyed by the
    storage directory so overlapping activations collapse into one copy.
    """

    def __init__(
        self,
        *,
        storage_path: Path,
        bundled_path: Path,
        marker: VersionMarker,
        install_config: Optional[InstallConfig] = None,
        home_dir: Optional[Path] = None,
        copier: Copier = copy_recursive,
    ) -> None:
        self.storage_path = Path(storage_path)
        self.bundled_path = Path(bundled_path)
        self.marker = marker
        self.config = install_config or InstallConfig()
        self.home_dir = Path(home_dir) if home_dir is not None else get_home_dir()
        self._copy = copier

    @property
    def resources_path(self) -> Path:
        return self.storage_path / RESOURCES_DIRNAME

    @property
    def pending_path(self) -> Path:
        return self.storage_path / INSTALL_PENDING_NAME

    def is_current(self, running_version: str) -> bool:
        """True when ``running_version`` is installed and its tree is complete.

        A pending install (wiped, then interrupted or failed before the marker was
        recorded) is never current, even when the marker names ``running_version``.
        """
        return (
            not self.marker.is_stale(running_version)
            and self.resources_path.is_dir()
            and not self.pending_path.exists()
        )

    def ensure_installed(self, running_version: str, *, force: bool = False) -> InstallResult:
        """Install the bundled tree unless ``running_version`` is already installed.

        Raises:
            SourceMissingError: the bundled tree is absent.
            CopyFailureError: the copy failed part-way; the marker is left unchanged
                and the next activation reinstalls.
            LockTimeoutError: another activation held the install lock too long.
        """
        previous = self.marker.get()
        if not force and self.is_current(running_version):
            logger.info("Resources already installed (version %s)", running_version)
            return InstallResult(
                installed=False,
                version=running_version,
                previous_version=previous,
                resources_path=self.resources_path,
            )

        if not self.storage_path.exists():
            ensure_directory(self.storage_path)
            logger.info("Created storage directory: %s", self.storage_path)

        with acquire_file_lock(
            self.storage_path / INSTALL_LOCK_NAME,
            timeout=self.config.lock_timeout_seconds,
        ):
            # Another activation may have finished while we waited for the lock.
            previous = self.marker.get()
            if not force and self.is_current(running_version):
                logger.info("Resources installed concurrently (version %s)", running_version)
                return InstallResult(
                    installed=False,
                    version=running_version,
                    previous_version=previous,
                    resources_path=self.resources_path,
                )
            result = self._install(running_version, previous)

        if self.config.external_discovery_enabled:
            result.warnings.extend(self.distribute_external())
        return result

    def _install(self, running_version: str, previous: Optional[str]) -> InstallResult:
        logger.info("Installing resources (version: %s -> %s)", previous, running_version)

        # Until the marker is recorded, the tree under resources_path is not
        # trusted, whatever version the marker still names.
        write_text(self.pending_path, running_version)
        if self.resources_path.exists():
            shutil.rmtree(self.resources_path)
            logger.info("Cleared old resources")

        if not self.bundled_path.exists():
            raise SourceMissingError(
                f"Extension resources not found at: {self.bundled_path}",
                context={"source": str(self.bundled_path)},
            )

        files_copied = self._copy(self.bundled_path, self.resources_path)
        self.marker.record(running_version)
        self.pending_path.unlink()

        logger.info("Resources installed to %s (%d files)", self.resources_path, files_copied)
        return InstallResult(
            installed=True,
            version=running_version,
            previous_version=previous,
            resources_path=self.resources_path,
            files_copied=files_copied,
        )

    @property
    def external_root(self) -> Path:
        return self.home_dir / self.config.external_discovery_dir

    def distribute_external(self) -> List[str]:
        """Copy the configured categories under ``~/<discovery dir>`` for external tools.

        Best effort: failures are logged and returned as warnings, never raised.
        """
        warnings: List[str] = []
        for category in self.config.external_discovery_categories:
            source = self.bundled_path / category
            if not source.is_dir():
                logger.debug("Skipping external discovery for missing category %s", category)
                continue
            target = self.external_root / category
            try:
                copied = self._copy(source, target)
            except (AgentProError, OSError) as exc:
                message = f"External discovery copy failed for {category}: {exc}"
                logger.warning(message)
                warnings.append(message)
                continue
            logger.info("Copied %d %s documents to %s", copied, category, target)
        return warnings

    def reset(self, *, purge: bool = False) -> None:
        """Forget the installed version so the next activation reinstalls.

        With ``purge`` the installed tree is removed as well.
        """
        with acquire_file_lock(
            self.storage_path / INSTALL_LOCK_NAME,
            timeout=self.config.lock_timeout_seconds,
        ):
            self.marker.clear()
            if purge:
                self.pending_path.unlink(missing_ok=True)
                if self.resources_path.exists():
                    shutil.rmtree(self.resources_path)
                    logger.info("Removed installed resources at %s", self.resources_path)


__all__ = ["InstallResult", "ResourceInstaller", "RESOURCES_DIRNAME"]
