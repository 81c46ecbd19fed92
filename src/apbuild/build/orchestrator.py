"""
Native build orchestration for apbuild.

This module produces the static webrtc-audio-processing libraries and
reports where the rest of the build finds headers and libraries:
1. Check the incremental build stamp (skip everything when current)
2. Copy the bundled source tree into the output directory
3. Run the platform's provisioning strategy (build from source, or fetch prebuilt)
4. Validate the resulting include and library paths
5. Record the new build stamp
"""

import logging
from pathlib import Path
from typing import Optional

from ..config import BuildConfig, BuildPaths
from ..packages import SourceProvisioner
from .build_stamp import BuildStamp
from .native_provisioner import NativeProvisioner, select_provisioner

logger = logging.getLogger(__name__)


class BuildPathsError(Exception):
    """Raised when include or library paths are missing after provisioning."""

    pass


def _has_entries(path: Path) -> bool:
    return path.is_dir() and next(path.iterdir(), None) is not None


def validate_build_paths(paths: BuildPaths) -> BuildPaths:
    """Ensure both include_path and lib_path exist and are non-empty.

    Raises:
        BuildPathsError: If either directory is missing or empty
    """
    for label, path in (("include", paths.include_path), ("library", paths.lib_path)):
        if not _has_entries(path):
            raise BuildPathsError(f"Native {label} directory is missing or empty: {path}")
    return paths


class NativeBuildOrchestrator:
    """
    Produces the native static libraries for the configured target.

    Example usage:
        orchestrator = NativeBuildOrchestrator(config)
        paths = orchestrator.build()
        print(paths.include_path, paths.lib_path)
    """

    def __init__(
        self,
        config: BuildConfig,
        provisioner: Optional[NativeProvisioner] = None,
        source_provisioner: Optional[SourceProvisioner] = None,
        stamp: Optional[BuildStamp] = None,
        show_progress: bool = True,
    ):
        """
        Initialize native build orchestrator.

        Args:
            config: Build configuration
            provisioner: Strategy override (default: chosen from config.target_os)
            source_provisioner: Source copier override
            stamp: Build stamp override
            show_progress: Whether to print progress messages
        """
        self.config = config
        self.show_progress = show_progress
        self.provisioner = provisioner or select_provisioner(
            config, show_progress=show_progress
        )
        self.source_provisioner = source_provisioner or SourceProvisioner(
            config.out_dir, show_progress=show_progress
        )
        self.stamp = stamp or BuildStamp(config.out_dir)
        self.skipped = False

    def fingerprint(self) -> str:
        """Fingerprint of the current inputs, or '' when there is no source to hash."""
        bundled = Path(self.config.bundled_source)
        if not bundled.is_dir():
            return ""
        return self.stamp.compute(bundled, self.provisioner.describe())

    def build(self) -> BuildPaths:
        """
        Provision the native library and return its build paths.

        Returns:
            BuildPaths for the configured target

        Raises:
            EmptySourceError: If the bundled source tree is empty
            BuildToolError: If meson or ninja fails
            DownloadError: If the prebuilt archive cannot be downloaded
            ArchiveError: If the prebuilt archive cannot be extracted
            BuildPathsError: If the expected directories are missing afterwards
        """
        config = self.config
        paths = config.build_paths()
        self.skipped = False

        fingerprint = ""
        if config.incremental:
            fingerprint = self.fingerprint()
            if (
                self.stamp.is_current(fingerprint)
                and _has_entries(paths.include_path)
                and _has_entries(paths.lib_path)
            ):
                if self.show_progress:
                    print("Native library is up to date, skipping provisioning")
                logger.info(f"Build stamp {fingerprint[:16]} is current")
                self.skipped = True
                return paths

        self.stamp.clear()

        if config.verbose:
            print(f"Provisioning native library ({self.provisioner.describe()})")

        source_root = self.source_provisioner.ensure_source(
            config.bundled_source, destination=config.source_root
        )
        self.provisioner.provision(source_root)

        validate_build_paths(paths)

        if fingerprint:
            self.stamp.write(fingerprint)

        return paths
