"""Bundled source provisioning.

The native library ships as a nested source tree (a git submodule). Builds
never run inside it; instead a fresh copy is made in the build output
directory on every run so stale objects cannot leak between invocations.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

REMEDIATION = (
    "The webrtc-audio-processing source directory is empty.\n"
    "See the crate README for installation instructions.\n"
    "Remember to clone the repo recursively if building from source."
)


class EmptySourceError(Exception):
    """Raised when the bundled source tree has no entries."""

    def __init__(self, bundled_path: Path, remediation: str = REMEDIATION):
        self.bundled_path = bundled_path
        self.remediation = remediation
        super().__init__(
            f"Aborting compilation because bundled source directory is empty: {bundled_path}"
        )


class SourceCopyError(Exception):
    """Raised when the source tree cannot be copied into the output directory."""

    pass


class SourceProvisioner:
    """Materializes a writable copy of the bundled source tree.

    Example usage:
        provisioner = SourceProvisioner(out_dir)
        source_root = provisioner.ensure_source(Path("webrtc-audio-processing"))
    """

    def __init__(self, out_dir: Path, show_progress: bool = True):
        """Initialize source provisioner.

        Args:
            out_dir: Build output directory the copy is placed in
            show_progress: Whether to print progress messages
        """
        self.out_dir = Path(out_dir)
        self.show_progress = show_progress

    def destination_for(self, bundled_path: Path) -> Path:
        """Location of the provisioned copy for a bundled tree."""
        return self.out_dir / Path(bundled_path).resolve().name

    def ensure_source(self, bundled_path: Path, destination: Optional[Path] = None) -> Path:
        """Copy bundled_path into the output directory, replacing any old copy.

        Args:
            bundled_path: Bundled source tree (must contain at least one entry)
            destination: Explicit destination (default: out_dir/<tree name>)

        Returns:
            Root of the provisioned copy

        Raises:
            EmptySourceError: If bundled_path is missing or empty
            SourceCopyError: If removing the old copy or copying fails
        """
        source = Path(bundled_path).resolve()
        if self.show_progress:
            print(f"Bundle path: {bundled_path}")

        if not source.is_dir() or next(source.iterdir(), None) is None:
            raise EmptySourceError(source)

        dest = Path(destination) if destination else self.destination_for(source)
        if self.show_progress:
            print(f"Copy from {source} to {dest}, exists: {dest.is_dir()}")

        try:
            if dest.is_dir():
                shutil.rmtree(dest)
            elif dest.exists():
                dest.unlink()
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, dest, symlinks=True)
        except (OSError, shutil.Error) as e:
            raise SourceCopyError(f"Failed to copy {source} to {dest}: {e}") from e

        logger.info(f"Provisioned source tree at {dest}")
        if self.show_progress:
            print("Copied")
        return dest
