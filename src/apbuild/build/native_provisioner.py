"""Native library provisioning strategies.

Two ways of producing the static libraries the wrapper links against:

- SourceBuildProvisioner: configure with meson, build with ninja, then
  ``ninja install`` with DESTDIR pointed back into the provisioned tree.
- PrebuiltProvisioner: download the pinned release archive and extract the
  libraries (used for Windows, where the meson toolchain is not available).

The strategy is picked once per invocation by ``select_provisioner``.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..config import BuildConfig
from ..packages import AssetFetcher, ReleaseAsset
from .tool_runner import ToolRunner

logger = logging.getLogger(__name__)

MESON = "meson"
NINJA = "ninja"
BUILD_SUBDIR = "build"


class BuildState(Enum):
    """Progress of a native provisioning run."""

    NOT_CONFIGURED = "not_configured"
    CONFIGURED = "configured"
    BUILT = "built"
    INSTALLED = "installed"


class NativeProvisioner(ABC):
    """Interface for strategies that place static libraries under the source tree."""

    def __init__(self) -> None:
        self.state = BuildState.NOT_CONFIGURED

    @abstractmethod
    def provision(self, source_root: Path) -> None:
        """Produce or obtain the native libraries for source_root.

        Args:
            source_root: Provisioned source tree (libraries land in source_root/lib)
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Stable description of the strategy and its fixed inputs.

        Used as part of the incremental build fingerprint.
        """
        pass


class SourceBuildProvisioner(NativeProvisioner):
    """Builds the native library from source with meson and ninja."""

    backend = "ninja"

    def __init__(self, runner: Optional[ToolRunner] = None, show_progress: bool = True):
        super().__init__()
        self.runner = runner or ToolRunner(show_progress=show_progress)
        self.show_progress = show_progress

    def configure_command(self) -> List[str]:
        return [
            MESON,
            "setup",
            "..",
            "--prefix=/",
            "-Ddefault_library=static",
            f"--backend={self.backend}",
        ]

    def build_command(self) -> List[str]:
        return [NINJA]

    def install_command(self) -> List[str]:
        return [NINJA, "install"]

    def describe(self) -> str:
        return "source-build:" + " | ".join(
            " ".join(cmd)
            for cmd in (self.configure_command(), self.build_command(), self.install_command())
        )

    def provision(self, source_root: Path) -> None:
        """Configure, build and install into source_root.

        Raises:
            BuildToolError: If any of the three steps fails
        """
        build_dir = source_root / BUILD_SUBDIR
        build_dir.mkdir(exist_ok=True)

        self.runner.run(self.configure_command(), cwd=build_dir, tool=MESON)
        self.state = BuildState.CONFIGURED
        logger.info("meson setup complete")

        self.runner.run(self.build_command(), cwd=build_dir, tool=NINJA)
        self.state = BuildState.BUILT
        logger.info("ninja build complete")

        self.runner.run(
            self.install_command(),
            cwd=build_dir,
            env={"DESTDIR": str(source_root)},
            tool=f"{NINJA} install",
        )
        self.state = BuildState.INSTALLED
        logger.info(f"Installed native library into {source_root}")


class PrebuiltProvisioner(NativeProvisioner):
    """Fetches prebuilt static libraries from a release archive."""

    def __init__(
        self,
        fetcher: AssetFetcher,
        release: Optional[ReleaseAsset] = None,
    ):
        super().__init__()
        self.fetcher = fetcher
        self.release = release or ReleaseAsset.default()

    def describe(self) -> str:
        return f"prebuilt:{self.release.url}"

    def provision(self, source_root: Path) -> None:
        """Download and extract the release archive into source_root/lib.

        Raises:
            DownloadError: If the download fails
            ArchiveError: If extraction fails
        """
        lib_dir = source_root / "lib"
        self.fetcher.fetch_and_extract(self.release, lib_dir)
        self.state = BuildState.INSTALLED


def select_provisioner(
    config: BuildConfig,
    runner: Optional[ToolRunner] = None,
    fetcher: Optional[AssetFetcher] = None,
    show_progress: bool = True,
) -> NativeProvisioner:
    """Pick the provisioning strategy for the configured target."""
    if config.target_os.is_windows:
        return PrebuiltProvisioner(
            fetcher or AssetFetcher(config.out_dir, show_progress=show_progress)
        )
    return SourceBuildProvisioner(runner=runner, show_progress=show_progress)
