"""Platform Detection Utilities.

This module provides utilities for detecting the host platform and architecture
when the build environment does not name an explicit target.

Names follow the Cargo ``CARGO_CFG_TARGET_OS`` / ``CARGO_CFG_TARGET_ARCH``
vocabulary:
    - OS: windows, macos, linux, freebsd, ...
    - Arch: x86_64, aarch64, x86, arm
"""

import platform


class PlatformError(Exception):
    """Raised when platform detection fails or platform is unsupported."""

    pass


class PlatformDetector:
    """Detects the host platform and architecture."""

    @staticmethod
    def detect_os() -> str:
        """Detect the host operating system.

        Returns:
            Cargo-style OS name ('windows', 'macos', 'linux', ...)

        Raises:
            PlatformError: If the platform cannot be identified
        """
        system = platform.system().lower()

        if system == "windows":
            return "windows"
        elif system == "darwin":
            return "macos"
        elif system:
            return system
        else:
            raise PlatformError("Unable to determine host operating system")

    @staticmethod
    def detect_arch() -> str:
        """Detect the host CPU architecture.

        Returns:
            Cargo-style architecture name ('x86_64', 'aarch64', 'x86', 'arm')
        """
        machine = platform.machine().lower()

        if machine in ("x86_64", "amd64"):
            return "x86_64"
        elif machine in ("aarch64", "arm64"):
            return "aarch64"
        elif machine in ("i386", "i686", "x86"):
            return "x86"
        elif machine.startswith("arm"):
            return "arm"
        return machine
