"""Build configuration for apbuild.

The build environment (Cargo, or a developer shell) describes the invocation
through environment variables. They are read exactly once, in
``BuildConfig.from_environ``, and the resulting immutable value is passed to
every pipeline component.

Environment variables:
    OUT_DIR                     Build output directory (required)
    CARGO_CFG_TARGET_OS         Target operating system (default: host)
    CARGO_CFG_TARGET_ARCH       Target architecture (default: host)
    MACOSX_DEPLOYMENT_TARGET    Minimum macOS version override
    CARGO_FEATURE_DERIVE_SERDE  Enables the serde derive patch when present
    CXX / AR / BINDGEN          Tool overrides
    APBUILD_BUNDLED_SOURCE      Bundled native source tree
    APBUILD_WRAPPER_SOURCE      ABI shim source file
    APBUILD_WRAPPER_HEADER      ABI shim public header
    APBUILD_INCREMENTAL         Set to 0 to always rebuild the native library
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..packages.platform_utils import PlatformDetector

DEPLOYMENT_TARGET_VAR = "MACOSX_DEPLOYMENT_TARGET"

SOURCE_DIR_NAME = "webrtc-audio-processing"
BINDING_FILE_NAME = "bindings.rs"
WRAPPER_LIB_NAME = "webrtc_audio_processing_wrapper"
NATIVE_LIB_NAME = "webrtc_audio_processing"

# Apple silicon shipped with macOS 11; x86_64 follows the Chromium mac SDK floor.
DEFAULT_DEPLOYMENT_TARGETS: Dict[str, str] = {
    "x86_64": "10.10",
    "aarch64": "11.0",
}


class ConfigError(Exception):
    """Raised when the build environment is incomplete or invalid."""

    pass


class UnsupportedArchitectureError(Exception):
    """Raised when no default deployment target is known for an architecture."""

    def __init__(self, arch: str):
        self.arch = arch
        super().__init__(f"unknown arch: {arch}")


class TargetPlatform(Enum):
    """Target operating system family."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    OTHER_UNIX = "unix"

    @classmethod
    def parse(cls, value: str) -> "TargetPlatform":
        """Map a Cargo-style OS name onto a platform family."""
        name = value.strip().lower()
        if name in ("windows", "win32", "win64"):
            return cls.WINDOWS
        if name in ("macos", "darwin", "osx"):
            return cls.MACOS
        if name == "linux":
            return cls.LINUX
        if not name:
            raise ConfigError("Target OS must not be empty")
        return cls.OTHER_UNIX

    @property
    def is_windows(self) -> bool:
        return self is TargetPlatform.WINDOWS

    @property
    def is_apple(self) -> bool:
        return self is TargetPlatform.MACOS


def resolve_deployment_target(arch: str, override: Optional[str] = None) -> str:
    """Return the minimum macOS version to compile for.

    Args:
        arch: Target architecture (Cargo naming)
        override: Explicit MACOSX_DEPLOYMENT_TARGET value, if set

    Returns:
        Version string such as "11.0"

    Raises:
        UnsupportedArchitectureError: If no override is given and the
            architecture has no known default
    """
    if override:
        return override
    try:
        return DEFAULT_DEPLOYMENT_TARGETS[arch]
    except KeyError:
        raise UnsupportedArchitectureError(arch) from None


@dataclass(frozen=True)
class BuildPaths:
    """Resolved locations consumed by the compiler, binding generator and linker.

    Attributes:
        include_path: Header search root (the provisioned source tree)
        lib_path: Directory holding the native static libraries
    """

    include_path: Path
    lib_path: Path


@dataclass(frozen=True)
class BuildConfig:
    """Immutable description of one provisioning invocation."""

    out_dir: Path
    target_os: TargetPlatform
    target_arch: str
    bundled_source: Path = Path(SOURCE_DIR_NAME)
    wrapper_source: Path = Path("src") / "wrapper.cpp"
    wrapper_header: Path = Path("src") / "wrapper.hpp"
    deployment_target: Optional[str] = None
    derive_serde: bool = False
    cxx: str = "c++"
    ar: str = "ar"
    bindgen: str = "bindgen"
    incremental: bool = True
    verbose: bool = False

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> "BuildConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Field values that take precedence over the environment

        Returns:
            BuildConfig instance

        Raises:
            ConfigError: If OUT_DIR is missing or a value cannot be parsed
        """
        env = os.environ if environ is None else environ
        overrides = {k: v for k, v in overrides.items() if v is not None}

        out_dir = overrides.pop("out_dir", None) or env.get("OUT_DIR")
        if not out_dir:
            raise ConfigError("OUT_DIR environment var not set.")

        target_os = overrides.pop("target_os", None) or env.get("CARGO_CFG_TARGET_OS")
        if not target_os:
            target_os = PlatformDetector.detect_os()
        if not isinstance(target_os, TargetPlatform):
            target_os = TargetPlatform.parse(target_os)

        target_arch = (
            overrides.pop("target_arch", None)
            or env.get("CARGO_CFG_TARGET_ARCH")
            or PlatformDetector.detect_arch()
        )

        values: Dict[str, Any] = {
            "out_dir": Path(out_dir).resolve(),
            "target_os": target_os,
            "target_arch": target_arch,
            "deployment_target": env.get(DEPLOYMENT_TARGET_VAR) or None,
            "derive_serde": "CARGO_FEATURE_DERIVE_SERDE" in env,
            "cxx": env.get("CXX") or "c++",
            "ar": env.get("AR") or "ar",
            "bindgen": env.get("BINDGEN") or "bindgen",
            "incremental": _parse_bool(env.get("APBUILD_INCREMENTAL"), default=True),
        }
        for key, var in (
            ("bundled_source", "APBUILD_BUNDLED_SOURCE"),
            ("wrapper_source", "APBUILD_WRAPPER_SOURCE"),
            ("wrapper_header", "APBUILD_WRAPPER_HEADER"),
        ):
            if env.get(var):
                values[key] = Path(env[var])

        values.update(overrides)
        return cls(**values)

    @property
    def source_root(self) -> Path:
        """Provisioned copy of the native source tree."""
        return self.out_dir / SOURCE_DIR_NAME

    @property
    def binding_file(self) -> Path:
        return self.out_dir / BINDING_FILE_NAME

    @property
    def wrapper_library(self) -> Path:
        return self.out_dir / f"lib{WRAPPER_LIB_NAME}.a"

    def build_paths(self) -> BuildPaths:
        """Compute include and library paths for the target platform.

        The Windows release archive mirrors the native project's own module
        layout, so its libraries sit several directories below lib/.
        """
        lib_root = self.source_root / "lib"
        if self.target_os.is_windows:
            lib_path = lib_root / "webrtc" / "modules" / "audio_processing"
        else:
            lib_path = lib_root
        return BuildPaths(include_path=self.source_root, lib_path=lib_path)

    def minimum_macos_version(self) -> str:
        """Deployment target for Apple builds (override, else per-arch default)."""
        return resolve_deployment_target(self.target_arch, self.deployment_target)


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")
