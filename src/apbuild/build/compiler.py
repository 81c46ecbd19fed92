"""ABI shim compiler.

This module compiles the C++ wrapper (a flat C ABI over the audio processing
library) into a static library that the Rust crate links. Flags mirror what
the native library's headers expect on each target:

- Windows: the WEBRTC_WIN family of preprocessor macros
- macOS: an explicit minimum deployment target, so clang emits a symbol
  table matching Xcode's
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..config import BuildConfig
from .archive_creator import ArchiveCreator
from .tool_runner import ToolRunner

logger = logging.getLogger(__name__)

WINDOWS_DEFINES = [
    "WEBRTC_WIN",
    "_WIN32",
    "__STRICT_ANSI__",
    "_WINSOCKAPI_",
    "NOMINMAX",
    "_USE_MATH_DEFINES",
]

COMMON_FLAGS = [
    "-Wno-unused-parameter",
    "-Wno-deprecated-declarations",
    "-std=c++11",
]


class CompilerError(Exception):
    """Raised when the wrapper cannot be compiled for reasons other than the compiler exit."""
    pass


class WrapperCompiler:
    """Compiles the ABI shim into lib<name>.a in the output directory."""

    def __init__(
        self,
        config: BuildConfig,
        runner: Optional[ToolRunner] = None,
        archiver: Optional[ArchiveCreator] = None,
        show_progress: bool = True
    ):
        self.config = config
        self.runner = runner or ToolRunner(show_progress=show_progress)
        self.archiver = archiver or ArchiveCreator(
            ar=config.ar, runner=self.runner, show_progress=show_progress
        )
        self.show_progress = show_progress

    def get_defines(self) -> List[str]:
        """Preprocessor macros for the target (only Windows needs any)."""
        if self.config.target_os.is_windows:
            return list(WINDOWS_DEFINES)
        return []

    def get_compile_flags(self, include_path: Path) -> List[str]:
        """Assemble compiler flags for the target.

        Raises:
            UnsupportedArchitectureError: On macOS without an override, for an
                architecture with no default deployment target
        """
        flags: List[str] = []

        if self.config.target_os.is_apple:
            flags.append(f"-mmacos-version-min={self.config.minimum_macos_version()}")

        flags.append(f"-I{include_path}")
        flags.extend(COMMON_FLAGS)

        if not self.config.target_os.is_windows:
            flags.append("-fPIC")

        flags.extend(f"-D{define}" for define in self.get_defines())
        return flags

    def build_command(self, source: Path, output: Path, include_path: Path) -> List[str]:
        cmd = [self.config.cxx]
        cmd.extend(self.get_compile_flags(include_path))
        cmd.extend(["-c", str(source), "-o", str(output)])
        return cmd

    def compile(self, include_path: Path) -> Path:
        """Compile the wrapper and archive it.

        Args:
            include_path: Header search root (BuildPaths.include_path)

        Returns:
            Path to the wrapper static library

        Raises:
            CompilerError: If the wrapper source is missing
            BuildToolError: If the compiler or archiver fails
            UnsupportedArchitectureError: See get_compile_flags
        """
        source = Path(self.config.wrapper_source)
        if not source.exists():
            raise CompilerError(f"Wrapper source not found: {source}")

        object_file = self.config.out_dir / "wrapper" / f"{source.stem}.o"
        object_file.parent.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command(source, object_file, include_path)
        if self.show_progress:
            print(f"Compiling {source.name}...")
        result = self.runner.run(cmd, tool=Path(self.config.cxx).name)
        if result.stderr:
            logger.warning(result.stderr.strip())

        return self.archiver.create_archive(self.config.wrapper_library, [object_file])
