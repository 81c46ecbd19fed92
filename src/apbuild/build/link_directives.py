"""Cargo link directives.

The crate's build script forwards these lines on stdout so rustc links the
wrapper, the native library and the platform C++ runtime.
"""

import sys
from typing import List, Optional, TextIO

from ..config import (
    DEPLOYMENT_TARGET_VAR,
    BuildConfig,
    BuildPaths,
    TargetPlatform,
)
from ..config.build_config import NATIVE_LIB_NAME, WRAPPER_LIB_NAME


class LinkDirectives:
    """Builds the cargo:* lines for a finished build."""

    def __init__(self, config: BuildConfig, paths: BuildPaths):
        self.config = config
        self.paths = paths

    def lines(self) -> List[str]:
        lines = [
            f"cargo:rustc-link-search=native={self.config.out_dir}",
            f"cargo:rustc-link-search=native={self.paths.lib_path}",
            f"cargo:rustc-link-lib=static={WRAPPER_LIB_NAME}",
            f"cargo:rerun-if-env-changed={DEPLOYMENT_TARGET_VAR}",
            f"cargo:rustc-link-lib=static={NATIVE_LIB_NAME}",
        ]
        if self.config.target_os is TargetPlatform.MACOS:
            lines.append("cargo:rustc-link-lib=dylib=c++")
        elif self.config.target_os is TargetPlatform.LINUX:
            lines.append("cargo:rustc-link-lib=dylib=stdc++")
        return lines

    def emit(self, stream: Optional[TextIO] = None) -> None:
        out = stream or sys.stdout
        for line in self.lines():
            print(line, file=out)
