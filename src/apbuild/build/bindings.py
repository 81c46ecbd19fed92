"""Rust binding generation.

Runs the bindgen CLI over the wrapper's public header. The generated file is
written next to a temporary name and only moved into place once bindgen
succeeds, so a failed run never leaves a half-written bindings.rs behind.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..config import BuildConfig

logger = logging.getLogger(__name__)


class BindingGenerationError(Exception):
    """Raised when bindgen cannot parse the header or generate bindings."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        super().__init__(message + (f"\n{stderr}" if stderr else ""))


@dataclass
class BindingFile:
    """A generated foreign-function declaration file."""

    path: Path

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def write_text(self, text: str) -> None:
        self.path.write_text(text, encoding="utf-8")


@dataclass(frozen=True)
class BindgenOptions:
    """Generation options passed to bindgen.

    Attributes:
        generate_comments: Copy doc comments from the header
        rustified_enum: Regex of enums emitted as Rust enums
        derive_debug: Derive Debug on generated types
        derive_default: Derive Default on generated types
        derive_partialeq: Derive PartialEq on generated types
        disable_name_namespacing: Keep flat C++ names instead of prefixing namespaces
    """

    generate_comments: bool = True
    rustified_enum: str = ".*"
    derive_debug: bool = True
    derive_default: bool = True
    derive_partialeq: bool = True
    disable_name_namespacing: bool = True

    def to_args(self) -> List[str]:
        """Translate to bindgen CLI flags (comments and Debug are on by default)."""
        args: List[str] = []
        if not self.generate_comments:
            args.append("--no-doc-comments")
        if self.rustified_enum:
            args.extend(["--rustified-enum", self.rustified_enum])
        if not self.derive_debug:
            args.append("--no-derive-debug")
        if self.derive_default:
            args.append("--with-derive-default")
        if self.derive_partialeq:
            args.append("--with-derive-partialeq")
        if self.disable_name_namespacing:
            args.append("--disable-name-namespacing")
        return args


class BindingGenerator:
    """Generates bindings.rs from the wrapper header."""

    def __init__(
        self,
        config: BuildConfig,
        options: Optional[BindgenOptions] = None,
        show_progress: bool = True,
    ):
        self.config = config
        self.options = options or BindgenOptions()
        self.show_progress = show_progress

    def build_command(self, header_path: Path, include_path: Path, output: Path) -> List[str]:
        cmd = [self.config.bindgen, str(header_path), "-o", str(output)]
        cmd.extend(self.options.to_args())
        # Everything after "--" is handed to clang.
        cmd.extend(["--", f"-I{include_path}"])
        return cmd

    def generate(self, header_path: Path, include_path: Path) -> BindingFile:
        """Generate bindings for header_path.

        Args:
            header_path: Wrapper public header
            include_path: Header search root for the native library

        Returns:
            BindingFile at config.binding_file

        Raises:
            BindingGenerationError: If bindgen is missing, fails, or writes nothing
        """
        target = self.config.binding_file
        temp = target.with_suffix(target.suffix + ".tmp")
        temp.unlink(missing_ok=True)

        cmd = self.build_command(Path(header_path), Path(include_path), temp)
        if self.show_progress:
            print(f"Generating bindings from {Path(header_path).name}...")
        logger.debug(f"exec {cmd}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except KeyboardInterrupt as ke:
            from apbuild.interrupt_utils import handle_keyboard_interrupt_properly

            handle_keyboard_interrupt_properly(ke)
            raise
        except OSError as e:
            raise BindingGenerationError(f"Unable to run {self.config.bindgen}: {e}") from e

        if result.returncode != 0:
            temp.unlink(missing_ok=True)
            raise BindingGenerationError("Unable to generate bindings", result.stderr)

        if not temp.exists():
            raise BindingGenerationError(f"bindgen did not write {temp}", result.stderr)

        try:
            temp.replace(target)
        except OSError as e:
            temp.unlink(missing_ok=True)
            raise BindingGenerationError(f"Couldn't write bindings: {e}") from e

        logger.info(f"Wrote {target}")
        return BindingFile(target)
