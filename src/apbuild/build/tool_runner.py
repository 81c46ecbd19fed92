"""External tool execution.

This module wraps subprocess.run for the meson/ninja/compiler/archiver
invocations made by the build. Every tool gets a fixed argument list, runs to
completion without a timeout, and a non-zero exit is fatal.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ExternalProcessResult:
    """Outcome of an external tool invocation."""

    success: bool
    stdout: str
    stderr: str
    returncode: int


class BuildToolError(Exception):
    """Raised when an external build tool exits with a non-zero status."""

    def __init__(self, tool: str, stdout: str, stderr: str, returncode: Optional[int] = None):
        self.tool = tool
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(f"{tool} failed {stderr} {stdout}".rstrip())


class ToolRunner:
    """Runs external build tools and enforces the fatal-on-failure policy."""

    def __init__(self, show_progress: bool = True):
        """Initialize tool runner.

        Args:
            show_progress: Whether to echo commands before running them
        """
        self.show_progress = show_progress

    def run(
        self,
        cmd: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        tool: Optional[str] = None,
    ) -> ExternalProcessResult:
        """Run a command and return its captured output.

        Args:
            cmd: Command and arguments
            cwd: Working directory
            env: Extra environment variables layered over the current environment
            tool: Name reported in errors (default: cmd[0])

        Returns:
            ExternalProcessResult for a successful run

        Raises:
            BuildToolError: If the tool cannot be started or exits non-zero
        """
        tool_name = tool or Path(cmd[0]).name
        argv: List[str] = [str(arg) for arg in cmd]

        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)

        if self.show_progress:
            print(f"Running command: {' '.join(argv)}" + (f" in dir: {cwd}" if cwd else ""))
        logger.debug(f"exec {argv} cwd={cwd} env_overrides={dict(env) if env else {}}")

        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                env=full_env,
                capture_output=True,
                text=True,
            )
        except KeyboardInterrupt as ke:
            from apbuild.interrupt_utils import handle_keyboard_interrupt_properly

            handle_keyboard_interrupt_properly(ke)
            raise  # Never reached, but satisfies type checker
        except OSError as e:
            raise BuildToolError(tool_name, "", f"Failed to start {argv[0]}: {e}") from e

        result = ExternalProcessResult(
            success=completed.returncode == 0,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )

        if not result.success:
            logger.error(f"{tool_name} exited with status {result.returncode}")
            raise BuildToolError(tool_name, result.stdout, result.stderr, result.returncode)

        return result
