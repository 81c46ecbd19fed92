"""CLI utility functions for apbuild.

This module provides error handling and formatting shared by the CLI
commands. Each fatal pipeline error gets its own presentation:
- EmptySourceError prints remediation guidance
- BuildToolError prints the tool's captured output unmodified
- DownloadError prints the HTTP status unmodified
"""

import sys

from apbuild.build import BuildToolError
from apbuild.packages import DownloadError, EmptySourceError


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message to stderr.

        Args:
            title: Error title (e.g., "Build failed")
            message: Error message details
        """
        print(file=sys.stderr)
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        print(file=sys.stderr)
        print(message, file=sys.stderr)
        print(file=sys.stderr)

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message.

        Args:
            message: Success message
        """
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message.

        Args:
            message: Warning message
        """
        print(file=sys.stderr)
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}", file=sys.stderr)

    @staticmethod
    def handle_empty_source(error: EmptySourceError) -> None:
        """Handle EmptySourceError, including how to fetch the source tree."""
        ErrorFormatter.print_error("Error: Bundled source is empty", str(error))
        print(error.remediation, file=sys.stderr)
        sys.exit(1)

    @staticmethod
    def handle_build_tool_error(error: BuildToolError) -> None:
        """Handle BuildToolError, surfacing the tool's stdout and stderr."""
        ErrorFormatter.print_error(
            f"{error.tool} failed",
            f"stderr: {error.stderr}\nstdout: {error.stdout}",
        )
        sys.exit(1)

    @staticmethod
    def handle_download_error(error: DownloadError) -> None:
        """Handle DownloadError, surfacing the HTTP status."""
        ErrorFormatter.print_error("Failed to download the asset", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle any other fatal error with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Build failed", message)

        if verbose:
            import traceback

            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)

        sys.exit(1)
