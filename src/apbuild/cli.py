"""
Command-line interface for apbuild.

This module provides the `apbuild` CLI tool. It is normally invoked from the
crate's build script, which forwards the cargo environment (OUT_DIR,
CARGO_CFG_TARGET_OS, ...); every option can also be given on the command line.
"""

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from apbuild import __version__
from apbuild.build import BuildToolError, Pipeline
from apbuild.cli_utils import ErrorFormatter
from apbuild.config import BuildConfig
from apbuild.logging_utils import setup_logging
from apbuild.packages import DownloadError, EmptySourceError, ReleaseAsset


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    out_dir: Optional[Path] = None
    target_os: Optional[str] = None
    target_arch: Optional[str] = None
    bundled_source: Optional[Path] = None
    derive_serde: bool = False
    incremental: bool = True
    link_directives: bool = True
    verbose: bool = False


def build_command(args: BuildArgs) -> None:
    """Provision the native library, compile the wrapper and generate bindings.

    Examples:
        apbuild build                          # Use the cargo environment
        apbuild build --out-dir target/ap      # Explicit output directory
        apbuild build --target-os windows      # Fetch prebuilt Windows libraries
        apbuild build --derive-serde           # Add serde derives to bindings
        apbuild build --no-incremental         # Always rebuild the native library
    """
    try:
        overrides = {
            "out_dir": args.out_dir,
            "target_os": args.target_os,
            "target_arch": args.target_arch,
            "bundled_source": args.bundled_source,
            "verbose": args.verbose,
        }
        if args.derive_serde:
            overrides["derive_serde"] = True
        if not args.incremental:
            overrides["incremental"] = False

        config = BuildConfig.from_environ(**overrides)
        setup_logging(config.out_dir, verbose=args.verbose)

        if args.verbose:
            print(f"apbuild {__version__}")
            print(f"Output directory: {config.out_dir}")
            print(f"Target: {config.target_os.value} ({config.target_arch})")
            print()

        start_time = time.time()
        result = Pipeline(config, emit_link_directives=args.link_directives).run()
        build_time = time.time() - start_time

        if args.verbose:
            ErrorFormatter.print_success("Build successful!")
            print(f"Bindings: {result.binding_file.path}")
            print(f"Wrapper:  {result.wrapper_library}")
            print(f"Libs:     {result.paths.lib_path}")
            print(f"Build time: {build_time:.2f}s")
        sys.exit(0)

    except EmptySourceError as e:
        ErrorFormatter.handle_empty_source(e)
    except BuildToolError as e:
        ErrorFormatter.handle_build_tool_error(e)
    except DownloadError as e:
        ErrorFormatter.handle_download_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def url_command() -> None:
    """Print the URL of the pinned prebuilt release archive."""
    print(ReleaseAsset.default().url)
    sys.exit(0)


def main(argv: Optional[List[str]] = None) -> None:
    """apbuild - provision webrtc-audio-processing for the Rust crate."""
    parser = argparse.ArgumentParser(
        prog="apbuild",
        description="Build or fetch webrtc-audio-processing and generate Rust bindings",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"apbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    build_parser = subparsers.add_parser(
        "build",
        help="Provision the native library and generate bindings",
    )
    build_parser.add_argument(
        "-o",
        "--out-dir",
        type=Path,
        default=None,
        help="Build output directory (default: $OUT_DIR)",
    )
    build_parser.add_argument(
        "--target-os",
        default=None,
        help="Target operating system (default: $CARGO_CFG_TARGET_OS or host)",
    )
    build_parser.add_argument(
        "--target-arch",
        default=None,
        help="Target architecture (default: $CARGO_CFG_TARGET_ARCH or host)",
    )
    build_parser.add_argument(
        "--bundled-source",
        type=Path,
        default=None,
        help="Bundled native source tree (default: ./webrtc-audio-processing)",
    )
    build_parser.add_argument(
        "--derive-serde",
        action="store_true",
        help="Derive serde Serialize/Deserialize on generated types",
    )
    build_parser.add_argument(
        "--no-incremental",
        action="store_true",
        help="Rebuild the native library even if its inputs are unchanged",
    )
    build_parser.add_argument(
        "--no-link-directives",
        action="store_true",
        help="Do not print cargo link directives",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    subparsers.add_parser(
        "url",
        help="Print the prebuilt release archive URL",
    )

    parsed_args = parser.parse_args(argv)

    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    if parsed_args.command == "build":
        build_args = BuildArgs(
            out_dir=parsed_args.out_dir,
            target_os=parsed_args.target_os,
            target_arch=parsed_args.target_arch,
            bundled_source=parsed_args.bundled_source,
            derive_serde=parsed_args.derive_serde,
            incremental=not parsed_args.no_incremental,
            link_directives=not parsed_args.no_link_directives,
            verbose=parsed_args.verbose,
        )
        build_command(build_args)
    elif parsed_args.command == "url":
        url_command()


if __name__ == "__main__":
    main()
