"""Output directory ownership.

One invocation owns its output directory for the whole run. A PID file marks
the owner; a second invocation against the same directory fails fast while
the owner is alive, and takes over stale or corrupted PID files.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Set

import psutil

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".apbuild.pid"


class OutputDirBusyError(Exception):
    """Raised when another live process is using the output directory."""

    def __init__(self, out_dir: Path, pid: int):
        self.out_dir = out_dir
        self.pid = pid
        super().__init__(f"Output directory {out_dir} is in use by process {pid}")


class OutputDirLock:
    """PID-file lock on an output directory, usable as a context manager."""

    # Output directories locked by this process; the PID file alone cannot
    # tell two locks in the same process apart.
    _held_dirs: Set[Path] = set()

    def __init__(self, out_dir: Path):
        self.out_dir = Path(out_dir)
        self.pid_file = self.out_dir / LOCK_FILE_NAME
        self._held = False

    def _read_owner(self) -> Optional[int]:
        try:
            with open(self.pid_file) as f:
                return int(f.read().strip())
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Removing corrupted lock file {self.pid_file}: {e}")
            self.pid_file.unlink(missing_ok=True)
            return None

    def acquire(self) -> None:
        """Take ownership of the output directory.

        Raises:
            OutputDirBusyError: If another live process, or another lock in
                this process, holds the directory
        """
        self.out_dir.mkdir(parents=True, exist_ok=True)
        key = self.out_dir.resolve()
        owner = self._read_owner()
        if owner == os.getpid():
            if key in OutputDirLock._held_dirs:
                raise OutputDirBusyError(self.out_dir, owner)
            logger.info(f"Removing lock file left behind by an earlier run with PID {owner}")
        elif owner is not None:
            if psutil.pid_exists(owner):
                raise OutputDirBusyError(self.out_dir, owner)
            logger.info(f"Removing stale lock file for PID {owner}")
            self.pid_file.unlink(missing_ok=True)

        with open(self.pid_file, "w") as f:
            f.write(str(os.getpid()))
        OutputDirLock._held_dirs.add(key)
        self._held = True

    def release(self) -> None:
        if self._held:
            self.pid_file.unlink(missing_ok=True)
            OutputDirLock._held_dirs.discard(self.out_dir.resolve())
            self._held = False

    def __enter__(self) -> "OutputDirLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
