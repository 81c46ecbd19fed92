"""Incremental build stamp.

A stamp file in the output directory records a fingerprint of everything the
native provisioning step depends on: the bundled source tree contents and the
strategy (fixed tool arguments or release URL). When the fingerprint matches
and the libraries are still present, the native step can be skipped.
"""

import hashlib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

STAMP_FILE_NAME = ".apbuild-native.stamp"


class BuildStamp:
    """Reads and writes the native build fingerprint."""

    def __init__(self, out_dir: Path, chunk_size: int = 65536):
        self.path = Path(out_dir) / STAMP_FILE_NAME
        self.chunk_size = chunk_size

    def compute(self, source_dir: Path, description: str) -> str:
        """Fingerprint source_dir contents together with a strategy description.

        File paths are hashed relative to source_dir, in sorted order, so the
        result does not depend on where the tree lives or on directory
        iteration order.
        """
        sha256 = hashlib.sha256()
        sha256.update(description.encode("utf-8"))
        source_dir = Path(source_dir)

        for path in sorted(p for p in source_dir.rglob("*") if p.is_file()):
            rel = path.relative_to(source_dir).as_posix()
            sha256.update(b"\0" + rel.encode("utf-8") + b"\0")
            with open(path, "rb") as f:
                for chunk in iter(lambda: f.read(self.chunk_size), b""):
                    sha256.update(chunk)

        return sha256.hexdigest()

    def read(self) -> str:
        """Return the stored fingerprint, or an empty string if there is none."""
        try:
            return self.path.read_text(encoding="utf-8").strip()
        except OSError:
            return ""

    def is_current(self, fingerprint: str) -> bool:
        return bool(fingerprint) and self.read() == fingerprint

    def write(self, fingerprint: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(fingerprint + "\n", encoding="utf-8")
        logger.debug(f"Wrote build stamp {fingerprint[:16]}")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
