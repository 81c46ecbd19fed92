"""Archive Creator.

This module handles creating static library archives (.a files) from compiled
object files using the archiver tool (ar).
"""

from pathlib import Path
from typing import List, Optional

from .tool_runner import ToolRunner


class ArchiveCreationError(Exception):
    """Raised when archive creation operations fail."""
    pass


class ArchiveCreator:
    """Creates static library archives from object files."""

    def __init__(
        self,
        ar: str = "ar",
        runner: Optional[ToolRunner] = None,
        show_progress: bool = True
    ):
        """Initialize archive creator.

        Args:
            ar: Archiver executable
            runner: Tool runner (default: ToolRunner)
            show_progress: Whether to show archive creation progress
        """
        self.ar = ar
        self.runner = runner or ToolRunner(show_progress=show_progress)
        self.show_progress = show_progress

    def create_archive(self, archive_path: Path, object_files: List[Path]) -> Path:
        """Create static library archive from object files.

        Args:
            archive_path: Path for output .a file
            object_files: List of object file paths to archive

        Returns:
            Path to generated archive file

        Raises:
            ArchiveCreationError: If there is nothing to archive or no archive appears
            BuildToolError: If the archiver exits non-zero
        """
        if not object_files:
            raise ArchiveCreationError("No object files provided for archive")

        archive_path.parent.mkdir(parents=True, exist_ok=True)
        # ar appends to an existing archive; start clean so old members never linger.
        archive_path.unlink(missing_ok=True)

        # 'rcs' flags: r=insert/replace, c=create, s=index (ranlib)
        cmd = [self.ar, "rcs", str(archive_path)]
        cmd.extend(str(obj) for obj in object_files)

        if self.show_progress:
            print(f"Creating {archive_path.name} archive from {len(object_files)} object files...")

        self.runner.run(cmd, tool=Path(self.ar).name)

        if not archive_path.exists():
            raise ArchiveCreationError(f"Archive was not created: {archive_path}")

        if self.show_progress:
            size = archive_path.stat().st_size
            print(f"✓ Created {archive_path.name}: {size:,} bytes")

        return archive_path
