"""
SourceEditor: text splicing with atomic whole-file writes.

Files are read and written with newline translation disabled, so offsets
computed by the parser line up with the text on disk and CRLF files keep
their line endings.
"""

import difflib
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from sourcepin.logging_config import logger

# (start, end, replacement) over code-point offsets
Splice = Tuple[int, int, str]

PathLike = Union[str, Path]


class SourceEditor:
    """
    Read, splice and write source files.

    Features:
    - Optional timestamped backups
    - Atomic writes (temp file + rename)
    - Line endings left exactly as found
    """

    def __init__(self, backup_dir: Optional[PathLike] = None):
        """
        Args:
            backup_dir: Where create_backup() puts copies (required to back up)
        """
        self.backup_dir = Path(backup_dir) if backup_dir else None

    def read_source(self, file_path: PathLike) -> str:
        """
        Read a file as UTF-8 without newline translation.

        Raises:
            OSError, UnicodeDecodeError: If the file cannot be read
        """
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def splice(self, content: str, splices: List[Splice]) -> str:
        """
        Apply non-overlapping splices to content.

        Raises:
            ValueError: If two splices overlap
        """
        parts = []
        cursor = 0
        for start, end, replacement in sorted(splices, key=lambda item: (item[0], item[1])):
            if start < cursor:
                raise ValueError(f"Overlapping edits at offset {start}")
            parts.append(content[cursor:start])
            parts.append(replacement)
            cursor = end
        parts.append(content[cursor:])
        return "".join(parts)

    def write_source(self, file_path: PathLike, content: str) -> None:
        """
        Write file atomically using temp file + rename.

        Raises:
            OSError: If the temp file cannot be created, written or renamed
        """
        path = Path(file_path)

        # Same directory as the target so the rename stays on one filesystem
        fd, temp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            if path.exists():
                shutil.copymode(str(path), temp_path)
            os.replace(temp_path, str(path))
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        logger.debug(f"Atomic write completed: {file_path}")

    def create_backup(self, file_path: PathLike) -> Optional[str]:
        """
        Create a timestamped backup of a file.

        Returns:
            Path to the backup file, or None if no backup_dir is configured

        Raises:
            OSError: If the copy fails
        """
        if self.backup_dir is None:
            return None

        path = Path(file_path)
        self.backup_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_path = self.backup_dir / f"{path.name}.{timestamp}.backup"

        shutil.copy2(str(path), str(backup_path))
        logger.debug(f"Created backup: {backup_path}")
        return str(backup_path)

    def generate_unified_diff(
        self,
        file_path: str,
        original_content: str,
        modified_content: str,
        max_diff_lines: int = 100,
    ) -> str:
        """
        Generate a unified diff between original and modified content.

        Diffs longer than max_diff_lines are cut and end with a notice.
        """
        diff_lines = list(difflib.unified_diff(
            original_content.splitlines(keepends=True),
            modified_content.splitlines(keepends=True),
            fromfile=f"a/{file_path}",
            tofile=f"b/{file_path}",
        ))

        if len(diff_lines) > max_diff_lines:
            hidden = len(diff_lines) - max_diff_lines
            diff_lines = diff_lines[:max_diff_lines]
            diff_lines.append(f"\n[... {hidden} diff lines truncated ...]\n")

        return "".join(diff_lines)
