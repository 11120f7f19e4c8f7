"""
sourcepin Path Configuration

Centralized path management for sourcepin data files.
All paths are relative to the project root (current working directory).

Directory Structure:
.sourcepin/
├── backups/             # Optional pre-edit backups
└── logs/                # Log files
"""

from pathlib import Path
from typing import Optional


class SourcepinPaths:
    """
    Centralized path configuration for sourcepin.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    SOURCEPIN_DIR = ".sourcepin"
    CONFIG_NAME = "sourcepin.toml"

    BACKUPS_DIR = "backups"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def sourcepin_dir(self) -> Path:
        """Get the .sourcepin directory path."""
        return self.project_root / self.SOURCEPIN_DIR

    @property
    def project_config(self) -> Path:
        """Get the project-level config file path."""
        return self.project_root / self.CONFIG_NAME

    @property
    def user_config(self) -> Path:
        """Get the user-level config file path."""
        return Path.home() / ".config" / "sourcepin" / "config.toml"

    @property
    def backups_dir(self) -> Path:
        """Get the backups directory path."""
        return self.sourcepin_dir / self.BACKUPS_DIR

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self.sourcepin_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create all necessary directories if they don't exist."""
        self.sourcepin_dir.mkdir(parents=True, exist_ok=True)
        self.backups_dir.mkdir(exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


# Global instance for convenience
_default_paths: Optional[SourcepinPaths] = None


def get_paths(project_root: Optional[Path] = None) -> SourcepinPaths:
    """
    Get the paths configuration.

    Args:
        project_root: Optional project root override

    Returns:
        SourcepinPaths instance
    """
    global _default_paths
    if project_root is not None:
        return SourcepinPaths(project_root)
    if _default_paths is None:
        _default_paths = SourcepinPaths()
    return _default_paths


def reset_paths() -> None:
    """Reset the global paths instance (useful for testing)."""
    global _default_paths
    _default_paths = None
