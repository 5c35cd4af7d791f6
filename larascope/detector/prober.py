"""Filesystem existence probes relative to a project root.

Probing never raises: permission errors, invalid path strings and other
OS-level failures all read as "does not exist". Absolute paths and paths
that resolve outside the project root read as "does not exist" too.
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class IndicatorProber:
    def __init__(self, project_root: Path) -> None:
        self.project_root = Path(project_root)

    def file_exists(self, relative_path: str) -> bool:
        try:
            path = self._resolve(relative_path)
            return path is not None and path.is_file()
        except (OSError, ValueError, RuntimeError) as exc:
            logger.debug("File probe failed for %s: %s", relative_path, exc)
            return False

    def directory_exists(self, relative_path: str) -> bool:
        try:
            path = self._resolve(relative_path)
            return path is not None and path.is_dir()
        except (OSError, ValueError, RuntimeError) as exc:
            logger.debug("Directory probe failed for %s: %s", relative_path, exc)
            return False

    def _resolve(self, relative_path: str) -> Optional[Path]:
        if Path(relative_path).is_absolute():
            logger.debug("Absolute probe path ignored: %s", relative_path)
            return None
        root = self.project_root.resolve()
        path = (root / relative_path).resolve()
        if not path.is_relative_to(root):
            logger.debug("Probe path escapes project root: %s", relative_path)
            return None
        return path
