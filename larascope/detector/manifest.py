"""composer.json reader.

Loads the project's dependency manifest into ManifestData. Any read or
parse failure yields an empty ManifestData and a False success flag;
the classifier maps that to the "unknown" category.
"""

import json
import logging
from pathlib import Path

from larascope.detector.types import ManifestData

logger = logging.getLogger(__name__)

MANIFEST_FILE = "composer.json"


class ManifestReader:
    """Reads one manifest file relative to a fixed project root."""

    def __init__(self, project_root: Path, manifest_file: str = MANIFEST_FILE) -> None:
        self.project_root = Path(project_root)
        self.manifest_path = self.project_root / manifest_file

    def load(self) -> tuple[ManifestData, bool]:
        """Return (manifest, ok). ok is False on any read or parse failure."""
        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.warning("No manifest found at %s", self.manifest_path)
            return ManifestData(), False
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Failed to read manifest %s: %s", self.manifest_path, exc)
            return ManifestData(), False

        if not isinstance(data, dict):
            logger.error("Manifest %s is not a JSON object", self.manifest_path)
            return ManifestData(), False

        return (
            ManifestData(
                name=_as_str(data.get("name")),
                description=_as_str(data.get("description")),
                dependencies=_as_constraints(data.get("require")),
                dev_dependencies=_as_constraints(data.get("require-dev")),
            ),
            True,
        )


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def _as_constraints(value: object) -> dict[str, str]:
    # composer writes an empty "require" as [] when generated from PHP arrays
    if not isinstance(value, dict):
        return {}
    return {str(name): str(constraint) for name, constraint in value.items()}
