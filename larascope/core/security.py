"""Path and content security filtering for file access.

Every path handed to the structure scanner or the linter wrapper goes
through SecurityValidator.validate_path() first:

  1. Dangerous patterns (traversal, system directories, credential files)
     are rejected unconditionally, even in developer mode.
  2. Developer mode skips the remaining checks.
  3. The path must start with an allow-listed prefix.
  4. The path must exist under the project root.

File contents are passed through sanitize_content() before being
returned to callers so credentials never leave the analyzer.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from larascope.core.config import DEFAULT_ALLOWED_PATHS, DEFAULT_RESTRICTED_FILES

logger = logging.getLogger(__name__)

DANGEROUS_PATTERNS: tuple[str, ...] = (
    "WEB-INF",
    "web.xml",
    "../",
    "..\\",
    "/etc/",
    "/var/",
    "/usr/",
    "passwd",
    "shadow",
)

_MASK = "***MASKED***"

_ARRAY_SECRET_KEYS = ("password", "pwd", "secret", "api_key", "api_secret", "token", "access_token")

# Order matters: array-style values first, then env-style assignments.
_SANITIZE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(rf"""(['"]{key}['"]\s*=>\s*['"])[^'"]*(['"]\s*[,;])""", re.IGNORECASE),
        rf"\g<1>{_MASK}\g<2>",
    )
    for key in _ARRAY_SECRET_KEYS
] + [
    (re.compile(r"(DB_PASSWORD=)\S*", re.IGNORECASE), rf"\g<1>{_MASK}"),
    (re.compile(r"(API_.*=)\S*", re.IGNORECASE), rf"\g<1>{_MASK}"),
    (re.compile(r"(SECRET_.*=)\S*", re.IGNORECASE), rf"\g<1>{_MASK}"),
    (re.compile(r"(.*_KEY=)\S*", re.IGNORECASE), rf"\g<1>{_MASK}"),
    (re.compile(r"(.*_SECRET=)\S*", re.IGNORECASE), rf"\g<1>{_MASK}"),
]


class SecurityError(ValueError):
    """Raised when a path or file fails a security check."""


class SecurityValidator:
    """Allow-list based guard for project-relative file access."""

    def __init__(
        self,
        allowed_paths: Optional[list[str]] = None,
        restricted_files: Optional[list[str]] = None,
        developer_mode: bool = False,
        project_root: Optional[Path] = None,
        log_events: bool = True,
    ) -> None:
        self.allowed_paths = list(allowed_paths if allowed_paths is not None else DEFAULT_ALLOWED_PATHS)
        self.restricted_files = list(
            restricted_files if restricted_files is not None else DEFAULT_RESTRICTED_FILES
        )
        self.developer_mode = developer_mode
        self.project_root = Path(project_root) if project_root is not None else Path.cwd()
        self.log_events = log_events

    def validate_path(self, path: str) -> None:
        """Validate a project-relative path.

        Raises:
            SecurityError: If the path is dangerous, outside the allow-list,
                or does not exist.
        """
        lowered = path.lower()
        for pattern in DANGEROUS_PATTERNS:
            if pattern.lower() in lowered:
                self._log_event(logging.WARNING, "Dangerous path access attempt: path=%s pattern=%s", path, pattern)
                raise SecurityError(f"Dangerous path detected: {pattern}")

        if self.developer_mode:
            self._log_event(logging.INFO, "Developer mode: path validation bypassed for %s", path)
            return

        if not self._in_allowed_paths(path):
            self._log_event(logging.WARNING, "Path not in allowed list: %s", path)
            raise SecurityError(f"Path not in allowed list: {path}")

        if not (self.project_root / path).exists():
            raise SecurityError(f"Path does not exist: {path}")

        logger.debug("Path access granted: %s", path)

    def is_readable_file(self, file_path: str) -> bool:
        """False when the path names a restricted file."""
        for restricted in self.restricted_files:
            if file_path.endswith(restricted):
                self._log_event(logging.INFO, "Access denied to restricted file: %s", file_path)
                return False
        return True

    def sanitize_content(self, content: str) -> str:
        """Mask credentials in PHP arrays and env-style assignments."""
        for pattern, replacement in _SANITIZE_PATTERNS:
            content = pattern.sub(replacement, content)
        return content

    def validate_php_content(self, content: str) -> dict:
        """Cheap sanity check that content looks like a PHP source file."""
        if not content.strip().startswith("<?php"):
            return {"valid": False, "error": "Content does not start with <?php tag"}
        if content.count("{") != content.count("}"):
            return {"valid": False, "error": "Unbalanced braces detected"}
        return {"valid": True, "error": None}

    def get_security_config(self) -> dict:
        return {
            "allowed_paths": list(self.allowed_paths),
            "restricted_files": list(self.restricted_files),
            "developer_mode": self.developer_mode,
            "project_root": str(self.project_root),
        }

    def set_allowed_paths(self, paths: list[str]) -> None:
        self.allowed_paths = list(paths)
        logger.info("Allowed paths updated: %s", paths)

    def add_allowed_paths(self, paths: list[str]) -> None:
        self.allowed_paths.extend(p for p in paths if p not in self.allowed_paths)
        logger.info("Additional paths added: %s", paths)

    def add_restricted_files(self, files: list[str]) -> None:
        self.restricted_files.extend(f for f in files if f not in self.restricted_files)

    def _in_allowed_paths(self, path: str) -> bool:
        # "app" names the same directory as the "app/" prefix
        as_directory = path.rstrip("/") + "/"
        return any(path.startswith(prefix) or as_directory.startswith(prefix) for prefix in self.allowed_paths)

    def _log_event(self, level: int, msg: str, *args) -> None:
        if self.log_events:
            logger.log(level, msg, *args)
