"""Error taxonomy for the response-to-project pipeline."""

from pathlib import Path
from typing import Any, Optional


class ProtoForgeError(Exception):
    """Base class for all pipeline errors."""

    pass


class ParseError(ProtoForgeError):
    """Raised when the JSON candidate is not syntactically valid JSON."""

    def __init__(self, message: str, candidate: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.candidate = candidate
        self.raw_response = raw_response


class ValidationError(ProtoForgeError):
    """Raised when decoded JSON does not match the minimum prototype shape."""

    def __init__(
        self,
        message: str,
        issues: list[str],
        parsed: Any = None,
        raw_response: Optional[str] = None,
    ):
        super().__init__(message)
        self.issues = issues
        self.parsed = parsed
        self.raw_response = raw_response


class MaterializationIOError(ProtoForgeError):
    """Raised when writing a project artifact fails."""

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class UnsafePathError(ProtoForgeError):
    """Raised when a path would resolve outside of its base directory."""

    def __init__(self, user_path: str, base_dir: Path):
        super().__init__(f"Invalid path '{user_path}': resolves outside of {base_dir}")
        self.user_path = user_path
        self.base_dir = base_dir
