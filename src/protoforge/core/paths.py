"""Path and name helpers for generated projects."""

import re
from pathlib import Path

from protoforge.core.errors import UnsafePathError


def slugify(title: str, default: str = "guide") -> str:
    """Lower-case a title and collapse non-alphanumeric runs to single hyphens."""
    slug = re.sub(r"[^a-z0-9]+", "-", str(title).strip().lower()).strip("-")
    return slug or default


def sanitize_filename(name: str, max_length: int = 50) -> str:
    """Make a filesystem-friendly stem from free text."""
    cleaned = re.sub(r"[^a-z0-9]+", "_", str(name).lower()).strip("_")
    return cleaned[:max_length]


def normalize_relative(user_path: str) -> str:
    """Convert backslashes to forward slashes and strip leading slashes."""
    return str(user_path or "").replace("\\", "/").lstrip("/")


def resolve_inside(base_dir: Path, user_path: str) -> Path:
    """
    Resolve a user-supplied relative path strictly inside a base directory.

    Args:
        base_dir: Directory the path must stay under
        user_path: Relative path (forward or backward slashes)

    Returns:
        Absolute resolved path

    Raises:
        UnsafePathError: If the path escapes the base directory or names the
            base directory itself
    """
    relative = normalize_relative(user_path)
    last = relative.rstrip("/").rsplit("/", 1)[-1]
    if last in ("", ".", ".."):
        raise UnsafePathError(user_path, base_dir)

    base = base_dir.resolve()
    target = (base / relative).resolve()
    if target == base or not target.is_relative_to(base):
        raise UnsafePathError(user_path, base_dir)
    return target
