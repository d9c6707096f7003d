"""Packaging and inspection helpers for generated project directories."""

import shutil
import zipfile
from pathlib import Path
from typing import Iterator, Optional

# Dependency/vendor directories never included in archives
SKIPPED_DIRS = {"node_modules", "vendor", "venv", "__pycache__"}


def _is_skipped(entry: Path) -> bool:
    return entry.name.startswith(".") or (entry.is_dir() and entry.name in SKIPPED_DIRS)


def iter_project_files(project_dir: Path) -> Iterator[Path]:
    """Yield archivable files under a project directory in sorted order."""
    for entry in sorted(project_dir.iterdir(), key=lambda p: p.name):
        if _is_skipped(entry):
            continue
        if entry.is_dir():
            yield from iter_project_files(entry)
        elif entry.is_file():
            yield entry


def create_project_archive(project_dir: Path, output_name: Optional[str] = None) -> Path:
    """
    Create a ZIP archive of a project directory.

    Args:
        project_dir: Project directory path
        output_name: Archive stem (default: the project directory name)

    Returns:
        Path to the created ``.zip`` next to the project directory
    """
    project_dir = Path(project_dir)
    archive_path = project_dir.parent / f"{output_name or project_dir.name}.zip"

    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for file_path in iter_project_files(project_dir):
            archive.write(file_path, file_path.relative_to(project_dir).as_posix())

    return archive_path


def get_file_tree(directory: Path, prefix: str = "") -> str:
    """
    Render a directory as a text tree.

    Directories come first, then files, each alphabetical. Dot entries are hidden.

    Args:
        directory: Directory to render
        prefix: Indentation prefix (used for recursion)

    Returns:
        Tree text, one entry per line
    """
    entries = [entry for entry in Path(directory).iterdir() if not entry.name.startswith(".")]
    entries.sort(key=lambda p: (not p.is_dir(), p.name.lower()))

    lines = []
    for idx, entry in enumerate(entries):
        is_last = idx == len(entries) - 1
        connector = "└── " if is_last else "├── "
        if entry.is_dir():
            lines.append(f"{prefix}{connector}{entry.name}/\n")
            lines.append(get_file_tree(entry, prefix + ("    " if is_last else "│   ")))
        else:
            lines.append(f"{prefix}{connector}{entry.name}\n")
    return "".join(lines)


def cleanup_project(project_dir: Path) -> bool:
    """
    Remove a project directory.

    Returns:
        True if something was removed
    """
    project_dir = Path(project_dir)
    if project_dir.exists():
        shutil.rmtree(project_dir)
        return True
    return False
