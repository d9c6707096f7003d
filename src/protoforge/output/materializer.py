"""Materialize a validated prototype into a project directory."""

import json
import re
from pathlib import Path
from typing import Any, Optional

from protoforge.core.errors import (
    MaterializationIOError,
    ParseError,
    UnsafePathError,
    ValidationError,
)
from protoforge.core.logging import StructuredLogger, get_logger
from protoforge.core.paths import normalize_relative, resolve_inside, slugify
from protoforge.core.response import parse_and_validate_response
from protoforge.output.bom import render_bom_csv, render_bom_markdown
from protoforge.output.renderers import DocumentRenderer
from protoforge.schemas.manifest import GeneratedFile, GenerationResult, ProjectManifest
from protoforge.schemas.prototype import CodeSnippet, PrototypeSpec

PROJECT_DIRS = ("code", "docs", "schematics")

RAW_RESPONSE_FILE = "prototype.raw.txt"
SPEC_FILE = "prototype.json"
PARSE_ERROR_FILE = "prototype.parse-error.txt"
WARNINGS_FILE = "prototype.warnings.txt"
METADATA_FILE = ".protoforge-meta.json"

# Paths written by the pipeline itself; code snippets may not claim them
RESERVED_ARTIFACTS = {
    "README.md",
    "report.md",
    "bom.csv",
    METADATA_FILE,
    "docs/overview.md",
    "docs/tech-stack.md",
    "docs/build-guide.md",
    "docs/issues-and-fixes.md",
    "docs/bom.md",
    "docs/architecture.mmd",
    "schematics/diagram.mmd",
    "schematics/3d-description.md",
}

# Built-in pages under docs/ that guide pages must not replace
RESERVED_DOC_SLUGS = {"overview", "tech-stack", "build-guide", "issues-and-fixes", "bom"}

LANGUAGE_EXTENSIONS = {
    "python": "py",
    "micropython": "py",
    "javascript": "js",
    "typescript": "ts",
    "arduino": "ino",
    "c++": "cpp",
    "cpp": "cpp",
    "c": "c",
    "rust": "rs",
    "go": "go",
    "java": "java",
    "kotlin": "kt",
    "html": "html",
    "css": "css",
    "json": "json",
    "yaml": "yaml",
    "markdown": "md",
    "shell": "sh",
    "bash": "sh",
    "sql": "sql",
    "mermaid": "mmd",
}


def extension_for(language: Optional[str]) -> str:
    """Pick a file extension for an unnamed snippet from its language tag."""
    tag = (language or "").strip().lower().lstrip(".")
    if tag in LANGUAGE_EXTENSIONS:
        return LANGUAGE_EXTENSIONS[tag]
    if re.fullmatch(r"[a-z0-9]{1,5}", tag):
        return tag
    return "txt"


def is_reserved_artifact(relative_path: str) -> bool:
    """
    Check whether a project-relative path, or one of its parent directories,
    names a file the pipeline writes itself.
    """
    parts = relative_path.split("/")
    for depth in range(1, len(parts) + 1):
        prefix = "/".join(parts[:depth])
        if prefix in RESERVED_ARTIFACTS:
            return True
        if depth == 1 and prefix.startswith("prototype."):
            return True
    return False


class ProjectMaterializer:
    """Writes the fixed project layout for one generation run."""

    def __init__(self, project_dir: Path, logger: Optional[StructuredLogger] = None):
        """
        Initialize materializer.

        Args:
            project_dir: Target directory owned by this run
            logger: Optional logger (default: protoforge.materializer)
        """
        self.project_dir = Path(project_dir)
        self.logger = logger or get_logger("protoforge.materializer")
        self.written: list[str] = []
        self.warnings: list[str] = []

    def _write(self, relative_path: str, content: str) -> Path:
        """Write one artifact, wrapping OS errors so the run fails fast."""
        target = self.project_dir / relative_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except (OSError, UnicodeError) as e:
            raise MaterializationIOError(f"Failed to write {relative_path}: {e}", target) from e

        if relative_path not in self.written:
            self.written.append(relative_path)
        self.logger.log_artifact(relative_path, len(content))
        return target

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        self.logger.warning(message, event_type="materialize_warning")

    def create_structure(self) -> None:
        """Create the directory skeleton before any content is written."""
        for name in PROJECT_DIRS:
            try:
                (self.project_dir / name).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise MaterializationIOError(
                    f"Failed to create directory {name}/: {e}", self.project_dir / name
                ) from e

    def write_raw_response(self, response: Any) -> None:
        self._write(RAW_RESPONSE_FILE, "" if response is None else str(response))

    def write_parse_error(self, error: Exception) -> None:
        self._write(PARSE_ERROR_FILE, str(error))

    def write_json(self, relative_path: str, data: Any) -> None:
        self._write(relative_path, json.dumps(data, indent=2, ensure_ascii=False))

    def write_spec(self, spec: PrototypeSpec) -> None:
        self.write_json(SPEC_FILE, spec.to_json_dict())

    def write_warnings(self, warnings: list[str]) -> None:
        if warnings:
            self._write(WARNINGS_FILE, "".join(f"- {warning}\n" for warning in warnings))

    def _snippet_destination(self, snippet: CodeSnippet, index: int) -> str:
        """Relative destination for a snippet; bare names go under code/."""
        if not snippet.file_name:
            return f"code/snippet-{index}.{extension_for(snippet.language)}"
        if "/" in snippet.file_name or "\\" in snippet.file_name:
            return normalize_relative(snippet.file_name)
        return f"code/{snippet.file_name}"

    def _collides_with_tree(self, target: Path) -> bool:
        """True if the target is a directory or one of its parents is a file."""
        if target.is_dir():
            return True
        root = self.project_dir.resolve()
        return any(
            parent.exists() and not parent.is_dir()
            for parent in target.parents
            if parent.is_relative_to(root)
        )

    def write_code_snippets(self, spec: PrototypeSpec) -> list[GeneratedFile]:
        """
        Write code snippets and return the generated file entries.

        Snippets with neither a name nor content are skipped. Paths that
        leave the project root or collide with generated artifacts and
        directories are rejected with a warning. When two snippets share a
        destination the later one wins.
        """
        files: list[GeneratedFile] = []
        destinations: dict[str, int] = {}

        for index, snippet in enumerate(spec.snippets(), start=1):
            if snippet.is_empty:
                self.logger.debug(f"Skipping empty code snippet #{index}")
                continue

            relative = self._snippet_destination(snippet, index)
            try:
                target = resolve_inside(self.project_dir, relative)
            except UnsafePathError:
                self._warn(
                    f"Code snippet #{index} path '{snippet.file_name}' escapes the project "
                    f"directory; skipped."
                )
                continue
            names_directory = relative.endswith("/")
            relative = target.relative_to(self.project_dir.resolve()).as_posix()

            if is_reserved_artifact(relative):
                self._warn(
                    f"Code snippet #{index} path '{relative}' is reserved for a generated "
                    f"file; skipped."
                )
                continue
            if names_directory or self._collides_with_tree(target):
                self._warn(
                    f"Code snippet #{index} path '{snippet.file_name}' names a directory "
                    f"or sits below an existing file; skipped."
                )
                continue

            if not snippet.code:
                self._warn(f"Code snippet '{relative}' has no content; wrote an empty file.")

            entry = GeneratedFile(
                name=relative,
                path=str(target),
                language=snippet.language or "txt",
            )
            if relative in destinations:
                first = destinations[relative]
                self._warn(
                    f"Duplicate code snippet path '{relative}': snippet #{index} "
                    f"overwrites snippet #{first}."
                )
                files = [f for f in files if f.name != relative]
            destinations[relative] = index

            self._write(relative, snippet.code or "")
            files.append(entry)

        return files

    def write_documentation(self, renderer: DocumentRenderer, spec: PrototypeSpec) -> None:
        self._write("README.md", renderer.render_readme())
        self._write("docs/overview.md", renderer.render_overview())
        self._write("docs/tech-stack.md", renderer.render_tech_stack())

        build_guide = renderer.render_build_guide()
        if build_guide:
            self._write("docs/build-guide.md", build_guide)

        issues = renderer.render_issues()
        if issues:
            self._write("docs/issues-and-fixes.md", issues)

        three_d = renderer.render_three_d()
        if three_d:
            self._write("schematics/3d-description.md", three_d)

        for guide in spec.guides or []:
            title, page = renderer.render_guide(guide)
            slug = slugify(title)
            if slug in RESERVED_DOC_SLUGS:
                self._warn(
                    f"Guide '{title}' collides with a built-in page; written as docs/guide-{slug}.md."
                )
                slug = f"guide-{slug}"

            destination = f"docs/{slug}.md"
            if destination in self.written:
                suffix = 2
                while f"docs/{slug}-{suffix}.md" in self.written:
                    suffix += 1
                renamed = f"docs/{slug}-{suffix}.md"
                self._warn(
                    f"Guide '{title}' collides with {destination} written earlier; written as {renamed}."
                )
                destination = renamed
            self._write(destination, page)

    def write_diagrams(self, spec: PrototypeSpec) -> None:
        """Write the diagram to both schematic and docs locations."""
        source = spec.diagram_source().strip()
        if not source:
            return
        self._write("schematics/diagram.mmd", source + "\n")
        self._write("docs/architecture.mmd", source + "\n")

    def write_bom(self, spec: PrototypeSpec) -> None:
        items = spec.bom_items()
        if not items:
            return
        self._write("bom.csv", render_bom_csv(items))
        self._write("docs/bom.md", render_bom_markdown(items))

    def materialize(
        self,
        spec: PrototypeSpec,
        original_description: str = "",
        warnings: Optional[list[str]] = None,
    ) -> ProjectManifest:
        """
        Write every artifact for a validated prototype.

        Args:
            spec: Validated prototype
            original_description: User description used as documentation fallback
            warnings: Validation warnings to persist alongside the project

        Returns:
            ProjectManifest describing what was written

        Raises:
            MaterializationIOError: On the first file-system failure
        """
        self.create_structure()
        self.write_spec(spec)

        renderer = DocumentRenderer(spec, original_description)
        files = self.write_code_snippets(spec)
        self.write_documentation(renderer, spec)
        self.write_diagrams(spec)
        self.write_bom(spec)

        all_warnings = list(warnings or []) + self.warnings
        self.write_warnings(all_warnings)
        self._write("report.md", renderer.render_report(self.written + ["report.md"]))

        return ProjectManifest(files=files, artifacts=list(self.written), warnings=all_warnings)


def generate_project_from_response(
    response: str,
    project_dir: Path,
    original_description: str = "",
    logger: Optional[StructuredLogger] = None,
) -> GenerationResult:
    """
    Parse an AI response and materialize it into a project directory.

    The raw response is always written first. If parsing or validation fails,
    the error text (and the decoded object, when there is one) is written
    before the error is re-raised.

    Args:
        response: Raw AI response text
        project_dir: Target directory
        original_description: User description used as documentation fallback
        logger: Optional logger

    Returns:
        GenerationResult with written files and the validated prototype

    Raises:
        ParseError: If no valid JSON can be decoded
        ValidationError: If the JSON does not match the prototype schema
        MaterializationIOError: On the first file-system failure
    """
    materializer = ProjectMaterializer(Path(project_dir), logger=logger)
    materializer.create_structure()
    materializer.write_raw_response(response)

    try:
        result = parse_and_validate_response(response)
    except (ParseError, ValidationError) as e:
        materializer.write_parse_error(e)
        if isinstance(e, ValidationError) and e.parsed is not None:
            materializer.write_json(SPEC_FILE, e.parsed)
        raise

    manifest = materializer.materialize(result.value, original_description, result.warnings)
    return GenerationResult(
        success=True,
        files=manifest.files,
        parsed=result.value,
        project_dir=str(project_dir),
        artifacts=manifest.artifacts,
        warnings=manifest.warnings,
    )
