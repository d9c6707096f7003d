"""Markdown rendering for generated project documentation."""

import re
from typing import Any, Optional, Union

from protoforge.schemas.prototype import Guide, PrototypeSpec, TechStack, ThreeDNotes

NOT_SPECIFIED = "_Not specified_"
DEFAULT_PROJECT_NAME = "ProtoForge Project"

README_TEMPLATE = """# {project_name}

## Overview
{description}

## Category
{category}

## Difficulty
{difficulty}

## Estimated Time
{estimated_time}

## Tech Stack

{tech_stack}

## Output Layout

- code/ (source code)
- schematics/ (Mermaid diagrams, wiring notes)
- docs/ (build guide, issues, overview)
- bom.csv (bill of materials)
- report.md (single-file summary)
- prototype.json (validated AI output)
- prototype.raw.txt (raw AI output)
"""

REPORT_TEMPLATE = """# {project_name}

## Summary
{description}

## Tech Stack
{tech_stack}

## Files
{files}

"""


def natural_key(key: str) -> list[tuple[int, int, str]]:
    """Sort key that orders embedded numbers numerically (step2 < step10)."""
    parts = []
    for chunk in re.split(r"(\d+)", key):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk.lower()))
    return parts


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _format_value(value: Any) -> str:
    if isinstance(value, list):
        return _bullets([_format_value(item) for item in value])
    if isinstance(value, dict):
        return "\n".join(f"- **{key}**: {_format_value(item)}" for key, item in value.items())
    if value is None:
        return ""
    return str(value)


def format_tech_stack(tech_stack: Optional[TechStack]) -> str:
    """Render tech stack categories, or the placeholder when all are empty."""
    if tech_stack is None:
        return NOT_SPECIFIED
    sections = [
        f"### {heading}\n{_bullets(items)}" for heading, items in tech_stack.categories() if items
    ]
    return "\n\n".join(sections) if sections else NOT_SPECIFIED


def format_build_guide(build_guide: Union[str, list[str], dict[str, Any], None]) -> str:
    """
    Render a build guide.

    Strings pass through, lists become a numbered list, and mappings become
    one section per key in natural key order.
    """
    if build_guide is None:
        return ""
    if isinstance(build_guide, str):
        return build_guide
    if isinstance(build_guide, list):
        return "\n".join(f"{idx}. {step}" for idx, step in enumerate(build_guide, start=1))
    steps = sorted(build_guide.items(), key=lambda pair: (natural_key(pair[0]), pair[0]))
    return "\n\n".join(f"## {key}\n{_format_value(value)}" for key, value in steps)


def format_three_d(notes: Union[str, ThreeDNotes, None]) -> str:
    """Render enclosure and mounting notes plus any other text sections."""
    if notes is None:
        return ""
    if isinstance(notes, str):
        return notes.strip()

    sections = []
    if notes.enclosure:
        sections.append(f"## Enclosure\n{notes.enclosure}")
    if notes.mounting:
        sections.append(f"## Mounting\n{notes.mounting}")
    for key, value in (notes.model_extra or {}).items():
        if isinstance(value, str) and value.strip():
            sections.append(f"## {key[:1].upper()}{key[1:]}\n{value}")
    return "\n\n".join(sections)


class DocumentRenderer:
    """Renders the Markdown documents of a generated project."""

    def __init__(self, spec: PrototypeSpec, original_description: str = ""):
        """
        Initialize renderer.

        Args:
            spec: Validated prototype
            original_description: User description, used when the overview lacks one
        """
        self.spec = spec
        self.original_description = original_description or ""
        self.overview = spec.overview

    @property
    def project_name(self) -> str:
        if self.overview and self.overview.project_name:
            return self.overview.project_name
        return DEFAULT_PROJECT_NAME

    @property
    def description(self) -> str:
        if self.overview and self.overview.description:
            return self.overview.description
        return self.original_description.strip() or NOT_SPECIFIED

    def _overview_field(self, name: str) -> str:
        value = getattr(self.overview, name, None) if self.overview else None
        return value or NOT_SPECIFIED

    def render_readme(self) -> str:
        return README_TEMPLATE.format(
            project_name=self.project_name,
            description=self.description,
            category=self._overview_field("category"),
            difficulty=self._overview_field("difficulty"),
            estimated_time=self._overview_field("estimated_time"),
            tech_stack=format_tech_stack(self.spec.tech_stack),
        )

    def render_overview(self) -> str:
        return f"# {self.project_name}\n\n{self.description}\n"

    def render_tech_stack(self) -> str:
        return f"# Tech Stack\n\n{format_tech_stack(self.spec.tech_stack)}\n"

    def render_build_guide(self) -> Optional[str]:
        """Return the build guide page, or None when there is no guide."""
        body = format_build_guide(self.spec.build_guide)
        if not body.strip():
            return None
        return f"# Build Guide\n\n{body}\n"

    def render_issues(self) -> Optional[str]:
        """Return the issues page, or None when no issues were listed."""
        issues = self.spec.issues_and_fixes or []
        if not issues:
            return None
        blocks = []
        for idx, issue in enumerate(issues, start=1):
            blocks.append(
                f"## {idx}. {issue.problem or 'Issue'}\n\n"
                f"**Solution**\n{issue.solution or NOT_SPECIFIED}\n\n"
                f"**Prevention**\n{issue.prevention or NOT_SPECIFIED}\n"
            )
        return "# Issues & Fixes\n\n" + "\n".join(blocks)

    def render_three_d(self) -> Optional[str]:
        body = format_three_d(self.spec.three_d_description)
        if not body:
            return None
        return f"# 3D / Enclosure Notes\n\n{body}\n"

    @staticmethod
    def render_guide(guide: Guide) -> tuple[str, str]:
        """Return (title, page) for an extra guide."""
        title = (guide.title or "guide").strip() or "guide"
        return title, f"# {title}\n\n{guide.content or ''}"

    def render_report(self, artifacts: list[str]) -> str:
        """
        Render the single-file project summary.

        Args:
            artifacts: Relative paths written for this project

        Returns:
            Markdown report text
        """
        report = REPORT_TEMPLATE.format(
            project_name=self.project_name,
            description=self.description,
            tech_stack=format_tech_stack(self.spec.tech_stack),
            files=_bullets(sorted(set(artifacts))),
        )

        issues = self.spec.issues_and_fixes or []
        if issues:
            issue_lines = [
                f"- {issue.problem or 'Issue'}: {issue.solution or ''}".rstrip() for issue in issues
            ]
            report += "## Issues & Fixes\n" + "\n".join(issue_lines) + "\n\n"

        next_steps = self.spec.next_steps or []
        if next_steps:
            report += f"## Next Steps\n{_bullets(next_steps)}\n\n"

        return report
