"""Schema validation of decoded AI responses."""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from protoforge.core.errors import ValidationError
from protoforge.schemas.prototype import PrototypeSpec

# Maximum number of field-level diagnostics reported on a hard failure
MAX_ISSUES = 25

NO_SNIPPETS_WARNING = "No codeSnippets/files array found; output may be documentation-only."


@dataclass
class ValidationResult:
    """A validated prototype plus non-fatal advisory messages."""

    value: PrototypeSpec
    warnings: list[str] = field(default_factory=list)


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "(root)"


def format_issues(error: PydanticValidationError, limit: int = MAX_ISSUES) -> list[str]:
    """
    Turn a pydantic error into path-qualified diagnostic lines.

    Args:
        error: Pydantic ValidationError
        limit: Maximum number of lines to return

    Returns:
        Lines of the form ``"path: reason"``
    """
    issues = []
    for err in error.errors()[:limit]:
        loc = _format_location(err.get("loc", ()))
        msg = err.get("msg", "")
        input_value = err.get("input")

        line = f"{loc}: {msg}"
        # Show input value (truncated if too long)
        if input_value is not None and not isinstance(input_value, (dict, list)):
            input_str = str(input_value)
            if len(input_str) > 60:
                input_str = input_str[:57] + "..."
            line += f" (got {input_str!r})"
        issues.append(line)
    return issues


def collect_warnings(spec: PrototypeSpec) -> list[str]:
    """Collect advisory messages for sections that degrade output usefulness."""
    warnings = []

    snippets = spec.snippets()
    if not snippets:
        warnings.append(NO_SNIPPETS_WARNING)
    else:
        empty = sum(1 for snippet in snippets if snippet.is_empty)
        if empty:
            warnings.append(
                f"{empty} code snippet(s) have neither a file name nor content and will be skipped."
            )

    if spec.overview is None:
        warnings.append(
            "No overview section found; documentation falls back to the original description."
        )
    elif not spec.overview.project_name:
        warnings.append("No overview.projectName found; using the default project name.")

    if spec.bom is not None and not spec.bom_items():
        warnings.append("Bill of materials is present but empty; bom.csv will not be written.")

    return warnings


def validate_prototype(raw: Any, raw_response: Optional[str] = None) -> ValidationResult:
    """
    Validate a decoded object against the prototype schema.

    Args:
        raw: Decoded JSON value
        raw_response: Original response text, kept on the error for debugging

    Returns:
        ValidationResult with the validated spec and soft warnings

    Raises:
        ValidationError: If the shape is fundamentally incompatible
    """
    try:
        spec = PrototypeSpec.model_validate(raw)
    except PydanticValidationError as e:
        issues = format_issues(e)
        omitted = e.error_count() - len(issues)

        message_parts = [
            "AI response JSON parsed but did not match expected structure.",
            "This usually means the model returned the wrong shape or missing fields.",
            "",
            *(f"- {issue}" for issue in issues),
        ]
        if omitted > 0:
            message_parts.append(f"- ... and {omitted} more issue(s)")
        message_parts.extend(
            [
                "",
                "Tip: Try re-running with a stricter model or ask the provider to output JSON only.",
            ]
        )
        raise ValidationError(
            "\n".join(message_parts),
            issues=issues,
            parsed=raw,
            raw_response=raw_response,
        ) from e

    return ValidationResult(value=spec, warnings=collect_warnings(spec))
