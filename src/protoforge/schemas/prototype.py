"""Schema for the prototype document returned by the model.

The schema encodes the minimum shape contract only. Unknown keys are kept,
and several fields accept more than one key name because model vocabulary
drifts across providers. Synonyms live in ``FIELD_ALIASES`` (canonical key
first) and are bound to each field once, as its validation alias.
"""

from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

FIELD_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    "Overview": {
        "project_name": ("projectName", "name", "title"),
        "description": ("description",),
        "category": ("category",),
        "difficulty": ("difficulty",),
        "estimated_time": ("estimatedTime",),
    },
    "TechStack": {
        "hardware": ("hardware", "hw"),
        "software": ("software", "softwareStack", "sw"),
        "protocols": ("protocols",),
        "tools": ("tools",),
    },
    "CodeSnippet": {
        "file_name": ("fileName", "filename", "name", "path"),
        "code": ("code", "content"),
        "language": ("language", "extension"),
    },
    "SchematicSource": {
        "mermaid": ("mermaid",),
        "diagram": ("diagram",),
    },
    "BomItem": {
        "part_number": ("partNumber", "part", "sku"),
        "description": ("description", "name"),
        "quantity": ("quantity", "qty"),
        "unit_price": ("unitPrice", "price"),
        "link": ("link", "url"),
    },
    "BomList": {
        "components": ("components", "items", "parts"),
    },
    "IssueFix": {
        "problem": ("problem", "issue"),
        "solution": ("solution", "fix"),
        "prevention": ("prevention",),
    },
    "Guide": {
        "title": ("title",),
        "content": ("content",),
    },
    "ThreeDNotes": {
        "enclosure": ("enclosure",),
        "mounting": ("mounting",),
    },
    "PrototypeSpec": {
        "overview": ("overview",),
        "tech_stack": ("techStack",),
        "code_snippets": ("codeSnippets", "files"),
        "schematic": ("schematic", "diagram"),
        "bom": ("bom", "billOfMaterials"),
        "build_guide": ("buildGuide",),
        "issues_and_fixes": ("issuesAndFixes",),
        "next_steps": ("nextSteps",),
        "guides": ("guides",),
        "three_d_description": ("threeDDescription", "threeD", "enclosure3d"),
    },
}

# Keys tried, in order, when a list item is an object but text is expected
TEXT_KEYS = ("name", "title", "text", "description", "step", "content")


def aliased(model: str, field: str, **kwargs: Any) -> Any:
    """Declare an optional field bound to its synonyms from FIELD_ALIASES."""
    names = FIELD_ALIASES[model][field]
    return Field(
        default=None,
        validation_alias=AliasChoices(*names),
        serialization_alias=names[0],
        **kwargs,
    )


def _stringify_scalar(v: Any) -> Any:
    if isinstance(v, (bool, int, float)):
        return str(v)
    return v


def _coerce_string_list(v: Any) -> Any:
    """Normalize a list-of-strings field, leaving unfixable input for pydantic to reject."""
    if v is None:
        return None
    if isinstance(v, str):
        return [v]
    if isinstance(v, list):
        normalized = []
        for item in v:
            if isinstance(item, dict):
                item = next(
                    (item[key] for key in TEXT_KEYS if isinstance(item.get(key), str)),
                    item,
                )
            normalized.append(_stringify_scalar(item))
        return normalized
    return v


def _join_lines(v: Any) -> Any:
    if isinstance(v, list) and all(isinstance(item, str) for item in v):
        return "\n".join(v)
    return _stringify_scalar(v)


def _diagram_text(source: Any) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, SchematicSource):
        return source.mermaid or source.diagram or ""
    if isinstance(source, dict):
        for key in ("mermaid", "diagram"):
            if isinstance(source.get(key), str) and source[key]:
                return source[key]
    return ""


class FlexibleModel(BaseModel):
    """Base model that keeps unknown keys and accepts Python field names."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Overview(FlexibleModel):
    """Project overview."""

    project_name: Optional[str] = aliased("Overview", "project_name")
    description: Optional[str] = aliased("Overview", "description")
    category: Optional[str] = aliased("Overview", "category")
    difficulty: Optional[str] = aliased("Overview", "difficulty")
    estimated_time: Optional[str] = aliased("Overview", "estimated_time")

    @field_validator("*", mode="before")
    @classmethod
    def stringify(cls, v):
        return _stringify_scalar(v)


class TechStack(FlexibleModel):
    """Categorized technology lists."""

    hardware: Optional[list[str]] = aliased("TechStack", "hardware")
    software: Optional[list[str]] = aliased("TechStack", "software")
    protocols: Optional[list[str]] = aliased("TechStack", "protocols")
    tools: Optional[list[str]] = aliased("TechStack", "tools")

    @field_validator("*", mode="before")
    @classmethod
    def normalize_list_field(cls, v):
        """Normalize list fields to list of strings."""
        return _coerce_string_list(v)

    def categories(self) -> list[tuple[str, list[str]]]:
        """Return (heading, items) pairs in display order."""
        return [
            ("Hardware", self.hardware or []),
            ("Software", self.software or []),
            ("Protocols", self.protocols or []),
            ("Tools", self.tools or []),
        ]


class CodeSnippet(FlexibleModel):
    """A single source file proposed by the model."""

    file_name: Optional[str] = aliased("CodeSnippet", "file_name")
    code: Optional[str] = aliased("CodeSnippet", "code")
    language: Optional[str] = aliased("CodeSnippet", "language")

    @field_validator("file_name", "language", mode="before")
    @classmethod
    def stringify(cls, v):
        return _stringify_scalar(v)

    @field_validator("code", mode="before")
    @classmethod
    def join_code_lines(cls, v):
        """Accept code given as a list of lines."""
        return _join_lines(v)

    @property
    def is_empty(self) -> bool:
        return not self.file_name and not self.code


class SchematicSource(FlexibleModel):
    """Diagram wrapper object."""

    mermaid: Optional[str] = aliased("SchematicSource", "mermaid")
    diagram: Optional[str] = aliased("SchematicSource", "diagram")

    @field_validator("*", mode="before")
    @classmethod
    def join_diagram_lines(cls, v):
        return _join_lines(v)


class BomItem(FlexibleModel):
    """A bill-of-materials line item."""

    part_number: Optional[str] = aliased("BomItem", "part_number")
    description: Optional[str] = aliased("BomItem", "description")
    quantity: Optional[Union[int, float, str]] = aliased("BomItem", "quantity")
    unit_price: Optional[Union[int, float, str]] = aliased("BomItem", "unit_price")
    link: Optional[str] = aliased("BomItem", "link")

    @field_validator("part_number", "description", "link", mode="before")
    @classmethod
    def stringify(cls, v):
        return _stringify_scalar(v)


class BomList(FlexibleModel):
    """A bill of materials wrapped in an object."""

    components: Optional[list[BomItem]] = aliased("BomList", "components")


class IssueFix(FlexibleModel):
    """A known problem with its fix."""

    problem: Optional[str] = aliased("IssueFix", "problem")
    solution: Optional[str] = aliased("IssueFix", "solution")
    prevention: Optional[str] = aliased("IssueFix", "prevention")

    @field_validator("*", mode="before")
    @classmethod
    def join_text(cls, v):
        return _join_lines(v)


class Guide(FlexibleModel):
    """An extra documentation page."""

    title: Optional[str] = aliased("Guide", "title")
    content: Optional[str] = aliased("Guide", "content")

    @field_validator("*", mode="before")
    @classmethod
    def join_text(cls, v):
        return _join_lines(v)


class ThreeDNotes(FlexibleModel):
    """Enclosure and mounting notes."""

    enclosure: Optional[str] = aliased("ThreeDNotes", "enclosure")
    mounting: Optional[str] = aliased("ThreeDNotes", "mounting")

    @field_validator("*", mode="before")
    @classmethod
    def join_text(cls, v):
        return _join_lines(v)


class PrototypeSpec(FlexibleModel):
    """Validated prototype document. Every section is optional."""

    overview: Optional[Overview] = aliased("PrototypeSpec", "overview")
    tech_stack: Optional[TechStack] = aliased("PrototypeSpec", "tech_stack")
    code_snippets: Optional[list[CodeSnippet]] = aliased("PrototypeSpec", "code_snippets")
    schematic: Optional[Union[str, SchematicSource]] = aliased("PrototypeSpec", "schematic")
    bom: Optional[Union[list[BomItem], BomList]] = aliased("PrototypeSpec", "bom")
    build_guide: Optional[Union[str, list[str], dict[str, Any]]] = aliased(
        "PrototypeSpec", "build_guide"
    )
    issues_and_fixes: Optional[list[IssueFix]] = aliased("PrototypeSpec", "issues_and_fixes")
    next_steps: Optional[list[str]] = aliased("PrototypeSpec", "next_steps")
    guides: Optional[list[Guide]] = aliased("PrototypeSpec", "guides")
    three_d_description: Optional[Union[str, ThreeDNotes]] = aliased(
        "PrototypeSpec", "three_d_description"
    )

    @field_validator("code_snippets", mode="before")
    @classmethod
    def normalize_snippets(cls, v):
        """Accept a mapping of file name to code as well as a list."""
        if isinstance(v, dict):
            snippets = []
            for name, body in v.items():
                if isinstance(body, dict):
                    snippets.append({"fileName": name, **body})
                else:
                    snippets.append({"fileName": name, "code": body})
            return snippets
        return v

    @field_validator("issues_and_fixes", mode="before")
    @classmethod
    def normalize_issues(cls, v):
        """Accept bare problem strings as issue entries."""
        if isinstance(v, list):
            return [{"problem": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("guides", mode="before")
    @classmethod
    def normalize_guides(cls, v):
        """Accept a mapping of title to content as well as a list."""
        if isinstance(v, dict):
            return [{"title": title, "content": content} for title, content in v.items()]
        return v

    @field_validator("build_guide", mode="before")
    @classmethod
    def normalize_build_guide(cls, v):
        if isinstance(v, list):
            return _coerce_string_list(v)
        return v

    @field_validator("next_steps", mode="before")
    @classmethod
    def normalize_next_steps(cls, v):
        return _coerce_string_list(v)

    def snippets(self) -> list[CodeSnippet]:
        return list(self.code_snippets or [])

    def diagram_source(self) -> str:
        """
        Resolve the diagram source from either schematic shape.

        When both ``schematic`` and ``diagram`` are present, ``diagram`` is kept
        as an extra key and serves as the fallback source.
        """
        for source in (self.schematic, (self.model_extra or {}).get("diagram")):
            text = _diagram_text(source)
            if text.strip():
                return text
        return ""

    def bom_items(self) -> list[BomItem]:
        """Resolve BOM line items from a flat list or a wrapper object."""
        if isinstance(self.bom, list):
            return list(self.bom)
        if self.bom is not None:
            return list(self.bom.components or [])
        return []

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with canonical key names, keeping only keys that were provided."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")
