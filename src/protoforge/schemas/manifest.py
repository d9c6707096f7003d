"""Schemas for materialization output."""

from typing import Optional

from pydantic import BaseModel, Field

from protoforge.schemas.prototype import PrototypeSpec


class GeneratedFile(BaseModel):
    """A code file written from a snippet."""

    name: str = Field(description="Path relative to the project root, forward slashes")
    path: str = Field(description="Absolute path on disk")
    language: str = Field(default="txt", description="Source language tag")


class ProjectManifest(BaseModel):
    """Everything a single materialization run wrote."""

    files: list[GeneratedFile] = Field(
        default_factory=list, description="Code files, in snippet order"
    )
    artifacts: list[str] = Field(
        default_factory=list, description="Every relative path written, in write order"
    )
    warnings: list[str] = Field(
        default_factory=list, description="Advisory messages raised while writing"
    )


class GenerationResult(BaseModel):
    """Result of turning a response into a project directory."""

    success: bool = Field(default=True)
    files: list[GeneratedFile] = Field(default_factory=list)
    parsed: PrototypeSpec
    project_dir: Optional[str] = Field(default=None)
    artifacts: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    archive_path: Optional[str] = Field(default=None)
