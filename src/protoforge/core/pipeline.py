"""Generation run orchestrator."""

import json
import time
from pathlib import Path
from typing import Optional

from protoforge.core.config import Config
from protoforge.core.errors import MaterializationIOError, ProtoForgeError
from protoforge.core.logging import StructuredLogger, get_logger
from protoforge.core.paths import sanitize_filename
from protoforge.output.archive import cleanup_project, create_project_archive
from protoforge.output.materializer import METADATA_FILE, generate_project_from_response
from protoforge.schemas.manifest import GenerationResult


class PrototypePipeline:
    """Turns one AI response into one project directory."""

    def __init__(self, config: Config, logger: Optional[StructuredLogger] = None):
        """
        Initialize pipeline.

        Args:
            config: Explicit configuration for this run (output directory,
                failure policy, archive flag, recent projects)
            logger: Optional logger (default: protoforge.pipeline)
        """
        self.config = config
        self.logger = logger or get_logger("protoforge.pipeline")

    def new_project_dir(self, description: str, timestamp: Optional[int] = None) -> Path:
        """
        Build a fresh project directory path under the configured output directory.

        Args:
            description: User description (first 30 characters name the directory)
            timestamp: Epoch milliseconds (default: now)

        Returns:
            Path that does not need to exist yet
        """
        stamp = timestamp if timestamp is not None else int(time.time() * 1000)
        slug = sanitize_filename(description[:30])
        return self.config.get_output_dir() / f"protoforge_{slug}_{stamp}"

    def run(
        self,
        response: str,
        description: str,
        project_dir: Optional[Path] = None,
    ) -> GenerationResult:
        """
        Materialize a response into a project directory.

        Args:
            response: Raw AI response text
            description: Original user description
            project_dir: Target directory (default: a new timestamped directory)

        Returns:
            GenerationResult for the run

        Raises:
            ParseError: If no valid JSON can be decoded
            ValidationError: If the JSON does not match the prototype schema
            MaterializationIOError: On the first file-system failure
        """
        timestamp = int(time.time() * 1000)
        project_dir = Path(project_dir) if project_dir else self.new_project_dir(description, timestamp)
        project_dir.mkdir(parents=True, exist_ok=True)

        start = time.time()
        self.logger.log_pipeline_stage("generate", "started", project_dir=str(project_dir))

        try:
            result = generate_project_from_response(
                response, project_dir, description, logger=self.logger
            )
        except ProtoForgeError as e:
            duration_ms = (time.time() - start) * 1000
            self.logger.log_pipeline_stage(
                "generate",
                "failed",
                duration_ms=duration_ms,
                error_type=type(e).__name__,
                project_dir=str(project_dir),
            )
            if not self.config.keep_failed_runs:
                cleanup_project(project_dir)
            raise

        metadata = {
            "description": description,
            "timestamp": timestamp,
            "outputDir": str(project_dir),
            "files": [f.model_dump() for f in result.files],
            "warnings": result.warnings,
        }
        metadata_path = project_dir / METADATA_FILE
        try:
            metadata_path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
        except OSError as e:
            raise MaterializationIOError(f"Failed to write {METADATA_FILE}: {e}", metadata_path) from e

        self.config.remember_project(project_dir)

        if self.config.create_archive:
            result.archive_path = str(create_project_archive(project_dir))

        duration_ms = (time.time() - start) * 1000
        self.logger.log_pipeline_stage(
            "generate",
            "completed",
            duration_ms=duration_ms,
            files=len(result.files),
            warnings=len(result.warnings),
        )
        return result
