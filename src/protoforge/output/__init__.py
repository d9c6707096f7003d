"""Project materialization and packaging."""

from protoforge.output.archive import cleanup_project, create_project_archive, get_file_tree
from protoforge.output.materializer import ProjectMaterializer, generate_project_from_response

__all__ = [
    "ProjectMaterializer",
    "cleanup_project",
    "create_project_archive",
    "generate_project_from_response",
    "get_file_tree",
]
