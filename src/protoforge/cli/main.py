"""CLI interface for ProtoForge."""

import sys
import time
from pathlib import Path

import click

from protoforge.cli.formatters import OutputFormatter
from protoforge.core.config import Config
from protoforge.core.errors import ProtoForgeError
from protoforge.core.logging import configure_logging
from protoforge.core.pipeline import PrototypePipeline
from protoforge.core.response import parse_and_validate_response
from protoforge.output.archive import create_project_archive, get_file_tree


def _read_source(source: str, formatter: OutputFormatter) -> str:
    """Read a response from a file path or '-' for stdin, exiting on failure."""
    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.is_file():
            formatter.print_error(f"Input file not found: {source}")
            sys.exit(1)
        text = path.read_text(encoding="utf-8")

    if not text.strip():
        formatter.print_error("Input is empty")
        sys.exit(1)
    return text


@click.group()
@click.version_option(package_name="protoforge")
def main():
    """
    ProtoForge - Turn AI prototype responses into project packages.

    Extracts the JSON document from a model response, validates it, and
    writes code, docs, schematics, a bill of materials and a report.
    """
    pass


@main.command()
@click.argument("response_source", type=click.Path(exists=False))
@click.option(
    "--description",
    "-d",
    default="",
    help="Original project description (documentation fallback and directory name)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory that receives generated projects (default: ~/protoforge-output)",
)
@click.option(
    "--project-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Exact project directory to write (default: a new timestamped directory)",
)
@click.option(
    "--zip/--no-zip",
    "create_archive",
    default=None,
    help="Also write <project>.zip",
)
@click.option(
    "--keep-failed/--discard-failed",
    "keep_failed_runs",
    default=None,
    help="Keep the project directory with debug files when parsing fails (default: keep)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (default: INFO)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to log file (default: stderr only)",
)
@click.option(
    "--json-logs/--plain-logs",
    default=None,
    help="Output logs in JSON format",
)
@click.option(
    "--remember/--no-remember",
    default=True,
    help="Record the project in the recent-projects list of the user config",
)
@click.option(
    "--stats/--no-stats",
    default=True,
    help="Show generation statistics (default: enabled)",
)
def build(
    response_source: str,
    description: str,
    output_dir: str | None,
    project_dir: str | None,
    create_archive: bool | None,
    keep_failed_runs: bool | None,
    config_file: str | None,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
    remember: bool,
    stats: bool,
):
    """
    Build a project directory from an AI response.

    RESPONSE_SOURCE can be a file path or '-' for stdin.

    Examples:

      protoforge build response.txt -d "Plant monitor with ESP32"

      cat response.txt | protoforge build - -o ./out --zip
    """
    formatter = OutputFormatter()

    cli_config = {
        "output_dir": output_dir,
        "create_archive": create_archive,
        "keep_failed_runs": keep_failed_runs,
        "log_level": log_level,
        "log_file": log_file,
        "json_logs": json_logs,
    }
    config = Config.load(cli_config, Path(config_file) if config_file else None)
    configure_logging(level=config.log_level, json_output=config.json_logs, log_file=config.log_file)

    response = _read_source(response_source, formatter)

    pipeline = PrototypePipeline(config)
    if project_dir:
        target = Path(project_dir)
    else:
        name_hint = description or ("stdin" if response_source == "-" else Path(response_source).stem)
        target = pipeline.new_project_dir(name_hint)

    start = time.time()
    try:
        result = pipeline.run(response, description, project_dir=target)
    except ProtoForgeError as e:
        formatter.print_error(str(e))
        if target.exists():
            formatter.print_info(f"Debug files preserved in {target}")
        sys.exit(1)

    formatter.print_success(f"Project written to {result.project_dir}")
    if result.files:
        formatter.print_files(result.files)
    for warning in result.warnings:
        formatter.print_warning(warning)
    formatter.print_text(f"{target.name}/\n{get_file_tree(target)}")
    if result.archive_path:
        formatter.print_success(f"Archive written to {result.archive_path}")

    if remember:
        config.save_recent_projects()

    if stats:
        formatter.print_stats(
            {
                "code_files": len(result.files),
                "artifacts": len(result.artifacts),
                "warnings": len(result.warnings),
                "duration": f"{time.time() - start:.2f}s",
            }
        )


@main.command()
@click.argument("response_source", type=click.Path(exists=False))
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Only report errors and warnings, do not print the validated JSON",
)
def check(response_source: str, quiet: bool):
    """
    Validate an AI response without writing a project.

    RESPONSE_SOURCE can be a file path or '-' for stdin.
    """
    formatter = OutputFormatter()
    response = _read_source(response_source, formatter)

    try:
        result = parse_and_validate_response(response)
    except ProtoForgeError as e:
        formatter.print_error(str(e))
        sys.exit(1)

    if not quiet:
        formatter.print_json(result.value.to_json_dict())
    for warning in result.warnings:
        formatter.print_warning(warning)
    formatter.print_success("Response is valid")


@main.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
def tree(project_dir: str):
    """Print the file tree of a generated project."""
    formatter = OutputFormatter()
    path = Path(project_dir)
    formatter.print_text(f"{path.resolve().name}/\n{get_file_tree(path)}")


@main.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--name", default=None, help="Archive name without extension (default: directory name)")
def archive(project_dir: str, name: str | None):
    """Package a generated project as a ZIP archive."""
    formatter = OutputFormatter()
    archive_path = create_project_archive(Path(project_dir), output_name=name)
    formatter.print_success(f"Archive written to {archive_path}")


@main.command()
def recent():
    """List recently generated projects."""
    formatter = OutputFormatter()
    config = Config.load()
    if not config.recent_projects:
        formatter.print_info("No recent projects")
        return
    for project in config.recent_projects:
        marker = "*" if project == config.last_project else " "
        formatter.print_text(f"{marker} {project}\n")


if __name__ == "__main__":
    main()
