"""Configuration management for ProtoForge."""

import json
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml

from protoforge.core.logging import get_logger

logger = get_logger("protoforge.config")

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


def substitute_env(value: Any) -> Any:
    """Replace ``${VAR}`` references in strings with environment values, when set."""
    if not isinstance(value, str):
        return value
    return ENV_VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)


class Config:
    """Configuration with hierarchy: CLI args > explicit file > project config > user config > defaults."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.output_dir: str = str(Path.home() / "protoforge-output")
        self.keep_failed_runs: bool = True
        self.create_archive: bool = False
        self.recent_projects: list[str] = []
        self.last_project: Optional[str] = None
        self.max_recent_projects: int = 10
        self.log_level: str = "INFO"
        self.json_logs: bool = False
        self.log_file: Optional[str] = None

    @staticmethod
    def user_config_path() -> Path:
        return Path.home() / ".protoforge" / "config.yaml"

    @classmethod
    def load(
        cls,
        cli_args: Optional[dict[str, Any]] = None,
        config_path: Optional[Path] = None,
    ) -> "Config":
        """
        Load configuration from files and CLI overrides.

        Args:
            cli_args: Dictionary of CLI arguments; None values are ignored
            config_path: Optional explicit config file, applied after the
                user and project files

        Returns:
            Config instance with loaded values
        """
        config = cls()

        # User config (~/.protoforge/config.yaml)
        user_config_path = cls.user_config_path()
        if user_config_path.exists():
            config._load_file(user_config_path)

        # Project config (.protoforge.yaml in current directory)
        project_config_path = Path.cwd() / ".protoforge.yaml"
        if project_config_path.exists():
            config._load_file(project_config_path)

        if config_path is not None:
            config._load_file(Path(config_path))

        if cli_args:
            for key, value in cli_args.items():
                if value is not None and hasattr(config, key):
                    setattr(config, key, value)

        return config

    def _load_file(self, config_path: Path) -> None:
        """Load configuration from a YAML or JSON file."""
        try:
            content = config_path.read_text(encoding="utf-8")
            if config_path.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(content)
            elif config_path.suffix == ".json":
                data = json.loads(content)
            else:
                logger.warning(f"Ignoring config file with unknown format: {config_path}")
                return
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Could not read config file {config_path}: {e}")
            return

        if not isinstance(data, dict):
            return

        for key, value in data.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, substitute_env(value))

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "output_dir": self.output_dir,
            "keep_failed_runs": self.keep_failed_runs,
            "create_archive": self.create_archive,
            "recent_projects": list(self.recent_projects),
            "last_project": self.last_project,
            "max_recent_projects": self.max_recent_projects,
            "log_level": self.log_level,
            "json_logs": self.json_logs,
            "log_file": self.log_file,
        }

    def save(self, path: Optional[Path] = None, format: str = "yaml") -> Path:
        """
        Save configuration to file.

        Args:
            path: Path to save config file (default: user config path)
            format: Format to save as ('yaml' or 'json')

        Returns:
            Path written
        """
        path = path or self.user_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)

        # Remove None values for cleaner config
        data = {k: v for k, v in self.to_dict().items() if v is not None}

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content, encoding="utf-8")
        return path

    def save_recent_projects(self, path: Optional[Path] = None) -> Path:
        """
        Persist only the recent-projects entries, keeping other keys of the file.

        Args:
            path: YAML config file (default: user config path)

        Returns:
            Path written
        """
        path = path or self.user_config_path()
        data: dict[str, Any] = {}
        if path.exists():
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
            if isinstance(loaded, dict):
                data = loaded

        data["recent_projects"] = list(self.recent_projects)
        data["last_project"] = self.last_project

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False), encoding="utf-8")
        return path

    def get_output_dir(self) -> Path:
        """Get output directory, creating it if needed."""
        dir_path = Path(self.output_dir).expanduser()
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path

    def remember_project(self, project_dir: Path) -> list[str]:
        """
        Record a project as the most recent one.

        Args:
            project_dir: Generated project directory

        Returns:
            Updated recent-projects list, most recent first
        """
        entry = str(project_dir)
        recent = [entry] + [p for p in self.recent_projects if p != entry]
        self.recent_projects = recent[: self.max_recent_projects]
        self.last_project = entry
        return self.recent_projects
