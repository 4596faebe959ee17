"""Configuration loader."""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console

from .models import ArticleException, ConfigModel

console = Console()


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = Path.home() / ".config" / "vocabtrend" / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @classmethod
    def from_model(cls, model: ConfigModel, config_path: Optional[Path] = None) -> "Config":
        """Wrap an already-built config model."""
        config = cls(config_path)
        config._config = model
        return config

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def workspace_root(self) -> Path:
        """Get workspace root path."""
        path = Path(self.config.workspace_root).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def runs_dir(self) -> Path:
        """Get the directory holding all run folders."""
        return self.workspace_root / "runs"

    def get_run_dir(self, run_name: str) -> Path:
        """Get run directory path."""
        run_dir = self.runs_dir / run_name
        run_dir.mkdir(parents=True, exist_ok=True)
        return run_dir

    def resolve_path(self, value: Optional[str]) -> Optional[Path]:
        """Resolve a configured path relative to the config file."""
        if not value:
            return None
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.config_path.parent / path
        return path

    @property
    def exceptions_path(self) -> Path:
        """Get the exception list path (defaults next to config.yaml)."""
        configured = self.resolve_path(self.config.corpus.exceptions_path)
        return configured or self.config_path.parent / "exceptions.yaml"


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_exceptions(exceptions_path: Path) -> List[ArticleException]:
    """Load the article exception list from YAML file."""
    if not exceptions_path.exists():
        raise FileNotFoundError(f"Exceptions file not found: {exceptions_path}")

    try:
        with open(exceptions_path) as f:
            data = yaml.safe_load(f)

        if data is None or "exceptions" not in data:
            return []

        exceptions = []
        for entry in data["exceptions"] or []:
            try:
                exceptions.append(ArticleException(**entry))
            except ValidationError as e:
                console.print(
                    f"[yellow]Skipping invalid exception for {entry.get('article_id', 'unknown')}: {e}[/yellow]"
                )

        return exceptions
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in exceptions file: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def save_exceptions(exceptions: List[ArticleException], exceptions_path: Path) -> None:
    """Save the article exception list to YAML file."""
    exceptions_path.parent.mkdir(parents=True, exist_ok=True)

    data = {"exceptions": [e.model_dump(exclude_none=True) for e in exceptions]}

    with open(exceptions_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
