"""Configuration for reve builds.

Settings are merged with the following priority order (highest to lowest):
1. Runtime Parameters (passed directly to ``load_config`` or ``Reve``)
2. Environment Variables (prefixed with REVE_)
3. Project Config ([tool.reve] in pyproject.toml)
4. Defaults (hardcoded fallbacks)
"""

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

_TRUTHY = ("true", "1", "yes", "on")


class ReveConfig(BaseModel):
    """Validated build and watch settings."""

    output_dir: str = Field(
        default="reve",
        min_length=1,
        description="Directory, relative to the base location, receiving output",
    )

    compression: bool = Field(
        default=False,
        description="Gzip payloads before encoding them",
    )

    debounce_ms: int = Field(
        default=100,
        gt=0,
        description="Quiet period before a changed resource is rebuilt",
    )

    watch_polling: bool = Field(
        default=False,
        description="Use a polling observer instead of native notifications",
    )

    verbose: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    resources: dict[str, str] = Field(
        default_factory=dict,
        description="Resource name to source path, used by the command line",
    )

    model_config = {
        "extra": "forbid",
    }

    @property
    def debounce(self) -> float:
        """Debounce delay in seconds."""
        return self.debounce_ms / 1000


def find_pyproject(start: Optional[Path] = None) -> Optional[Path]:
    """Return the nearest pyproject.toml at or above *start*."""
    current_dir = (start or Path.cwd()).resolve()
    for path in [current_dir] + list(current_dir.parents):
        pyproject_path = path / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
    return None


def _load_from_pyproject_toml(start: Optional[Path] = None) -> dict[str, Any]:
    """Load the [tool.reve] section from the nearest pyproject.toml.

    Returns:
        Dictionary with config values, or empty dict if not found.
    """
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    pyproject_path = find_pyproject(start)
    if pyproject_path is None:
        return {}

    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("tool", {}).get("reve")
    if not section:
        return {}
    return dict(section)


def _load_from_env() -> dict[str, Any]:
    """Load configuration from environment variables (prefixed with REVE_).

    Returns:
        Dictionary with config values from environment.
    """
    config: dict[str, Any] = {}

    env_mapping = {
        "REVE_OUTPUT_DIR": "output_dir",
        "REVE_COMPRESSION": "compression",
        "REVE_DEBOUNCE_MS": "debounce_ms",
        "REVE_WATCH_POLLING": "watch_polling",
        "REVE_VERBOSE": "verbose",
    }
    bool_keys = {"compression", "watch_polling", "verbose"}

    for env_var, config_key in env_mapping.items():
        value = os.getenv(env_var)
        if value is None:
            continue
        if config_key in bool_keys:
            config[config_key] = value.strip().lower() in _TRUTHY
        else:
            config[config_key] = value

    return config


def load_config(
    output_dir: Optional[str] = None,
    compression: Optional[bool] = None,
    debounce_ms: Optional[int] = None,
    verbose: Optional[bool] = None,
    project_dir: Optional[Path] = None,
    **kwargs: Any,
) -> ReveConfig:
    """Load configuration with hierarchical priority.

    Args:
        output_dir: Output directory name.
        compression: Whether to gzip payloads.
        debounce_ms: Watch debounce delay in milliseconds.
        verbose: Enable debug logging.
        project_dir: Directory to start the pyproject.toml search from
            (default: current working directory).
        **kwargs: Additional configuration parameters.

    Returns:
        ReveConfig instance with merged configuration.
    """
    file_config = _load_from_pyproject_toml(project_dir)
    env_config = _load_from_env()

    runtime_config: dict[str, Any] = {}
    if output_dir is not None:
        runtime_config["output_dir"] = output_dir
    if compression is not None:
        runtime_config["compression"] = compression
    if debounce_ms is not None:
        runtime_config["debounce_ms"] = debounce_ms
    if verbose is not None:
        runtime_config["verbose"] = verbose
    runtime_config.update(kwargs)

    merged_config = ReveConfig().model_dump()
    merged_config.update(file_config)
    merged_config.update(env_config)
    merged_config.update(runtime_config)

    return ReveConfig(**merged_config)
