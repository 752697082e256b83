"""Run configuration (YAML) for the score scripts: loading, overrides and path expansion."""

from pathlib import Path
from typing import Dict, Any, Optional
import copy
import os
import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "saps.yaml"

# Keys whose values are filesystem locations
PATH_KEY_SUFFIXES = ('_dir', '_path', '_file')
PATH_MAPPING_KEYS = ('tables',)


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """Read one YAML file into a dict.

    An empty file yields ``{}``; a file whose top level is not a mapping is rejected.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the document is not a mapping.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open(encoding='utf-8') as f:
        content = yaml.safe_load(f) or {}

    if not isinstance(content, dict):
        raise ValueError(f"Configuration must be a mapping: {file_path}")
    return content


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated with ``override``; sections (nested dicts) merge key by key."""
    merged = copy.deepcopy(base)

    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def resolve_path(path: str, base_dir: Optional[Path] = None) -> Path:
    """Turn a configured path into an absolute one.

    A leading ``$VAR`` is replaced by the environment variable, e.g.
    ``$MIMIC_III_BASE_PATH/CHARTEVENTS.csv.gz``. Remaining relative paths are
    taken relative to ``base_dir`` (or the working directory).

    Raises:
        ValueError: If the referenced environment variable is not set.
    """
    if path.startswith('$'):
        env_var, _, remainder = path[1:].partition('/')
        if env_var not in os.environ:
            raise ValueError(f"Environment variable {env_var} not set")
        path = os.path.join(os.environ[env_var], remainder) if remainder else os.environ[env_var]

    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = Path(base_dir) / resolved if base_dir is not None else resolved
        resolved = resolved.resolve()
    return resolved


def _try_resolve(value: str, base_dir: Optional[Path]) -> str:
    # Unset variables stay visible in the saved run config instead of failing the load
    try:
        return str(resolve_path(value, base_dir))
    except (ValueError, OSError):
        return value


def expand_paths_in_config(config: Dict[str, Any], base_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Expand every path value of a configuration (returns a new dict).

    Path values are strings under keys ending in ``_dir``/``_path``/``_file``
    and all entries of a ``tables`` mapping (single table overrides).
    """
    expanded = {}

    for key, value in config.items():
        if isinstance(value, dict) and key in PATH_MAPPING_KEYS:
            expanded[key] = {name: _try_resolve(str(p), base_dir) for name, p in value.items()}
        elif isinstance(value, dict):
            expanded[key] = expand_paths_in_config(value, base_dir)
        elif isinstance(value, str) and key.endswith(PATH_KEY_SUFFIXES):
            expanded[key] = _try_resolve(value, base_dir)
        else:
            expanded[key] = value

    return expanded


def load_config(
    config_path: Optional[Path] = None,
    override_path: Optional[Path] = None,
    expand_paths: bool = True,
    base_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Load the run configuration for a score script.

    Args:
        config_path: Base configuration (default: ``configs/saps.yaml``).
        override_path: Optional YAML file merged on top of the base.
        expand_paths: Expand ``$VAR`` and relative paths (default: True).
        base_dir: Directory relative paths refer to (default: project root).

    Returns:
        dict: Merged configuration.
    """
    config = load_yaml(config_path if config_path is not None else DEFAULT_CONFIG_PATH)

    if override_path is not None:
        config = merge_configs(config, load_yaml(override_path))

    if expand_paths:
        config = expand_paths_in_config(config, base_dir if base_dir is not None else PROJECT_ROOT)

    return config


def save_config(config: Dict[str, Any], output_path: Path) -> None:
    """Write the effective configuration next to the run outputs (overwrites)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        yaml.safe_dump(config, default_flow_style=False, sort_keys=False, allow_unicode=True),
        encoding='utf-8',
    )
