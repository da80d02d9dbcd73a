"""Collection options and project configuration files."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

try:
    import toml
except ImportError:
    toml = None

try:
    import yaml
except ImportError:
    yaml = None

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "package.json"
DEFAULT_INSTALL_DIR_NAME = "node_modules"

CONFIG_FILENAMES = (
    "license-auditor.toml",
    ".license-auditor.toml",
    ".license-auditor.yml",
    ".license-auditor.yaml",
)

# Keys accepted in a config file, mapped to the CLI argument they set.
CONFIG_KEYS = {
    "include_dev": "include_dev",
    "include_private": "include_private",
    "exclude": "exclude",
    "max_depth": "max_depth",
    "format": "format",
    "include_root": "include_root",
    "output_all": "output_all",
    "output_force": "output_force",
    "output": "output",
    "quiet": "quiet",
    "return_error": "return_error",
    "absolute_license_paths": "absolute_license_paths",
}


def parse_exclude(value: Union[None, str, Iterable[str]]) -> FrozenSet[str]:
    """Turn a comma-separated string or a list of names into a set of names."""
    if not value:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(name.strip() for name in value if name and name.strip())


@dataclass(frozen=True)
class ReportOptions:
    """Options recognized by the tree collector.

    Args:
        include_dev_dependencies: Also traverse the root's dev dependencies.
        include_private: Keep packages whose manifest sets ``private``.
        exclude_names: Package names omitted anywhere in the tree.
        max_depth: Deepest level included, counting direct dependencies as 1.
            Nodes at this depth are kept but not expanded.
        absolute_license_file_paths: Report discovered license files as
            absolute paths instead of paths relative to the root.
        manifest_name: File name of a package manifest.
        install_dir_name: Name of the nested installation directory.
    """

    include_dev_dependencies: bool = False
    include_private: bool = False
    exclude_names: FrozenSet[str] = field(default_factory=frozenset)
    max_depth: Optional[int] = None
    absolute_license_file_paths: bool = False
    manifest_name: str = DEFAULT_MANIFEST_NAME
    install_dir_name: str = DEFAULT_INSTALL_DIR_NAME

    def __post_init__(self):
        if not isinstance(self.exclude_names, frozenset):
            object.__setattr__(self, "exclude_names", parse_exclude(self.exclude_names))
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")


def _read_toml(path: Path) -> Dict[str, Any]:
    if not toml:
        logger.warning("toml package not available, skipping %s", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return toml.load(f)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not yaml:
        logger.warning("PyYAML package not available, skipping %s", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _normalize(data: Any, source: Path) -> Dict[str, Any]:
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a table of options", source)
        return {}
    config = {}
    for key, value in data.items():
        normalized = str(key).replace("-", "_")
        if normalized not in CONFIG_KEYS:
            logger.warning("Ignoring unknown option %r in %s", key, source)
            continue
        config[CONFIG_KEYS[normalized]] = value
    if "exclude" in config and not isinstance(config["exclude"], str):
        config["exclude"] = ",".join(str(name) for name in config["exclude"])
    return config


def load_config(project_root: Path) -> Dict[str, Any]:
    """Load auditor options from the first config file found in ``project_root``.

    Returns a dict keyed by CLI argument name, suitable for
    ``ArgumentParser.set_defaults``. Missing or unreadable files yield ``{}``.
    """
    project_root = Path(project_root)

    for filename in CONFIG_FILENAMES:
        path = project_root / filename
        if not path.is_file():
            continue
        try:
            if path.suffix == ".toml":
                data = _read_toml(path)
            else:
                data = _read_yaml(path)
        except Exception as e:
            logger.warning("Error parsing %s: %s", path, e)
            return {}
        logger.debug("Loaded configuration from %s", path)
        return _normalize(data, path)

    pyproject_path = project_root / "pyproject.toml"
    if pyproject_path.is_file():
        try:
            data = _read_toml(pyproject_path)
        except Exception as e:
            logger.warning("Error parsing %s: %s", pyproject_path, e)
            return {}
        section = data.get("tool", {}).get("license-auditor")
        if section is not None:
            logger.debug("Loaded configuration from %s", pyproject_path)
            return _normalize(section, pyproject_path)

    return {}
