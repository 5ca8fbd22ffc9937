"""
Configuration — Settings for one depwatch run

Config precedence (highest to lowest):
  1. Project config (depwatch.yaml in the project root)
  2. Bundled default (depwatch/defaults/depwatch.yaml)

The project file replaces the default as a whole; it is not merged key by
key. An unreadable or invalid project file is reported and the bundled
default is used instead. Configuration is resolved once and is not
re-read while the process runs.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

import yaml
from loguru import logger

from .errors import ConfigLoadError


PACKAGE_MANAGERS = ("npm", "yarn")
DEFAULT_PACKAGE_MANAGER = "npm"

PROJECT_CONFIG_FILE = "depwatch.yaml"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "depwatch.yaml"


def _string_list_error(name: str, value: Any) -> Optional[str]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return f"'{name}' must be a list of strings"
    if not all(isinstance(item, str) for item in value):
        return f"'{name}' must contain only strings"
    return None


def _as_tuple(value: Any) -> Any:
    """Lists become tuples; anything else is kept so validate() can reject it."""
    return tuple(value) if isinstance(value, (list, tuple)) else value


@dataclass(frozen=True)
class WatchConfig:
    """File watching and scanning settings."""
    on_save: bool = True
    debounce_ms: int = 300
    ignored_paths: Tuple[str, ...] = ()
    file_extensions: Tuple[str, ...] = ('.js', '.jsx', '.ts', '.tsx')

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not isinstance(self.on_save, bool):
            return "'watch.onSave' must be true or false"
        if isinstance(self.debounce_ms, bool) or not isinstance(self.debounce_ms, int) or self.debounce_ms < 0:
            return f"'watch.debounceMs' must be a non-negative integer, got {self.debounce_ms!r}"
        error = _string_list_error("watch.ignoredPaths", self.ignored_paths)
        if error:
            return error
        error = _string_list_error("watch.fileExtensions", self.file_extensions)
        if error:
            return error
        for ext in self.file_extensions:
            if not ext.startswith('.') or len(ext) < 2:
                return f"Invalid file extension '{ext}'. Extensions start with '.' (e.g. '.js')"
        return None


@dataclass(frozen=True)
class ManifestPolicy:
    """How package.json is compared and changed."""
    check_dev_dependencies: bool = False
    safe_mode: bool = False
    package_manager: str = DEFAULT_PACKAGE_MANAGER

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.package_manager not in PACKAGE_MANAGERS:
            valid = ", ".join(PACKAGE_MANAGERS)
            return f"Unknown package manager '{self.package_manager}'. Valid: {valid}"
        if not isinstance(self.check_dev_dependencies, bool):
            return "'manifestPolicy.checkDevDependencies' must be true or false"
        if not isinstance(self.safe_mode, bool):
            return "'manifestPolicy.safeMode' must be true or false"
        return None


@dataclass(frozen=True)
class Config:
    """Application configuration. Immutable once loaded."""
    ignored_packages: frozenset = frozenset()
    essential_packages: tuple = ()
    watch: WatchConfig = field(default_factory=WatchConfig)
    manifest: ManifestPolicy = field(default_factory=ManifestPolicy)
    debug: bool = False

    def validate(self) -> Optional[str]:
        """Validate every section. Returns the first error message or None."""
        if not isinstance(self.debug, bool):
            return "'debug' must be true or false"
        return self.watch.validate() or self.manifest.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (config file layout)."""
        return {
            "ignoredPackages": sorted(self.ignored_packages),
            "essentialPackages": list(self.essential_packages),
            "watch": {
                "onSave": self.watch.on_save,
                "debounceMs": self.watch.debounce_ms,
                "ignoredPaths": list(self.watch.ignored_paths),
                "fileExtensions": list(self.watch.file_extensions),
            },
            "manifestPolicy": {
                "checkDevDependencies": self.manifest.check_dev_dependencies,
                "safeMode": self.manifest.safe_mode,
                "packageManager": self.manifest.package_manager,
            },
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """
        Create from a parsed config file.

        Raises:
            ValueError: If the data does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError("config must be a mapping")

        watch_data = data.get("watch") or {}
        policy_data = data.get("manifestPolicy") or {}
        if not isinstance(watch_data, dict):
            raise ValueError("'watch' must be a mapping")
        if not isinstance(policy_data, dict):
            raise ValueError("'manifestPolicy' must be a mapping")

        ignored = data.get("ignoredPackages") or []
        essential = data.get("essentialPackages") or []
        for name, value in (("ignoredPackages", ignored), ("essentialPackages", essential)):
            error = _string_list_error(name, value)
            if error:
                raise ValueError(error)

        defaults = WatchConfig()
        return cls(
            ignored_packages=frozenset(ignored),
            # Keep declaration order, drop duplicates
            essential_packages=tuple(dict.fromkeys(essential)),
            watch=WatchConfig(
                on_save=watch_data.get("onSave", True),
                debounce_ms=watch_data.get("debounceMs", 300),
                ignored_paths=_as_tuple(watch_data.get("ignoredPaths", defaults.ignored_paths)),
                file_extensions=_as_tuple(watch_data.get("fileExtensions", defaults.file_extensions)),
            ),
            manifest=ManifestPolicy(
                check_dev_dependencies=policy_data.get("checkDevDependencies", False),
                safe_mode=policy_data.get("safeMode", False),
                package_manager=policy_data.get("packageManager") or DEFAULT_PACKAGE_MANAGER,
            ),
            debug=data.get("debug", False),
        )


class ConfigManager:
    """
    Resolves the configuration for a project.

    Hierarchy:
      1. Project config (depwatch.yaml)
      2. Bundled default
    """

    def __init__(self, project_dir: Optional[Path] = None, default_path: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.default_path = Path(default_path) if default_path else DEFAULT_CONFIG_PATH
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / PROJECT_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration, falling back to the bundled default."""
        if self._config is not None:
            return self._config

        if self.project_config_path.exists():
            try:
                self._config = self._read(self.project_config_path)
                logger.debug("Using project config {}", self.project_config_path)
                return self._config
            except ConfigLoadError as e:
                logger.warning("Ignoring invalid config {} ({}); using defaults", e.path, e.reason)

        self._config = self._read(self.default_path)
        return self._config

    def _read(self, path: Path) -> Config:
        """
        Read and validate one config file.

        Raises:
            ConfigLoadError: If the file is unreadable, not YAML, or invalid
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(path, str(e)) from e

        try:
            config = Config.from_dict(data)
        except ValueError as e:
            raise ConfigLoadError(path, str(e)) from e

        error = config.validate()
        if error:
            raise ConfigLoadError(path, error)
        return config


# Convenience function
def load_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
