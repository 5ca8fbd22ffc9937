"""
Parser Registry — Routes files to language-specific configurations.

Maps file extensions to LanguageConfig instances so the analyzer can pick
the right grammar without knowing about languages itself.

Usage:
    registry = ParserRegistry()
    registry.register(TSX_CONFIG)

    config = registry.get_config(Path("src/App.tsx"))
    # Returns TSX_CONFIG
"""

from pathlib import Path
from typing import Dict, Optional, Set, List

from .config import LanguageConfig


class ParserRegistry:
    """
    Registry of language configurations.

    Maps file extensions to LanguageConfig instances for routing.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._configs: Dict[str, LanguageConfig] = {}  # name -> config
        self._extension_map: Dict[str, str] = {}  # ext -> config name

    def register(self, config: LanguageConfig) -> None:
        """
        Register a language configuration.

        Raises:
            ValueError: If extension already registered to different config
        """
        for ext in config.extensions:
            existing = self._extension_map.get(ext.lower())
            if existing and existing != config.name:
                raise ValueError(
                    f"Extension {ext} already registered to {existing}, "
                    f"cannot register to {config.name}"
                )

        self._configs[config.name] = config
        for ext in config.extensions:
            self._extension_map[ext.lower()] = config.name

    def get_config(self, file_path: Path) -> Optional[LanguageConfig]:
        """Get language config for a file based on extension, or None."""
        config_name = self._extension_map.get(Path(file_path).suffix.lower())
        return self._configs.get(config_name) if config_name else None

    def supported_extensions(self) -> Set[str]:
        """Get all supported file extensions (e.g., {'.js', '.tsx'})."""
        return set(self._extension_map.keys())

    def supported_languages(self) -> List[str]:
        """Get list of registered language names."""
        return list(self._configs.keys())

    def is_supported(self, file_path: Path) -> bool:
        """Check if a file type is supported."""
        return Path(file_path).suffix.lower() in self._extension_map

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, name: str) -> bool:
        return name in self._configs


def default_registry() -> ParserRegistry:
    """Registry with every bundled JavaScript/TypeScript dialect."""
    from .languages import ALL_CONFIGS

    registry = ParserRegistry()
    for config in ALL_CONFIGS:
        registry.register(config)
    return registry
