"""
depwatch — Keep package.json in step with the code that uses it

Watches a JavaScript/TypeScript project, detects which external packages
the source actually references, and installs or removes dependencies so
the manifest matches.

Usage:
    depwatch init          # add the watch script and a depwatch.yaml
    depwatch check         # show what would be installed/removed
    depwatch               # watch and keep dependencies in sync
"""

__version__ = "0.1.0"

from .config import Config, ConfigManager, WatchConfig, ManifestPolicy, load_config
from .errors import (
    DepwatchError,
    ConfigLoadError,
    ParseError,
    ManifestError,
    ManifestReadError,
    ManifestWriteError,
    ExternalCommandError,
    WatchStartError,
)
from .core.imports import ImportBinding, resolve_package_identity
from .core.analyzer import SourceAnalyzer, FileAnalysis
from .core.aggregator import UsageAggregator
from .core.scanner import FileScanner
from .core.manifest import Manifest, read_manifest
from .core.sync import ManifestSynchronizer, SyncPlan, SyncReport, compute_plan
from .services.package_manager import PackageManagerAdapter, CommandResult
from .services.confirm import InteractiveConfirmer
from .services.watcher import WatchSession, WatchState
from .engine import SyncEngine

__all__ = [
    # Config
    'Config', 'ConfigManager', 'WatchConfig', 'ManifestPolicy', 'load_config',
    # Errors
    'DepwatchError', 'ConfigLoadError', 'ParseError', 'ManifestError',
    'ManifestReadError', 'ManifestWriteError', 'ExternalCommandError',
    'WatchStartError',
    # Analysis
    'ImportBinding', 'resolve_package_identity',
    'SourceAnalyzer', 'FileAnalysis', 'UsageAggregator', 'FileScanner',
    # Synchronization
    'Manifest', 'read_manifest',
    'ManifestSynchronizer', 'SyncPlan', 'SyncReport', 'compute_plan',
    # Services
    'PackageManagerAdapter', 'CommandResult', 'InteractiveConfirmer',
    'WatchSession', 'WatchState',
    # Engine
    'SyncEngine',
]
