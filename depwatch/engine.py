"""
SyncEngine — One configuration, one project, repeatable sync cycles.

A cycle is: scan -> analyze each file -> aggregate -> read package.json
-> plan -> apply. Nothing is carried over between cycles.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from .config import Config
from .core.aggregator import UsageAggregator
from .core.analyzer import SourceAnalyzer
from .core.manifest import MANIFEST_FILE, read_manifest
from .core.scanner import FileScanner
from .core.sync import ManifestSynchronizer, SyncPlan, SyncReport
from .errors import ManifestError, ParseError
from .services.confirm import InteractiveConfirmer
from .services.package_manager import PackageManagerAdapter


@dataclass
class CycleResult:
    """Everything one cycle observed and did."""
    files: List[str] = field(default_factory=list)
    used: Tuple[str, ...] = ()
    skipped_files: List[str] = field(default_factory=list)
    plan: Optional[SyncPlan] = None
    report: Optional[SyncReport] = None
    error: Optional[ManifestError] = None


class SyncEngine:
    """
    Wires scanner, analyzer, aggregator and synchronizer together.

    Collaborators are built from the config unless given explicitly
    (tests pass fakes for the package manager and confirmer).
    """

    def __init__(
        self,
        project_dir: Path,
        config: Config,
        analyzer: Optional[SourceAnalyzer] = None,
        adapter: Optional[PackageManagerAdapter] = None,
        confirmer: Optional[InteractiveConfirmer] = None,
    ):
        self.project_dir = Path(project_dir)
        self.config = config
        self.scanner = FileScanner(
            self.project_dir,
            config.watch.file_extensions,
            config.watch.ignored_paths,
        )
        self.analyzer = analyzer or SourceAnalyzer(debug=config.debug)
        self.adapter = adapter or PackageManagerAdapter(config.manifest.package_manager, self.project_dir)
        if confirmer is None and config.manifest.safe_mode:
            confirmer = InteractiveConfirmer()
        self.synchronizer = ManifestSynchronizer(config, self.adapter, confirmer)

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / MANIFEST_FILE

    def analyze(self) -> Tuple[List[str], UsageAggregator, List[str]]:
        """Scan and analyze every file. Returns (files, aggregate, skipped files)."""
        files = self.scanner.scan()
        aggregator = UsageAggregator()
        skipped: List[str] = []
        for rel_path in files:
            try:
                aggregator.add(self.analyzer.analyze_file(self.project_dir, rel_path))
            except ParseError as e:
                logger.warning("Skipping {}: {}", e.path, e.reason)
                skipped.append(rel_path)
        return files, aggregator, skipped

    def plan(self) -> CycleResult:
        """Analyze and compute the plan without applying it."""
        files, aggregator, skipped = self.analyze()
        result = CycleResult(files=files, used=aggregator.used, skipped_files=skipped)
        try:
            manifest = read_manifest(self.manifest_path)
        except ManifestError as e:
            logger.error("Cannot read manifest: {}", e)
            result.error = e
            return result
        result.plan = self.synchronizer.plan(aggregator.used, manifest)
        return result

    async def run_cycle(self) -> CycleResult:
        """One full sync cycle. Manifest errors end this cycle only."""
        logger.debug("Analyzing dependencies...")
        result = self.plan()
        if result.plan is None:
            return result
        result.report = await self.synchronizer.apply(result.plan)
        return result
