"""
ManifestSynchronizer — From used packages to install/remove actions.

    to_install = (used ∪ essential) − declared − declared_dev − ignored − protected
    to_remove  = declared − used − declared_dev − ignored − protected − essential

``declared_dev`` is empty unless manifestPolicy.checkDevDependencies is on.
Protected packages (depwatch itself) and Node.js built-in module names
are excluded even when the ignore list forgets them. A declared npm
polyfill that shares a built-in name (buffer, events) is left alone.

Applying a plan runs installs first, then removals, one package at a time.
A failed or declined action never stops the rest of the plan.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from loguru import logger

from ..config import Config
from ..errors import ExternalCommandError
from .imports import NODE_BUILTINS
from .manifest import Manifest


# The tool's own package and the packages it cannot run without
PROTECTED_PACKAGES = frozenset({'depwatch'})


@dataclass(frozen=True)
class SyncPlan:
    """Packages to install and remove in one cycle. Never persisted."""
    to_install: Tuple[str, ...] = ()
    to_remove: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_install and not self.to_remove


@dataclass
class SyncReport:
    """What happened when a plan was applied."""
    installed: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[ExternalCommandError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def compute_plan(
    used: Iterable[str],
    manifest: Manifest,
    config: Config,
    protected: Iterable[str] = PROTECTED_PACKAGES,
) -> SyncPlan:
    """Diff used packages against the manifest under the config's policy."""
    used = list(dict.fromkeys(used))
    used_set = set(used)
    declared = manifest.dependencies
    declared_dev = manifest.dev_dependencies if config.manifest.check_dev_dependencies else {}
    excluded = set(config.ignored_packages) | set(protected) | NODE_BUILTINS
    essential = set(config.essential_packages)

    wanted = list(dict.fromkeys(used + list(config.essential_packages)))
    to_install = tuple(
        pkg for pkg in wanted
        if pkg not in declared and pkg not in declared_dev and pkg not in excluded
    )
    to_remove = tuple(
        pkg for pkg in declared
        if pkg not in used_set
        and pkg not in declared_dev
        and pkg not in excluded
        and pkg not in essential
    )
    return SyncPlan(to_install=to_install, to_remove=to_remove)


class ManifestSynchronizer:
    """
    Computes and applies sync plans.

    Usage:
        sync = ManifestSynchronizer(config, adapter, confirmer)
        plan = sync.plan(used, read_manifest(path))
        report = await sync.apply(plan)
    """

    def __init__(self, config: Config, adapter, confirmer=None, protected: Iterable[str] = PROTECTED_PACKAGES):
        self.config = config
        self.adapter = adapter
        self.confirmer = confirmer
        self.protected = frozenset(protected)

    def plan(self, used: Iterable[str], manifest: Manifest) -> SyncPlan:
        return compute_plan(used, manifest, self.config, self.protected)

    async def apply(self, plan: SyncPlan) -> SyncReport:
        report = SyncReport()
        if plan.is_empty:
            return report

        if plan.to_install:
            logger.info("Adding: {}", ", ".join(plan.to_install))
        if plan.to_remove:
            logger.info("Removing: {}", ", ".join(plan.to_remove))

        for package in plan.to_install:
            await self._execute(package, "install", report)
        for package in plan.to_remove:
            if package in self.protected:
                logger.warning("Refusing to remove protected package {}", package)
                continue
            await self._execute(package, "remove", report)

        if self.config.debug:
            logger.debug(
                "Dependencies update completed: {} installed, {} removed, {} skipped, {} failed",
                len(report.installed), len(report.removed), len(report.skipped), len(report.failed),
            )
        return report

    async def _execute(self, package: str, action: str, report: SyncReport) -> None:
        if self.config.manifest.safe_mode and self.confirmer is not None:
            if not await self.confirmer.confirm(f"Do you want to {action} {package}?"):
                logger.info("Skipping {} of {}", "installation" if action == "install" else "removal", package)
                report.skipped.append(package)
                return

        if action == "install":
            logger.info("Installing {}...", package)
            result = await self.adapter.install(package)
        else:
            logger.info("Removing {}...", package)
            result = await self.adapter.remove(package)

        if not result.success:
            error = ExternalCommandError(package, result.command, result.output)
            logger.error("Failed to {} {}: {}", action, package, error.output or f"exit {result.returncode}")
            report.failed.append(error)
            return

        if action == "install":
            logger.info("{} installed", package)
            report.installed.append(package)
        else:
            logger.info("{} removed", package)
            report.removed.append(package)
