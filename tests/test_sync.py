"""
Tests for ManifestSynchronizer — plan computation and application.

Tests validate:
- Set arithmetic of install/remove plans
- Ignored, protected and essential packages are never removed
- Dev dependency policy
- Apply order (installs before removals), safe mode, partial failure
"""

import asyncio
from pathlib import Path

import pytest

from depwatch.core.manifest import Manifest
from depwatch.core.sync import (
    ManifestSynchronizer,
    PROTECTED_PACKAGES,
    SyncPlan,
    compute_plan,
)
from depwatch.errors import ExternalCommandError

from tests.factories import FakeConfirmer, FakePackageManager, make_config


def manifest(deps=(), dev=()):
    return Manifest(
        path=Path("package.json"),
        dependencies={name: "^1.0.0" for name in deps},
        dev_dependencies={name: "^1.0.0" for name in dev},
    )


class TestComputePlan:
    """Diffing used packages against declared dependencies."""

    def test_install_and_remove(self, config):
        plan = compute_plan(["B", "C"], manifest(["A", "B"]), config)
        assert plan.to_install == ("C",)
        assert plan.to_remove == ("A",)

    def test_in_sync(self, config):
        plan = compute_plan(["A"], manifest(["A"]), config)
        assert plan.is_empty

    def test_no_usage_removes_everything_declared(self, config):
        plan = compute_plan([], manifest(["A", "B"]), config)
        assert plan.to_install == ()
        assert plan.to_remove == ("A", "B")

    def test_install_follows_usage_order(self, config):
        plan = compute_plan(["zod", "axios", "zod"], manifest(), config)
        assert plan.to_install == ("zod", "axios")

    def test_remove_follows_manifest_order(self, config):
        plan = compute_plan([], manifest(["zod", "axios", "chalk"]), config)
        assert plan.to_remove == ("zod", "axios", "chalk")

    def test_ignored_never_installed_or_removed(self):
        config = make_config(ignoredPackages=["fs", "typescript"])
        plan = compute_plan(["fs"], manifest(["typescript"]), config)
        assert plan.is_empty

    def test_protected_never_installed_or_removed(self, config):
        assert "depwatch" in PROTECTED_PACKAGES
        plan = compute_plan(["depwatch"], manifest(["depwatch"]), config, protected={"depwatch"})
        assert plan.is_empty
        plan = compute_plan([], manifest(["depwatch"]), config)
        assert plan.to_remove == ()

    def test_essential_installed_and_kept(self):
        config = make_config(essentialPackages=["react", "dotenv"])
        plan = compute_plan([], manifest(["dotenv"]), config)
        assert plan.to_install == ("react",)
        assert plan.to_remove == ()

    def test_essential_after_used(self):
        config = make_config(essentialPackages=["react"])
        plan = compute_plan(["axios"], manifest(), config)
        assert plan.to_install == ("axios", "react")

    def test_ignored_wins_over_essential(self):
        config = make_config(ignoredPackages=["react"], essentialPackages=["react"])
        assert compute_plan([], manifest(), config).is_empty

    def test_dev_dependencies_ignored_by_default(self, config):
        plan = compute_plan(["jest"], manifest(dev=["jest"]), config)
        assert plan.to_install == ("jest",)

    def test_dev_dependencies_checked_when_enabled(self):
        config = make_config(manifestPolicy={"checkDevDependencies": True})
        plan = compute_plan(["jest"], manifest(["jest"], dev=["jest"]), config)
        assert plan.is_empty

    def test_unused_dev_dependency_never_removed(self):
        config = make_config(manifestPolicy={"checkDevDependencies": True})
        plan = compute_plan([], manifest(dev=["eslint"]), config)
        assert plan.is_empty

    def test_node_builtins_never_installed_or_removed(self, config):
        assert config.ignored_packages == frozenset()
        plan = compute_plan(
            ["net", "worker_threads", "querystring", "process", "dns", "axios"],
            manifest(["buffer", "events"]),
            config,
        )
        assert plan.to_install == ("axios",)
        assert plan.to_remove == ()

    def test_plan_sets_are_disjoint(self, config):
        plan = compute_plan(["A", "C"], manifest(["A", "B"]), config)
        assert not set(plan.to_install) & set(plan.to_remove)


class TestApply:
    """Executing a plan through the package manager."""

    def test_installs_before_removals(self, config):
        adapter = FakePackageManager()
        sync = ManifestSynchronizer(config, adapter)
        report = asyncio.run(sync.apply(SyncPlan(to_install=("C",), to_remove=("A",))))
        assert adapter.commands == [["npm", "install", "C"], ["npm", "uninstall", "A"]]
        assert report.installed == ["C"]
        assert report.removed == ["A"]
        assert report.ok

    def test_yarn_commands(self):
        config = make_config(manifestPolicy={"packageManager": "yarn"})
        adapter = FakePackageManager("yarn")
        sync = ManifestSynchronizer(config, adapter)
        asyncio.run(sync.apply(SyncPlan(to_install=("C",), to_remove=("A",))))
        assert adapter.commands == [["yarn", "add", "C"], ["yarn", "remove", "A"]]

    def test_empty_plan_runs_nothing(self, config):
        adapter = FakePackageManager()
        report = asyncio.run(ManifestSynchronizer(config, adapter).apply(SyncPlan()))
        assert adapter.commands == []
        assert report.ok

    def test_failure_does_not_stop_remaining_actions(self, config):
        adapter = FakePackageManager(failing={"nope"})
        sync = ManifestSynchronizer(config, adapter)
        plan = SyncPlan(to_install=("nope", "axios"), to_remove=("A",))
        report = asyncio.run(sync.apply(plan))

        assert report.installed == ["axios"]
        assert report.removed == ["A"]
        assert not report.ok
        assert len(report.failed) == 1
        error = report.failed[0]
        assert isinstance(error, ExternalCommandError)
        assert error.package == "nope"
        assert "E404" in error.output

    def test_protected_removal_refused(self, config):
        adapter = FakePackageManager()
        sync = ManifestSynchronizer(config, adapter)
        asyncio.run(sync.apply(SyncPlan(to_remove=("depwatch", "A"))))
        assert adapter.commands == [["npm", "uninstall", "A"]]


class TestSafeMode:
    """Per-package confirmation."""

    @pytest.fixture
    def safe_config(self):
        return make_config(manifestPolicy={"safeMode": True})

    def test_prompts_per_package(self, safe_config):
        adapter = FakePackageManager()
        confirmer = FakeConfirmer({}, default=True)
        sync = ManifestSynchronizer(safe_config, adapter, confirmer)
        asyncio.run(sync.apply(SyncPlan(to_install=("C",), to_remove=("A",))))
        assert confirmer.questions == [
            "Do you want to install C?",
            "Do you want to remove A?",
        ]

    def test_declined_action_skipped(self, safe_config):
        adapter = FakePackageManager()
        confirmer = FakeConfirmer({"A": False}, default=True)
        sync = ManifestSynchronizer(safe_config, adapter, confirmer)
        report = asyncio.run(sync.apply(SyncPlan(to_install=("C",), to_remove=("A",))))
        assert adapter.commands == [["npm", "install", "C"]]
        assert report.skipped == ["A"]
        assert report.ok

    def test_no_prompt_when_safe_mode_off(self, config):
        confirmer = FakeConfirmer({}, default=False)
        sync = ManifestSynchronizer(config, FakePackageManager(), confirmer)
        report = asyncio.run(sync.apply(SyncPlan(to_install=("C",))))
        assert confirmer.questions == []
        assert report.installed == ["C"]
