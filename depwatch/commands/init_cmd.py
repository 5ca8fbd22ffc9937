"""
InitCommand — Project scaffolding

- Adds a ``watch-imports`` script to package.json (kept if present)
- Copies the bundled default config to depwatch.yaml (kept if present)
"""

import shutil

from ..commands.base import BaseCommand
from ..config import DEFAULT_CONFIG_PATH, PROJECT_CONFIG_FILE
from ..core.manifest import MANIFEST_FILE, read_manifest, write_manifest
from ..errors import DepwatchError
from ..presentation.symbols import safe_print

WATCH_SCRIPT = "watch-imports"
WATCH_SCRIPT_COMMAND = "depwatch watch"


class InitCommand(BaseCommand):
    """Command for one-time project setup."""

    def init(self) -> int:
        """
        Scaffold the project. Existing script and config are left untouched.

        Returns:
            Process exit code (0 ok, 1 failure)
        """
        symbols = self.symbols
        try:
            script_added = self._add_watch_script()
            config_created = self._create_config_file()
        except (DepwatchError, OSError) as e:
            safe_print(f"{symbols.check_fail} Error during installation: {e}")
            return 1

        if script_added:
            safe_print(f"{symbols.check_pass} Script \"{WATCH_SCRIPT}\" added to {MANIFEST_FILE}")
        if config_created:
            safe_print(f"{symbols.check_pass} Configuration file {PROJECT_CONFIG_FILE} created")
        safe_print(f"{symbols.check_pass} Installation completed successfully")
        safe_print("")
        safe_print("To start watching imports:")
        safe_print(f"  npm run {WATCH_SCRIPT}")
        return 0

    def _add_watch_script(self) -> bool:
        """Add the watch script. False if package.json is absent or already has it."""
        manifest_path = self.project_dir / MANIFEST_FILE
        if not manifest_path.exists():
            return False
        manifest = read_manifest(manifest_path)
        if WATCH_SCRIPT in manifest.scripts:
            return False
        manifest.scripts[WATCH_SCRIPT] = WATCH_SCRIPT_COMMAND
        write_manifest(manifest)
        return True

    def _create_config_file(self) -> bool:
        target = self.project_dir / PROJECT_CONFIG_FILE
        if target.exists():
            return False
        shutil.copyfile(DEFAULT_CONFIG_PATH, target)
        return True


def register_parser(subparsers):
    """Register init command parser."""
    subparsers.add_parser(
        'init',
        help='Add the watch script to package.json and create depwatch.yaml',
    )


def handle(cli, args):
    """Handle init command dispatch."""
    return InitCommand(cli).init()
