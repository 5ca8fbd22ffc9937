"""
PackageManagerAdapter — npm / yarn command dialects.

Builds argv lists (never shell strings) and runs them in the project
directory. A command runs once; a failure is returned, not retried.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List

from loguru import logger

from ..config import PACKAGE_MANAGERS


# manager -> (install verb, removal verb)
COMMANDS = {
    "npm": (["npm", "install"], ["npm", "uninstall"]),
    "yarn": (["yarn", "add"], ["yarn", "remove"]),
}


@dataclass
class CommandResult:
    """Outcome of one external command."""
    command: List[str]
    success: bool
    output: str = ""
    returncode: int = 0


class PackageManagerAdapter:
    """
    Translates install/removal actions into package manager commands.

    Usage:
        adapter = PackageManagerAdapter("yarn", project_dir)
        adapter.install_command("axios")          # ['yarn', 'add', 'axios']
        result = await adapter.install("axios")
    """

    def __init__(self, manager: str = "npm", cwd: Path = Path(".")):
        if manager not in PACKAGE_MANAGERS:
            raise ValueError(
                f"Unknown package manager '{manager}'. Valid: {', '.join(PACKAGE_MANAGERS)}"
            )
        self.manager = manager
        self.cwd = Path(cwd)

    def install_command(self, package: str) -> List[str]:
        install, _ = COMMANDS[self.manager]
        return install + [package]

    def removal_command(self, *packages: str) -> List[str]:
        """Removal command for one package or a batch of packages."""
        if not packages:
            raise ValueError("removal_command needs at least one package")
        _, remove = COMMANDS[self.manager]
        return remove + list(packages)

    async def install(self, package: str) -> CommandResult:
        return await self.run(self.install_command(package))

    async def remove(self, *packages: str) -> CommandResult:
        return await self.run(self.removal_command(*packages))

    async def run(self, command: List[str]) -> CommandResult:
        """Run a command to completion, capturing its output."""
        logger.debug("Running {} in {}", " ".join(command), self.cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(self.cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            # Executable missing or not runnable
            return CommandResult(command=command, success=False, output=str(e), returncode=-1)

        stdout, _ = await proc.communicate()
        output = stdout.decode("utf-8", errors="replace").strip() if stdout else ""
        return CommandResult(
            command=command,
            success=proc.returncode == 0,
            output=output,
            returncode=proc.returncode,
        )
