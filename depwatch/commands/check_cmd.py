"""
CheckCommand — One analysis pass, nothing applied

Prints the plan a sync cycle would execute. Exit code 0 when in sync,
2 when changes are pending, 1 when package.json cannot be read.
"""

import json

from ..commands.base import BaseCommand
from ..presentation.formatters import format_plan, plan_to_dict
from ..presentation.symbols import safe_print


class CheckCommand(BaseCommand):
    """Dry-run of a sync cycle."""

    def check(self, as_json: bool = False) -> int:
        result = self.engine.plan()
        if result.plan is None:
            safe_print(f"{self.symbols.check_fail} {result.error}")
            return 1

        if as_json:
            safe_print(json.dumps(
                plan_to_dict(result.plan, result.used, result.skipped_files), indent=2
            ))
        else:
            safe_print(f"Analyzed {len(result.files)} file(s), {len(result.used)} package(s) in use")
            for rel_path in result.skipped_files:
                safe_print(f"  {self.symbols.check_warn} Skipped {rel_path} (could not parse)")
            safe_print(format_plan(result.plan, self.symbols))
        return 0 if result.plan.is_empty else 2


def register_parser(subparsers):
    """Register check command parser."""
    p = subparsers.add_parser('check', help='Show what would be installed or removed')
    p.add_argument('--json', action='store_true', dest='as_json', help='Output as JSON')


def handle(cli, args):
    """Handle check command dispatch."""
    return CheckCommand(cli).check(as_json=args.as_json)
