"""
Formatters — Human and JSON renderings of sync plans and reports.
"""

from typing import Any, Dict, List, Optional

from .symbols import SymbolSet, get_symbols


def plan_to_dict(plan, used=(), skipped_files=()) -> Dict[str, Any]:
    """JSON-ready view of a plan (for ``depwatch check --json``)."""
    return {
        "toInstall": list(plan.to_install),
        "toRemove": list(plan.to_remove),
        "used": list(used),
        "skippedFiles": list(skipped_files),
    }


def format_plan(plan, symbols: Optional[SymbolSet] = None) -> str:
    """
    Format a plan for display.

    Examples:
        Dependencies changes:
          + Adding: axios, styled-components
          − Removing: lodash
    """
    symbols = symbols or get_symbols()
    if plan.is_empty:
        return f"{symbols.check_pass} Dependencies are in sync"

    lines: List[str] = ["Dependencies changes:"]
    if plan.to_install:
        lines.append(f"  {symbols.add} Adding: {', '.join(plan.to_install)}")
    if plan.to_remove:
        lines.append(f"  {symbols.remove} Removing: {', '.join(plan.to_remove)}")
    return "\n".join(lines)


def format_report(report, symbols: Optional[SymbolSet] = None) -> str:
    """One line per outcome group, failures last."""
    symbols = symbols or get_symbols()
    lines: List[str] = []
    if report.installed:
        lines.append(f"{symbols.check_pass} Installed: {', '.join(report.installed)}")
    if report.removed:
        lines.append(f"{symbols.check_pass} Removed: {', '.join(report.removed)}")
    if report.skipped:
        lines.append(f"{symbols.skip} Skipped: {', '.join(report.skipped)}")
    for error in report.failed:
        lines.append(f"{symbols.check_fail} {error}")
    return "\n".join(lines)
