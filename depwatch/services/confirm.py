"""InteractiveConfirmer — line-based yes/no prompt used in safe mode."""

import asyncio
import sys
from typing import Callable, Optional

YES_ANSWERS = ("y", "yes")


class InteractiveConfirmer:
    """
    Asks one yes/no question per action.

    ``y`` or ``yes`` (any case, surrounding spaces ignored) accepts.
    Anything else, including end of input, declines.
    """

    def __init__(self, read_line: Optional[Callable[[], str]] = None, output=None):
        self._read_line = read_line or sys.stdin.readline
        self._output = output

    def ask(self, message: str) -> bool:
        """Blocking prompt."""
        out = self._output or sys.stdout
        out.write(f"{message} (y/n): ")
        out.flush()
        try:
            answer = self._read_line()
        except EOFError:
            return False
        if not answer:
            return False
        return answer.strip().lower() in YES_ANSWERS

    async def confirm(self, message: str) -> bool:
        """Prompt without blocking the event loop."""
        return await asyncio.to_thread(self.ask, message)
