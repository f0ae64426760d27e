"""Per-invocation run context.

Verbosity used to be process-wide state in the CLI. It now travels as an
explicit value so analysis functions stay free of hidden globals and can be
called from tests or concurrent callers with different settings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

_DEFAULT_LOGGER = logging.getLogger("screenbook")


@dataclass(frozen=True)
class RunContext:
    """Options for one command invocation."""

    verbose: bool = False
    logger: logging.Logger | None = None

    @property
    def log(self) -> logging.Logger:
        return self.logger or _DEFAULT_LOGGER

    def debug(self, msg: str, *args: object) -> None:
        """Emit a debug record, but only in verbose runs."""
        if self.verbose:
            self.log.debug(msg, *args)


DEFAULT_CONTEXT = RunContext()
