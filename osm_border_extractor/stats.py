"""Run statistics and warning/error bookkeeping."""

import logging
from collections import Counter
from dataclasses import dataclass, field

from .errors import EXIT_OK, EXIT_WARNING, EXIT_ERROR

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Counters for one run, passed explicitly to every pass."""
    warnings: int = 0
    errors: int = 0
    counts: Counter = field(default_factory=Counter)

    def warning(self, message: str) -> None:
        """Report one recoverable problem."""
        self.warnings += 1
        logger.warning(message)

    def error(self, message: str) -> None:
        """Report one per-record failure."""
        self.errors += 1
        logger.error(message)

    def count(self, name: str, amount: int = 1) -> None:
        self.counts[name] += amount

    def exit_code(self, max_warnings: int = 500) -> int:
        if self.errors or self.warnings > max_warnings:
            return EXIT_ERROR
        if self.warnings:
            return EXIT_WARNING
        return EXIT_OK
