"""Verbosity-gated console output."""

from __future__ import annotations

import sys
from typing import TextIO

from p3d.config import Verbosity


class ConsoleReporter:
    """
    Prints messages whose level does not exceed the configured verbosity.

    Usage:
        reporter = ConsoleReporter(config.verbosity)
        reporter.sparse("Starting evolution")
        reporter.verbose(f"Genome: {genome}")
    """

    def __init__(self, verbosity: Verbosity = Verbosity.QUIET, stream: TextIO | None = None):
        self.verbosity = Verbosity(verbosity)
        self._stream = stream

    def enabled(self, level: Verbosity) -> bool:
        return level != Verbosity.QUIET and self.verbosity >= level

    def emit(self, level: Verbosity, message: str) -> None:
        if self.enabled(level):
            print(message, file=self._stream or sys.stdout)

    def sparse(self, message: str) -> None:
        self.emit(Verbosity.SPARSE, message)

    def normal(self, message: str) -> None:
        self.emit(Verbosity.NORMAL, message)

    def verbose(self, message: str) -> None:
        self.emit(Verbosity.VERBOSE, message)
