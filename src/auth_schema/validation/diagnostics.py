"""
Findings produced while checking the assembled auth keyspace.

A rule returns zero or more `Diagnostic`s; the validator gathers them into a
`ValidationReport`. Only ERROR findings stop startup. WARNING and INFO
findings are logged and startup continues.

Keyspace-wide findings (replication, table set) carry an empty `table_key`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum


class DiagnosticLevel(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def log_level(self) -> int:
        """The `logging` level a finding of this severity is reported at."""
        return {
            DiagnosticLevel.ERROR: logging.ERROR,
            DiagnosticLevel.WARNING: logging.WARNING,
            DiagnosticLevel.INFO: logging.INFO,
        }[self]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    One finding about a table or the keyspace.

    table_key:
        'system_auth.<table>' for table findings, "" for the keyspace.
    code:
        The RuleCode value of the rule that raised it.
    """

    table_key: str
    level: DiagnosticLevel
    code: str
    message: str
    hint: str = ""

    def __str__(self) -> str:
        where = f"{self.table_key}: " if self.table_key else ""
        return f"[{self.code}] {where}{self.message}"


@dataclass(frozen=True, slots=True)
class ValidationReport:
    diagnostics: tuple[Diagnostic, ...]

    @property
    def ok(self) -> bool:
        """False as soon as any rule reported an ERROR."""
        return not self.errors

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return self._at(DiagnosticLevel.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return self._at(DiagnosticLevel.WARNING)

    def _at(self, level: DiagnosticLevel) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.level is level)
