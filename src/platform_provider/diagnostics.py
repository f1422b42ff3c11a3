"""
Diagnostics sink for user-facing errors and warnings.

One Diagnostics instance is owned by each resource operation and passed by
reference into every executor and polling call. The core only appends;
the resource layer reads the accumulated entries once the operation ends,
so the user sees every problem encountered rather than only the first.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single user-facing record.

    Attributes:
        severity: ERROR or WARNING
        summary: Short title (e.g. "GET failed")
        detail: Long message with everything needed to debug the failure
    """

    severity: Severity
    summary: str
    detail: str

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.summary}: {self.detail}"


class Diagnostics:
    """Append-only collector of Diagnostic records for one operation."""

    def __init__(self) -> None:
        self._entries: list[Diagnostic] = []

    def add_error(self, summary: str, detail: str) -> None:
        self._entries.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str) -> None:
        self._entries.append(Diagnostic(Severity.WARNING, summary, detail))

    def extend(self, entries: Iterable[Diagnostic]) -> None:
        self._entries.extend(entries)

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._entries)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._entries if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._entries if d.severity is Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Diagnostics(errors={len(self.errors)}, warnings={len(self.warnings)})"
