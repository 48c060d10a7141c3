"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic attached to msgbundle
exceptions and log records.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Group resolution errors (raw data could not be loaded)
        2000-2999: Lookup errors (missing translations)
        3000-3999: Formatting errors (pattern/argument mismatch)
        4000-4999: Bundle construction errors (custom behaviors, parent chains)
    """

    # Group resolution errors (1000-1999)
    GROUP_NOT_FOUND = 1001
    GROUP_LOAD_FAILED = 1002
    GROUP_INVALID_DATA = 1003

    # Lookup errors (2000-2999)
    MISSING_TRANSLATION = 2001

    # Formatting errors (3000-3999)
    FORMAT_MISMATCH = 3001
    ARGUMENT_INDEX_OUT_OF_RANGE = 3002
    UNKNOWN_FORMAT_TYPE = 3003
    INVALID_FORMAT_STYLE = 3004
    UNBALANCED_BRACES = 3005

    # Bundle construction errors (4000-4999)
    CUSTOM_BUNDLE_UNKNOWN = 4001
    CUSTOM_BUNDLE_FAILED = 4002
    CYCLIC_PARENT = 4003


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        group: Group path the error relates to (None if not applicable)
        key: Message key the error relates to (None if not applicable)
        hint: Suggestion for fixing the error
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    group: str | None = None
    key: str | None = None
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic as a compact multi-line report.

        Example output:
            error[MISSING_TRANSLATION]: Missing translation message
              --> game.chess: m.widgets
              = help: Add the key to the group or one of its parents

        Returns:
            Formatted error message
        """
        lines = [f"{self.severity}[{self.code.name}]: {self.message}"]
        if self.group is not None or self.key is not None:
            location = ": ".join(part for part in (self.group, self.key) if part is not None)
            lines.append(f"  --> {location}")
        if self.hint:
            lines.append(f"  = help: {self.hint}")
        return "\n".join(lines)
