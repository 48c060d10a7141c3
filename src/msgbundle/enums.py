"""Enumerations for msgbundle type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so a PluralSuffix can be appended
to a key directly.

Python 3.13+.
"""

from enum import StrEnum

from msgbundle.constants import SUFFIX_MANY, SUFFIX_ONE, SUFFIX_ZERO


class PluralSuffix(StrEnum):
    """Key suffix selected from the first (count) argument of a lookup.

    StrEnum provides automatic string conversion: "m.widgets" + PluralSuffix.ONE == "m.widgets.1"
    """

    NONE = ""
    """First argument absent or not an integer: look up the plain key."""

    ZERO = SUFFIX_ZERO
    """Count of exactly zero: m.widgets.0 = no widgets."""

    ONE = SUFFIX_ONE
    """Count of exactly one: m.widgets.1 = {0} widget."""

    MANY = SUFFIX_MANY
    """Any other count, negatives included: m.widgets.n = {0} widgets."""


class LoadStatus(StrEnum):
    """Outcome of resolving the raw data for one group.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Group data was found and parsed."""

    NOT_FOUND = "not_found"
    """No data exists for the group in any candidate locale."""

    ERROR = "error"
    """Data exists but could not be read or parsed."""


__all__ = [
    "LoadStatus",
    "PluralSuffix",
]
