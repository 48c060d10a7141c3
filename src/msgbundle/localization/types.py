"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the package and by user code
when annotating MessageManager call sites.

Python 3.13+.
"""

from collections.abc import Mapping

__all__ = [
    "GroupPath",
    "LocaleCode",
    "MessageKey",
    "RawData",
]

type GroupPath = str
"""Dot-separated hierarchical group name (e.g., 'global', 'game.chess')."""

type LocaleCode = str
"""Locale code (e.g., 'en', 'en_US', 'de-DE'). Opaque to resolution."""

type MessageKey = str
"""Message identifier within a group (e.g., 'm.widgets')."""

type RawData = Mapping[str, str]
"""Flat key -> text mapping for one group in one locale."""
