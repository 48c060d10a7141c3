"""Runtime: bundle resolution, pattern formatting and custom bundle behaviors.

Exports:
    MessageBundle - Per-group resolution with parent fallback
    BundleRegistry - Custom bundle behavior factories
    format_pattern - Positional placeholder formatting

Python 3.13+.
"""

from .bundle import MessageBundle
from .formatter import format_pattern
from .registry import BundleFactory, BundleRegistry, get_default_registry

__all__ = [
    "BundleFactory",
    "BundleRegistry",
    "MessageBundle",
    "format_pattern",
    "get_default_registry",
]
