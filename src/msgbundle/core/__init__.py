"""Core utilities shared across the runtime and localization layers.

This package holds the key codec that both MessageBundle (parsing keys) and
application code (building keys) depend on. Isolating it keeps a clean
dependency graph:

    core <- runtime <- localization

Exports:
    Key codec functions (compose, qualify, taint, escape and friends)

Python 3.13+.
"""

from .keys import (
    compose,
    decompose,
    escape,
    get_bundle_name,
    get_unqualified_key,
    is_compound,
    is_qualified,
    is_tainted,
    qualify,
    stringify_args,
    taint,
    tcompose,
    unescape,
    untaint,
)

__all__ = [
    "compose",
    "decompose",
    "escape",
    "get_bundle_name",
    "get_unqualified_key",
    "is_compound",
    "is_qualified",
    "is_tainted",
    "qualify",
    "stringify_args",
    "taint",
    "tcompose",
    "unescape",
    "untaint",
]
