"""Shared constants for msgbundle.

Centralizes the reserved keys, marker characters and fallback templates used
by the key codec, the bundle and the manager. Placing constants here avoids
circular imports between the runtime and localization packages.

Constants are grouped by domain:
- Group naming: the root group and path prefix separator
- Reserved keys: entries in a group's raw data that are not messages
- Key codec markers: taint, qualification, compound separators and escapes
- Plural suffixes: key suffixes selected from a count argument

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Group naming
    "GLOBAL_BUNDLE",
    "PATH_SEPARATOR",
    # Reserved keys
    "PARENT_KEY",
    "BUNDLE_CLASS_KEY",
    # Key codec markers
    "TAINT_CHAR",
    "QUAL_PREFIX",
    "QUAL_SEP",
    "COMPOUND_SEP",
    "ESCAPE_CHAR",
    "ESCAPED_SEP",
    # Plural suffixes
    "SUFFIX_ZERO",
    "SUFFIX_ONE",
    "SUFFIX_MANY",
    # Formatting
    "DEFAULT_FORMAT_LOCALE",
]

# ============================================================================
# GROUP NAMING
# ============================================================================

GLOBAL_BUNDLE: str = "global"
"""Name of the root group. Every other group falls back to it."""

PATH_SEPARATOR: str = "."
"""Separator between the resource prefix and hierarchical group path components."""

# ============================================================================
# RESERVED KEYS
# ============================================================================

PARENT_KEY: str = "__parent"
"""Raw-data key naming an explicit parent group path."""

BUNDLE_CLASS_KEY: str = "msgbundle_class"
"""Raw-data key naming a registered custom bundle behavior."""

# ============================================================================
# KEY CODEC MARKERS
# ============================================================================
#
# Wire format of a compound key:
#
#     key|arg1|arg2          plain compound key
#     %group:key|arg1        qualified compound key
#     key|~literal           tainted argument, never translated
#
# Arguments are escaped before joining: "\" -> "\\" and "|" -> "\!".

TAINT_CHAR: str = "~"
QUAL_PREFIX: str = "%"
QUAL_SEP: str = ":"
COMPOUND_SEP: str = "|"
ESCAPE_CHAR: str = "\\"
ESCAPED_SEP: str = "!"

# ============================================================================
# PLURAL SUFFIXES
# ============================================================================

SUFFIX_ZERO: str = ".0"
SUFFIX_ONE: str = ".1"
SUFFIX_MANY: str = ".n"

# ============================================================================
# FORMATTING
# ============================================================================

DEFAULT_FORMAT_LOCALE: str = "en_US"
"""Locale used for number/date rendering when the manager locale is unknown to Babel."""
