"""msgbundle - hierarchical message bundles with fallback, plurals and compound keys.

Messages are divided into named groups ("game.chess"). Each group resolves
to a MessageBundle that falls back to a parent group and, ultimately, to the
root "global" group. Bundles substitute positional arguments, pick plural
variants (.0/.1/.n) from a count argument, resolve keys qualified with a
foreign group, and translate compound keys whose arguments are themselves
keys.

Public API:
    MessageManager - Caches bundles for one locale and wires up parents
    MessageBundle - Per-group lookup, formatting and compound translation
    BundleRegistry - Custom bundle behaviors selected by group data
    DictGroupLoader / PathGroupLoader - Group data loaders
    compose, tcompose, qualify, taint - Key codec for building keys

Exceptions:
    MessageError - Base exception class
    GroupResolutionError / GroupNotFoundError - Group data could not be loaded
    MissingTranslationError - Key not found in a bundle chain
    FormatMismatchError - Pattern rejected its arguments
    CustomBundleError - Custom bundle behavior could not be built
    CyclicParentError - Explicit parents form a cycle

Submodules:
    msgbundle.core - Key codec
    msgbundle.runtime - Bundles, formatting and the behavior registry
    msgbundle.localization - Manager, loaders and type aliases
    msgbundle.diagnostics - Error types and diagnostic codes
"""

from .constants import GLOBAL_BUNDLE
from .core.keys import (
    compose,
    escape,
    get_bundle_name,
    get_unqualified_key,
    is_qualified,
    is_tainted,
    qualify,
    taint,
    tcompose,
    unescape,
    untaint,
)
from .diagnostics import (
    CustomBundleError,
    CyclicParentError,
    FormatMismatchError,
    GroupNotFoundError,
    GroupResolutionError,
    MessageError,
    MissingTranslationError,
)
from .localization import DictGroupLoader, GroupLoader, MessageManager, PathGroupLoader
from .runtime import BundleRegistry, MessageBundle, get_default_registry

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("msgbundle")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "GLOBAL_BUNDLE",
    "BundleRegistry",
    "CustomBundleError",
    "CyclicParentError",
    "DictGroupLoader",
    "FormatMismatchError",
    "GroupLoader",
    "GroupNotFoundError",
    "GroupResolutionError",
    "MessageBundle",
    "MessageError",
    "MessageManager",
    "MissingTranslationError",
    "PathGroupLoader",
    "__version__",
    "compose",
    "escape",
    "get_bundle_name",
    "get_default_registry",
    "get_unqualified_key",
    "is_qualified",
    "is_tainted",
    "qualify",
    "taint",
    "tcompose",
    "unescape",
    "untaint",
]
