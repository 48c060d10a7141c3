"""Diagnostic system for msgbundle errors.

Provides structured error diagnostics with codes, group/key locations and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    CustomBundleError,
    CyclicParentError,
    FormatMismatchError,
    GroupNotFoundError,
    GroupResolutionError,
    MessageError,
    MissingTranslationError,
)

__all__ = [
    "CustomBundleError",
    "CyclicParentError",
    "Diagnostic",
    "DiagnosticCode",
    "FormatMismatchError",
    "GroupNotFoundError",
    "GroupResolutionError",
    "MessageError",
    "MissingTranslationError",
]
