"""Localization package: the bundle manager and group loading.

Submodules:
    types    - PEP 695 type aliases (GroupPath, LocaleCode, MessageKey, RawData)
    loading  - GroupLoader protocol, DictGroupLoader, PathGroupLoader,
               GroupLoadResult, LoadSummary
    manager  - MessageManager (bundle cache and parent wiring)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from msgbundle.enums import LoadStatus
from msgbundle.localization.loading import (
    DictGroupLoader,
    GroupLoader,
    GroupLoadResult,
    LoadSummary,
    PathGroupLoader,
)
from msgbundle.localization.manager import MessageManager
from msgbundle.localization.types import GroupPath, LocaleCode, MessageKey, RawData

__all__ = [
    # Manager
    "MessageManager",
    # Loader protocol and implementations
    "GroupLoader",
    "DictGroupLoader",
    "PathGroupLoader",
    # Load tracking
    "LoadStatus",
    "LoadSummary",
    "GroupLoadResult",
    # Type aliases for user code type annotations
    "GroupPath",
    "LocaleCode",
    "MessageKey",
    "RawData",
]
