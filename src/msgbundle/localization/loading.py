"""Group data loading for MessageManager.

Provides the protocol for group loaders, an in-memory and a filesystem
implementation, and result/summary data structures for tracking load
attempts.

Components:
    GroupLoader - Protocol for loading a group's raw data (structural typing)
    DictGroupLoader - Loader over embedded Python data
    PathGroupLoader - YAML/JSON file loader with path-traversal prevention
    GroupLoadResult - Immutable result of a single group load attempt
    LoadSummary - Immutable aggregate of the load results of one cache epoch

Locale fallback inside a group follows resource-bundle conventions: data for
de_DE is layered over data for de, which is layered over the base
(locale-less) data. A group is "not found" only if no layer exists.

Python 3.13+.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import yaml

from msgbundle.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    GroupNotFoundError,
    GroupResolutionError,
)
from msgbundle.enums import LoadStatus
from msgbundle.locale_utils import locale_candidates, normalize_locale
from msgbundle.localization.types import GroupPath, LocaleCode, RawData

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "GroupLoader",
    # Concrete loaders
    "DictGroupLoader",
    "PathGroupLoader",
    # Load result types
    "GroupLoadResult",
    "LoadSummary",
]


class GroupLoader(Protocol):
    """Protocol for resolving a group's raw data in a locale.

    Implementations must provide load(). It returns a flat key -> text
    mapping or raises GroupNotFoundError when the group definitely does not
    exist; any other exception is recorded as a load error. A loader may also
    define describe_path(resource_path, locale) returning a human-readable
    source location; the manager records it in GroupLoadResult.source_path.

    Example:
        >>> class EnvLoader:
        ...     def load(self, resource_path: str, locale: str) -> dict[str, str]:
        ...         return {"greeting": os.environ["GREETING"]}
        ...     def describe_path(self, resource_path: str, locale: str) -> str:
        ...         return f"env:{resource_path}"
    """

    def load(self, resource_path: str, locale: LocaleCode) -> RawData:
        """Load the raw data of a group.

        Args:
            resource_path: Prefixed group path (e.g., 'rsrc.i18n.game.chess')
            locale: Locale to resolve for

        Returns:
            Flat key -> text mapping

        Raises:
            GroupNotFoundError: If the group does not exist
            GroupResolutionError: If the group data is invalid
            OSError: If the backing storage cannot be read
        """


def _not_found(resource_path: str, locale: LocaleCode) -> GroupNotFoundError:
    return GroupNotFoundError(
        Diagnostic(
            code=DiagnosticCode.GROUP_NOT_FOUND,
            message=f"Unable to resolve message group for locale {locale!r}",
            group=resource_path,
        )
    )


def _flatten(data: Mapping[object, object], prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into dot-separated keys with string values."""
    items: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            items.update(_flatten(value, full_key))
        elif value is None:
            items[full_key] = ""
        else:
            items[full_key] = str(value)
    return items


@dataclass(frozen=True, slots=True)
class DictGroupLoader:
    """Loader over embedded data.

    Data is keyed by locale (use "" for the base layer), then by resource
    path, then by message key. Nested message mappings are flattened.

    Example:
        >>> loader = DictGroupLoader({
        ...     "": {"i18n.global": {"ok": "OK"}},
        ...     "de": {"i18n.global": {"ok": "Gut"}},
        ... })
        >>> loader.load("i18n.global", "de_AT")["ok"]
        'Gut'

    Attributes:
        groups: Locale -> resource path -> messages
    """

    groups: Mapping[LocaleCode, Mapping[str, Mapping[str, object]]]
    _layers: dict[str, Mapping[str, Mapping[str, object]]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Index the data by normalized locale."""
        layers = {normalize_locale(locale): groups for locale, groups in self.groups.items()}
        object.__setattr__(self, "_layers", layers)

    def describe_path(self, resource_path: str, locale: LocaleCode) -> str:
        """Return human-readable location for diagnostics."""
        return f"<embedded>:{resource_path}[{locale}]"

    def load(self, resource_path: str, locale: LocaleCode) -> RawData:
        """Merge the group's locale layers, least specific first.

        Raises:
            GroupNotFoundError: If no layer defines the group
        """
        merged: dict[str, str] = {}
        found = False
        for candidate in reversed(locale_candidates(locale)):
            groups = self._layers.get(candidate)
            if groups is None or resource_path not in groups:
                continue
            found = True
            merged.update(_flatten(groups[resource_path]))
        if not found:
            raise _not_found(resource_path, locale)
        return merged


@dataclass(frozen=True, slots=True)
class PathGroupLoader:
    """File system loader for YAML and JSON group files.

    The dotted resource path selects a file below root_dir:

        rsrc.i18n.game.chess + locale de_DE
        -> root/rsrc/i18n/game/chess.yaml        (base layer)
        -> root/rsrc/i18n/game/chess_de.yaml     (layered over base)
        -> root/rsrc/i18n/game/chess_de_DE.yaml  (layered over de)

    For each layer the first existing extension wins (.yaml, .yml, .json
    by default). Nested mappings are flattened to dotted keys, so these
    are equivalent::

        m.widgets.0: no widgets.

        m:
          widgets:
            "0": no widgets.

    Security:
        Resource path components and locale codes containing path
        separators or ".." are rejected, and every resolved file is verified
        to lie within root_dir.

    Attributes:
        root_dir: Directory holding the group files
        extensions: File extensions to try, in order
    """

    root_dir: str | Path
    extensions: tuple[str, ...] = (".yaml", ".yml", ".json")
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache the resolved root directory."""
        object.__setattr__(self, "_resolved_root", Path(self.root_dir).resolve())

    @staticmethod
    def _split_resource_path(resource_path: str) -> list[str]:
        """Split a dotted resource path into validated path components.

        Raises:
            ValueError: If a component is empty or contains a path separator
        """
        parts = resource_path.split(".")
        for part in parts:
            if not part or part.strip() != part:
                msg = f"Invalid component {part!r} in resource path {resource_path!r}"
                raise ValueError(msg)
            if "/" in part or "\\" in part:
                msg = f"Path separators not allowed in resource path: {resource_path!r}"
                raise ValueError(msg)
        return parts

    @staticmethod
    def _validate_locale(locale: LocaleCode) -> None:
        if ".." in locale:
            msg = f"Path traversal sequences not allowed in locale: '{locale}'"
            raise ValueError(msg)
        if "/" in locale or "\\" in locale:
            msg = f"Path separators not allowed in locale: '{locale}'"
            raise ValueError(msg)

    def _is_safe_path(self, full_path: Path) -> bool:
        try:
            full_path.resolve().relative_to(self._resolved_root)
            return True
        except ValueError:
            return False

    def _base_path(self, resource_path: str) -> Path:
        parts = self._split_resource_path(resource_path)
        return self._resolved_root.joinpath(*parts)

    def describe_path(self, resource_path: str, locale: LocaleCode) -> str:
        """Return the most specific candidate file stem for diagnostics."""
        stem = Path(self.root_dir).joinpath(*resource_path.split("."))
        suffix = f"_{normalize_locale(locale)}" if locale else ""
        return f"{stem}{suffix}{{{','.join(self.extensions)}}}"

    def _find_file(self, base: Path, candidate: str) -> Path | None:
        name = f"{base.name}_{candidate}" if candidate else base.name
        for extension in self.extensions:
            path = base.with_name(name + extension)
            if not self._is_safe_path(path):
                msg = f"Path traversal detected: {path} escapes {self._resolved_root}"
                raise ValueError(msg)
            if path.is_file():
                return path
        return None

    @staticmethod
    def _parse(path: Path) -> dict[str, str]:
        """Parse one group file into a flat mapping.

        Raises:
            GroupResolutionError: If the file is not valid YAML/JSON or its
                top level is not a mapping
        """
        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise GroupResolutionError(
                Diagnostic(
                    code=DiagnosticCode.GROUP_INVALID_DATA,
                    message=f"Failed to parse {path.name}: {e}",
                    group=str(path),
                )
            ) from e

        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise GroupResolutionError(
                Diagnostic(
                    code=DiagnosticCode.GROUP_INVALID_DATA,
                    message=(
                        f"Top level of {path.name} must be a mapping, got {type(data).__name__}"
                    ),
                    group=str(path),
                )
            )
        return _flatten(data)

    def load(self, resource_path: str, locale: LocaleCode) -> RawData:
        """Load and merge the group's files, least specific first.

        Raises:
            ValueError: If the resource path or locale is unsafe
            GroupNotFoundError: If no file exists for any locale layer
            GroupResolutionError: If a file cannot be parsed
            OSError: If a file cannot be read
        """
        self._validate_locale(locale)
        base = self._base_path(resource_path)

        merged: dict[str, str] = {}
        found = False
        for candidate in reversed(locale_candidates(locale)):
            path = self._find_file(base, candidate)
            if path is None:
                continue
            found = True
            merged.update(self._parse(path))
        if not found:
            raise _not_found(resource_path, locale)
        return merged


@dataclass(frozen=True, slots=True)
class GroupLoadResult:
    """Result of resolving one group's raw data.

    Attributes:
        path: Group path requested from the manager
        resource_path: Prefixed path handed to the loader
        locale: Locale the group was resolved for
        status: Load status (success, not_found, error)
        error: Exception if status is not SUCCESS, None otherwise
        source_path: Human-readable location (if available)
    """

    path: GroupPath
    resource_path: str
    locale: LocaleCode
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None

    @property
    def is_success(self) -> bool:
        """Check if the group loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the group does not exist."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if the group exists but failed to load."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of group load results for one cache epoch.

    A group requested again after its epoch was discarded appears once per
    attempt, so get_by_path() may return several results.

    Example:
        >>> summary = manager.get_load_summary()
        >>> for result in summary.get_errors():
        ...     print(f"Failed: {result.resource_path}: {result.error}")
    """

    results: tuple[GroupLoadResult, ...]

    def __repr__(self) -> str:
        return (
            f"LoadSummary(total={self.total_attempted}, ok={self.successful}, "
            f"not_found={self.not_found}, errors={self.errors})"
        )

    def get_by_status(self, status: LoadStatus) -> tuple[GroupLoadResult, ...]:
        """Get all results with the given status, in load order."""
        return tuple(r for r in self.results if r.status == status)

    def get_errors(self) -> tuple[GroupLoadResult, ...]:
        return self.get_by_status(LoadStatus.ERROR)

    def get_not_found(self) -> tuple[GroupLoadResult, ...]:
        return self.get_by_status(LoadStatus.NOT_FOUND)

    def get_by_path(self, path: GroupPath) -> tuple[GroupLoadResult, ...]:
        """Get all results for a group path (unprefixed, as passed to get_bundle)."""
        return tuple(r for r in self.results if r.path == path)

    @property
    def total_attempted(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return len(self.get_by_status(LoadStatus.SUCCESS))

    @property
    def not_found(self) -> int:
        return len(self.get_not_found())

    @property
    def errors(self) -> int:
        return len(self.get_errors())

    @property
    def all_successful(self) -> bool:
        """True when no group was missing or failed (vacuously true if none were loaded)."""
        return self.successful == self.total_attempted
