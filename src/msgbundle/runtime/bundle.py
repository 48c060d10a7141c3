"""MessageBundle - translated messages for one group in one locale.

A bundle resolves keys through its own raw data and then through its parent
chain, selects plural variants, substitutes arguments, and hands qualified
keys back to its MessageManager for resolution in the named group.

Lookups never raise: missing keys and formatting failures are logged,
reported to the manager's error callback, and replaced by best-effort text.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from msgbundle.core.keys import (
    decompose,
    get_bundle_name,
    get_unqualified_key,
    is_qualified,
    is_tainted,
    stringify_args,
    unescape,
    untaint,
)
from msgbundle.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    FormatMismatchError,
    MissingTranslationError,
)
from msgbundle.enums import PluralSuffix
from msgbundle.runtime.formatter import format_pattern

if TYPE_CHECKING:
    from collections.abc import Sequence

    from msgbundle.localization.manager import MessageManager
    from msgbundle.localization.types import GroupPath, LocaleCode, MessageKey, RawData

__all__ = ["MessageBundle"]

logger = logging.getLogger(__name__)

# Signed decimal integer, ASCII digits only
_COUNT_PATTERN = re.compile(r"[+-]?[0-9]+")


class MessageBundle:
    """Translated messages for one group, with fallback to a parent bundle.

    Bundles are normally obtained from MessageManager.get_bundle(), which
    caches one instance per group path and wires up the parent chain. A
    bundle whose raw data could not be resolved (data is None) still works:
    every lookup falls through to the parent, or echoes the key.

    Custom behaviors registered in a BundleRegistry subclass this class and
    override get_suffix(), get_resource_string() or get() as needed.

    Example:
        >>> bundle = manager.get_bundle("game.chess")
        >>> bundle.get("m.widgets", 5)
        '5 widgets.'
        >>> bundle.xlate(compose("m.moved", "m.knight", taint("e4")))
        'Knight moves to e4.'

    Attributes:
        path: Group path this bundle was resolved for
        parent: Fallback bundle (None only for the root bundle)
        locale: Locale the bundle was resolved for
    """

    __slots__ = ("_data", "_locale", "_manager", "_parent", "_path")

    def __init__(
        self,
        manager: MessageManager,
        path: GroupPath,
        data: RawData | None,
        parent: MessageBundle | None = None,
        locale: LocaleCode | None = None,
    ) -> None:
        """Initialize bundle state.

        Args:
            manager: Manager used to resolve qualified keys
            path: Group path (used for diagnostics)
            data: Key -> text mapping, or None if resolution failed
            parent: Parent bundle consulted on local misses
            locale: Locale the data was resolved for (default: manager's current locale)
        """
        self._manager = manager
        self._path = path
        self._data: Mapping[str, str] | None = (
            MappingProxyType(dict(data)) if data is not None else None
        )
        self._parent = parent
        self._locale: LocaleCode = locale if locale is not None else manager.locale

    @property
    def path(self) -> GroupPath:
        """Group path this bundle was resolved for."""
        return self._path

    @property
    def parent(self) -> MessageBundle | None:
        """Parent bundle, or None for the root bundle."""
        return self._parent

    @property
    def manager(self) -> MessageManager:
        """Manager that created this bundle."""
        return self._manager

    @property
    def locale(self) -> LocaleCode:
        """Locale the bundle was resolved for (used for number/date rendering)."""
        return self._locale

    @property
    def data(self) -> Mapping[str, str] | None:
        """Read-only local raw data, or None if the group failed to resolve."""
        return self._data

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: MessageKey, *args: object) -> str:
        """Obtain the translation for a key, substituting any arguments.

        Without arguments: tainted keys are untainted and returned verbatim,
        qualified keys are resolved in their group, and other keys resolve
        through this bundle and its parents, falling back to the key itself.

        With arguments: if the first argument is an integer (or an integer
        string), a plural variant is preferred. Given::

            m.widgets.0 = no widgets.
            m.widgets.1 = {0} widget.
            m.widgets.n = {0} widgets.

        get("m.widgets", 5) returns "5 widgets.". If no variant exists, the
        plain key is used. Missing keys return the key plus the stringified
        arguments; patterns that reject the arguments return the pattern
        plus the stringified arguments.

        Args:
            key: Message key (plain, tainted or qualified)
            *args: Positional arguments for {N} placeholders

        Returns:
            Translated text (never None)

        Raises:
            TypeError: If key is None
        """
        if key is None:
            msg = "Message key must not be None"
            raise TypeError(msg)
        if args:
            return self._get_formatted(key, args)

        if is_tainted(key):
            return untaint(key)

        target = self._split_qualified(key)
        if target is not None:
            group, unqualified = target
            return self._manager.get_bundle(group).get(unqualified)

        text = self.get_resource_string(key)
        return key if text is None else text

    def _get_formatted(self, key: MessageKey, args: Sequence[object]) -> str:
        target = self._split_qualified(key)
        if target is not None:
            group, unqualified = target
            return self._manager.get_bundle(group).get(unqualified, *args)

        suffix = self.get_suffix(args)
        text = self.get_resource_string(key + suffix, report_missing=False)
        if text is None and suffix:
            text = self.get_resource_string(key, report_missing=False)
        if text is None:
            self._report_missing(key)
            return key + stringify_args(args)

        try:
            return format_pattern(text, args, self._locale)
        except FormatMismatchError as e:
            logger.warning(
                "Translation error: %s '%s' (bundle=%s, key=%s, msg=%r, args=%r)",
                e.diagnostic.code.name if e.diagnostic else type(e).__name__,
                e.diagnostic.message if e.diagnostic else e,
                self._path,
                key,
                text,
                args,
            )
            self._manager.report_error(e)
            return text + stringify_args(args)

    def get_suffix(self, args: Sequence[object]) -> PluralSuffix:
        """Select the plural suffix from the first argument.

        0 selects ".0", 1 selects ".1", any other integer selects ".n". An
        absent, None or non-integer first argument selects no suffix.

        Args:
            args: Positional arguments of a lookup

        Returns:
            PluralSuffix to append to the key

        Example:
            >>> bundle.get_suffix([0]), bundle.get_suffix(["7"]), bundle.get_suffix(["x"])
            (<PluralSuffix.ZERO: '.0'>, <PluralSuffix.MANY: '.n'>, <PluralSuffix.NONE: ''>)
        """
        if not args or args[0] is None:
            return PluralSuffix.NONE
        count = _coerce_count(args[0])
        match count:
            case None:
                return PluralSuffix.NONE
            case 0:
                return PluralSuffix.ZERO
            case 1:
                return PluralSuffix.ONE
            case _:
                return PluralSuffix.MANY

    def get_resource_string(self, key: MessageKey, report_missing: bool = True) -> str | None:
        """Look up raw text for a key in this bundle, then its parents.

        Args:
            key: Message key
            report_missing: Log (and report) a missing translation if the key
                is found nowhere in the chain

        Returns:
            Raw text, or None if not found
        """
        if self._data is not None:
            text = self._data.get(key)
            if text is not None:
                return text

        if self._parent is not None:
            text = self._parent.get_resource_string(key, report_missing=False)
            if text is not None:
                return text

        if report_missing:
            self._report_missing(key)
        return None

    def exists(self, key: MessageKey) -> bool:
        """Check whether a translation exists for a key (no logging)."""
        return self.get_resource_string(key, report_missing=False) is not None

    def __contains__(self, key: object) -> bool:
        """Support 'in' operator: key in bundle."""
        return isinstance(key, str) and self.exists(key)

    # ------------------------------------------------------------------
    # Compound keys
    # ------------------------------------------------------------------

    def xlate(self, compound_key: str) -> str:
        """Translate a compound key built with compose() or tcompose().

        Arguments are unescaped and translated recursively against this
        bundle, so an argument may itself be a (compound or qualified) key.
        Tainted arguments are unescaped and used verbatim. If the key is
        qualified, the arguments are still translated here and only the
        primary key is resolved in the named group.

        Args:
            compound_key: Key, optionally followed by '|'-separated arguments

        Returns:
            Translated text
        """
        target = self._split_qualified(compound_key)
        key_part = compound_key if target is None else target[1]
        key, raw_args = decompose(key_part)
        bundle = self if target is None else self._manager.get_bundle(target[0])

        if not raw_args:
            return bundle.get(key)

        args = [self._xlate_arg(raw) for raw in raw_args]
        return bundle.get(key, *args)

    def _xlate_arg(self, raw: str) -> str:
        if is_tainted(raw):
            return unescape(untaint(raw))
        if not raw:
            return raw
        return self.xlate(unescape(raw))

    # ------------------------------------------------------------------
    # Prefix scans
    # ------------------------------------------------------------------

    def get_all(self, prefix: str, include_parent: bool = False) -> list[str]:
        """Return the messages whose keys start with a prefix.

        Args:
            prefix: Key prefix to match
            include_parent: Also include matches from the whole parent chain
                (keys already defined locally are not deduplicated)

        Returns:
            Translated messages, local matches first
        """
        messages = [self.get(key) for key in self._matching_keys(prefix)]
        if include_parent and self._parent is not None:
            messages.extend(self._parent.get_all(prefix, include_parent=True))
        return messages

    def get_all_keys(self, prefix: str, include_parent: bool = False) -> list[str]:
        """Return the keys that start with a prefix.

        Args:
            prefix: Key prefix to match
            include_parent: Also include matches from the whole parent chain

        Returns:
            Matching keys, local matches first
        """
        keys = self._matching_keys(prefix)
        if include_parent and self._parent is not None:
            keys.extend(self._parent.get_all_keys(prefix, include_parent=True))
        return keys

    def _matching_keys(self, prefix: str) -> list[str]:
        if self._data is None:
            return []
        return [key for key in self._data if key.startswith(prefix)]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _split_qualified(self, key: str) -> tuple[GroupPath, MessageKey] | None:
        """Return (group, key) for a well-formed qualified key, else None."""
        if not is_qualified(key):
            return None
        try:
            return get_bundle_name(key), get_unqualified_key(key)
        except ValueError:
            logger.debug("Malformed qualified key treated as plain key: %r", key)
            return None

    def _report_missing(self, key: MessageKey) -> None:
        logger.warning("Missing translation message (bundle=%s, key=%s)", self._path, key)
        error = MissingTranslationError(
            Diagnostic(
                code=DiagnosticCode.MISSING_TRANSLATION,
                message="Missing translation message",
                group=self._path,
                key=key,
                hint="Add the key to the group or one of its parents",
                severity="warning",
            )
        )
        self._manager.report_error(error)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        size = "unresolved" if self._data is None else f"{len(self._data)} keys"
        return f"{type(self).__name__}(path={self._path!r}, locale={self._locale!r}, {size})"


def _coerce_count(value: object) -> int | None:
    """Interpret a plural count argument as an integer, if possible."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value)
    if not _COUNT_PATTERN.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        # beyond the interpreter's integer string conversion limit
        return None

