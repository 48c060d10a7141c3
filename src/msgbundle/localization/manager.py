"""MessageManager - bundle cache and parent wiring for one locale at a time.

The manager divides localization resources into logical groups. Each group
is resolved on first request through a GroupLoader, turned into a
MessageBundle, linked to its parent and cached until the locale changes.

Key architectural decisions:
- Never fails: a group that cannot be resolved yields a bundle that falls
  back to its parent and ultimately echoes keys
- Copy-on-write cache epochs: locale/prefix/loader changes swap in a fresh,
  empty snapshot atomically; readers never see a half-cleared cache
- Iterative parent-chain construction with a visited set, so a cyclic
  explicit-parent declaration is detected instead of recursing forever
- Custom bundle behaviors come from an explicit BundleRegistry

Example:
    >>> loader = PathGroupLoader("resources")
    >>> manager = MessageManager("rsrc.i18n", loader, locale="de_DE")
    >>> chess = manager.get_bundle("game.chess")
    # Loads resources/rsrc/i18n/game/chess[_de[_DE]].yaml, parent "global"
    >>> chess.get("m.widgets", 3)
    '3 Figuren.'

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from msgbundle.constants import BUNDLE_CLASS_KEY, GLOBAL_BUNDLE, PARENT_KEY, PATH_SEPARATOR
from msgbundle.diagnostics import (
    CustomBundleError,
    CyclicParentError,
    Diagnostic,
    DiagnosticCode,
    GroupNotFoundError,
    GroupResolutionError,
    MessageError,
)
from msgbundle.enums import LoadStatus
from msgbundle.locale_utils import get_system_locale
from msgbundle.localization.loading import GroupLoader, GroupLoadResult, LoadSummary
from msgbundle.runtime.bundle import MessageBundle
from msgbundle.runtime.registry import BundleRegistry, get_default_registry

if TYPE_CHECKING:
    from msgbundle.localization.types import GroupPath, LocaleCode, RawData

__all__ = ["MessageManager"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _CacheEpoch:
    """Immutable snapshot of the manager's resolution state.

    A new epoch (with an empty cache) starts whenever the locale, prefix or
    loader changes. Inserting a bundle replaces the snapshot with a copy
    that has the same epoch number.
    """

    epoch: int
    locale: LocaleCode
    prefix: str
    loader: GroupLoader
    bundles: Mapping[GroupPath, MessageBundle] = field(default_factory=dict)
    load_results: tuple[GroupLoadResult, ...] = ()


def _dot_terminate(prefix: str) -> str:
    if prefix and not prefix.endswith(PATH_SEPARATOR):
        return prefix + PATH_SEPARATOR
    return prefix


def _reserved_value(data: RawData | None, key: str) -> str | None:
    """Return the stripped value of a reserved key, or None if absent or blank."""
    if data is None:
        return None
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class MessageManager:
    """Resolves and caches message bundles for the current locale.

    The resource prefix is prepended to every group path before it reaches
    the loader: with prefix "rsrc.i18n", group "game.chess" is loaded from
    "rsrc.i18n.game.chess".

    Every bundle except the root ("global") has a parent: the group named
    by its reserved "__parent" entry, or the root bundle by default.

    Thread Safety:
        get_bundle() reads an immutable snapshot without locking; inserts and
        epoch swaps are serialized by a lock. Two threads missing the same
        group concurrently may both load it, but both receive the same
        cached instance. A bundle built while the locale changes is returned
        to its caller but not cached in the new epoch.

    Attributes:
        locale: Current locale (opaque; interpreted only by the loader and
            for number/date rendering)
        prefix: Dot-terminated resource prefix
    """

    __slots__ = ("_lock", "_on_error", "_registry", "_state")

    def __init__(
        self,
        prefix: str,
        loader: GroupLoader,
        *,
        locale: LocaleCode | None = None,
        registry: BundleRegistry | None = None,
        on_error: Callable[[MessageError], None] | None = None,
    ) -> None:
        """Initialize the manager and resolve the root bundle.

        Args:
            prefix: Resource prefix (a trailing "." is added if missing)
            loader: Resolver turning prefixed group paths into raw data
            locale: Locale to resolve for (default: system locale)
            registry: Custom bundle behaviors (default: the shared default registry)
            on_error: Optional callback receiving every absorbed error
                (group resolution failures, missing translations, format
                mismatches, custom bundle failures, cyclic parents)

        Raises:
            TypeError: If loader is None
        """
        if loader is None:
            msg = "loader is required"
            raise TypeError(msg)

        self._lock = threading.Lock()
        self._registry = registry if registry is not None else get_default_registry()
        self._on_error = on_error
        self._state = _CacheEpoch(
            epoch=0,
            locale=locale if locale is not None else get_system_locale(),
            prefix=_dot_terminate(prefix),
            loader=loader,
        )
        logger.info(
            "MessageManager initialized (prefix=%r, locale=%s)",
            self._state.prefix,
            self._state.locale,
        )
        self.get_bundle(GLOBAL_BUNDLE)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def locale(self) -> LocaleCode:
        """Locale used to resolve bundles."""
        return self._state.locale

    @property
    def prefix(self) -> str:
        """Dot-terminated resource prefix."""
        return self._state.prefix

    @property
    def loader(self) -> GroupLoader:
        """Loader resolving group data."""
        return self._state.loader

    @property
    def registry(self) -> BundleRegistry:
        """Registry of custom bundle behaviors."""
        return self._registry

    @property
    def epoch(self) -> int:
        """Cache epoch counter; incremented on every cache invalidation."""
        return self._state.epoch

    def _new_epoch(self, **changes: object) -> _CacheEpoch:
        with self._lock:
            current = self._state
            self._state = replace(
                current, epoch=current.epoch + 1, bundles={}, load_results=(), **changes
            )
            logger.debug("Cache epoch %d -> %d", current.epoch, self._state.epoch)
            return self._state

    def set_locale(self, locale: LocaleCode, update_global: bool = False) -> None:
        """Switch to a new locale, discarding all cached bundles.

        Every get_bundle() call made after this returns reflects the new
        locale. Bundles obtained earlier keep working with the old locale.

        Args:
            locale: New locale
            update_global: Resolve the root bundle immediately instead of on
                first use
        """
        self._new_epoch(locale=locale)
        logger.info("Locale changed to %s", locale)
        if update_global:
            self.get_bundle(GLOBAL_BUNDLE)

    def set_prefix(self, prefix: str) -> None:
        """Switch to a new resource prefix and re-resolve the root bundle.

        Cached bundles were resolved under the old prefix and are discarded.
        """
        self._new_epoch(prefix=_dot_terminate(prefix))
        logger.info("Resource prefix changed to %r", self.prefix)
        self.get_bundle(GLOBAL_BUNDLE)

    def set_loader(self, loader: GroupLoader) -> None:
        """Switch to a new loader, discarding all cached bundles."""
        if loader is None:
            msg = "loader is required"
            raise TypeError(msg)
        self._new_epoch(loader=loader)
        logger.info("Loader changed to %r", loader)

    def clear_cache(self) -> None:
        """Discard all cached bundles (e.g., after group files changed)."""
        self._new_epoch()

    # ------------------------------------------------------------------
    # Bundle resolution
    # ------------------------------------------------------------------

    @property
    def global_bundle(self) -> MessageBundle:
        """Root bundle for the current epoch."""
        return self.get_bundle(GLOBAL_BUNDLE)

    def cached_paths(self) -> tuple[GroupPath, ...]:
        """Group paths cached in the current epoch."""
        return tuple(self._state.bundles)

    def get_load_summary(self) -> LoadSummary:
        """Return the load results recorded in the current epoch."""
        return LoadSummary(results=self._state.load_results)

    def get_bundle(self, path: GroupPath) -> MessageBundle:
        """Fetch the bundle for a group path.

        Cached bundles are returned as-is (same instance for the whole
        epoch). Otherwise the group and any uncached ancestors are resolved
        and cached. If a group cannot be resolved, a warning is logged and
        the returned bundle defers every lookup to its parent, so callers
        never need their own error handling.

        Args:
            path: Group path (e.g., 'game.chess')

        Returns:
            MessageBundle for the group

        Raises:
            TypeError: If path is None
        """
        if path is None:
            msg = "Group path must not be None"
            raise TypeError(msg)

        state = self._state
        cached = state.bundles.get(path)
        if cached is not None:
            return cached
        return self._build_chain(path, state)

    def _build_chain(self, path: GroupPath, state: _CacheEpoch) -> MessageBundle:
        """Resolve a group and its uncached ancestors, then build them root-side first."""
        pending: list[tuple[GroupPath, RawData | None]] = []
        visited: set[GroupPath] = set()
        parent: MessageBundle | None = None
        current = path

        while True:
            cached = self._state.bundles.get(current) if self._state.epoch == state.epoch else None
            if cached is not None:
                parent = cached
                break

            if current in visited:
                self._report_cycle(current, pending)
                current = GLOBAL_BUNDLE
                continue

            visited.add(current)
            data = self._load(current, state)
            pending.append((current, data))

            if current == GLOBAL_BUNDLE:
                if _reserved_value(data, PARENT_KEY) is not None:
                    logger.warning(
                        "Ignoring %s entry in root bundle %r", PARENT_KEY, GLOBAL_BUNDLE
                    )
                break

            current = _reserved_value(data, PARENT_KEY) or GLOBAL_BUNDLE

        bundle = parent
        for group_path, data in reversed(pending):
            created = self._create_bundle(group_path, data, bundle, state.locale)
            bundle = self._store(state, group_path, created)
        assert bundle is not None  # pending is empty only on a cache hit
        return bundle

    def _report_cycle(
        self, current: GroupPath, pending: list[tuple[GroupPath, RawData | None]]
    ) -> None:
        chain = [group_path for group_path, _ in pending]
        closing = chain[-1]
        error = CyclicParentError(
            Diagnostic(
                code=DiagnosticCode.CYCLIC_PARENT,
                message=(
                    f"Cyclic parent declaration: {' -> '.join([*chain, current])}; "
                    f"parenting {closing!r} to {GLOBAL_BUNDLE!r}"
                ),
                group=closing,
                hint=f"Remove the {PARENT_KEY} entry that closes the cycle",
            )
        )
        logger.warning("%s", error.diagnostic.message if error.diagnostic else error)
        self.report_error(error)

    def _store(self, state: _CacheEpoch, path: GroupPath, bundle: MessageBundle) -> MessageBundle:
        """Cache a bundle in the epoch it was built for; first insert wins."""
        with self._lock:
            current = self._state
            if current.epoch != state.epoch:
                logger.debug("Not caching %r: epoch changed during resolution", path)
                return bundle
            existing = current.bundles.get(path)
            if existing is not None:
                return existing
            self._state = replace(current, bundles={**current.bundles, path: bundle})
        logger.debug("Cached bundle %r (epoch %d)", path, state.epoch)
        return bundle

    def _record(self, state: _CacheEpoch, result: GroupLoadResult) -> None:
        with self._lock:
            current = self._state
            if current.epoch == state.epoch:
                self._state = replace(current, load_results=(*current.load_results, result))

    def _load(self, path: GroupPath, state: _CacheEpoch) -> RawData | None:
        """Resolve a group's raw data, recording the outcome. Never raises."""
        resource_path = state.prefix + path
        source_path = self._describe(resource_path, state)

        status = LoadStatus.SUCCESS
        error: Exception | None = None
        data: RawData | None = None
        try:
            data = self._load_group(resource_path, state)
        except (GroupNotFoundError, FileNotFoundError) as e:
            status, error = LoadStatus.NOT_FOUND, e
        except Exception as e:  # noqa: BLE001 - any loader failure degrades to a fallback bundle
            status, error = LoadStatus.ERROR, e

        if data is not None and not isinstance(data, Mapping):
            status = LoadStatus.ERROR
            error = GroupResolutionError(
                Diagnostic(
                    code=DiagnosticCode.GROUP_INVALID_DATA,
                    message=f"Loader returned {type(data).__name__}, not a mapping",
                    group=resource_path,
                )
            )
            data = None

        self._record(
            state,
            GroupLoadResult(
                path=path,
                resource_path=resource_path,
                locale=state.locale,
                status=status,
                error=error,
                source_path=source_path,
            ),
        )

        if error is not None:
            logger.warning(
                "Unable to resolve message group (path=%s, locale=%s): %s",
                resource_path,
                state.locale,
                error,
            )
            if not isinstance(error, GroupResolutionError):
                error = GroupResolutionError(
                    Diagnostic(
                        code=(
                            DiagnosticCode.GROUP_NOT_FOUND
                            if status == LoadStatus.NOT_FOUND
                            else DiagnosticCode.GROUP_LOAD_FAILED
                        ),
                        message=f"Unable to resolve message group: {error}",
                        group=resource_path,
                    )
                )
            self.report_error(error)
            return None

        logger.debug("Resolved group %r for locale %s", resource_path, state.locale)
        return data

    @staticmethod
    def _describe(resource_path: str, state: _CacheEpoch) -> str | None:
        """Loader's source description for diagnostics; None if it has none."""
        describe_path = getattr(state.loader, "describe_path", None)
        if describe_path is None:
            return None
        try:
            return describe_path(resource_path, state.locale)
        except Exception as e:  # noqa: BLE001 - source_path is diagnostic only
            logger.debug("describe_path failed for %r: %s", resource_path, e)
            return None

    def _load_group(self, resource_path: str, state: _CacheEpoch) -> RawData:
        """Load raw data through the epoch's loader. Override to customize."""
        return state.loader.load(resource_path, state.locale)

    def _create_bundle(
        self,
        path: GroupPath,
        data: RawData | None,
        parent: MessageBundle | None,
        locale: LocaleCode,
    ) -> MessageBundle:
        """Build the bundle for a group, honoring a registered custom behavior.

        The bundle formats with the locale its data was resolved for, even if
        the manager has moved on to another locale meanwhile. Override to
        customize bundle construction.
        """
        identifier = _reserved_value(data, BUNDLE_CLASS_KEY)
        if identifier is not None:
            try:
                bundle = self._registry.create(identifier, self, path, data, parent, locale)
            except CustomBundleError as e:
                logger.warning(
                    "Failure instantiating custom message bundle (bundle=%s, class=%s): %s",
                    path,
                    identifier,
                    e.diagnostic.message if e.diagnostic else e,
                )
                self.report_error(e)
            else:
                logger.debug("Created custom bundle %r for %r", identifier, path)
                return bundle
        return MessageBundle(self, path, data, parent, locale)

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    def report_error(self, error: MessageError) -> None:
        """Forward an absorbed error to the on_error callback, if any.

        Called by bundles and the manager after logging; exposed so custom
        bundles can report their own errors the same way.
        """
        if self._on_error is not None:
            self._on_error(error)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        state = self._state
        return (
            f"MessageManager(prefix={state.prefix!r}, locale={state.locale!r}, "
            f"epoch={state.epoch}, cached={len(state.bundles)})"
        )
