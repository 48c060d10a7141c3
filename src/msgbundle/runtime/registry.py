"""Registry of custom bundle behaviors.

A group's raw data may name a custom behavior under the reserved
``msgbundle_class`` key. The manager looks the identifier up here and calls
the registered factory instead of constructing a plain MessageBundle.

Architecture:
    - BundleRegistry: identifier -> factory mapping, filled at registration time
    - Factories receive (manager, path, data, parent, locale) and return a MessageBundle
    - MessageBundle subclasses are valid factories as-is

Example:
    >>> registry = BundleRegistry()
    >>> @registry.register("ru_plurals")
    ... class RussianBundle(MessageBundle):
    ...     def get_suffix(self, args):
    ...         ...
    >>> manager = MessageManager("rsrc.i18n", loader, registry=registry)

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, overload

from msgbundle.diagnostics import CustomBundleError, Diagnostic, DiagnosticCode
from msgbundle.runtime.bundle import MessageBundle

if TYPE_CHECKING:
    from msgbundle.localization.manager import MessageManager
    from msgbundle.localization.types import GroupPath, LocaleCode, RawData

__all__ = ["BundleFactory", "BundleRegistry", "get_default_registry"]

type BundleFactory = Callable[
    [MessageManager, GroupPath, RawData | None, MessageBundle | None, LocaleCode], MessageBundle
]
"""Callable building a bundle from (manager, path, data, parent, locale)."""


class BundleRegistry:
    """Maps custom behavior identifiers to bundle factories.

    Supports dict-like introspection:
        - list_behaviors(): List all registered identifiers
        - __iter__: Iterate over identifiers
        - __len__: Count registered behaviors
        - __contains__: Check if an identifier exists (supports 'in' operator)

    Example:
        >>> registry = BundleRegistry()
        >>> registry.register("loud", LoudBundle)
        >>> "loud" in registry
        True
        >>> len(registry)
        1
    """

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._factories: dict[str, BundleFactory] = {}

    @overload
    def register(self, identifier: str) -> Callable[[BundleFactory], BundleFactory]: ...

    @overload
    def register(self, identifier: str, factory: BundleFactory) -> BundleFactory: ...

    def register(
        self, identifier: str, factory: BundleFactory | None = None
    ) -> BundleFactory | Callable[[BundleFactory], BundleFactory]:
        """Register a factory under an identifier.

        Usable directly or as a class/function decorator. Registering an
        identifier again replaces the previous factory.

        Args:
            identifier: Value groups put under the msgbundle_class key
            factory: Bundle factory (omit to use as a decorator)

        Returns:
            The factory (or a decorator that registers and returns it)

        Raises:
            ValueError: If identifier is blank
            TypeError: If factory is not callable
        """
        identifier = identifier.strip()
        if not identifier:
            msg = "Bundle behavior identifier must not be blank"
            raise ValueError(msg)

        def decorator(func: BundleFactory) -> BundleFactory:
            if not callable(func):
                msg = f"Bundle factory for {identifier!r} is not callable: {func!r}"
                raise TypeError(msg)
            self._factories[identifier] = func
            return func

        if factory is None:
            return decorator
        return decorator(factory)

    def unregister(self, identifier: str) -> None:
        """Remove a registered behavior (no-op if absent)."""
        self._factories.pop(identifier, None)

    def create(
        self,
        identifier: str,
        manager: MessageManager,
        path: GroupPath,
        data: RawData | None,
        parent: MessageBundle | None,
        locale: LocaleCode | None = None,
    ) -> MessageBundle:
        """Build a bundle with the factory registered under an identifier.

        Args:
            identifier: Registered behavior identifier
            manager: Owning manager
            path: Group path
            data: Group raw data
            parent: Parent bundle
            locale: Locale the data was resolved for (default: manager's current locale)

        Returns:
            The custom bundle

        Raises:
            CustomBundleError: If the identifier is unknown, the factory
                raises, or it returns something other than a MessageBundle
        """
        factory = self._factories.get(identifier)
        if factory is None:
            raise CustomBundleError(
                Diagnostic(
                    code=DiagnosticCode.CUSTOM_BUNDLE_UNKNOWN,
                    message=f"Unknown bundle behavior {identifier!r}",
                    group=path,
                    hint=f"Register it: registry.register({identifier!r}, factory)",
                    severity="warning",
                )
            )

        if locale is None:
            locale = manager.locale
        try:
            bundle = factory(manager, path, data, parent, locale)
        except Exception as e:  # noqa: BLE001 - factory failures fall back to the default bundle
            raise CustomBundleError(
                Diagnostic(
                    code=DiagnosticCode.CUSTOM_BUNDLE_FAILED,
                    message=f"Failure instantiating bundle behavior {identifier!r}: {e}",
                    group=path,
                    severity="warning",
                )
            ) from e

        if not isinstance(bundle, MessageBundle):
            raise CustomBundleError(
                Diagnostic(
                    code=DiagnosticCode.CUSTOM_BUNDLE_FAILED,
                    message=(
                        f"Bundle behavior {identifier!r} returned "
                        f"{type(bundle).__name__}, not MessageBundle"
                    ),
                    group=path,
                    severity="warning",
                )
            )
        return bundle

    def copy(self) -> BundleRegistry:
        """Return an independent copy of this registry."""
        new_registry = BundleRegistry()
        new_registry._factories = self._factories.copy()
        return new_registry

    def list_behaviors(self) -> list[str]:
        """List all registered identifiers."""
        return list(self._factories)

    def __iter__(self) -> Iterator[str]:
        """Iterate over registered identifiers."""
        return iter(self._factories)

    def __len__(self) -> int:
        """Count registered behaviors."""
        return len(self._factories)

    def __contains__(self, identifier: object) -> bool:
        """Support 'in' operator: 'loud' in registry."""
        return identifier in self._factories

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"BundleRegistry(behaviors={len(self._factories)})"


_DEFAULT_REGISTRY = BundleRegistry()


def get_default_registry() -> BundleRegistry:
    """Get the process-wide registry used by managers created without one.

    Applications register their behaviors here at import time:

        >>> get_default_registry().register("loud", LoudBundle)
    """
    return _DEFAULT_REGISTRY
