"""Tests for BundleRegistry registration, introspection and construction."""

from __future__ import annotations

import pytest
from conftest import make_manager
from hypothesis import given
from hypothesis import strategies as st

from msgbundle import BundleRegistry, CustomBundleError, MessageBundle, get_default_registry
from msgbundle.diagnostics import DiagnosticCode
from msgbundle.enums import PluralSuffix

behavior_names = st.from_regex(r"[a-z][a-z0-9_]{0,20}", fullmatch=True)


class AlwaysManyBundle(MessageBundle):
    """Bundle whose every count selects the .n variant."""

    __slots__ = ()

    def get_suffix(self, args: object) -> PluralSuffix:
        return PluralSuffix.MANY


class TestRegistration:
    """Test register() and unregister()."""

    def test_register_direct(self) -> None:
        """register(identifier, factory) returns the factory."""
        registry = BundleRegistry()

        assert registry.register("many", AlwaysManyBundle) is AlwaysManyBundle
        assert "many" in registry

    def test_register_as_decorator(self) -> None:
        """register(identifier) decorates a class or function."""
        registry = BundleRegistry()

        @registry.register("deco")
        class DecoratedBundle(MessageBundle):
            __slots__ = ()

        assert registry.list_behaviors() == ["deco"]
        assert DecoratedBundle.__name__ == "DecoratedBundle"

    def test_reregister_replaces(self) -> None:
        """Registering an identifier again replaces the factory."""
        registry = BundleRegistry()
        registry.register("x", MessageBundle)
        registry.register("x", AlwaysManyBundle)

        manager = make_manager(registry=registry)
        bundle = registry.create("x", manager, "g", {}, None)

        assert isinstance(bundle, AlwaysManyBundle)
        assert len(registry) == 1

    @pytest.mark.parametrize("identifier", ["", "   "])
    def test_blank_identifier_rejected(self, identifier: str) -> None:
        """Identifiers must not be blank."""
        with pytest.raises(ValueError, match="must not be blank"):
            BundleRegistry().register(identifier, MessageBundle)

    def test_non_callable_rejected(self) -> None:
        """Factories must be callable."""
        with pytest.raises(TypeError, match="not callable"):
            BundleRegistry().register("x", "MessageBundle")  # type: ignore[call-overload]

    def test_unregister(self) -> None:
        """unregister() removes an identifier and ignores unknown ones."""
        registry = BundleRegistry()
        registry.register("x", MessageBundle)

        registry.unregister("x")
        registry.unregister("never-registered")

        assert "x" not in registry


class TestCreate:
    """Test create()."""

    def test_create_passes_arguments(self) -> None:
        """Factories receive manager, path, data, parent and locale."""
        registry = BundleRegistry()
        seen: list[object] = []

        def factory(manager, path, data, parent, locale):  # type: ignore[no-untyped-def]
            seen.extend([manager, path, data, parent, locale])
            return MessageBundle(manager, path, data, parent, locale)

        registry.register("spy", factory)
        manager = make_manager(registry=registry)
        parent = manager.global_bundle

        bundle = registry.create("spy", manager, "g", {"a": "b"}, parent, "de_DE")

        assert seen == [manager, "g", {"a": "b"}, parent, "de_DE"]
        assert bundle.get("a") == "b"
        assert bundle.locale == "de_DE"

    def test_create_defaults_to_manager_locale(self) -> None:
        """Without an explicit locale the manager's current one is used."""
        registry = BundleRegistry()
        registry.register("plain", MessageBundle)
        manager = make_manager(registry=registry, locale="fr_FR")

        assert registry.create("plain", manager, "g", None, None).locale == "fr_FR"

    def test_unknown_identifier(self) -> None:
        """Unknown identifiers raise CustomBundleError with a hint."""
        registry = BundleRegistry()
        manager = make_manager(registry=registry)

        with pytest.raises(CustomBundleError) as excinfo:
            registry.create("nope", manager, "g", None, None)

        diagnostic = excinfo.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code == DiagnosticCode.CUSTOM_BUNDLE_UNKNOWN
        assert diagnostic.group == "g"
        assert diagnostic.hint is not None

    def test_factory_exception_is_wrapped(self) -> None:
        """Exceptions raised by a factory are chained into CustomBundleError."""
        registry = BundleRegistry()

        def broken(*_args: object) -> MessageBundle:
            raise KeyError("missing")

        registry.register("broken", broken)
        manager = make_manager(registry=registry)

        with pytest.raises(CustomBundleError) as excinfo:
            registry.create("broken", manager, "g", None, None)

        assert isinstance(excinfo.value.__cause__, KeyError)

    def test_factory_must_return_bundle(self) -> None:
        """Factories returning something else are rejected."""
        registry = BundleRegistry()
        registry.register("wrong", lambda *_args: "not a bundle")
        manager = make_manager(registry=registry)

        with pytest.raises(CustomBundleError, match="not MessageBundle"):
            registry.create("wrong", manager, "g", None, None)


class TestIntrospection:
    """Test dict-like introspection."""

    def test_copy_is_independent(self) -> None:
        """Changes to a copy do not affect the original."""
        registry = BundleRegistry()
        registry.register("a", MessageBundle)

        copy = registry.copy()
        copy.register("b", MessageBundle)

        assert list(registry) == ["a"]
        assert list(copy) == ["a", "b"]

    def test_repr(self) -> None:
        """repr shows the number of behaviors."""
        assert repr(BundleRegistry()) == "BundleRegistry(behaviors=0)"

    def test_default_registry_is_shared(self) -> None:
        """get_default_registry() always returns the same instance."""
        assert get_default_registry() is get_default_registry()

    @given(names=st.lists(behavior_names, max_size=20, unique=True))
    def test_list_matches_registrations(self, names: list[str]) -> None:
        """Every registered identifier is listed once, in registration order."""
        registry = BundleRegistry()
        for name in names:
            registry.register(name, MessageBundle)

        assert registry.list_behaviors() == names
        assert len(registry) == len(names)
        assert all(name in registry for name in names)
