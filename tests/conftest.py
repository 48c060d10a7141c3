"""Pytest configuration for the msgbundle test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: CI runs with 50 examples (fast feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
Run them via: pytest -m fuzz

Shared fixtures build a MessageManager over embedded group data (see
CHESS_GROUPS) with a fixed en_US locale, so results never depend on the
machine's locale settings.
"""

from __future__ import annotations

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from msgbundle import BundleRegistry, DictGroupLoader, MessageError, MessageManager

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested.

    Behavior:
    - Normal test run (pytest tests/): Fuzz tests are SKIPPED
    - Explicit fuzz run (pytest -m fuzz): Fuzz tests run, others skipped
    """
    marker_expr = config.getoption("-m", default="")
    if "fuzz" in str(marker_expr):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED GROUP DATA
# =============================================================================

PREFIX = "i18n"

CHESS_GROUPS: dict[str, dict[str, dict[str, object]]] = {
    "": {
        "i18n.global": {
            "ok": "OK",
            "m.hello": "Hello, {0}!",
            "m.knight": "knight",
            "m.echo": "[{0}]",
        },
        "i18n.game.chess": {
            "m.widgets": {
                "0": "no widgets.",
                "1": "{0} widget.",
                "n": "{0} widgets.",
            },
            "m.count": "{0} items",
            "m.moved": "The {0} moves to {1}.",
            "m.bad": "{0} and {1}",
            "m.piece": "rook",
            "m.check": "Check!",
        },
        "i18n.game.chess.variant": {
            "__parent": "game.chess",
            "m.check": "Check, variant!",
        },
    },
    "de": {
        "i18n.global": {
            "ok": "Gut",
            "m.hello": "Hallo, {0}!",
        },
    },
}
"""Locale -> resource path -> messages. Shared by bundle and manager tests."""


def make_manager(
    groups: dict[str, dict[str, dict[str, object]]] | None = None,
    *,
    locale: str = "en_US",
    registry: BundleRegistry | None = None,
    errors: list[MessageError] | None = None,
) -> MessageManager:
    """Build a manager over embedded group data with a fixed locale."""
    return MessageManager(
        PREFIX,
        DictGroupLoader(groups if groups is not None else CHESS_GROUPS),
        locale=locale,
        registry=registry if registry is not None else BundleRegistry(),
        on_error=errors.append if errors is not None else None,
    )


@pytest.fixture
def errors() -> list[MessageError]:
    """Collects every error a manager reports through on_error."""
    return []


@pytest.fixture
def manager(errors: list[MessageError]) -> MessageManager:
    """Manager over CHESS_GROUPS in en_US, reporting into `errors`."""
    return make_manager(errors=errors)
