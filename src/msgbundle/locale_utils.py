"""Locale utilities for msgbundle.

The resolution engine treats a locale as an opaque comparison key. Only two
places interpret it: loaders, which derive candidate locales in resource
bundle order (de_DE -> de -> base), and the formatter, which needs a Babel
Locale to render numbers and dates.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
import os
from typing import TYPE_CHECKING

from babel import Locale, UnknownLocaleError

from msgbundle.constants import DEFAULT_FORMAT_LOCALE

if TYPE_CHECKING:
    from msgbundle.localization.types import LocaleCode

__all__ = [
    "clear_locale_cache",
    "get_babel_locale",
    "get_system_locale",
    "locale_candidates",
    "normalize_locale",
]

logger = logging.getLogger(__name__)


def normalize_locale(locale_code: LocaleCode) -> str:
    """Convert a BCP-47 locale code to POSIX format.

    Args:
        locale_code: Locale code (e.g., "en-US", "pt_BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")  # Already normalized
        'en'
    """
    return locale_code.replace("-", "_")


def locale_candidates(locale_code: LocaleCode) -> tuple[str, ...]:
    """Return the locale suffixes to try, most specific first.

    The empty string (base resource, no locale suffix) is always last.

    Example:
        >>> locale_candidates("de-DE-1996")
        ('de_DE_1996', 'de_DE', 'de', '')
        >>> locale_candidates("")
        ('',)
    """
    parts = [part for part in normalize_locale(locale_code).split("_") if part]
    candidates = ["_".join(parts[:end]) for end in range(len(parts), 0, -1)]
    candidates.append("")
    return tuple(candidates)


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: LocaleCode) -> Locale:
    """Get a Babel Locale for formatting, with caching.

    Unknown or malformed locale codes fall back to en_US; the warning is
    logged once per code because results are cached.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Example:
        >>> get_babel_locale("en-US").territory
        'US'
        >>> get_babel_locale("xx-UNKNOWN").language  # falls back
        'en'
    """
    try:
        return Locale.parse(normalize_locale(locale_code))
    except UnknownLocaleError as e:
        logger.warning(
            "Unknown locale '%s': %s. Formatting with %s", locale_code, e, DEFAULT_FORMAT_LOCALE
        )
    except (ValueError, TypeError) as e:
        logger.warning(
            "Invalid locale format '%s': %s. Formatting with %s",
            locale_code,
            e,
            DEFAULT_FORMAT_LOCALE,
        )
    return Locale.parse(DEFAULT_FORMAT_LOCALE)


def clear_locale_cache() -> None:
    """Clear the cached Babel Locale objects."""
    get_babel_locale.cache_clear()


def get_system_locale() -> str:
    """Detect the system locale from environment variables.

    LC_ALL overrides LC_MESSAGES, which overrides LANG. The "C" and "POSIX"
    pseudo-locales are skipped and encoding suffixes are stripped.

    Returns:
        Detected locale code in POSIX format, or "en_US" if none is set.
    """
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in ("C", "POSIX"):
            return normalize_locale(value.split(".")[0])

    return DEFAULT_FORMAT_LOCALE
