"""Key codec: string encodings understood by MessageBundle.

Pure, stateless functions that build and take apart the transportable key
strings passed through the translation pipeline:

    taint/untaint      - mark text as literal so it is never translated
    compose/tcompose   - package a key with positional arguments ("key|a|b")
    qualify/...        - name the group a key must be resolved in ("%group:key")
    escape/unescape    - protect separator characters inside arguments

A composed key can be stored or sent over the wire and later translated in a
single MessageBundle.xlate() call. Arguments may themselves be composed (or
qualified) keys; escaping nests correctly to any depth.

Example:
    >>> compose("m.moved", "m.knight", taint("Anna|Bob"))
    'm.moved|m.knight|~Anna\\\\!Bob'
    >>> qualify("chess", "m.check")
    '%chess:m.check'

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from msgbundle.constants import (
    COMPOUND_SEP,
    ESCAPE_CHAR,
    ESCAPED_SEP,
    QUAL_PREFIX,
    QUAL_SEP,
    TAINT_CHAR,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "compose",
    "decompose",
    "escape",
    "get_bundle_name",
    "get_unqualified_key",
    "is_compound",
    "is_qualified",
    "is_tainted",
    "qualify",
    "stringify_args",
    "taint",
    "tcompose",
    "unescape",
    "untaint",
]


# ============================================================================
# TAINT
# ============================================================================


def taint(text: object) -> str:
    """Mark text entered outside the application as literal.

    Tainted strings are never looked up or recursively translated; the
    bundle strips the marker and uses the text verbatim.

    Args:
        text: Value to mark (converted with str())

    Returns:
        Tainted string
    """
    return f"{TAINT_CHAR}{text}"


def is_tainted(text: str) -> bool:
    """Check whether text carries the taint marker."""
    return bool(text) and text[0] == TAINT_CHAR


def untaint(text: str) -> str:
    """Strip the taint marker; untainted text is returned unchanged."""
    return text[1:] if is_tainted(text) else text


# ============================================================================
# ESCAPING
# ============================================================================


def escape(text: str) -> str:
    """Escape separator characters so text can be embedded as one argument.

    Backslashes are escaped first so that escaping nests: an already escaped
    compound key can itself be escaped and embedded in another one.

    Args:
        text: Raw argument text

    Returns:
        Text containing no bare compound separators
    """
    return text.replace(ESCAPE_CHAR, ESCAPE_CHAR * 2).replace(
        COMPOUND_SEP, ESCAPE_CHAR + ESCAPED_SEP
    )


def unescape(text: str) -> str:
    """Reverse escape().

    Scans left to right so that "\\\\!" decodes to a backslash followed by
    "!" rather than to a separator. Unknown escape sequences and a trailing
    backslash are kept verbatim.

    Args:
        text: Escaped argument text

    Returns:
        Original argument text
    """
    if ESCAPE_CHAR not in text:
        return text

    out: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char == ESCAPE_CHAR and i + 1 < length:
            nxt = text[i + 1]
            if nxt == ESCAPE_CHAR:
                out.append(ESCAPE_CHAR)
                i += 2
                continue
            if nxt == ESCAPED_SEP:
                out.append(COMPOUND_SEP)
                i += 2
                continue
        out.append(char)
        i += 1
    return "".join(out)


# ============================================================================
# COMPOUND KEYS
# ============================================================================


def _render_arg(arg: object) -> str:
    return "" if arg is None else str(arg)


def compose(key: str, *args: object) -> str:
    """Compose a message key with positional arguments.

    The result can be translated in a single call to MessageBundle.xlate().
    Arguments are converted with str() (None becomes an empty string) and
    escaped. Untainted arguments are translated recursively by xlate(), so
    an argument may itself be a message key or a composed key.

    Args:
        key: Message key (may be qualified)
        *args: Positional arguments

    Returns:
        Compound key, or the bare key if no arguments were given

    Example:
        >>> compose("m.score", "m.player", 10)
        'm.score|m.player|10'
    """
    if not args:
        return key
    parts = [key]
    parts.extend(escape(_render_arg(arg)) for arg in args)
    return COMPOUND_SEP.join(parts)


def tcompose(key: str, *args: object) -> str:
    """Compose a message key with arguments that are all tainted.

    Equivalent to compose(key, *(taint(arg) for arg in args)).
    """
    return compose(key, *(taint(_render_arg(arg)) for arg in args))


def is_compound(key: str) -> bool:
    """Check whether a key carries compound arguments."""
    return COMPOUND_SEP in key


def decompose(compound_key: str) -> tuple[str, list[str]]:
    """Split a compound key into its primary key and raw (still escaped) arguments.

    Args:
        compound_key: Key as produced by compose()

    Returns:
        Tuple of (key, args). args is empty when no separator is present.
    """
    key, sep, argstr = compound_key.partition(COMPOUND_SEP)
    if not sep:
        return key, []
    return key, argstr.split(COMPOUND_SEP)


# ============================================================================
# QUALIFIED KEYS
# ============================================================================


def qualify(bundle: str, key: str) -> str:
    """Return a key that any bundle will resolve in the named group.

    Args:
        bundle: Group path owning the key (e.g., 'game.chess')
        key: Unqualified (possibly compound) key

    Returns:
        Qualified key of the form '%group:key'

    Raises:
        ValueError: If the group name is empty, starts with the qualified
            prefix, or contains a qualified or compound separator
    """
    if not bundle:
        msg = "Cannot qualify a key with an empty group name"
        raise ValueError(msg)
    if bundle.startswith(QUAL_PREFIX) or QUAL_SEP in bundle or COMPOUND_SEP in bundle:
        msg = (
            f"Group name contains a reserved character "
            f"({QUAL_PREFIX!r}, {QUAL_SEP!r} or {COMPOUND_SEP!r}): {bundle!r}"
        )
        raise ValueError(msg)
    return f"{QUAL_PREFIX}{bundle}{QUAL_SEP}{key}"


def is_qualified(key: str) -> bool:
    """Check whether a key names the group it must be resolved in."""
    return key.startswith(QUAL_PREFIX)


def _qual_sep_index(qualified_key: str) -> int:
    if not is_qualified(qualified_key):
        msg = f"Key is not qualified: {qualified_key!r}"
        raise ValueError(msg)
    index = qualified_key.find(QUAL_SEP)
    if index == -1:
        msg = f"Qualified key has no group separator {QUAL_SEP!r}: {qualified_key!r}"
        raise ValueError(msg)
    return index


def get_bundle_name(qualified_key: str) -> str:
    """Return the group name from a qualified key.

    Raises:
        ValueError: If the key is not a well-formed qualified key
    """
    return qualified_key[len(QUAL_PREFIX) : _qual_sep_index(qualified_key)]


def get_unqualified_key(qualified_key: str) -> str:
    """Return the key portion (including any compound arguments) of a qualified key.

    Raises:
        ValueError: If the key is not a well-formed qualified key
    """
    return qualified_key[_qual_sep_index(qualified_key) + len(QUAL_SEP) :]


# ============================================================================
# FALLBACK RENDERING
# ============================================================================


def stringify_args(args: Iterable[object]) -> str:
    """Render arguments for fallback output: '(a, b, c)'."""
    return "(" + ", ".join(str(arg) for arg in args) + ")"
