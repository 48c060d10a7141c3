"""Positional pattern formatting for message texts.

Substitutes positional arguments into translated patterns. Placeholders:

    {0}                      argument 0; numbers and dates rendered for the locale
    {0,number}               locale decimal format
    {0,number,integer}       rounded, grouped integer
    {0,number,percent}       locale percent format
    {0,number,#,##0.00}      custom Babel number pattern
    {0,date}  {0,date,long}  date with CLDR style (short, medium, long, full) or pattern
    {0,time}  {0,time,short} time with CLDR style or pattern
    {{  }}                   literal braces

Any mismatch between pattern and arguments raises FormatMismatchError; the
caller (MessageBundle) decides the fallback.

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from babel import dates as babel_dates
from babel import numbers as babel_numbers

from msgbundle.diagnostics import Diagnostic, DiagnosticCode, FormatMismatchError
from msgbundle.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from collections.abc import Sequence

    from babel import Locale

    from msgbundle.localization.types import LocaleCode

__all__ = ["format_pattern"]


_DATE_STYLES = frozenset({"short", "medium", "long", "full"})


@dataclass(frozen=True, slots=True)
class _Placeholder:
    """One parsed {index,type,style} element."""

    index: int
    format_type: str | None = None
    style: str | None = None


type _Segment = str | _Placeholder


def _mismatch(code: DiagnosticCode, message: str) -> FormatMismatchError:
    return FormatMismatchError(Diagnostic(code=code, message=message))


def _parse_placeholder(body: str, pattern: str) -> _Placeholder:
    index_text, _, rest = body.partition(",")
    index_text = index_text.strip()
    if not index_text.isdecimal() or not index_text.isascii():
        raise _mismatch(
            DiagnosticCode.FORMAT_MISMATCH,
            f"Invalid argument index {index_text!r} in pattern {pattern!r}",
        )
    if not rest:
        return _Placeholder(int(index_text))
    format_type, _, style = rest.partition(",")
    return _Placeholder(
        int(index_text),
        format_type.strip() or None,
        style.strip() or None,
    )


@functools.lru_cache(maxsize=512)
def _parse_pattern(pattern: str) -> tuple[_Segment, ...]:
    """Split a pattern into literal text and placeholders.

    Raises:
        FormatMismatchError: On unbalanced braces or a malformed index
    """
    segments: list[_Segment] = []
    literal: list[str] = []
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if char == "{":
            if pattern.startswith("{{", i):
                literal.append("{")
                i += 2
                continue
            end = pattern.find("}", i + 1)
            if end == -1:
                raise _mismatch(
                    DiagnosticCode.UNBALANCED_BRACES, f"Unmatched '{{' in pattern {pattern!r}"
                )
            if literal:
                segments.append("".join(literal))
                literal = []
            segments.append(_parse_placeholder(pattern[i + 1 : end], pattern))
            i = end + 1
        elif char == "}":
            if not pattern.startswith("}}", i):
                raise _mismatch(
                    DiagnosticCode.UNBALANCED_BRACES, f"Single '}}' in pattern {pattern!r}"
                )
            literal.append("}")
            i += 2
        else:
            literal.append(char)
            i += 1
    if literal:
        segments.append("".join(literal))
    return tuple(segments)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _to_number(value: object) -> int | float | Decimal:
    if _is_number(value):
        return value  # type: ignore[return-value]
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            pass
    raise _mismatch(
        DiagnosticCode.FORMAT_MISMATCH,
        f"Cannot format {type(value).__name__} value {value!r} as a number",
    )


def _format_number(value: object, style: str | None, locale: Locale) -> str:
    number = _to_number(value)
    try:
        match style:
            case None:
                return babel_numbers.format_decimal(number, locale=locale)
            case "integer":
                return babel_numbers.format_decimal(number, format="#,##0", locale=locale)
            case "percent":
                return babel_numbers.format_percent(number, locale=locale)
            case _:
                return babel_numbers.format_decimal(number, format=style, locale=locale)
    except (ValueError, TypeError) as e:
        raise _mismatch(
            DiagnosticCode.INVALID_FORMAT_STYLE, f"Invalid number style {style!r}: {e}"
        ) from e


def _format_temporal(value: object, format_type: str, style: str | None, locale: Locale) -> str:
    fmt = style or "medium"
    try:
        if format_type == "date":
            if not isinstance(value, date):
                msg = f"Cannot format {type(value).__name__} value {value!r} as a date"
                raise _mismatch(DiagnosticCode.FORMAT_MISMATCH, msg)
            return babel_dates.format_date(value, format=fmt, locale=locale)
        if not isinstance(value, (datetime, time)):
            msg = f"Cannot format {type(value).__name__} value {value!r} as a time"
            raise _mismatch(DiagnosticCode.FORMAT_MISMATCH, msg)
        return babel_dates.format_time(value, format=fmt, locale=locale)
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        if fmt not in _DATE_STYLES:
            raise _mismatch(
                DiagnosticCode.INVALID_FORMAT_STYLE, f"Invalid {format_type} style {fmt!r}: {e}"
            ) from e
        msg = f"{format_type} formatting failed: {e}"
        raise _mismatch(DiagnosticCode.FORMAT_MISMATCH, msg) from e


def _format_plain(value: object, locale: Locale) -> str:
    if _is_number(value):
        return babel_numbers.format_decimal(value, locale=locale)  # type: ignore[arg-type]
    match value:
        case datetime():
            return babel_dates.format_datetime(value, locale=locale)
        case date():
            return babel_dates.format_date(value, locale=locale)
        case time():
            return babel_dates.format_time(value, locale=locale)
        case _:
            return str(value)


def _render(placeholder: _Placeholder, args: Sequence[object], locale: Locale) -> str:
    if placeholder.index >= len(args):
        raise _mismatch(
            DiagnosticCode.ARGUMENT_INDEX_OUT_OF_RANGE,
            f"Argument {{{placeholder.index}}} requested but only {len(args)} supplied",
        )
    value = args[placeholder.index]
    match placeholder.format_type:
        case None:
            return _format_plain(value, locale)
        case "number":
            return _format_number(value, placeholder.style, locale)
        case "date" | "time":
            return _format_temporal(value, placeholder.format_type, placeholder.style, locale)
        case other:
            raise _mismatch(DiagnosticCode.UNKNOWN_FORMAT_TYPE, f"Unknown format type {other!r}")


def format_pattern(pattern: str, args: Sequence[object], locale_code: LocaleCode) -> str:
    """Substitute positional arguments into a pattern.

    Args:
        pattern: Translated text with {N} placeholders
        args: Positional arguments (extra arguments are ignored)
        locale_code: Locale for number and date rendering

    Returns:
        Formatted text

    Raises:
        FormatMismatchError: If the pattern is malformed or cannot accept the arguments

    Example:
        >>> format_pattern("{0} of {1,number,integer}", ["Page 1", 1200.4], "en_US")
        'Page 1 of 1,200'
    """
    segments = _parse_pattern(pattern)
    if len(segments) == 1 and isinstance(segments[0], str):
        return segments[0]
    locale = get_babel_locale(locale_code)
    parts = [
        segment if isinstance(segment, str) else _render(segment, args, locale)
        for segment in segments
    ]
    return "".join(parts)
