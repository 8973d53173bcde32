"""Interpolation of resolved translation templates.

Stateless utility used by the rendering boundary once a template string has
been resolved from a bundle. Placeholders use double braces with an
optional format after a comma:

    "Hello, {{name}}!"
    "{{name, uppercase}}"
    "Last visit: {{when, date:short}}"

Supported formats:
    uppercase, lowercase    - str.upper() / str.lower() of the value
    date:<style>            - Babel format_date with short, medium, long or full

Unknown formats insert the value unchanged. Missing variables leave the
placeholder in place so that gaps remain visible instead of rendering as
empty text.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from babel import UnknownLocaleError
from babel import dates as babel_dates

from nsl10n.enums import DateStyle
from nsl10n.locale_utils import get_babel_locale

__all__ = ["FORMATTERS", "format_date_value", "interpolate"]

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*(?P<name>[^{},]+?)\s*(?:,\s*(?P<format>[^{}]+?)\s*)?\}\}")

_DATE_PREFIX = "date:"

_FALLBACK_BABEL_LOCALE = "en"


def _coerce_date(value: Any) -> date | None:
    match value:
        case datetime() | date():
            return value
        case str():
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        case _:
            return None


def format_date_value(value: Any, style: str, language: str) -> str:
    """Format a date-like value for ``language`` with Babel.

    Args:
        value: date, datetime, or ISO-8601 string
        style: One of DateStyle values
        language: Language code used to select CLDR patterns

    Returns:
        Localized date string, or str(value) if it cannot be interpreted
        as a date or the style is unknown.
    """
    parsed = _coerce_date(value)
    if parsed is None or style not in DateStyle:
        logger.debug("Cannot format %r as date with style %r", value, style)
        return str(value)

    try:
        locale = get_babel_locale(language)
    except (UnknownLocaleError, ValueError):
        locale = get_babel_locale(_FALLBACK_BABEL_LOCALE)
    return babel_dates.format_date(parsed, format=style, locale=locale)


FORMATTERS: dict[str, Callable[[Any], str]] = {
    "uppercase": lambda value: str(value).upper(),
    "lowercase": lambda value: str(value).lower(),
}


def _apply_format(value: Any, fmt: str | None, language: str) -> str:
    if fmt is None:
        return str(value)
    if fmt.startswith(_DATE_PREFIX):
        return format_date_value(value, fmt[len(_DATE_PREFIX):].strip(), language)
    formatter = FORMATTERS.get(fmt)
    if formatter is None:
        logger.debug("Unknown interpolation format '%s'", fmt)
        return str(value)
    return formatter(value)


def interpolate(
    template: str,
    variables: Mapping[str, Any] | None,
    *,
    language: str,
) -> str:
    """Substitute ``{{name}}`` / ``{{name, format}}`` placeholders.

    Args:
        template: Resolved translation string
        variables: Values by placeholder name (None means no substitution)
        language: Active language, used by locale-aware formats

    Returns:
        Interpolated string

    Example:
        >>> interpolate("Hi {{name, uppercase}}", {"name": "ann"}, language="en")
        'Hi ANN'
        >>> interpolate("Hi {{name}}", {}, language="en")
        'Hi {{name}}'
    """
    if not variables or "{{" not in template:
        return template

    def replace(match: re.Match[str]) -> str:
        name = match.group("name")
        if name not in variables:
            logger.debug("Missing interpolation variable '%s'", name)
            return match.group(0)
        return _apply_format(variables[name], match.group("format"), language)

    return _PLACEHOLDER.sub(replace, template)
