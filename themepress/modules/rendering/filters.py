"""Filters available to theme templates.

``build_filter_table`` returns a fresh mapping per renderer, so nothing here
is registered globally.
"""

from __future__ import annotations

import re
from datetime import date as date_type, datetime, timezone
from functools import partial
from typing import Any, Callable, Iterable, Optional
from urllib.parse import quote_plus, unquote_plus

from markupsafe import Markup, escape
from jinja2.utils import htmlsafe_json_dumps

_TAG = re.compile(r"<[^>]*>")
_NEWLINE = re.compile(r"\r?\n")

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY


def asset_url(value: Any, prefix: str = "/assets") -> str:
    if value is None:
        return ""
    return f"{prefix.rstrip('/')}/{str(value).lstrip('/')}"


def image_url(value: Any) -> str:
    if value is None:
        return ""
    return f"/images/{str(value).lstrip('/')}"


def strip_html(value: Any) -> str:
    if value is None:
        return ""
    return _TAG.sub("", str(value))


def truncatewords(value: Any, words: int = 15, end: str = "...") -> str:
    if value is None:
        return ""
    parts = str(value).split()
    if len(parts) <= words:
        return str(value)
    return " ".join(parts[:words]) + end


def strip_newlines(value: Any) -> str:
    if value is None:
        return ""
    return _NEWLINE.sub(" ", str(value))


def newline_to_br(value: Any) -> Markup:
    if value is None:
        return Markup("")
    return Markup("<br>").join(escape(line) for line in _NEWLINE.split(str(value)))


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date_type):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def format_date(value: Any, fmt: str = "%B %d, %Y") -> str:
    if value is None or value == "":
        return ""
    moment = _coerce_datetime(value)
    if moment is None:
        return str(value)
    return moment.strftime(fmt)


def time_ago(value: Any, now: Optional[datetime] = None) -> str:
    if value is None or value == "":
        return ""
    moment = _coerce_datetime(value)
    if moment is None:
        return str(value)
    distance = ((now or datetime.now(timezone.utc)) - moment).total_seconds()
    if distance < _MINUTE:
        return "just now"
    for unit, seconds in (("year", _YEAR), ("month", _MONTH), ("week", _WEEK), ("day", _DAY), ("hour", _HOUR)):
        if distance >= seconds:
            count = round(distance / seconds)
            return f"{count} {unit}{'' if count == 1 else 's'} ago"
    count = round(distance / _MINUTE)
    return f"{count} minute{'' if count == 1 else 's'} ago"


def url_encode(value: Any) -> str:
    return "" if value is None else quote_plus(str(value))


def url_decode(value: Any) -> str:
    return "" if value is None else unquote_plus(str(value))


def _attribute(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def where(items: Optional[Iterable[Any]], prop: str, value: Any) -> list[Any]:
    if not items:
        return []
    return [item for item in items if _attribute(item, prop) == value]


def limit(items: Optional[Iterable[Any]], count: int) -> list[Any]:
    if not items:
        return []
    return list(items)[: max(int(count), 0)]


def offset(items: Optional[Iterable[Any]], count: int) -> list[Any]:
    if not items:
        return []
    return list(items)[max(int(count), 0) :]


def to_json(value: Any) -> Markup:
    if value is None:
        return Markup("{}")
    return htmlsafe_json_dumps(value, sort_keys=True, default=str)


def build_filter_table(asset_url_prefix: str = "/assets") -> dict[str, Callable[..., Any]]:
    return {
        "asset_url": partial(asset_url, prefix=asset_url_prefix),
        "image_url": image_url,
        "strip_html": strip_html,
        "truncatewords": truncatewords,
        "strip_newlines": strip_newlines,
        "newline_to_br": newline_to_br,
        "time_ago": time_ago,
        "date": format_date,
        "url_encode": url_encode,
        "url_decode": url_decode,
        "where": where,
        "limit": limit,
        "offset": offset,
        "json": to_json,
    }


__all__ = ["build_filter_table"]
