"""Quick-entry directives embedded in task text.

Two independent grammars:

* ``[priority:LEVEL]`` / ``[p:LEVEL]`` with LEVEL in low, medium, high, max;
* ``[date:WHEN]`` / ``[d:WHEN]`` where WHEN is a keyword (today, tomorrow,
  yesterday), a weekday (``fri``, ``next fri``), a month and day (``jan 15``),
  a relative offset (``+3``, ``3d``) or a slash date (``4/15``, ``4/15/27``).

A directive that matches is cut out of the text and the remaining whitespace is
collapsed to single spaces. A date directive whose body cannot be resolved is
left in the text untouched.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Optional, Tuple

from .priority import Priority

PRIORITY_PRECEDENCE: Tuple[Priority, ...] = (Priority.MAX, Priority.HIGH, Priority.MEDIUM, Priority.LOW)
PRIORITY_KEYWORDS: Tuple[str, ...] = ("priority", "p")
PRIORITY_PATTERNS: Dict[Priority, Tuple[re.Pattern, ...]] = {
    level: tuple(re.compile(re.escape(f"[{keyword}:{level.label.lower()}]"), re.IGNORECASE) for keyword in PRIORITY_KEYWORDS)
    for level in PRIORITY_PRECEDENCE
}

DATE_DIRECTIVE_RE = re.compile(r"\[(date|d):([^\]]+)\]", re.IGNORECASE)

WEEKDAYS: Dict[str, int] = {
    "mon": 0, "monday": 0,
    "tue": 1, "tues": 1, "tuesday": 1,
    "wed": 2, "wednesday": 2,
    "thu": 3, "thurs": 3, "thursday": 3,
    "fri": 4, "friday": 4,
    "sat": 5, "saturday": 5,
    "sun": 6, "sunday": 6,
}

MONTHS: Dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}


@dataclass(frozen=True)
class ParsedEntry:
    text: str
    priority: Priority
    due_date: Optional[date]


def _excise(text: str, start: int, end: int) -> str:
    return " ".join((text[:start] + text[end:]).split())


def parse_priority(text: str) -> Tuple[str, Priority]:
    """Extract the highest priority marker present.

    Levels are checked from max down to low; the first level found anywhere in
    the text wins, whatever its position. Only that marker is removed.
    """
    for level in PRIORITY_PRECEDENCE:
        matches = [m for m in (pattern.search(text) for pattern in PRIORITY_PATTERNS[level]) if m]
        if matches:
            first = min(matches, key=lambda m: m.start())
            return _excise(text, first.start(), first.end()), level
    return text, Priority.NONE


def parse_date(text: str, today: Optional[date] = None) -> Tuple[str, Optional[date]]:
    """Extract the first ``[date:...]`` directive.

    Returns the (trimmed) text unchanged and ``None`` when there is no
    directive or its body does not resolve to a calendar date.
    """
    text = text.strip()
    match = DATE_DIRECTIVE_RE.search(text)
    if not match:
        return text, None
    body = match.group(2).strip().lower()
    resolved = resolve_date(body, today or date.today())
    if resolved is None:
        return text, None
    return _excise(text, match.start(), match.end()), resolved


def parse_entry(text: str, today: Optional[date] = None) -> ParsedEntry:
    remaining, priority = parse_priority(text)
    remaining, due_date = parse_date(remaining, today)
    return ParsedEntry(text=remaining, priority=priority, due_date=due_date)


def resolve_date(body: str, today: date) -> Optional[date]:
    if body in ("today", "tod"):
        return today
    if body in ("tomorrow", "tom"):
        return today + timedelta(days=1)
    if body == "yesterday":
        return today - timedelta(days=1)

    if body.startswith("next "):
        weekday = WEEKDAYS.get(body[len("next "):])
        if weekday is not None:
            return next_weekday(today, weekday, skip_this_week=True)

    weekday = WEEKDAYS.get(body)
    if weekday is not None:
        return next_weekday(today, weekday, skip_this_week=False)

    for parser in (_month_day, _relative, _slash_date):
        resolved = parser(body, today)
        if resolved is not None:
            return resolved
    return None


def next_weekday(today: date, weekday: int, skip_this_week: bool) -> date:
    """Next occurrence of ``weekday`` (Monday=0).

    ``next fri`` always adds a week to the raw offset; a bare ``fri`` only does
    so when today is that day or already past it. A past weekday therefore
    resolves to the same date either way.
    """
    days_ahead = weekday - today.weekday()
    if days_ahead <= 0 or skip_this_week:
        days_ahead += 7
    return today + timedelta(days=days_ahead)


def _date_or_none(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _this_year_or_next(today: date, month: int, day: int) -> Optional[date]:
    candidate = _date_or_none(today.year, month, day)
    if candidate is None:
        return None
    if candidate < today:
        return _date_or_none(today.year + 1, month, day)
    return candidate


def _to_int(raw: str) -> Optional[int]:
    # Only plain (optionally signed) ASCII digits, like an integer parse.
    if not re.fullmatch(r"[+-]?[0-9]+", raw):
        return None
    return int(raw)


def _month_day(body: str, today: date) -> Optional[date]:
    parts = body.split()
    if len(parts) != 2:
        return None
    month = MONTHS.get(parts[0])
    if month is None:
        return None
    day = _to_int(parts[1])
    if day is None or day < 0:
        return None
    return _this_year_or_next(today, month, day)


def _relative(body: str, today: date) -> Optional[date]:
    if body.startswith("+"):
        raw = body[1:]
    elif body.endswith("d"):
        raw = body[:-1]
    else:
        return None
    days = _to_int(raw)
    if days is None:
        return None
    try:
        return today + timedelta(days=days)
    except OverflowError:
        return None


def _slash_date(body: str, today: date) -> Optional[date]:
    parts = body.split("/")
    if len(parts) not in (2, 3):
        return None
    numbers = [_to_int(part) for part in parts[:2]]
    if any(n is None or n < 0 for n in numbers):
        return None
    month, day = numbers
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    if len(parts) == 2:
        return _this_year_or_next(today, month, day)
    year = _to_int(parts[2])
    if year is None:
        return None
    if year < 100:
        year += 2000
    if year < 1:
        return None
    return _date_or_none(year, month, day)
