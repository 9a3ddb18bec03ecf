#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Time utility functions for the media sync tool.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

_NAME_DATE_RE = re.compile(
    r"(?<!\d)((?:19|20)\d{2})[-_.]?(\d{2})[-_.]?(\d{2})[-_. T]?(\d{2})[-_.:]?(\d{2})[-_.:]?(\d{2})(?!\d)"
)


def utc_now_str() -> str:
    """Return current UTC time in ISO-8601 format with 'Z'."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def naive(d: datetime) -> datetime:
    """Drop the timezone, for wall-clock comparisons between local files."""
    return d.replace(tzinfo=None) if d.tzinfo else d


def instant(d: datetime) -> datetime:
    """Aware datetime for d. A naive d, as read from EXIF, is local time."""
    return d if d.tzinfo else d.astimezone()


def date_from_name(name: str) -> Optional[datetime]:
    """Extract a capture date embedded in a file name like IMG_20230501_100000.jpg."""
    for m in _NAME_DATE_RE.finditer(name):
        try:
            return datetime(*(int(g) for g in m.groups()))
        except ValueError:
            continue
    return None


@dataclass
class DateRange:
    """Half-open [after, before) capture date filter."""
    after: Optional[datetime] = None
    before: Optional[datetime] = None

    @classmethod
    def parse(cls, text: str) -> "DateRange":
        """
        Parse YYYY, YYYY-MM, YYYY-MM-DD or "start,end" where both ends use
        one of the former forms.
        """
        text = (text or "").strip()
        if not text:
            return cls()
        if "," in text:
            start, end = (part.strip() for part in text.split(",", 1))
            return cls(after=cls._bounds(start)[0], before=cls._bounds(end)[1])
        after, before = cls._bounds(text)
        return cls(after=after, before=before)

    @staticmethod
    def _bounds(text: str):
        parts = text.split("-")
        try:
            if len(parts) == 1:
                y = int(parts[0])
                return datetime(y, 1, 1), datetime(y + 1, 1, 1)
            if len(parts) == 2:
                y, m = int(parts[0]), int(parts[1])
                start = datetime(y, m, 1)
                end = datetime(y + 1, 1, 1) if m == 12 else datetime(y, m + 1, 1)
                return start, end
            if len(parts) == 3:
                start = datetime.strptime(text, "%Y-%m-%d")
                return start, start + timedelta(days=1)
        except ValueError as e:
            raise ValueError(f"invalid date {text!r}: {e}") from e
        raise ValueError(f"invalid date {text!r}, expected YYYY, YYYY-MM or YYYY-MM-DD")

    def is_set(self) -> bool:
        return self.after is not None or self.before is not None

    def in_range(self, d: datetime) -> bool:
        d = naive(d)
        if self.after is not None and d < self.after:
            return False
        if self.before is not None and d >= self.before:
            return False
        return True

    def __str__(self) -> str:
        fmt = lambda v: v.strftime("%Y-%m-%d") if v else "*"
        return f"{fmt(self.after)},{fmt(self.before)}"
