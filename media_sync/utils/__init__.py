"""Utility functions for the media sync tool."""

from .time import utc_now_str, DateRange, date_from_name, instant, naive
from .path import display_name, normalize_name, parent_folder, split_stem
from .size import format_bytes

__all__ = [
    'utc_now_str', 'DateRange', 'date_from_name', 'instant', 'naive',
    'display_name', 'normalize_name', 'parent_folder', 'split_stem',
    'format_bytes',
]
