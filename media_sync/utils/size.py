#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Human readable sizes.
"""


def format_bytes(size: int) -> str:
    """Format a byte count as B, KB, MB or GB with one decimal."""
    suffixes = ["B", "KB", "MB", "GB"]
    value = float(size)
    base = 1024.0
    if value < base:
        return f"{value:.0f} {suffixes[0]}"
    exp = 0
    while value >= base and exp < len(suffixes) - 1:
        value /= base
        exp += 1
    return f"{round(value, 1):.1f} {suffixes[exp]}"
