#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Path and file name helpers for the media sync tool.
"""

import posixpath
from typing import Tuple


def display_name(title: str, file_name: str = "") -> str:
    """
    Basename shown for an asset.

    The title wins; when it carries no extension the one from file_name is
    appended.
    """
    name = posixpath.basename((title or file_name).replace("\\", "/"))
    if not posixpath.splitext(name)[1] and file_name:
        name += posixpath.splitext(file_name)[1]
    return name


def normalize_name(title: str, file_name: str = "") -> str:
    """Case-insensitive lookup key for a display name."""
    return display_name(title, file_name).casefold()


def parent_folder(file_name: str) -> str:
    """Immediate parent folder of a slash separated path, '' at the root."""
    parent = posixpath.dirname(file_name.replace("\\", "/"))
    return "" if parent in ("", ".") else parent


def split_stem(file_name: str) -> Tuple[str, str]:
    """Return (stem, lowercase extension) of the basename."""
    stem, ext = posixpath.splitext(posixpath.basename(file_name.replace("\\", "/")))
    return stem, ext.lower()
