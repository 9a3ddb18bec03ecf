#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for local files produced by a source browser.
"""

import calendar
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, List, Optional

from ..utils.path import normalize_name
from ..utils.time import naive


@dataclass
class LocalAlbum:
    """Album hint attached to a local file: source folder path and title."""
    path: str = ""
    name: str = ""


@dataclass
class LocalFile:
    """A media file found in the local source."""
    file_name: str
    title: str = ""
    captured_at: Optional[datetime] = None
    file_size: int = 0

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None

    albums: List[LocalAlbum] = field(default_factory=list)
    from_partner: bool = False
    trashed: bool = False

    # Metadata extraction failure, the file is skipped when set
    error: Optional[Exception] = None

    # Backing file on disk, when there is one
    full_path: Optional[str] = None

    _handle: Optional[BinaryIO] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.title:
            self.title = os.path.basename(self.file_name)

    def device_asset_id(self) -> str:
        """Stable key built from the normalized name, the size and the capture time."""
        stamp = calendar.timegm(naive(self.captured_at).timetuple()) if self.captured_at else 0
        return f"{normalize_name(self.title, self.file_name)}-{self.file_size}-{stamp}"

    def add_album(self, album: LocalAlbum):
        if any(a.name == album.name for a in self.albums):
            return
        self.albums.append(album)

    def open(self) -> BinaryIO:
        if self.full_path is None:
            raise FileNotFoundError(f"{self.file_name}: no backing file")
        self.close()
        self._handle = open(self.full_path, "rb")
        return self._handle

    def close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def remove(self):
        """Delete the backing file."""
        if self.full_path is None:
            raise FileNotFoundError(f"{self.file_name}: no backing file")
        self.close()
        os.remove(self.full_path)
