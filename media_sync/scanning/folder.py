#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Local folder source: walks a directory tree and yields its media files.
"""

import logging
import os
import threading
import warnings
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..config import IMAGE_EXT, SUPPORTED_EXT
from ..models.local_file import LocalAlbum, LocalFile
from ..utils.time import date_from_name

logging.getLogger("PIL.TiffImagePlugin").setLevel(logging.WARNING)
logging.getLogger("PIL.PngImagePlugin").setLevel(logging.WARNING)

# Suppress PIL warnings
warnings.filterwarnings("ignore", category=UserWarning,
                        message=".*Palette images with Transparency expressed in bytes.*")

logger = logging.getLogger(__name__)

EXIF_IFD = 0x8769
GPS_IFD = 0x8825
TAG_DATETIME = 306
TAG_DATETIME_ORIGINAL = 36867


def _rational(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        num, den = value
        return num / den if den else 0.0


def _dms(values, ref: str) -> Optional[float]:
    try:
        d, m, s = (_rational(v) for v in values)
    except (TypeError, ValueError):
        return None
    deg = d + m / 60 + s / 3600
    return -deg if ref in ("S", "W") else deg


def read_exif(path: Path) -> Tuple[Optional[datetime], Optional[float], Optional[float], Optional[float]]:
    """Return (capture date, latitude, longitude, altitude) from the EXIF block."""
    with Image.open(path) as img:
        exif = img.getexif()
    raw = exif.get_ifd(EXIF_IFD).get(TAG_DATETIME_ORIGINAL) or exif.get(TAG_DATETIME)
    taken = None
    if raw:
        try:
            taken = datetime.strptime(str(raw).strip("\x00 "), "%Y:%m:%d %H:%M:%S")
        except ValueError:
            taken = None

    lat = lon = alt = None
    gps = exif.get_ifd(GPS_IFD)
    if gps:
        if 2 in gps:
            lat = _dms(gps[2], gps.get(1, "N"))
        if 4 in gps:
            lon = _dms(gps[4], gps.get(3, "E"))
        if 6 in gps:
            alt = _rational(gps[6])
            if gps.get(5) in (1, b"\x01"):
                alt = -alt
    return taken, lat, lon, alt


class FolderBrowser:
    """
    Yields one LocalFile per supported media file below root.

    Files are produced lazily in sorted order. With album_after_folder the
    parent folder name is attached to each file as an album hint.
    """

    def __init__(self, root: Path, album_after_folder: bool = False):
        self.root = Path(root)
        self.album_after_folder = album_after_folder
        self.stats = {'total_scanned': 0, 'media_files_found': 0, 'permission_errors': 0}

    def browse(self, cancel_event: Optional[threading.Event] = None) -> Iterator[LocalFile]:
        cancel_event = cancel_event or threading.Event()
        logger.info("Browsing %s...", self.root)
        yield from self._scan_recursive(self.root, cancel_event)
        logger.info("Browsing done: %d items scanned, %d media files, %d permission errors",
                    self.stats['total_scanned'], self.stats['media_files_found'],
                    self.stats['permission_errors'])

    def _scan_recursive(self, path: Path, cancel_event: threading.Event) -> Iterator[LocalFile]:
        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except (PermissionError, OSError) as e:
            logger.warning("Can't read %s: %s", path, e)
            self.stats['permission_errors'] += 1
            return

        for entry in entries:
            if cancel_event.is_set():
                return
            self.stats['total_scanned'] += 1
            try:
                if entry.is_dir(follow_symlinks=False):
                    yield from self._scan_recursive(Path(entry.path), cancel_event)
                    continue
                if not entry.is_file():
                    continue
            except OSError:
                self.stats['permission_errors'] += 1
                continue
            if Path(entry.name).suffix.lower() not in SUPPORTED_EXT:
                continue
            self.stats['media_files_found'] += 1
            yield self._local_file(Path(entry.path))

    def _local_file(self, full: Path) -> LocalFile:
        rel = full.relative_to(self.root).as_posix()
        local = LocalFile(file_name=rel, title=full.name, full_path=str(full))

        if self.album_after_folder and full.parent != self.root:
            folder = full.parent.name
            local.add_album(LocalAlbum(path=full.parent.relative_to(self.root).as_posix(), name=folder))

        try:
            local.file_size = full.stat().st_size
        except OSError as e:
            local.error = e
            return local

        if full.suffix.lower() in IMAGE_EXT:
            try:
                local.captured_at, local.latitude, local.longitude, local.altitude = read_exif(full)
            except (UnidentifiedImageError, OSError, ValueError, KeyError, SyntaxError) as e:
                logger.debug("No EXIF for %s: %s", rel, e)
        if local.captured_at is None:
            local.captured_at = date_from_name(full.name)
        return local
