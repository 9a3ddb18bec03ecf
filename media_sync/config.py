#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Global configuration and constants for the media sync tool.
"""

import os
from datetime import timedelta
from typing import Set

# File type categories
IMAGE_EXT: Set[str] = {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tiff", ".tif", ".webp", ".heic", ".heif", ".avif"}
RAW_EXT: Set[str] = {".dng", ".cr2", ".cr3", ".nef", ".arw", ".orf", ".raf", ".rw2", ".pef", ".srw", ".raw"}
VIDEO_EXT: Set[str] = {".mp4", ".mov", ".avi", ".mkv", ".wmv", ".flv", ".mpeg", ".mpg", ".m4v", ".3gp", ".mts", ".webm"}
SUPPORTED_EXT: Set[str] = IMAGE_EXT | RAW_EXT | VIDEO_EXT

# Processed extensions preferred as the cover of a RAW+JPEG stack
STACK_COVER_EXT: Set[str] = {".jpg", ".jpeg", ".heic"}

# Two capture dates closer than this are the same shot
DATE_TOLERANCE = timedelta(minutes=5)

# Burst detection window for stacking
STACK_BURST_WINDOW = timedelta(seconds=1)

# Processing defaults
DEFAULT_WORKERS = os.cpu_count() or 4
DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_PAGE_SIZE = 1000

# Error kind reported by the catalog when an asset is already in an album
DUPLICATE_ERROR = "duplicate"

# Environment variables used when the CLI flags are omitted
ENV_SERVER = "MEDIA_SYNC_SERVER"
ENV_API_KEY = "MEDIA_SYNC_API_KEY"
ENV_DEVICE_ID = "MEDIA_SYNC_DEVICE_ID"

DEFAULT_DEVICE_ID = "media-sync"
