#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures describing what the remote catalog holds.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class RemoteAsset:
    """An asset stored on the server."""
    id: str
    device_asset_id: str
    original_file_name: str
    captured_at: Optional[datetime] = None
    file_size: int = 0
    is_trashed: bool = False
    albums: List[str] = field(default_factory=list)

    # Set when this run uploaded the asset
    just_uploaded: bool = False


@dataclass
class Album:
    """A remote album and its current members."""
    id: str
    name: str
    asset_ids: List[str] = field(default_factory=list)


@dataclass
class AlbumUpdateResult:
    """Per-asset outcome of an add-to-album call."""
    id: str
    success: bool
    error: Optional[str] = None


@dataclass
class UploadResponse:
    id: str
    duplicate: bool = False
