#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exception types raised by the media sync tool.
"""

from typing import Optional


class MediaSyncError(Exception):
    """Base class for all errors raised by media_sync."""


class CatalogError(MediaSyncError):
    """A call to the remote catalog failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RunCancelled(MediaSyncError):
    """The run was cancelled before all files were dispatched."""


class DeletionError(MediaSyncError):
    """The batched removal of server assets failed."""


class ConfigurationError(MediaSyncError):
    """Invalid combination of run options."""
