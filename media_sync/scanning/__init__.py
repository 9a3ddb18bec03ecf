"""Local sources for the media sync tool."""

from .folder import FolderBrowser, read_exif

__all__ = ['FolderBrowser', 'read_exif']
