"""CLI commands for the media sync tool."""

from .upload import UploadCommand

__all__ = ['UploadCommand']
