"""Data models for the media sync tool."""

from .remote_asset import RemoteAsset, Album, AlbumUpdateResult, UploadResponse
from .local_file import LocalFile, LocalAlbum
from .advice import Advice, AdviceCode
from .run_state import RunState, FlushFailure, RunReport

__all__ = [
    'RemoteAsset', 'Album', 'AlbumUpdateResult', 'UploadResponse',
    'LocalFile', 'LocalAlbum',
    'Advice', 'AdviceCode',
    'RunState', 'FlushFailure', 'RunReport',
]
