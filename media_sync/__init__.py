"""Media Sync - reconcile a local photo library with a remote catalog."""

__version__ = "1.0.0"
__author__ = "Media Sync Team"

# Import key classes for convenient top-level access
from .catalog import AssetIndex, CatalogClient, HttpCatalogClient
from .commands import UploadCommand
from .models import Advice, AdviceCode, LocalAlbum, LocalFile, RemoteAsset, RunReport, RunState
from .reconcile import UploadEngine, UploadOptions, should_upload
from .scanning import FolderBrowser

__all__ = [
    # Core classes
    'UploadEngine',
    'UploadOptions',
    'UploadCommand',
    'AssetIndex',
    'should_upload',

    # Collaborators
    'CatalogClient',
    'HttpCatalogClient',
    'FolderBrowser',

    # Data models
    'Advice',
    'AdviceCode',
    'LocalAlbum',
    'LocalFile',
    'RemoteAsset',
    'RunReport',
    'RunState',

    # Package metadata
    '__version__',
    '__author__'
]
