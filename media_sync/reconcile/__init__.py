"""Reconciliation of a local source with the server catalog."""

from .advice import should_upload, compare_dates
from .albums import AlbumReconciler
from .deletions import ConcurrentList, DeletionSets
from .engine import UploadEngine
from .options import UploadOptions
from .pipeline import WorkerPipeline
from .stacking import Stack, StackBuilder

__all__ = [
    'should_upload', 'compare_dates',
    'AlbumReconciler',
    'ConcurrentList', 'DeletionSets',
    'UploadEngine',
    'UploadOptions',
    'WorkerPipeline',
    'Stack', 'StackBuilder',
]
