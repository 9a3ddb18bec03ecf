#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Minimal set of catalog operations needed to reconcile and upload.
"""

from typing import Iterable, List, Optional, Protocol

from ..models.local_file import LocalFile
from ..models.remote_asset import Album, AlbumUpdateResult, RemoteAsset, UploadResponse


class CatalogClient(Protocol):
    """What the upload engine needs from the remote catalog."""

    def get_all_assets(self) -> Iterable[RemoteAsset]: ...

    def upload_asset(self, local: LocalFile) -> UploadResponse: ...

    def delete_assets(self, ids: List[str], force: bool = False) -> None: ...

    def get_all_albums(self) -> List[Album]: ...

    def create_album(self, name: str, ids: List[str]) -> Album: ...

    def add_assets_to_album(self, album_id: str, ids: List[str]) -> List[AlbumUpdateResult]: ...

    def update_assets(self, ids: List[str], archived: bool = False, favorite: bool = False,
                      remove_parent: bool = False, stack_parent_id: Optional[str] = None) -> None: ...
