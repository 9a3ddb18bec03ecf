#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
In-memory index of the assets present on the server.
"""

import logging
import threading
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ..models.local_file import LocalFile
from ..models.remote_asset import RemoteAsset
from ..utils.path import display_name, normalize_name

logger = logging.getLogger(__name__)


class AssetIndex:
    """
    Lookup of server assets by id, by device asset id and by display name.

    Built once from a full listing. The only mutation afterwards is
    add_local_asset, which records assets uploaded during the current run.
    """

    def __init__(self, assets: Iterable[RemoteAsset]):
        self._lock = threading.Lock()
        self._by_id: Dict[str, RemoteAsset] = {}
        self._by_device_id: Dict[str, RemoteAsset] = {}
        self._by_name: Dict[str, List[RemoteAsset]] = defaultdict(list)
        for asset in assets:
            self._insert(asset)
        logger.debug("Indexed %d assets under %d names", len(self._by_id), len(self._by_name))

    @classmethod
    def from_client(cls, client) -> "AssetIndex":
        """List the whole catalog, leaving trashed assets out."""
        logger.info("Loading server assets...")
        assets = [a for a in client.get_all_assets() if not a.is_trashed]
        logger.info("%d asset(s) received", len(assets))
        return cls(assets)

    def _insert(self, asset: RemoteAsset):
        self._by_id[asset.id] = asset
        if asset.device_asset_id:
            self._by_device_id[asset.device_asset_id] = asset
        self._by_name[normalize_name(asset.original_file_name)].append(asset)

    def __len__(self) -> int:
        return len(self._by_id)

    def by_id(self, asset_id: str) -> Optional[RemoteAsset]:
        with self._lock:
            return self._by_id.get(asset_id)

    def by_device_id(self, device_asset_id: str) -> Optional[RemoteAsset]:
        with self._lock:
            return self._by_device_id.get(device_asset_id)

    def by_name(self, name: str) -> List[RemoteAsset]:
        """Every asset sharing the display name, in listing order."""
        with self._lock:
            return list(self._by_name.get(normalize_name(name), ()))

    def add_local_asset(self, local: LocalFile, asset_id: str) -> RemoteAsset:
        """Record an asset uploaded from local under the id the server returned."""
        asset = RemoteAsset(
            id=asset_id,
            device_asset_id=local.device_asset_id(),
            original_file_name=display_name(local.title, local.file_name),
            captured_at=local.captured_at,
            file_size=local.file_size,
            albums=[a.name for a in local.albums if a.name],
        )
        with self._lock:
            existing = self._by_id.get(asset_id)
            if existing is not None:
                existing.just_uploaded = True
                return existing
            asset.just_uploaded = True
            self._insert(asset)
        return asset
