#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
HTTP binding of the catalog operations, for an Immich compatible server.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import requests

from ..config import DEFAULT_DEVICE_ID, DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT_SECONDS
from ..errors import CatalogError
from ..models.local_file import LocalFile
from ..models.remote_asset import Album, AlbumUpdateResult, RemoteAsset, UploadResponse

logger = logging.getLogger(__name__)


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _iso(d: Optional[datetime]) -> str:
    """UTC timestamp; a naive d is local time."""
    if d is None:
        d = datetime.now(timezone.utc)
    return d.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class HttpCatalogClient:
    """Talks to the catalog REST API through one shared requests session."""

    def __init__(self, server_url: str, api_key: str, device_id: str = DEFAULT_DEVICE_ID,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS, session: Optional[requests.Session] = None):
        self.server_url = server_url.rstrip("/")
        self.device_id = device_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"x-api-key": api_key, "Accept": "application/json"})

    # -----------------------------
    # Plumbing
    # -----------------------------

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        url = f"{self.server_url}/api{endpoint}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise CatalogError(f"{method} {endpoint}: {e}") from e
        if response.status_code >= 400:
            raise CatalogError(
                f"{method} {endpoint}: HTTP {response.status_code} {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    def _json(self, method: str, endpoint: str, **kwargs) -> Any:
        response = self._request(method, endpoint, **kwargs)
        if not response.content:
            return None
        return response.json()

    def ping(self) -> bool:
        data = self._json("GET", "/server/ping")
        return bool(data) and data.get("res") == "pong"

    # -----------------------------
    # Assets
    # -----------------------------

    def _asset_from_json(self, item: Dict[str, Any], albums: Dict[str, List[str]]) -> RemoteAsset:
        exif = item.get("exifInfo") or {}
        captured = _parse_time(exif.get("dateTimeOriginal")) or _parse_time(item.get("fileCreatedAt"))
        return RemoteAsset(
            id=item["id"],
            device_asset_id=item.get("deviceAssetId", ""),
            original_file_name=item.get("originalFileName", ""),
            captured_at=captured,
            file_size=int(exif.get("fileSizeInByte") or 0),
            is_trashed=bool(item.get("isTrashed", False)),
            albums=list(albums.get(item["id"], [])),
        )

    def get_all_assets(self) -> Iterator[RemoteAsset]:
        """Page through every asset, album memberships included."""
        memberships: Dict[str, List[str]] = {}
        for album in self.get_all_albums():
            for asset_id in album.asset_ids:
                memberships.setdefault(asset_id, []).append(album.name)

        page: Optional[int] = 1
        while page:
            body = {"page": page, "size": DEFAULT_PAGE_SIZE, "withDeleted": True, "withExif": True}
            data = self._json("POST", "/search/metadata", json=body) or {}
            assets = data.get("assets", {})
            for item in assets.get("items", []):
                yield self._asset_from_json(item, memberships)
            next_page = assets.get("nextPage")
            page = int(next_page) if next_page else None

    def upload_asset(self, local: LocalFile) -> UploadResponse:
        stamp = _iso(local.captured_at)
        data = {
            "deviceAssetId": local.device_asset_id(),
            "deviceId": self.device_id,
            "fileCreatedAt": stamp,
            "fileModifiedAt": stamp,
            "isFavorite": "false",
        }
        with local.open() as fh:
            files = {"assetData": (os.path.basename(local.file_name), fh, "application/octet-stream")}
            response = self._request("POST", "/assets", data=data, files=files)
        payload = response.json()
        duplicate = response.status_code == 200 or payload.get("status") == "duplicate"
        return UploadResponse(id=payload["id"], duplicate=duplicate)

    def delete_assets(self, ids: List[str], force: bool = False) -> None:
        self._request("DELETE", "/assets", json={"ids": ids, "force": force})

    def update_assets(self, ids: List[str], archived: bool = False, favorite: bool = False,
                      remove_parent: bool = False, stack_parent_id: Optional[str] = None) -> None:
        body: Dict[str, Any] = {"ids": ids, "isArchived": archived, "isFavorite": favorite}
        if remove_parent:
            body["removeParent"] = True
        if stack_parent_id:
            body["stackParentId"] = stack_parent_id
        self._request("PUT", "/assets", json=body)

    # -----------------------------
    # Albums
    # -----------------------------

    def get_all_albums(self) -> List[Album]:
        albums = []
        for item in self._json("GET", "/albums") or []:
            detail = self._json("GET", f"/albums/{item['id']}") or {}
            albums.append(Album(
                id=item["id"],
                name=item.get("albumName", ""),
                asset_ids=[a["id"] for a in detail.get("assets", [])],
            ))
        return albums

    def create_album(self, name: str, ids: List[str]) -> Album:
        data = self._json("POST", "/albums", json={"albumName": name, "assetIds": ids}) or {}
        return Album(id=data.get("id", ""), name=data.get("albumName", name), asset_ids=list(ids))

    def add_assets_to_album(self, album_id: str, ids: List[str]) -> List[AlbumUpdateResult]:
        data = self._json("PUT", f"/albums/{album_id}/assets", json={"ids": ids}) or []
        return [
            AlbumUpdateResult(id=r.get("id", ""), success=bool(r.get("success")), error=r.get("error"))
            for r in data
        ]
