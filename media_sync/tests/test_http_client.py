#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for the HTTP catalog client, with the requests session mocked.
"""

import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
import requests

from media_sync.catalog.http_client import HttpCatalogClient
from media_sync.errors import CatalogError
from media_sync.tests.fixtures.fake_catalog import local


def response(status=200, payload=None):
    content = json.dumps(payload).encode() if payload is not None else b""
    return SimpleNamespace(status_code=status, content=content, text=content.decode(), json=lambda: payload)


class RoutedSession:
    """Minimal stand-in for requests.Session answering from a route table."""

    def __init__(self, routes):
        self.headers = {}
        self.routes = routes
        self.requests = []

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append((method, url, kwargs))
        handler = self.routes[(method, url.split("/api", 1)[1])]
        return handler(**kwargs) if callable(handler) else handler


@pytest.fixture
def make_client():
    def factory(routes):
        session = RoutedSession(routes)
        return HttpCatalogClient("http://photos:2283/", "secret", device_id="dev", session=session), session
    return factory


class TestHttpCatalogClient:
    """Requests sent and responses decoded."""

    def test_api_key_header(self, make_client):
        client, session = make_client({("GET", "/server/ping"): response(payload={"res": "pong"})})
        assert client.ping()
        assert session.headers["x-api-key"] == "secret"
        assert session.requests[0][1] == "http://photos:2283/api/server/ping"

    def test_get_all_assets_pages_and_albums(self, make_client):
        pages = {
            1: {"assets": {"items": [{
                "id": "a1", "deviceAssetId": "d1", "originalFileName": "IMG_1.JPG",
                "exifInfo": {"dateTimeOriginal": "2023-05-01T10:00:00.000Z", "fileSizeInByte": 1234},
            }], "nextPage": "2"}},
            2: {"assets": {"items": [{
                "id": "a2", "originalFileName": "IMG_2.JPG", "isTrashed": True,
                "fileCreatedAt": "2023-05-02T10:00:00Z", "exifInfo": None,
            }], "nextPage": None}},
        }
        client, session = make_client({
            ("GET", "/albums"): response(payload=[{"id": "alb", "albumName": "Trip"}]),
            ("GET", "/albums/alb"): response(payload={"assets": [{"id": "a1"}]}),
            ("POST", "/search/metadata"): lambda json: response(payload=pages[json["page"]]),
        })

        assets = list(client.get_all_assets())

        assert [a.id for a in assets] == ["a1", "a2"]
        a1, a2 = assets
        assert a1.device_asset_id == "d1"
        assert a1.file_size == 1234
        assert a1.captured_at == datetime(2023, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert a1.albums == ["Trip"]
        assert a2.is_trashed
        assert a2.captured_at == datetime(2023, 5, 2, 10, 0, tzinfo=timezone.utc)
        assert a2.albums == []

    def test_upload_asset(self, make_client, tmp_path):
        path = tmp_path / "IMG_1.JPG"
        path.write_bytes(b"jpegdata")
        f = local("IMG_1.JPG", 8, datetime(2023, 5, 1, 10, 0), full_path=str(path))
        client, session = make_client({
            ("POST", "/assets"): response(201, {"id": "new", "status": "created"}),
        })

        resp = client.upload_asset(f)

        assert resp.id == "new"
        assert not resp.duplicate
        kwargs = session.requests[0][2]
        assert kwargs["data"]["deviceAssetId"] == f.device_asset_id()
        assert kwargs["data"]["deviceId"] == "dev"
        expected = datetime(2023, 5, 1, 10, 0).astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        assert kwargs["data"]["fileCreatedAt"] == expected
        assert kwargs["files"]["assetData"][0] == "IMG_1.JPG"

    def test_upload_duplicate(self, make_client, tmp_path):
        path = tmp_path / "IMG_1.JPG"
        path.write_bytes(b"x")
        client, _ = make_client({
            ("POST", "/assets"): response(200, {"id": "old", "status": "duplicate"}),
        })
        assert client.upload_asset(local("IMG_1.JPG", 1, None, full_path=str(path))).duplicate

    def test_album_calls(self, make_client):
        client, session = make_client({
            ("POST", "/albums"): response(201, {"id": "alb", "albumName": "Trip"}),
            ("PUT", "/albums/alb/assets"): response(200, [
                {"id": "a", "success": True},
                {"id": "b", "success": False, "error": "duplicate"},
            ]),
        })

        album = client.create_album("Trip", ["a"])
        results = client.add_assets_to_album("alb", ["a", "b"])

        assert album.id == "alb"
        assert session.requests[0][2]["json"] == {"albumName": "Trip", "assetIds": ["a"]}
        assert [(r.id, r.success, r.error) for r in results] == [("a", True, None), ("b", False, "duplicate")]

    def test_delete_and_stack(self, make_client):
        client, session = make_client({
            ("DELETE", "/assets"): response(204),
            ("PUT", "/assets"): response(204),
        })

        client.delete_assets(["a", "b"])
        client.update_assets(["raw"], stack_parent_id="jpg")

        assert session.requests[0][2]["json"] == {"ids": ["a", "b"], "force": False}
        assert session.requests[1][2]["json"]["stackParentId"] == "jpg"

    def test_http_error(self, make_client):
        client, _ = make_client({("DELETE", "/assets"): response(500, {"message": "boom"})})
        with pytest.raises(CatalogError) as exc:
            client.delete_assets(["a"])
        assert exc.value.status_code == 500

    def test_network_error(self, make_client):
        def fail(**kwargs):
            raise requests.ConnectionError("refused")

        client, _ = make_client({("GET", "/albums"): fail})
        with pytest.raises(CatalogError):
            client.get_all_albums()
