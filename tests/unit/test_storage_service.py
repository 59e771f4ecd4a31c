"""Unit tests for the B2 storage service."""
from __future__ import annotations

import hashlib
import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from photoblog_admin.core.exceptions import StorageException
from photoblog_admin.services import B2Session, StorageService


class FakeB2:
    """In-memory B2 API for httpx.MockTransport."""

    def __init__(self):
        self.calls = []
        self.authorizations = 0
        self.reject_next = set()
        self.list_buckets_status = 200
        self.files = {"album/img000.jpg": "file-id-0"}
        self.uploaded = []
        self.deleted = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        operation = request.url.path.rsplit("/", 1)[-1]
        self.calls.append(operation)
        if operation in self.reject_next:
            self.reject_next.discard(operation)
            return httpx.Response(401, json={"code": "expired_auth_token", "message": "expired"})

        if operation == "b2_authorize_account":
            self.authorizations += 1
            return httpx.Response(200, json={
                "accountId": "acct",
                "authorizationToken": f"token-{self.authorizations}",
                "apiUrl": "https://api001.example.com",
                "downloadUrl": "https://f001.example.com",
            })
        if operation == "b2_list_buckets":
            if self.list_buckets_status != 200:
                return httpx.Response(self.list_buckets_status, json={"message": "unauthorized"})
            return httpx.Response(200, json={"buckets": [
                {"bucketName": "other", "bucketId": "bucket-other"},
                {"bucketName": "test-bucket", "bucketId": "bucket-123"},
            ]})
        if operation == "b2_get_upload_url":
            return httpx.Response(200, json={
                "uploadUrl": "https://pod.example.com/b2api/v2/upload_target",
                "authorizationToken": "upload-token",
            })
        if operation == "upload_target":
            self.uploaded.append(request)
            return httpx.Response(200, json={"fileName": request.headers["X-Bz-File-Name"]})
        if operation == "b2_list_file_versions":
            prefix = json.loads(request.content)["prefix"]
            files = [
                {"fileName": name, "fileId": file_id}
                for name, file_id in sorted(self.files.items())
                if name.startswith(prefix)
            ]
            return httpx.Response(200, json={"files": files[:1]})
        if operation == "b2_delete_file_version":
            self.deleted.append(json.loads(request.content))
            return httpx.Response(200, json={})
        return httpx.Response(404, json={"message": f"unknown operation {operation}"})


@pytest.fixture
def fake_b2():
    return FakeB2()


@pytest.fixture
def storage(test_settings, fake_b2):
    return StorageService(test_settings, client=httpx.AsyncClient(transport=httpx.MockTransport(fake_b2)))


class TestPublicUrl:
    """Test public URL construction."""

    def test_cdn_url(self, test_settings):
        settings = test_settings.model_copy(update={"b2_use_cdn": True, "b2_cdn_domain": "img.example.com"})

        assert StorageService(settings).public_url("a/img000.jpg") == "https://img.example.com/a/img000.jpg"

    def test_download_url_without_cdn(self, test_settings):
        settings = test_settings.model_copy(update={"b2_use_cdn": True, "b2_cdn_domain": None})

        assert StorageService(settings).public_url("a/thumb/img000.webp") == (
            "https://f003.backblazeb2.com/file/test-bucket/a/thumb/img000.webp"
        )

    def test_session_expiry(self):
        now = datetime.now(timezone.utc)
        session = B2Session("acct", "tok", "api", "dl", expires_at=now + timedelta(hours=1))

        assert not session.is_expired(now)
        assert session.is_expired(now + timedelta(hours=2))


@pytest.mark.asyncio
class TestAuthorization:
    """Test B2 authorization."""

    async def test_session_is_cached(self, storage, fake_b2):
        first = await storage.authorize()
        second = await storage.authorize()

        assert first is second
        assert fake_b2.authorizations == 1
        assert first.bucket_id == "bucket-123"

    async def test_force_reauthorizes(self, storage, fake_b2):
        await storage.authorize()
        session = await storage.authorize(force=True)

        assert fake_b2.authorizations == 2
        assert session.authorization_token == "token-2"

    async def test_expired_session_reauthorizes(self, storage, fake_b2):
        session = await storage.authorize()
        session.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)

        await storage.authorize()

        assert fake_b2.authorizations == 2

    async def test_configured_bucket_id_skips_listing(self, test_settings, fake_b2):
        settings = test_settings.model_copy(update={"b2_bucket_id": "configured-id"})
        service = StorageService(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(fake_b2)))

        session = await service.authorize()

        assert session.bucket_id == "configured-id"
        assert "b2_list_buckets" not in fake_b2.calls

    async def test_bucket_listing_denied(self, storage, fake_b2):
        fake_b2.list_buckets_status = 401

        with pytest.raises(StorageException, match="bucket ID required"):
            await storage.authorize()
        assert storage.session is None

    async def test_missing_credentials(self, test_settings, fake_b2):
        settings = test_settings.model_copy(update={"b2_application_key": None})
        service = StorageService(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(fake_b2)))

        with pytest.raises(StorageException, match="not configured"):
            await service.authorize()
        assert fake_b2.calls == []

    async def test_rejected_credentials(self, storage, fake_b2):
        fake_b2.reject_next.add("b2_authorize_account")

        with pytest.raises(StorageException, match="401"):
            await storage.authorize()


@pytest.mark.asyncio
class TestFileOperations:
    """Test uploads and deletions."""

    async def test_upload_sends_b2_headers(self, storage, fake_b2):
        data = b"jpeg bytes"

        name = await storage.upload_file("my-album/img000.jpg", data, "image/jpeg")

        assert name == "my-album/img000.jpg"
        request = fake_b2.uploaded[0]
        assert request.headers["Authorization"] == "upload-token"
        assert request.headers["X-Bz-File-Name"] == "my-album/img000.jpg"
        assert request.headers["Content-Type"] == "image/jpeg"
        assert request.headers["X-Bz-Content-Sha1"] == hashlib.sha1(data).hexdigest()
        assert request.content == data

    async def test_upload_retries_after_expired_token(self, storage, fake_b2):
        await storage.authorize()
        fake_b2.reject_next.add("b2_get_upload_url")

        await storage.upload_file("a/img000.jpg", b"x", "image/jpeg")

        assert fake_b2.authorizations == 2
        assert len(fake_b2.uploaded) == 1

    async def test_upload_retries_after_rejected_upload(self, storage, fake_b2):
        fake_b2.reject_next.add("upload_target")

        await storage.upload_file("a/img000.jpg", b"x", "image/jpeg")

        assert fake_b2.calls.count("upload_target") == 2
        assert len(fake_b2.uploaded) == 1

    async def test_delete_existing_file(self, storage, fake_b2):
        assert await storage.delete_file("album/img000.jpg") is True
        assert fake_b2.deleted == [{"fileId": "file-id-0", "fileName": "album/img000.jpg"}]

    async def test_delete_requires_exact_name(self, storage, fake_b2):
        assert await storage.delete_file("album/img00") is False
        assert await storage.delete_file("album/img999.jpg") is False
        assert fake_b2.deleted == []
