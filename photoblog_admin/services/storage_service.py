"""Remote storage service backed by the Backblaze B2 native API."""
import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from photoblog_admin.core.config import Settings
from photoblog_admin.core.exceptions import StorageException

logger = logging.getLogger(__name__)


@dataclass
class B2Session:
    """Authorization state returned by b2_authorize_account."""

    account_id: str
    authorization_token: str
    api_url: str
    download_url: str
    expires_at: datetime
    bucket_id: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at


class StorageService:
    """Service for uploading and deleting album images in a B2 bucket."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize storage service.

        Args:
            settings: Application settings holding the B2 credentials
            client: HTTP client (a new one is created when omitted)
        """
        self.settings = settings
        self.client = client or httpx.AsyncClient(timeout=settings.b2_timeout_seconds)
        self.session: Optional[B2Session] = None

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    # Authorization

    async def authorize(self, force: bool = False) -> B2Session:
        """
        Authorize against B2, reusing the current session until it expires.

        Args:
            force: Re-authorize even if the session is still valid

        Returns:
            Current session

        Raises:
            StorageException: If credentials are missing or authorization fails
        """
        if self.session is not None and not force and not self.session.is_expired():
            return self.session

        if not (self.settings.b2_application_key_id and self.settings.b2_application_key):
            raise StorageException("B2 credentials are not configured")

        logger.info("Authorizing B2...")
        try:
            response = await self.client.get(
                f"{self.settings.b2_api_url}/b2api/v2/b2_authorize_account",
                auth=(self.settings.b2_application_key_id, self.settings.b2_application_key),
            )
        except httpx.HTTPError as e:
            raise StorageException(f"Authorization request failed: {e}")
        data = self._check_response(response, "b2_authorize_account")

        self.session = B2Session(
            account_id=data["accountId"],
            authorization_token=data["authorizationToken"],
            api_url=data["apiUrl"],
            download_url=data.get("downloadUrl", ""),
            expires_at=datetime.now(timezone.utc) + timedelta(hours=self.settings.b2_auth_ttl_hours),
        )
        try:
            self.session.bucket_id = await self.resolve_bucket_id()
        except StorageException:
            self.session = None
            raise
        logger.info(f"B2 authorized. Bucket ID: {self.session.bucket_id}")
        return self.session

    async def resolve_bucket_id(self) -> str:
        """
        Determine the bucket ID, from configuration or by listing buckets.

        Raises:
            StorageException: If the bucket cannot be found
        """
        if self.settings.b2_bucket_id:
            return self.settings.b2_bucket_id

        session = self.session
        if session is None:
            raise StorageException("Not authorized")

        try:
            response = await self.client.post(
                f"{session.api_url}/b2api/v2/b2_list_buckets",
                headers={"Authorization": session.authorization_token},
                json={"accountId": session.account_id, "bucketName": self.settings.b2_bucket_name},
            )
            buckets = self._check_response(response, "b2_list_buckets").get("buckets", [])
        except (httpx.HTTPError, StorageException) as e:
            logger.error(f"Cannot list buckets: {e}")
            raise StorageException(
                "bucket ID required in configuration when the key cannot list buckets"
            )

        for bucket in buckets:
            if bucket.get("bucketName") == self.settings.b2_bucket_name:
                return bucket["bucketId"]
        raise StorageException(f"Bucket {self.settings.b2_bucket_name} not found")

    # API calls

    async def _api_call(self, operation: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST to a B2 API operation, re-authorizing once on 401.

        Raises:
            StorageException: If the call fails
        """
        for attempt in range(2):
            session = await self.authorize(force=attempt > 0)
            try:
                response = await self.client.post(
                    f"{session.api_url}/b2api/v2/{operation}",
                    headers={"Authorization": session.authorization_token},
                    json=payload,
                )
            except httpx.HTTPError as e:
                raise StorageException(f"{operation} request failed: {e}")

            if response.status_code == 401 and attempt == 0:
                logger.info(f"{operation} rejected authorization, re-authorizing")
                continue
            return self._check_response(response, operation)

        raise StorageException(f"{operation} failed after re-authorization")

    def _check_response(self, response: httpx.Response, operation: str) -> Dict[str, Any]:
        if response.is_success:
            return response.json()
        try:
            detail = response.json().get("message", response.text)
        except ValueError:
            detail = response.text
        raise StorageException(f"{operation} failed ({response.status_code}): {detail}")

    async def upload_file(self, file_name: str, data: bytes, content_type: str) -> str:
        """
        Upload a file to the bucket.

        Args:
            file_name: Object name, e.g. "my-album/img000.jpg"
            data: File content
            content_type: MIME type

        Returns:
            Stored file name

        Raises:
            StorageException: If the upload fails
        """
        for attempt in range(2):
            session = await self.authorize(force=attempt > 0)
            upload = await self._api_call("b2_get_upload_url", {"bucketId": session.bucket_id})
            try:
                response = await self.client.post(
                    upload["uploadUrl"],
                    headers={
                        "Authorization": upload["authorizationToken"],
                        "X-Bz-File-Name": quote(file_name, safe="/"),
                        "Content-Type": content_type,
                        "X-Bz-Content-Sha1": hashlib.sha1(data).hexdigest(),
                    },
                    content=data,
                )
            except httpx.HTTPError as e:
                raise StorageException(f"Upload of {file_name} failed: {e}")

            if response.status_code == 401 and attempt == 0:
                continue
            stored = self._check_response(response, "b2_upload_file")
            logger.info(f"Uploaded {file_name} ({len(data)} bytes)")
            return stored.get("fileName", file_name)

        raise StorageException(f"Upload of {file_name} failed after re-authorization")

    async def list_file_versions(self, prefix: str, limit: int = 1) -> List[Dict[str, Any]]:
        """List file versions whose names start with prefix."""
        session = await self.authorize()
        data = await self._api_call(
            "b2_list_file_versions",
            {"bucketId": session.bucket_id, "prefix": prefix, "maxFileCount": limit},
        )
        return data.get("files", [])

    async def delete_file_version(self, file_id: str, file_name: str):
        """Delete one version of a file."""
        await self._api_call(
            "b2_delete_file_version",
            {"fileId": file_id, "fileName": file_name},
        )

    async def delete_file(self, file_name: str) -> bool:
        """
        Delete the newest version of a file.

        Args:
            file_name: Object name

        Returns:
            True if deleted, False if no version with that exact name exists

        Raises:
            StorageException: If listing or deletion fails
        """
        versions = await self.list_file_versions(file_name, limit=1)
        if not versions or versions[0].get("fileName") != file_name:
            logger.info(f"{file_name} not found in bucket, nothing to delete")
            return False

        await self.delete_file_version(versions[0]["fileId"], file_name)
        logger.info(f"Deleted {file_name}")
        return True

    # URLs

    def public_url(self, file_path: str) -> str:
        """Public URL of a stored file, routed through the CDN when enabled."""
        if self.settings.b2_use_cdn and self.settings.b2_cdn_domain:
            return f"https://{self.settings.b2_cdn_domain}/{file_path}"
        return f"https://{self.settings.b2_download_host}/file/{self.settings.b2_bucket_name}/{file_path}"
