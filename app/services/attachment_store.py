"""
Post attachment storage backed by a Supabase Storage bucket
"""
import asyncio
import os
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from supabase import create_client, Client

from app.config import settings
from app.exceptions import UpstreamUnavailableError
from app.logging_config import logger


@dataclass(frozen=True)
class StoredBlob:
    """Location of an uploaded blob: public URL plus the handle used to delete it"""

    url: str
    handle: str


class AttachmentStore:
    """Stores and removes binary attachments"""

    def __init__(self, client: Optional[Client] = None, bucket: Optional[str] = None):
        self.bucket = bucket or settings.ATTACHMENT_BUCKET
        self.client = client
        if self.client is None and settings.SUPABASE_URL and settings.SUPABASE_SERVICE_KEY:
            self.client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)

    def _bucket(self):
        if self.client is None:
            raise UpstreamUnavailableError("Attachment storage is not configured")
        return self.client.storage.from_(self.bucket)

    async def upload(self, data: bytes, filename: str, content_type: Optional[str] = None) -> StoredBlob:
        """
        Upload a blob under a fresh key

        Raises:
            UpstreamUnavailableError: If storage is unconfigured or rejects the upload
        """
        bucket = self._bucket()
        extension = os.path.splitext(filename or "")[1].lower()
        handle = f"{uuid4().hex}{extension}"
        try:
            await asyncio.to_thread(
                bucket.upload,
                handle,
                data,
                {"content-type": content_type or "application/octet-stream"},
            )
            url = await asyncio.to_thread(bucket.get_public_url, handle)
        except Exception as e:
            logger.error(f"Attachment upload failed for {filename}: {str(e)}")
            raise UpstreamUnavailableError("Attachment upload failed")

        logger.info(f"Stored attachment {handle} ({len(data)} bytes)")
        return StoredBlob(url=url, handle=handle)

    async def remove(self, handle: str) -> None:
        """Delete a stored blob; raises UpstreamUnavailableError on failure"""
        bucket = self._bucket()
        try:
            await asyncio.to_thread(bucket.remove, [handle])
        except Exception as e:
            logger.error(f"Attachment removal failed for {handle}: {str(e)}")
            raise UpstreamUnavailableError("Attachment removal failed")
        logger.info(f"Removed attachment {handle}")
