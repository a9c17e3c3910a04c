"""
Resume Storage Service

Uploads resume files to Supabase Storage and removes them again when a
submission has to be rolled back.
"""

import asyncio
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Set

from supabase import Client

from app.config import Config
from app.utils.exceptions import UploadFailed
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredResume:
    public_id: str
    url: str


class ResumeStorageService:
    """Gateway to the resume bucket. One attempt per upload, no retries."""

    def __init__(self, config: Config, client: Client):
        self.config = config
        self.client = client
        self.bucket = config.storage.resume_bucket
        self.timeout = config.storage.upload_timeout_seconds
        self._cleanup_tasks: Set[asyncio.Task] = set()

    def _build_public_id(self, local_path: str, target_folder: str) -> str:
        suffix = Path(local_path).suffix.lower()
        return f"{target_folder.strip('/')}/{uuid.uuid4().hex}{suffix}"

    def _upload_sync(self, local_path: str, public_id: str, content_type: Optional[str]) -> StoredResume:
        file_content = Path(local_path).read_bytes()
        bucket = self.client.storage.from_(self.bucket)
        response = bucket.upload(
            path=public_id,
            file=file_content,
            file_options={"content-type": content_type or "application/octet-stream"},
        )
        # Older storage clients hand back a response object instead of raising
        if response is None or getattr(response, "error", None):
            raise UploadFailed(
                f"Storage rejected upload: {getattr(response, 'error', 'empty response')}",
                "ResumeStorage",
            )
        url = bucket.get_public_url(public_id)
        if not url:
            raise UploadFailed("Storage returned no public URL", "ResumeStorage")
        return StoredResume(public_id=public_id, url=url)

    async def upload(
        self,
        local_path: str,
        target_folder: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> StoredResume:
        """
        Upload a local file and return its public id and URL.

        Raises:
            UploadFailed: On transport/store error or when the deadline passes
        """
        folder = target_folder or self.config.storage.resume_folder
        public_id = self._build_public_id(local_path, folder)
        logger.info(f"[ResumeStorage] Uploading resume to {self.bucket}/{public_id}")
        upload_task = asyncio.ensure_future(
            asyncio.to_thread(self._upload_sync, local_path, public_id, content_type)
        )
        try:
            stored = await asyncio.wait_for(asyncio.shield(upload_task), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"[ResumeStorage] Upload timed out after {self.timeout}s: {public_id}")
            # The worker thread keeps running; drop whatever it stores
            upload_task.add_done_callback(lambda task: self._discard_late_upload(task, public_id))
            raise UploadFailed("Failed to upload Resume", "ResumeStorage")
        except UploadFailed as e:
            logger.error(f"[ResumeStorage] {e.message}")
            raise UploadFailed("Failed to upload Resume", "ResumeStorage")
        except Exception as e:
            logger.error(f"[ResumeStorage] Upload failed: {e}", exc_info=True)
            raise UploadFailed("Failed to upload Resume", "ResumeStorage") from e

        logger.info(f"[ResumeStorage] ✅ Upload complete: {stored.url}")
        return stored

    def _discard_late_upload(self, upload_task: asyncio.Future, public_id: str) -> None:
        if upload_task.cancelled() or upload_task.exception() is not None:
            return
        logger.warning(f"[ResumeStorage] Late upload finished, removing {public_id}")
        cleanup = asyncio.ensure_future(self.remove(public_id))
        self._cleanup_tasks.add(cleanup)
        cleanup.add_done_callback(self._cleanup_tasks.discard)

    async def remove(self, public_id: str) -> bool:
        """Delete a stored resume. Returns False instead of raising on failure."""
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self.client.storage.from_(self.bucket).remove, [public_id]),
                timeout=self.timeout,
            )
            logger.info(f"[ResumeStorage] Removed {public_id}")
            return True
        except Exception as e:
            logger.error(f"[ResumeStorage] Failed to remove {public_id}: {e}")
            return False
