"""
Media side effects around video and thumbnail mutations.

Wraps the media host client so that a rejected upload or delete surfaces as
an API error, and so that staged local files never outlive the request.
"""
import os
import uuid
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiofiles
from fastapi import UploadFile

from ..errors import ExternalDeleteFailed, UploadFailed
from .media_host import MediaUpload

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def remove_local_file(path: Optional[str]) -> None:
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove staged file %s: %s", path, e)


class MediaService:
    """Uploads and deletes media through the host, cleaning up local files."""

    def __init__(self, host, temp_dir: str):
        self.host = host
        self.temp_dir = temp_dir

    @asynccontextmanager
    async def stage_upload(self, upload: Optional[UploadFile]) -> AsyncIterator[Optional[str]]:
        """
        Write a client-supplied file to a temporary path for the duration of the block.

        Yields None when no file was sent. The staged file is removed on exit
        whether the block succeeds or raises.
        """
        if upload is None or not upload.filename:
            yield None
            return

        os.makedirs(self.temp_dir, exist_ok=True)
        extension = os.path.splitext(upload.filename)[1].lower()
        path = os.path.join(self.temp_dir, f"{uuid.uuid4().hex}{extension}")

        try:
            async with aiofiles.open(path, 'wb') as out_file:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    await out_file.write(chunk)
            yield path
        finally:
            remove_local_file(path)

    async def upload(self, local_path: str, label: str) -> MediaUpload:
        """Upload a staged file; the local copy is removed afterwards."""
        try:
            result = await self.host.upload(local_path)
        finally:
            remove_local_file(local_path)

        if result is None or not result.url:
            logger.warning("Media host rejected %s upload", label)
            raise UploadFailed(f"Error while uploading {label}")
        return result

    async def delete(self, remote_ref: str, label: str) -> None:
        result = await self.host.delete(remote_ref)
        if not result or result.get("result") != "ok":
            logger.warning("Media host could not delete %s %s: %s", label, remote_ref, result)
            raise ExternalDeleteFailed(f"Error while deleting {label}")
