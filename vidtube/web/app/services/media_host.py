"""
Media Host Client

Stores uploaded thumbnails and video files in an S3-compatible bucket:
- Organized key structure per resource type
- Public URL references returned to the caller
- Video duration probing with FFprobe
"""
import os
import json
import asyncio
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import Settings

logger = logging.getLogger(__name__)


@dataclass
class MediaUpload:
    """Result of a successful upload to the media host"""
    url: str
    key: str
    resource_type: str
    duration: Optional[float] = None


class MediaHostClient:
    """Thin client for the S3 bucket that backs video and thumbnail storage"""

    def __init__(self, s3_client, bucket_name: str, public_base_url: str,
                 key_prefix: str = "", ffprobe_path: str = "ffprobe"):
        self.s3_client = s3_client
        self.bucket_name = bucket_name
        self.public_base_url = public_base_url.rstrip("/")
        self.key_prefix = key_prefix.strip("/")
        self.ffprobe_path = ffprobe_path

    @classmethod
    def from_settings(cls, settings: Settings) -> "MediaHostClient":
        config = Config(
            region_name=settings.S3_REGION,
            retries={
                'max_attempts': 3,
                'mode': 'adaptive'
            },
            max_pool_connections=50
        )

        client_kwargs = {"config": config}
        if settings.S3_ENDPOINT_URL:
            client_kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
        # Fall back to the default credential chain when no keys are configured
        if settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY:
            client_kwargs["aws_access_key_id"] = settings.S3_ACCESS_KEY_ID
            client_kwargs["aws_secret_access_key"] = settings.S3_SECRET_ACCESS_KEY

        return cls(
            boto3.client('s3', **client_kwargs),
            bucket_name=settings.S3_BUCKET_NAME,
            public_base_url=settings.MEDIA_PUBLIC_BASE_URL,
            key_prefix=settings.MEDIA_KEY_PREFIX,
            ffprobe_path=settings.FFPROBE_PATH,
        )

    @staticmethod
    def resource_type_for(content_type: Optional[str]) -> str:
        if content_type and content_type.startswith("video/"):
            return "video"
        if content_type and content_type.startswith("image/"):
            return "image"
        return "raw"

    def generate_key(self, resource_type: str, filename: str) -> str:
        """
        Structure: <prefix>/<resource_type>/<uuid>.<ext>
        """
        extension = os.path.splitext(filename)[1].lower()
        parts = [self.key_prefix, resource_type, f"{uuid.uuid4().hex}{extension}"]
        return "/".join(part for part in parts if part)

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_from_url(self, url: str) -> Optional[str]:
        base = f"{self.public_base_url}/"
        if not url or not url.startswith(base):
            return None
        return url[len(base):] or None

    async def upload(self, local_path: str) -> Optional[MediaUpload]:
        """
        Upload a local file. Returns None when the host rejects the upload.
        """
        if not local_path or not os.path.exists(local_path):
            return None

        content_type = mimetypes.guess_type(local_path)[0] or "application/octet-stream"
        resource_type = self.resource_type_for(content_type)
        key = self.generate_key(resource_type, local_path)

        try:
            await asyncio.to_thread(
                self.s3_client.upload_file,
                local_path,
                self.bucket_name,
                key,
                ExtraArgs={'ContentType': content_type}
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning("Upload of %s to media host failed: %s", local_path, e)
            return None

        duration = None
        if resource_type == "video":
            duration = await self.probe_duration(local_path)

        return MediaUpload(url=self.url_for(key), key=key, resource_type=resource_type, duration=duration)

    async def delete(self, remote_ref: str) -> Dict[str, str]:
        """
        Delete an object by its public URL. Returns {"result": "ok"} on success.
        """
        key = self.key_from_url(remote_ref)
        if key is None:
            return {"result": "not found"}

        try:
            await asyncio.to_thread(self.s3_client.delete_object, Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')
            logger.warning("Delete of %s on media host failed: %s", key, error_code)
            if error_code in ('404', 'NoSuchKey'):
                return {"result": "not found"}
            return {"result": "error"}
        except BotoCoreError as e:
            logger.warning("Delete of %s on media host failed: %s", key, e)
            return {"result": "error"}

        return {"result": "ok"}

    async def probe_duration(self, file_path: str) -> Optional[float]:
        """Read the container duration with FFprobe, None when unavailable."""
        cmd = [
            self.ffprobe_path,
            '-v', 'quiet',
            '-print_format', 'json',
            '-show_format',
            file_path
        ]

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            stdout, _ = await process.communicate()
        except OSError as e:
            logger.warning("FFprobe unavailable: %s", e)
            return None

        if process.returncode != 0:
            return None

        try:
            probe_data = json.loads(stdout.decode())
            return float(probe_data['format']['duration'])
        except (ValueError, KeyError, TypeError):
            return None
