"""
Object storage for uploaded submission files.

Two backends:
- local (default): files under PORTAL_STORAGE_PATH, served from PORTAL_PUBLIC_BASE_URL
- s3: boto3 bucket PORTAL_S3_BUCKET with public object URLs
"""
import io
import logging
import os
from typing import BinaryIO, Iterable, List, Optional, Tuple, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import UploadError

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

STORAGE_BACKEND = os.getenv("PORTAL_STORAGE_BACKEND", "local")
LOCAL_STORAGE_PATH = os.getenv("PORTAL_STORAGE_PATH", "uploads")
PUBLIC_BASE_URL = os.getenv("PORTAL_PUBLIC_BASE_URL", "http://localhost:8001/files")
S3_BUCKET = os.getenv("PORTAL_S3_BUCKET", "submissions")
S3_REGION = os.getenv("PORTAL_S3_REGION", "us-east-1")


class ObjectStorage:
    """Upload, list and remove objects by key."""

    def __init__(
        self,
        backend: Optional[str] = None,
        base_path: Optional[str] = None,
        public_base_url: Optional[str] = None,
        bucket: Optional[str] = None,
    ):
        self.backend = backend or STORAGE_BACKEND
        self.base_path = str(base_path or LOCAL_STORAGE_PATH)
        self.public_base_url = (public_base_url or PUBLIC_BASE_URL).rstrip("/")
        self.bucket = bucket or S3_BUCKET
        self._s3 = None

    def _s3_client(self):
        if self._s3 is None:
            self._s3 = boto3.client("s3", region_name=S3_REGION)
        return self._s3

    def _local_path(self, key: str) -> str:
        return os.path.join(self.base_path, key)

    def public_url(self, key: str) -> str:
        if self.backend == "s3":
            return f"https://{self.bucket}.s3.{S3_REGION}.amazonaws.com/{key}"
        return f"{self.public_base_url}/{key}"

    def upload(self, key: str, content: Union[bytes, BinaryIO]) -> Tuple[str, str]:
        """
        Store content under key.

        Returns (key, public_url). Raises UploadError if the write fails.
        """
        file = io.BytesIO(content) if isinstance(content, (bytes, bytearray)) else content
        try:
            if self.backend == "s3":
                self._s3_client().upload_fileobj(file, self.bucket, key)
            else:
                path = self._local_path(key)
                os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
                with open(path, "wb") as f:
                    file.seek(0)
                    f.write(file.read())
        except (OSError, BotoCoreError, ClientError) as e:
            logger.error(f"Upload of {key} to {self.backend} storage failed: {e}")
            raise UploadError(f"Failed to upload {key}") from e

        logger.info(f"Uploaded {key} to {self.backend} storage")
        return key, self.public_url(key)

    def list(self, prefix: str = "") -> List[str]:
        """Keys starting with prefix."""
        if self.backend == "s3":
            response = self._s3_client().list_objects_v2(Bucket=self.bucket, Prefix=prefix)
            return [obj["Key"] for obj in response.get("Contents", [])]

        if not os.path.isdir(self.base_path):
            return []
        return sorted(name for name in os.listdir(self.base_path) if name.startswith(prefix))

    def remove(self, keys: Iterable[str]) -> None:
        """Delete objects; missing keys are ignored."""
        for key in keys:
            if self.backend == "s3":
                self._s3_client().delete_object(Bucket=self.bucket, Key=key)
            else:
                path = self._local_path(key)
                if os.path.exists(path):
                    os.remove(path)


def appeal_storage_key(org: str, file_name: str, timestamp_ms: int) -> str:
    """<ORG>_appeal_<timestamp>.<ext>"""
    ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else "bin"
    return f"{org}_appeal_{timestamp_ms}.{ext}"


def get_storage() -> ObjectStorage:
    """Dependency for FastAPI - storage configured from the environment."""
    return ObjectStorage()
