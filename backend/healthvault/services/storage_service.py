"""
File storage for uploaded records: local disk or Google Cloud Storage.
"""

import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO

from healthvault.core.config import Settings
from healthvault.utils.file_utils import ensure_upload_dir, generate_unique_filename

logger = logging.getLogger(__name__)

SIGNED_URL_TTL = timedelta(hours=1)


class StorageService:
    """Saves, reads and deletes uploaded files."""

    def __init__(self, settings: Settings):
        """
        Initialize storage service.

        Args:
            settings: Application settings; ``storage_backend`` picks the mode
        """
        self.settings = settings
        self.mode = settings.storage_backend.lower()
        self.bucket_name = settings.gcs_bucket_name
        self.client = None
        self.bucket = None

        if self.mode == "gcs":
            self._init_gcs()
        elif self.mode == "local":
            self.root = Path(settings.upload_dir).resolve()
            ensure_upload_dir(str(self.root))
        else:
            raise ValueError(f"Unknown storage backend: {settings.storage_backend}")

    def _init_gcs(self) -> None:
        """Initialize Google Cloud Storage with explicit credentials."""
        from google.cloud import storage
        from google.oauth2 import service_account

        try:
            if not self.bucket_name:
                raise ValueError("GCS_BUCKET_NAME not configured in .env")

            credentials_path = self.settings.google_application_credentials
            if not credentials_path:
                raise ValueError(
                    "GOOGLE_APPLICATION_CREDENTIALS not configured in .env"
                )

            if not os.path.exists(credentials_path):
                raise FileNotFoundError(
                    f"Service account file not found at: {credentials_path}"
                )

            credentials = service_account.Credentials.from_service_account_file(
                credentials_path,
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )
            self.client = storage.Client(
                credentials=credentials, project=self.settings.google_cloud_project
            )
            self.bucket = self.client.bucket(self.bucket_name)

            if not self.bucket.exists():
                raise ValueError(f"Bucket '{self.bucket_name}' does not exist")

            logger.info("Google Cloud Storage initialized: %s", self.bucket_name)
        except Exception as e:
            raise RuntimeError(f"Failed to initialize Google Cloud Storage: {e}")

    def _local_path(self, file_path: str) -> Path:
        """Resolve a stored path, refusing anything outside the upload root."""
        path = (self.root / file_path).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Path escapes upload directory: {file_path}")
        return path

    async def save_file(
        self, file_content: BinaryIO, original_filename: str, folder: str = "records"
    ) -> dict:
        """
        Save an uploaded file under a generated unique name.

        Args:
            file_content: File content as binary stream
            original_filename: Original name of the file
            folder: Subfolder to organize files (one per user)

        Returns:
            Dictionary with ``success`` and, on success, ``file_path``
        """
        file_path = f"{folder}/{generate_unique_filename(original_filename)}"

        try:
            content = file_content.read()
            if self.mode == "gcs":
                self.bucket.blob(file_path).upload_from_string(content)
            else:
                target = self._local_path(file_path)
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(content)
        except Exception as e:
            logger.error(f"Failed to store {original_filename}: {e}")
            return {"success": False, "error": str(e)}

        return {
            "success": True,
            "storage_mode": self.mode,
            "file_path": file_path,
            "original_filename": original_filename,
            "size": len(content),
        }

    async def delete_file(self, file_path: str) -> bool:
        """Delete a stored file. Returns True if something was deleted."""
        try:
            if self.mode == "gcs":
                blob = self.bucket.blob(file_path)
                if blob.exists():
                    blob.delete()
                    return True
                return False
            path = self._local_path(file_path)
            if path.exists():
                path.unlink()
                return True
            return False
        except Exception as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

    def local_path(self, file_path: str) -> Path:
        """Filesystem path of a locally stored file."""
        return self._local_path(file_path)

    def get_signed_url(self, file_path: str) -> str:
        """Short-lived v4 signed URL for a GCS object."""
        blob = self.bucket.blob(file_path)
        return blob.generate_signed_url(
            version="v4", expiration=SIGNED_URL_TTL, method="GET"
        )
