"""
Local disk storage for profile pictures.

Files are written synchronously under the upload directory with generated
unique names and served back from a public URL path. Nothing is ever cleaned
up and no size limit is enforced.
"""

import structlog
from pathlib import Path
from typing import Optional
from uuid import uuid4

logger = structlog.get_logger(__name__)


class ProfilePictureStorage:
    """Writes uploaded pictures to a local directory."""

    def __init__(self, upload_dir: str, url_path: str = "/uploads"):
        """
        Initialize storage.

        Args:
            upload_dir: Directory receiving the files (created if missing)
            url_path: URL path the directory is served under
        """
        self.upload_dir = Path(upload_dir)
        self.url_path = "/" + url_path.strip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_filename(original_name: Optional[str]) -> str:
        """Unique filename keeping the original extension."""
        suffix = Path(original_name or "").suffix.lower()
        return f"profile-{uuid4().hex}{suffix}"

    def save(self, original_name: Optional[str], content: bytes) -> str:
        """
        Store one upload.

        Args:
            original_name: Client-supplied filename, only its extension is kept
            content: File bytes

        Returns:
            Public URL path of the stored file
        """
        filename = self.generate_filename(original_name)
        destination = self.upload_dir / filename

        with open(destination, "wb") as f:
            f.write(content)

        logger.info("profile_picture_stored", filename=filename, size_bytes=len(content))
        return f"{self.url_path}/{filename}"
