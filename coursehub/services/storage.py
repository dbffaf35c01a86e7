import logging
import os
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from coursehub.core.errors import InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    url: str
    file_name: str
    content_type: str


class FileStorage:
    """Disk-backed storage, one file per upload."""

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads", allowed_extensions=None):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.allowed_extensions = {e.lower() for e in (allowed_extensions or ())}

    def _get_file_extension(self, filename: str) -> str:
        return os.path.splitext(filename)[1].lower()

    def is_allowed_file(self, filename: str) -> bool:
        if not self.allowed_extensions:
            return True
        return self._get_file_extension(filename) in self.allowed_extensions

    def path_for(self, url: str) -> Path:
        # only the basename is trusted, the rest of the url is ignored
        return self.upload_dir / Path(url).name

    def save(self, upload: UploadFile) -> StoredFile:
        if upload is None or not upload.filename:
            raise InvalidInput("Please upload a file")
        if not self.is_allowed_file(upload.filename):
            raise InvalidInput("File type not allowed")

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        unique_filename = f"{uuid.uuid4().hex}{self._get_file_extension(upload.filename)}"
        file_path = self.upload_dir / unique_filename

        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(upload.file, buffer)

        logger.debug("stored %s as %s", upload.filename, file_path)
        return StoredFile(
            url=f"{self.url_prefix}/{unique_filename}",
            file_name=upload.filename,
            content_type=upload.content_type or "application/octet-stream",
        )

    def delete(self, url: str | None) -> bool:
        """Best-effort removal. Returns True if a file was actually removed."""
        if not url:
            return False
        file_path = self.path_for(url)
        try:
            file_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning("could not delete %s: %s", file_path, exc)
            return False
        return True
