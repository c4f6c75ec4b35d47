"""Disk storage for uploaded character images and motion videos."""

import os
import time
import uuid
from dataclasses import dataclass

from fastapi import UploadFile

from motion_control.jobs.errors import UploadTooLargeError

_CHUNK_BYTES = 1024 * 1024


@dataclass
class StoredUpload:
    filename: str
    path: str


class UploadStore:
    """Writes each upload to base_dir under a fresh, collision-resistant name."""

    def __init__(self, base_dir: str, max_bytes: int = 500 * 1024 * 1024):
        self._base_dir = base_dir
        self._max_bytes = max_bytes

    @property
    def base_dir(self) -> str:
        return self._base_dir

    def ensure_dir(self) -> None:
        os.makedirs(self._base_dir, exist_ok=True)

    @staticmethod
    def make_filename(original: str) -> str:
        ext = os.path.splitext(os.path.basename(original or ""))[1].lower()
        if not ext[1:].isalnum():
            ext = ""
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"

    def get_path(self, filename: str) -> str:
        return os.path.join(self._base_dir, filename)

    def file_exists(self, filename: str) -> bool:
        return os.path.isfile(self.get_path(filename))

    async def save(self, upload: UploadFile) -> StoredUpload:
        """Stream an upload to disk. Raises UploadTooLargeError past the cap.

        Any failure mid-write removes the partial file.
        """
        self.ensure_dir()
        filename = self.make_filename(upload.filename)
        path = self.get_path(filename)

        total = 0
        try:
            with open(path, "wb") as dst:
                while True:
                    chunk = await upload.read(_CHUNK_BYTES)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > self._max_bytes:
                        raise UploadTooLargeError(self._max_bytes)
                    dst.write(chunk)
        except BaseException:
            if os.path.exists(path):
                os.remove(path)
            raise

        return StoredUpload(filename=filename, path=path)
