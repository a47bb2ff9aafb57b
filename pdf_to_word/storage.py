"""Local file storage for converted outputs with best-effort retention."""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from .processing.models import StoredFile


logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".rtf": "application/rtf",
}


def content_type_for(filename: str) -> str:
    """Return the download content type for ``filename``."""
    return CONTENT_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")


class LocalFileStorage:
    """Writes files into a directory and hands back URL locators.

    Each stored file is scheduled for deletion after ``retention_seconds``
    on a daemon timer. Deletion is best-effort: files left behind by a
    process restart are not tracked.
    """

    def __init__(
        self,
        root: Union[str, Path],
        url_prefix: Optional[str] = "/uploads",
        retention_seconds: Optional[float] = 3600
    ):
        """Initialize the storage.

        Args:
            root: Directory that holds stored files.
            url_prefix: Prefix for returned locators. ``None`` returns
                filesystem paths instead of URLs.
            retention_seconds: Delay before deletion, ``None`` to keep files.
        """
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip('/') if url_prefix else None
        self.retention_seconds = retention_seconds
        self._timers: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    def resolve(self, filename: str) -> Path:
        """Map a stored filename to its path.

        Raises:
            ValueError: If the name could escape the storage directory.
        """
        if not filename or '..' in filename or '/' in filename or '\\' in filename:
            raise ValueError(f"Invalid filename: {filename!r}")
        return self.root / filename

    def put(self, data: bytes, filename: str) -> StoredFile:
        """Store ``data`` under ``filename``.

        Args:
            data: File contents.
            filename: Target filename, unique per request.

        Returns:
            StoredFile with its locator and size.
        """
        path = self.resolve(filename)
        self.root.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

        locator = f"{self.url_prefix}/{filename}" if self.url_prefix else str(path)
        logger.info(f"Stored {filename} ({len(data)} bytes)")

        if self.retention_seconds is not None:
            self.delete_after(filename, self.retention_seconds)

        return StoredFile(filename=filename, locator=locator, path=path, size_bytes=len(data))

    def delete(self, filename: str) -> bool:
        """Remove a stored file. Returns False when it was already gone."""
        with self._lock:
            timer = self._timers.pop(filename, None)
        if timer is not None:
            timer.cancel()

        path = self.resolve(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug(f"Deleted {filename}")
        return True

    def _expire(self, filename: str) -> None:
        with self._lock:
            self._timers.pop(filename, None)
        try:
            self.resolve(filename).unlink()
            logger.debug(f"Retention expired, deleted {filename}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to clean up {filename}: {e}")

    def delete_after(self, filename: str, seconds: float) -> None:
        """Schedule best-effort deletion of ``filename``."""
        timer = threading.Timer(seconds, self._expire, args=(filename,))
        timer.daemon = True
        with self._lock:
            previous = self._timers.pop(filename, None)
            self._timers[filename] = timer
        if previous is not None:
            previous.cancel()
        timer.start()

    def shutdown(self) -> None:
        """Cancel pending deletions without removing files."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
