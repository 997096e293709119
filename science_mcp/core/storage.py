"""
Shared download directory for fetched PDFs
"""
from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class DownloadStore:
    """Flat directory holding every downloaded PDF.

    The directory is created lazily on first use and shared by all
    requests. Files are written under a unique ``.part`` name and moved
    into place with ``os.replace`` so readers never see a partial PDF.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def ensure(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    def path_for(self, filename: str) -> Path:
        return (self.ensure() / filename).resolve()

    def write_temporary(self, filename: str, data: bytes) -> Path:
        """Write bytes to a private temp file next to the final location."""
        temp_path = self.ensure() / f".{filename}.{uuid.uuid4().hex}.part"
        temp_path.write_bytes(data)
        return temp_path

    def commit(self, temp_path: Path, filename: str) -> Path:
        target = self.path_for(filename)
        os.replace(temp_path, target)
        return target

    @staticmethod
    def discard(temp_path: Path) -> None:
        Path(temp_path).unlink(missing_ok=True)

    def list_pdfs(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            str(path.resolve())
            for path in self.directory.iterdir()
            if path.is_file() and path.name.endswith(".pdf")
        )

    def cleanup(self) -> int:
        """Delete every file in the directory and return how many were removed."""
        if not self.directory.is_dir():
            return 0

        removed = 0
        for path in self.directory.iterdir():
            if not path.is_file():
                continue
            path.unlink(missing_ok=True)
            removed += 1

        logger.info("Cleaned up %d downloaded files", removed)
        return removed
