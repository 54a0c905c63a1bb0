"""Local-disk storage for uploaded profile pictures.

Files are written under ``upload_dir`` and served by the app's static mount at
``url_prefix``. The returned URL is what gets recorded on the account.
Writes run in a worker thread so the event loop is never blocked on disk.
"""

import asyncio
from pathlib import Path

from shared.logging import get_logger

log = get_logger(__name__)


class LocalFileStorage:
    def __init__(self, upload_dir: str, url_prefix: str = "/uploads") -> None:
        self._root = Path(upload_dir)
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    async def save(self, filename: str, data: bytes) -> str:
        """Write *data* as *filename* and return its public URL."""
        self.ensure_root()
        path = self._root / Path(filename).name
        await asyncio.to_thread(path.write_bytes, data)
        log.info("file_stored", filename=path.name, size=len(data))
        return f"{self._url_prefix}/{path.name}"
