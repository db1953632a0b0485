"""Publish asset directories under hashed public URLs."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

BUNDLED_ASSETS_DIR = Path(__file__).resolve().parent / "static"


class AssetPublisher:
    """Expose local asset directories as ``<base_url>/<hash>/...`` URLs.

    The hash is derived from the directory's absolute path, so a directory keeps
    its URL across runs. ``locate`` maps a request path back to a file.
    """

    def __init__(self, base_url: str = "/assets", *, hash_length: int = 8) -> None:
        self._base_url = base_url.rstrip("/")
        self._hash_length = hash_length
        self._published: dict[str, Path] = {}

    @property
    def base_url(self) -> str:
        return self._base_url

    def publish(self, source: Path) -> str:
        """Publish ``source`` and return its public base URL."""
        directory = source.resolve()
        if not directory.is_dir():
            raise FileNotFoundError(directory)
        digest = hashlib.sha256(str(directory).encode("utf-8")).hexdigest()[: self._hash_length]
        if digest not in self._published:
            logger.debug("Published %s as %s/%s", directory, self._base_url, digest)
        self._published[digest] = directory
        return f"{self._base_url}/{digest}"

    def resolve(self, path: str, source: Path = BUNDLED_ASSETS_DIR) -> str:
        """Return the public URL of ``path`` inside the published ``source``."""
        if path.startswith(("http://", "https://", "//")):
            return path
        return f"{self.publish(source)}/{path.lstrip('/')}"

    def locate(self, url_path: str) -> Path | None:
        """Map a request path under ``base_url`` to a published file."""
        prefix = f"{self._base_url}/"
        if not url_path.startswith(prefix):
            return None
        parts = PurePosixPath(url_path[len(prefix):]).parts
        if len(parts) < 2 or ".." in parts:
            return None
        directory = self._published.get(parts[0])
        if directory is None:
            return None
        candidate = directory.joinpath(*parts[1:]).resolve()
        try:
            candidate.relative_to(directory)
        except ValueError:
            return None
        return candidate if candidate.is_file() else None
