"""
Stockage objet des images (système de fichiers local).

Les blobs sont rangés sous MEDIA_ROOT et servis publiquement sous
MEDIA_BASE_URL. Les chemins sont relatifs à la racine.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Tuple

from fastapi import Depends

from blog_api.core.config import Settings, get_settings
from blog_api.core.errors import StoreFailure, UploadFailure

logger = logging.getLogger(__name__)


class LocalObjectStore:
    def __init__(self, root, base_url: str):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if target == self.root or self.root not in target.parents:
            raise UploadFailure(f"Invalid storage path: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise UploadFailure(f"Could not store {path}: {e}")
        logger.info("Stored blob %s (%s, %d bytes)", path, content_type, len(data))

    def remove(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink()
        except OSError as e:
            raise StoreFailure(f"Could not remove {path}: {e}")
        logger.info("Removed blob %s", path)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def path_from_url(self, url: str) -> Optional[str]:
        """Chemin du blob derrière une URL publique, None si l'URL est externe"""
        prefix = self.base_url + "/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    def list_blobs(self) -> Iterator[Tuple[str, datetime]]:
        if not self.root.exists():
            return
        for file in self.root.rglob("*"):
            if file.is_file():
                modified = datetime.fromtimestamp(file.stat().st_mtime, tz=timezone.utc)
                yield file.relative_to(self.root).as_posix(), modified


def get_object_store(config: Settings = Depends(get_settings)) -> LocalObjectStore:
    """Dépendance stockage objet"""
    return LocalObjectStore(config.MEDIA_ROOT, config.MEDIA_BASE_URL)
