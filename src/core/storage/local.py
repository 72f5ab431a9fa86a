import logging
from pathlib import Path
from typing import List, Optional

import obstore as obs
from obstore.exceptions import BaseError, NotFoundError
from obstore.store import LocalStore

from src.core.storage.interface import StorageInterface

logger = logging.getLogger(__name__)


class LocalFileStorage(StorageInterface):
    """
    Filesystem implementation of StorageInterface using obstore LocalStore.

    Disk I/O runs on obstore's own runtime, off the event loop. Puts go
    through a staging file and a rename.
    """

    def __init__(self, root: str):
        """
        Initialize local storage

        Args:
            root: Directory every storage path is resolved against
        """
        super().__init__()
        self._root = Path(root).expanduser().resolve()
        # Opened on first use; constructing the storage never touches disk
        self._store: Optional[LocalStore] = None

    @property
    def root(self) -> Path:
        """Get the root directory"""
        return self._root

    @property
    def store(self) -> LocalStore:
        """Get the obstore LocalStore, creating the root directory if needed"""
        return self._open_store()

    def _open_store(self) -> LocalStore:
        if self._store is None:
            try:
                self._store = LocalStore(prefix=str(self._root), mkdir=True)
            except (BaseError, ValueError) as e:
                raise OSError(f"Cannot open storage root {self._root}: {e}") from e
        return self._store

    def _key(self, path: str) -> str:
        """Normalize a storage path, refusing anything that escapes the root"""
        if not path:
            raise ValueError("Storage path must not be empty")
        resolved = (self._root / path).resolve()
        if self._root not in resolved.parents:
            raise ValueError(f"Path escapes storage root: {path}")
        return resolved.relative_to(self._root).as_posix()

    async def save_bytes(self, data: bytes, path: str) -> str:
        """Overwrite the file at path, creating parent directories as needed"""
        key = self._key(path)
        try:
            await obs.put_async(self.store, key, data)
        except BaseError as e:
            raise OSError(f"Failed to write {key}: {e}") from e
        return self.get_url(key)

    async def get_bytes(self, path: str) -> bytes:
        """Read the whole file at path"""
        key = self._key(path)
        try:
            result = await obs.get_async(self.store, key)
            return bytes(await result.bytes_async())
        except NotFoundError as e:
            raise FileNotFoundError(f"Path not found in local storage: {key}") from e
        except BaseError as e:
            raise OSError(f"Failed to read {key}: {e}") from e

    async def exists(self, path: str) -> bool:
        key = self._key(path)
        try:
            await obs.head_async(self.store, key)
            return True
        except NotFoundError:
            return False
        except BaseError as e:
            raise OSError(f"Failed to stat {key}: {e}") from e

    async def copy(self, source_path: str, target_path: str) -> None:
        source = self._key(source_path)
        target = self._key(target_path)
        try:
            await obs.copy_async(self.store, source, target, overwrite=True)
        except NotFoundError as e:
            raise FileNotFoundError(f"Path not found in local storage: {source}") from e
        except BaseError as e:
            raise OSError(f"Failed to copy {source} to {target}: {e}") from e

    async def delete(self, path: str) -> None:
        key = self._key(path)
        if not await self.exists(key):
            raise FileNotFoundError(f"Path not found in local storage: {key}")
        try:
            await obs.delete_async(self.store, key)
        except BaseError as e:
            raise OSError(f"Failed to delete {key}: {e}") from e

    async def list_files(self, prefix: str = "") -> List[str]:
        """List files under the root whose relative path starts with prefix"""
        if self._store is None and not self._root.is_dir():
            return []
        objects = obs.list(self.store)
        paths = [obj["path"] for obj in await objects.collect_async()]
        return sorted(path for path in paths if path.startswith(prefix))

    async def ensure_root(self) -> None:
        """Create the root directory (through LocalStore mkdir) if it is missing"""
        self._open_store()
        logger.debug(f"Storage root ensured: {self._root}")

    def get_url(self, path: str) -> str:
        """Absolute filesystem location of path"""
        return str(self._root / self._key(path))
