from typing import List

import obstore as obs
from obstore.store import MemoryStore

from src.core.storage.interface import StorageInterface


class MemoryStorage(StorageInterface):
    """
    In-memory implementation of StorageInterface for development and tests
    (or environments where file system access is not available)
    """

    def __init__(self, base_url: str = "memory://"):
        """
        Initialize in-memory storage

        Args:
            base_url: Base URL prefix for virtual URLs
        """
        super().__init__()
        self._store = MemoryStore()
        self._base_url: str = base_url.rstrip("/")

    async def save_bytes(self, data: bytes, path: str) -> str:
        """Save binary data to in-memory storage"""
        await obs.put_async(self._store, path, data)
        return self.get_url(path)

    async def get_bytes(self, path: str) -> bytes:
        """Get binary data from in-memory storage"""
        try:
            result = await obs.get_async(self._store, path)
            return bytes(await result.bytes_async())
        except Exception:
            raise FileNotFoundError(f"Path not found in memory storage: {path}")

    async def exists(self, path: str) -> bool:
        try:
            await self.get_bytes(path)
            return True
        except FileNotFoundError:
            return False

    async def copy(self, source_path: str, target_path: str) -> None:
        data = await self.get_bytes(source_path)
        await self.save_bytes(data, target_path)

    async def delete(self, path: str) -> None:
        if not await self.exists(path):
            raise FileNotFoundError(f"Path not found in memory storage: {path}")
        await obs.delete_async(self._store, path)

    async def list_files(self, prefix: str = "") -> List[str]:
        """List files in in-memory storage with given prefix"""
        objects = self._store.list()
        paths = [obj["path"] for obj in await objects.collect_async()]
        return sorted(path for path in paths if path.startswith(prefix))

    async def ensure_root(self) -> None:
        """Nothing to create for an in-memory store"""
        return None

    def get_url(self, path: str) -> str:
        """Get URL for a stored object (virtual URL for in-memory storage)"""
        return f"{self._base_url}/{path}"
