from abc import ABC, abstractmethod
import asyncio
from typing import Dict, List


class StorageInterface(ABC):
    """Abstract interface for all storage operations"""

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}

    @abstractmethod
    async def save_bytes(self, data: bytes, path: str) -> str:
        """
        Save binary data to storage, replacing any existing content

        Args:
            data: Binary data to save
            path: Storage path relative to the backend root (e.g., "commands.json")

        Returns:
            URL to access the saved data
        """
        pass

    @abstractmethod
    async def get_bytes(self, path: str) -> bytes:
        """
        Get binary data from storage

        Args:
            path: Storage path to retrieve

        Returns:
            Binary data

        Raises:
            FileNotFoundError: If nothing is stored at path
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """
        Check whether an object is stored at path

        Args:
            path: Storage path to check

        Returns:
            True if the object exists
        """
        pass

    @abstractmethod
    async def copy(self, source_path: str, target_path: str) -> None:
        """
        Copy an object, overwriting the target

        Args:
            source_path: Path to copy from
            target_path: Path to copy to

        Raises:
            FileNotFoundError: If source_path does not exist
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> None:
        """
        Delete an object

        Args:
            path: Storage path to delete

        Raises:
            FileNotFoundError: If nothing is stored at path
        """
        pass

    @abstractmethod
    async def list_files(self, prefix: str = "") -> List[str]:
        """
        List files in storage with given prefix

        Args:
            prefix: Path prefix to list

        Returns:
            List of file paths
        """
        pass

    @abstractmethod
    async def ensure_root(self) -> None:
        """Create the backend root (directory, bucket, ...) if it is missing"""
        pass

    @abstractmethod
    def get_url(self, path: str) -> str:
        """
        Get a URL or filesystem location for a stored object

        Args:
            path: Storage path

        Returns:
            Location string for the object
        """
        pass

    def lock_for(self, path: str) -> asyncio.Lock:
        """
        Get the lock serializing read-modify-write cycles on one path.

        The same lock is returned for every caller of this storage instance,
        so concurrent requests in one process cannot lose each other's updates.

        Args:
            path: Storage path the caller is about to mutate

        Returns:
            asyncio.Lock dedicated to path
        """
        lock = self._locks.get(path)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[path] = lock
        return lock
