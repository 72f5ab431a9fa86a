"""
JSON document store.

Makes a storage path behave like a durable array-valued document: the whole
document is read and rewritten on every access, there are no partial updates.
"""

import json
import logging
from typing import Any, List

from src.config.constants import JSON_INDENT
from src.core.errors import InvalidCollectionError, StorageReadError, StorageWriteError
from src.core.storage.interface import StorageInterface


logger = logging.getLogger(__name__)


def serialize_document(value: Any) -> bytes:
    """
    Serialize a document the way it is stored on disk.

    Indented with two spaces, keys kept in the order given and non-ASCII
    characters written verbatim.

    Raises:
        InvalidCollectionError: If value is not JSON serializable
    """
    try:
        return json.dumps(value, indent=JSON_INDENT, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise InvalidCollectionError(f"Value is not JSON serializable: {e}")


class JSONStore:
    """Read/write whole JSON documents through a StorageInterface"""

    def __init__(self, storage: StorageInterface):
        self._storage = storage

    @property
    def storage(self) -> StorageInterface:
        return self._storage

    async def ensure(self, path: str, default_value: Any = None) -> bool:
        """
        Create the document with default_value if it does not exist yet.

        Existing content is never inspected nor overwritten, so calling this
        repeatedly is safe.

        Args:
            path: Storage path of the document
            default_value: Value written when the file is missing (empty list if None)

        Returns:
            True if the file was created by this call
        """
        if default_value is None:
            default_value = []

        await self._storage.ensure_root()
        if await self._storage.exists(path):
            return False

        await self.write(path, default_value)
        logger.info(f"Created data file {self._storage.get_url(path)}")
        return True

    async def read(self, path: str) -> Any:
        """
        Read and parse the document at path.

        Raises:
            StorageReadError: If the file is missing, unreadable or not valid JSON
        """
        try:
            raw = await self._storage.get_bytes(path)
        except (OSError, ValueError) as e:
            raise StorageReadError(f"Could not read {path}: {e}", path=path)

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageReadError(f"Invalid JSON in {path}: {e}", path=path)

    async def read_collection(self, path: str) -> List[Any]:
        """
        Read the document at path and require it to be an array.

        Raises:
            StorageReadError: If the file cannot be read or parsed
            InvalidCollectionError: If the document is not an array
        """
        value = await self.read(path)
        if not isinstance(value, list):
            raise InvalidCollectionError(
                f"Expected a JSON array in {path}, got {type(value).__name__}",
                path=path,
            )
        return value

    async def write(self, path: str, value: Any) -> bytes:
        """
        Serialize value and overwrite the document at path in full.

        Returns:
            The exact bytes written

        Raises:
            InvalidCollectionError: If value is not JSON serializable
            StorageWriteError: If the file could not be written
        """
        payload = serialize_document(value)
        try:
            await self._storage.save_bytes(payload, path)
        except (OSError, ValueError) as e:
            raise StorageWriteError(f"Could not write {path}: {e}", path=path)
        return payload
