"""
Server inventory persistence.

The collection is replaced wholesale by the client; the backend only checks
its shape and the unique-id invariant.
"""

import logging
import random
import string
import time
from collections import Counter
from typing import Any, Dict, List, Optional

from src.core.errors import (
    InvalidCollectionError,
    StorageWriteError,
    ValidationError,
)
from src.core.storage.json_store import JSONStore
from src.models.types import (
    Ambiente,
    Location,
    ServerSortKey,
    ServerStatus,
    SortDirection,
)


logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("servico", "hostname", "ip_address", "projeto", "observacao")

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_server_id() -> str:
    """Base-36 millisecond timestamp followed by a random base-36 suffix"""
    suffix = "".join(random.choice(_BASE36) for _ in range(11))
    return _to_base36(int(time.time() * 1000)) + suffix


def validate_server_collection(payload: Any) -> List[Dict[str, Any]]:
    """
    Check a client-supplied collection before it replaces the stored one.

    Records missing an id get a generated one; ids must be unique.

    Returns:
        The collection with every record carrying a string id

    Raises:
        ValidationError: If payload is not a list of objects or ids repeat
    """
    if not isinstance(payload, list):
        raise ValidationError("Server collection must be a JSON array")

    seen = set()
    servers = []
    for position, record in enumerate(payload):
        if not isinstance(record, dict):
            raise ValidationError(f"Server at position {position} is not an object")

        server_id = record.get("id")
        if server_id in (None, ""):
            server_id = generate_server_id()
            record = {"id": server_id, **{k: v for k, v in record.items() if k != "id"}}
        server_id = str(server_id)
        if server_id in seen:
            raise ValidationError(f"Duplicate server id: {server_id}")
        seen.add(server_id)
        servers.append({**record, "id": server_id})

    return servers


def filter_servers(
    servers: List[Dict[str, Any]],
    search: Optional[str] = None,
    status: Optional[ServerStatus] = None,
    projeto: Optional[str] = None,
    ambiente: Optional[Ambiente] = None,
    location: Optional[Location] = None,
    sort_by: Optional[ServerSortKey] = None,
    direction: SortDirection = SortDirection.ASC,
) -> List[Dict[str, Any]]:
    """
    Presentation-side filtering and ordering; never persisted.

    Sorting compares the lower-cased string form of the field.
    """
    result = list(servers)

    if search:
        needle = search.lower()
        result = [
            server
            for server in result
            if any(needle in str(server.get(f) or "").lower() for f in SEARCH_FIELDS)
        ]
    if status is not None:
        result = [
            s for s in result if str(s.get("status", "")).lower() == status.value.lower()
        ]
    if projeto:
        result = [s for s in result if s.get("projeto") == projeto]
    if ambiente is not None:
        result = [s for s in result if s.get("ambiente") == ambiente.value]
    if location is not None:
        result = [s for s in result if s.get("location") == location.value]

    if sort_by is not None:
        result.sort(
            key=lambda s: str(s.get(sort_by.value) or "").lower(),
            reverse=direction is SortDirection.DESC,
        )

    return result


def compute_stats(servers: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Totals for the dashboard cards plus the distinct project list"""
    statuses = Counter(s.get("status") for s in servers)
    ambientes = Counter(s.get("ambiente") for s in servers if s.get("ambiente"))
    projects: List[str] = []
    for server in servers:
        projeto = server.get("projeto")
        if projeto and projeto not in projects:
            projects.append(projeto)

    return {
        "total": len(servers),
        "active": statuses.get(ServerStatus.ACTIVE.value, 0),
        "inactive": statuses.get(ServerStatus.INACTIVE.value, 0),
        "by_ambiente": dict(ambientes),
        "projects": projects,
    }


class ServerRepository:
    """Whole-collection reads and replaces of the server inventory"""

    def __init__(self, store: JSONStore, path: str):
        self._store = store
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def list_servers(self) -> List[Dict[str, Any]]:
        """
        Raises:
            StorageReadError: If the file cannot be read or parsed
            InvalidCollectionError: If the file does not hold an array
        """
        servers = await self._store.read_collection(self._path)
        logger.debug(f"Read {len(servers)} servers from {self._path}")
        return servers

    async def replace_servers(self, payload: Any) -> List[Dict[str, Any]]:
        """
        Overwrite the inventory with a new full collection.

        Raises:
            ValidationError: If payload is not a valid server collection
            StorageWriteError: If the file could not be written
        """
        servers = validate_server_collection(payload)

        async with self._store.storage.lock_for(self._path):
            try:
                await self._store.write(self._path, servers)
            except InvalidCollectionError as e:
                raise StorageWriteError(e.message, path=self._path)

        logger.info(f"Saved {len(servers)} servers to {self._path}")
        return servers
