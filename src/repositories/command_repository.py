"""
Command catalog persistence.

Every mutation reads the whole collection, changes it in memory and commits
it back through the DurableCollectionWriter while holding the path lock.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from src.core.errors import (
    InvalidCollectionError,
    NotFoundError,
    StorageError,
    StorageWriteError,
    ValidationError,
)
from src.core.storage.durable_writer import DurableCollectionWriter
from src.core.storage.json_store import JSONStore
from src.models.types import CommandSort


logger = logging.getLogger(__name__)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def generate_command_id(existing_ids: Iterable[str], now_ms: Optional[int] = None) -> str:
    """
    Millisecond timestamp id, bumped until it does not collide.

    Args:
        existing_ids: Ids already present in the collection
        now_ms: Override for the current time in milliseconds
    """
    taken = set(existing_ids)
    candidate = now_ms if now_ms is not None else int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def _require_fields(command: Optional[str], description: Optional[str]) -> None:
    if not command or not description:
        raise ValidationError("Command and description are required")


def filter_commands(
    commands: List[Dict[str, Any]],
    search: Optional[str] = None,
    sort: Optional[CommandSort] = None,
) -> List[Dict[str, Any]]:
    """
    Presentation-side search and ordering; never persisted.

    Args:
        commands: Collection as stored
        search: Case-insensitive substring matched on command and description
        sort: newest/oldest by createdAt, az/za by command text

    Returns:
        New list, the input is not modified
    """
    result = list(commands)
    if search:
        needle = search.lower()
        result = [
            cmd
            for cmd in result
            if needle in str(cmd.get("command", "")).lower()
            or needle in str(cmd.get("description", "")).lower()
        ]

    if sort is CommandSort.NEWEST:
        result.sort(key=lambda cmd: str(cmd.get("createdAt", "")), reverse=True)
    elif sort is CommandSort.OLDEST:
        result.sort(key=lambda cmd: str(cmd.get("createdAt", "")))
    elif sort is CommandSort.AZ:
        result.sort(key=lambda cmd: str(cmd.get("command", "")).lower())
    elif sort is CommandSort.ZA:
        result.sort(key=lambda cmd: str(cmd.get("command", "")).lower(), reverse=True)

    return result


class CommandRepository:
    """CRUD over the command collection file"""

    def __init__(self, store: JSONStore, path: str):
        self._store = store
        self._path = path
        self._writer = DurableCollectionWriter(store, path)

    @property
    def path(self) -> str:
        return self._path

    @property
    def writer(self) -> DurableCollectionWriter:
        return self._writer

    async def list_commands(self) -> List[Dict[str, Any]]:
        """
        Read the collection, degrading to an empty list on any read problem.

        The UI prefers an empty catalog over an error page.
        """
        try:
            commands = await self._store.read_collection(self._path)
        except StorageError as e:
            logger.error(f"Error reading commands, returning empty list: {e.message}")
            return []

        logger.debug(f"Read {len(commands)} commands from {self._path}")
        return commands

    async def get_command(self, command_id: str) -> Dict[str, Any]:
        for cmd in await self.list_commands():
            if cmd.get("id") == command_id:
                return cmd
        raise NotFoundError("Command not found")

    async def add_command(
        self, command: Optional[str], description: Optional[str]
    ) -> Dict[str, Any]:
        """
        Append a new command with a fresh id and createdAt.

        Raises:
            ValidationError: If command or description is missing
            StorageWriteError: If the commit was not confirmed
        """
        _require_fields(command, description)

        async with self._store.storage.lock_for(self._path):
            commands = await self.list_commands()
            new_command = {
                "id": generate_command_id(cmd.get("id") for cmd in commands),
                "command": command,
                "description": description,
                "createdAt": utc_timestamp(),
            }
            commands.append(new_command)
            await self._commit(commands, "Error saving command")

        logger.info(f"Added command {new_command['id']}")
        return new_command

    async def update_command(
        self, command_id: str, command: Optional[str], description: Optional[str]
    ) -> Dict[str, Any]:
        """
        Replace command/description of an existing record and stamp updatedAt.

        Raises:
            ValidationError: If command or description is missing
            NotFoundError: If no record has command_id
            StorageWriteError: If the commit was not confirmed
        """
        _require_fields(command, description)

        async with self._store.storage.lock_for(self._path):
            commands = await self.list_commands()
            index = next(
                (i for i, cmd in enumerate(commands) if cmd.get("id") == command_id),
                None,
            )
            if index is None:
                raise NotFoundError("Command not found")

            commands[index] = {
                **commands[index],
                "command": command,
                "description": description,
                "updatedAt": utc_timestamp(),
            }
            await self._commit(commands, "Error updating command")

        logger.info(f"Updated command {command_id}")
        return commands[index]

    async def delete_command(self, command_id: str) -> None:
        """
        Remove a record by id.

        Raises:
            NotFoundError: If no record has command_id (collection untouched)
            StorageWriteError: If the commit was not confirmed
        """
        async with self._store.storage.lock_for(self._path):
            commands = await self.list_commands()
            remaining = [cmd for cmd in commands if cmd.get("id") != command_id]
            if len(remaining) == len(commands):
                raise NotFoundError("Command not found")

            await self._commit(remaining, "Error deleting command")

        logger.info(f"Deleted command {command_id}")

    async def _commit(self, commands: List[Dict[str, Any]], error_message: str) -> None:
        try:
            result = await self._writer.commit(commands)
        except InvalidCollectionError as e:
            raise StorageWriteError(f"{error_message}: {e.message}", path=self._path)

        if result.is_failure():
            raise StorageWriteError(
                f"{error_message}: {result.error_message}", path=self._path
            )
