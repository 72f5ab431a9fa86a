"""
Durable collection writer.

Wraps JSONStore writes in a backup/verify/restore protocol so that a failed
write is either confirmed, rolled back to the previous content, or reported
as possibly corrupted. It does not write-to-temp-then-rename: a crash between
the overwrite and the verification can still leave a half-written file, which
the next commit will notice.
"""

import hashlib
import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from src.config.constants import BACKUP_SUFFIX
from src.core.errors import (
    InvalidCollectionError,
    StorageError,
    VerificationError,
)
from src.core.storage.json_store import JSONStore


logger = logging.getLogger(__name__)


class WriterState(Enum):
    NORMAL = "normal"
    BACKING_UP = "backing_up"
    WRITING = "writing"
    VERIFYING = "verifying"
    CLEANUP = "cleanup"
    RESTORING = "restoring"


class CommitOutcome(Enum):
    """How a commit ended"""

    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    CORRUPTED = "corrupted"


@dataclass
class CommitResult:
    """
    Outcome of a single commit.

    ROLLED_BACK and CORRUPTED are both failures: the write was not confirmed.
    ROLLED_BACK means the previous content was copied back; CORRUPTED means
    there was no backup or restoring it failed.
    """

    outcome: CommitOutcome
    path: str
    record_count: int
    backup_created: bool = False
    restored: bool = False
    checksum: Optional[str] = None
    error_message: Optional[str] = None
    transitions: List[WriterState] = field(default_factory=list)
    execution_time_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.outcome is CommitOutcome.COMMITTED

    def is_failure(self) -> bool:
        return not self.success

    @classmethod
    def committed(cls, path: str, record_count: int, **kwargs: Any) -> "CommitResult":
        return cls(
            outcome=CommitOutcome.COMMITTED,
            path=path,
            record_count=record_count,
            **kwargs,
        )

    @classmethod
    def rolled_back(
        cls, path: str, record_count: int, error_message: str, **kwargs: Any
    ) -> "CommitResult":
        return cls(
            outcome=CommitOutcome.ROLLED_BACK,
            path=path,
            record_count=record_count,
            restored=True,
            error_message=error_message,
            **kwargs,
        )

    @classmethod
    def corrupted(
        cls, path: str, record_count: int, error_message: str, **kwargs: Any
    ) -> "CommitResult":
        return cls(
            outcome=CommitOutcome.CORRUPTED,
            path=path,
            record_count=record_count,
            error_message=error_message,
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "path": self.path,
            "record_count": self.record_count,
            "backup_created": self.backup_created,
            "restored": self.restored,
            "checksum": self.checksum,
            "error_message": self.error_message,
            "transitions": [state.value for state in self.transitions],
            "execution_time_ms": self.execution_time_ms,
        }


def checksum(payload: bytes) -> str:
    return hashlib.sha256(payload).hexdigest()


class DurableCollectionWriter:
    """
    Commit a whole collection to one path with backup, verification and restore.

    Callers must treat any non-COMMITTED result as "write not confirmed",
    never as "state reverted".
    """

    def __init__(self, store: JSONStore, path: str):
        self._store = store
        self._path = path
        self._backup_path = f"{path}{BACKUP_SUFFIX}"
        self._state = WriterState.NORMAL
        self._transitions: List[WriterState] = []

    @property
    def path(self) -> str:
        return self._path

    @property
    def backup_path(self) -> str:
        return self._backup_path

    @property
    def state(self) -> WriterState:
        return self._state

    def _enter(self, state: WriterState) -> None:
        logger.debug(f"{self._path}: {self._state.value} -> {state.value}")
        self._state = state
        self._transitions.append(state)

    async def commit(self, collection: Any) -> CommitResult:
        """
        Durably replace the collection.

        Args:
            collection: New full collection, must be a list

        Returns:
            CommitResult describing the outcome

        Raises:
            InvalidCollectionError: If collection is not a list or not serializable
        """
        if not isinstance(collection, list):
            raise InvalidCollectionError(
                f"Collection must be a list, got {type(collection).__name__}",
                path=self._path,
            )

        start_time = time.time()
        self._transitions = []
        record_count = len(collection)
        logger.info(f"Committing {record_count} records to {self._path}")

        backup_created = await self._backup()

        self._enter(WriterState.WRITING)
        written_checksum: Optional[str] = None
        try:
            payload = await self._store.write(self._path, collection)
            written_checksum = checksum(payload)

            self._enter(WriterState.VERIFYING)
            await self._verify(record_count, written_checksum)
        except InvalidCollectionError:
            self._enter(WriterState.NORMAL)
            if backup_created:
                await self._discard_backup()
            raise
        except StorageError as e:
            logger.error(f"Commit to {self._path} not confirmed: {e.message}")
            restored = await self._restore(backup_created)
            self._enter(WriterState.NORMAL)
            result_kwargs = {
                "backup_created": backup_created,
                "checksum": written_checksum,
                "transitions": list(self._transitions),
                "execution_time_ms": (time.time() - start_time) * 1000,
            }
            if restored:
                result = CommitResult.rolled_back(
                    self._path, record_count, e.message, **result_kwargs
                )
            else:
                result = CommitResult.corrupted(
                    self._path, record_count, e.message, **result_kwargs
                )
            logger.warning(f"Commit result: {result.to_dict()}")
            return result

        self._enter(WriterState.CLEANUP)
        if backup_created:
            await self._discard_backup()
        self._enter(WriterState.NORMAL)

        result = CommitResult.committed(
            self._path,
            record_count,
            backup_created=backup_created,
            checksum=written_checksum,
            transitions=list(self._transitions),
            execution_time_ms=(time.time() - start_time) * 1000,
        )
        logger.info(
            f"Committed {record_count} records to {self._path} "
            f"in {result.execution_time_ms:.2f}ms"
        )
        return result

    async def _backup(self) -> bool:
        """Copy the current file aside; failure only costs the safety net"""
        self._enter(WriterState.BACKING_UP)
        storage = self._store.storage
        try:
            if not await storage.exists(self._path):
                logger.debug(f"No existing file at {self._path}, skipping backup")
                return False
            await storage.copy(self._path, self._backup_path)
        except (OSError, ValueError) as e:
            logger.warning(
                f"Backup of {self._path} failed, committing without one: {e}"
            )
            return False

        logger.debug(f"Backup created: {self._backup_path}")
        return True

    async def _verify(self, expected_count: int, expected_checksum: str) -> None:
        """
        Re-read the file and compare it with what was written.

        Raises:
            VerificationError: On parse failure, length or checksum mismatch
        """
        storage = self._store.storage
        try:
            raw = await storage.get_bytes(self._path)
        except (OSError, ValueError) as e:
            raise VerificationError(
                f"Could not re-read {self._path}: {e}", path=self._path
            )

        try:
            parsed = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise VerificationError(
                f"Re-read of {self._path} is not valid JSON: {e}", path=self._path
            )

        if not isinstance(parsed, list) or len(parsed) != expected_count:
            found = len(parsed) if isinstance(parsed, list) else type(parsed).__name__
            raise VerificationError(
                f"Verification failed for {self._path}: expected {expected_count} "
                f"records, found {found}",
                path=self._path,
            )

        if checksum(raw) != expected_checksum:
            raise VerificationError(
                f"Verification failed for {self._path}: checksum mismatch",
                path=self._path,
            )

        logger.debug(f"Verification successful: {expected_count} records in {self._path}")

    async def _restore(self, backup_created: bool) -> bool:
        """Copy the backup back over the target; returns whether that worked"""
        if not backup_created:
            logger.error(f"No backup available to restore {self._path}")
            return False

        self._enter(WriterState.RESTORING)
        storage = self._store.storage
        try:
            await storage.copy(self._backup_path, self._path)
        except (OSError, ValueError) as e:
            logger.error(
                f"Failed to restore {self._path} from {self._backup_path}: {e}"
            )
            return False

        logger.info(f"Restored {self._path} from backup")
        await self._discard_backup()
        return True

    async def _discard_backup(self) -> None:
        try:
            await self._store.storage.delete(self._backup_path)
            logger.debug(f"Backup removed: {self._backup_path}")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not remove backup {self._backup_path}: {e}")
