"""
Startup preparation and health reporting for the data files.
"""

import logging
import time
from typing import Any, Dict

from src.config.constants import INVALID_SUFFIX
from src.config.settings import DashboardSettings
from src.core.errors import BootstrapError, StorageError
from src.core.storage.json_store import JSONStore
from src.core.storage.storage_factory import StorageFactory
from src.repositories.command_repository import CommandRepository


logger = logging.getLogger(__name__)


async def ensure_commands_file(store: JSONStore, path: str) -> None:
    """
    Make sure the command collection exists and holds a JSON array.

    A file with unparseable content is copied to ``<path>.invalid`` and then
    reset to an empty array.
    """
    created = await store.ensure(path, [])
    if created:
        return

    try:
        await store.read_collection(path)
        logger.info(f"Commands data file is valid JSON: {path}")
    except StorageError as e:
        logger.warning(f"Resetting commands data file {path}: {e.message}")
        try:
            await store.storage.copy(path, f"{path}{INVALID_SUFFIX}")
        except (OSError, ValueError) as copy_error:
            logger.warning(f"Could not keep a copy of {path}: {copy_error}")
        await store.write(path, [])


async def ensure_data_files(factory: StorageFactory, settings: DashboardSettings) -> None:
    """
    Prepare the data and export storages before serving requests.

    Ensures the server and command collections exist, then re-commits the
    current command collection as a write-permission self test.

    Raises:
        BootstrapError: If any file cannot be prepared or the self test fails
    """
    data_store = JSONStore(factory.get_data_storage())

    try:
        await factory.get_export_storage().ensure_root()
        await data_store.ensure(settings.servers_filename, [])
        await ensure_commands_file(data_store, settings.commands_filename)
    except (StorageError, OSError, ValueError) as e:
        raise BootstrapError(f"Could not prepare data files: {e}")

    logger.info("Testing write access to the commands data file")
    repository = CommandRepository(data_store, settings.commands_filename)
    commands = await repository.list_commands()
    result = await repository.writer.commit(commands)
    if result.is_failure():
        raise BootstrapError(
            f"Write test failed for {settings.commands_filename}: {result.error_message}"
        )

    logger.info(
        f"Data files ready: servers={data_store.storage.get_url(settings.servers_filename)}, "
        f"commands={data_store.storage.get_url(settings.commands_filename)}"
    )


async def check_health(factory: StorageFactory, settings: DashboardSettings) -> Dict[str, Any]:
    """
    Report whether each collection and the export storage are usable.

    Returns:
        Dictionary with overall_status, timestamp, checks and unhealthy_components
    """
    data_store = JSONStore(factory.get_data_storage())
    checks: Dict[str, Dict[str, Any]] = {}

    for name, path in (
        ("servers", settings.servers_filename),
        ("commands", settings.commands_filename),
    ):
        try:
            collection = await data_store.read_collection(path)
            checks[name] = {"status": "healthy", "records": len(collection)}
        except StorageError as e:
            checks[name] = {"status": "unhealthy", "error": e.message}

    export_storage = factory.get_export_storage()
    try:
        await export_storage.ensure_root()
        checks["exports"] = {
            "status": "healthy",
            "type": type(export_storage).__name__,
        }
    except (OSError, ValueError) as e:
        checks["exports"] = {"status": "unhealthy", "error": str(e)}

    unhealthy_count = sum(
        1 for check in checks.values() if check.get("status") == "unhealthy"
    )

    return {
        "overall_status": "healthy" if unhealthy_count == 0 else "unhealthy",
        "timestamp": time.time(),
        "checks": checks,
        "unhealthy_components": unhealthy_count,
    }
