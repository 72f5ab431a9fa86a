#!/usr/bin/env python3
"""
Prepare the dashboard data files outside of the web server.

Used by deployment scripts to create the data and export directories, the
empty collections and to check write access before the service starts.
"""

import asyncio
import sys

from src.config.settings import DashboardSettings
from src.core.errors import BootstrapError
from src.core.storage.storage_factory import StorageFactory
from src.services.bootstrap import check_health, ensure_data_files


async def main() -> int:
    """Ensure the data files exist and are writable.

    Reads configuration from the same environment variables as the server
    (DASHBOARD_DATA_DIR, DASHBOARD_EXPORT_DIR, ...).

    Returns:
        0 on success, 1 on failure
    """
    try:
        settings = DashboardSettings.from_env()
    except ValueError as e:
        print(f"✗ Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    print(f"Preparing data files in: {settings.data_dir}")
    factory = StorageFactory.from_settings(settings)

    try:
        await ensure_data_files(factory, settings)
    except BootstrapError as e:
        print(f"✗ Error preparing data files: {e}", file=sys.stderr)
        return 1

    health = await check_health(factory, settings)
    for name, check in health["checks"].items():
        print(f"  {name}: {check['status']}")

    if health["overall_status"] != "healthy":
        print("✗ Data files are not healthy", file=sys.stderr)
        return 1

    print("✓ Data files ready")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
