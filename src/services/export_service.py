import csv
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from src.core.errors import NotFoundError, StorageWriteError, ValidationError
from src.core.storage.interface import StorageInterface


logger = logging.getLogger(__name__)

# Column header -> server record field, in the order the UI export uses
SERVER_CSV_COLUMNS = {
    "Serviço": "servico",
    "IP Address": "ip_address",
    "Hostname": "hostname",
    "OS": "os",
    "Location": "location",
    "Projeto": "projeto",
    "Ambiente": "ambiente",
    "Status": "status",
    "Observação": "observacao",
}


def validate_export_filename(filename: Optional[str]) -> str:
    """
    Reject names that could leave the export directory.

    Raises:
        ValidationError: If filename is empty, hidden or contains a path component
    """
    if not filename:
        raise ValidationError("Filename is required")
    if "/" in filename or "\\" in filename or filename.startswith(".") or "\x00" in filename:
        raise ValidationError(f"Invalid export filename: {filename}")
    return filename


def servers_export_filename(now: Optional[datetime] = None) -> str:
    """servidores_<YYYY-MM-DDTHH-MM-SS>.csv in UTC"""
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return f"servidores_{stamp}.csv"


def render_servers_csv(servers: List[Dict[str, Any]]) -> str:
    """
    Render server records as CSV with every value quoted.

    Missing fields become empty cells.
    """
    rows = [
        {header: server.get(field) or "" for header, field in SERVER_CSV_COLUMNS.items()}
        for server in servers
    ]
    df = pd.DataFrame(rows, columns=list(SERVER_CSV_COLUMNS.keys()))
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


class ExportService:
    """Write CSV exports to, and read them back from, the export storage"""

    def __init__(self, storage: StorageInterface):
        self._storage = storage

    async def export_text(self, filename: Optional[str], data: Optional[str]) -> Dict[str, str]:
        """
        Write data verbatim to filename in the export storage.

        Returns:
            Dictionary with the filename and the location it was written to

        Raises:
            ValidationError: If filename or data is missing or filename is unsafe
            StorageWriteError: If the file could not be written
        """
        if not filename or not data:
            raise ValidationError("Filename and data are required")
        filename = validate_export_filename(filename)

        try:
            await self._storage.ensure_root()
            location = await self._storage.save_bytes(data.encode("utf-8"), filename)
        except (OSError, ValueError) as e:
            raise StorageWriteError(f"Could not export {filename}: {e}", path=filename)

        logger.info(f"CSV file exported: {location}")
        return {"filename": filename, "path": location}

    async def open_download(self, filename: str) -> bytes:
        """
        Raises:
            ValidationError: If filename is unsafe
            NotFoundError: If no export with that name exists
        """
        filename = validate_export_filename(filename)
        if not await self._storage.exists(filename):
            raise NotFoundError("File not found")
        return await self._storage.get_bytes(filename)
