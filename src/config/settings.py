import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from src.config.constants import (
    COMMANDS_DATA_FILENAME,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_DATA_DIR,
    DEFAULT_EXPORT_DIR,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_STORAGE_TYPE,
    SERVERS_DATA_FILENAME,
)

logger = logging.getLogger(__name__)

SUPPORTED_STORAGE_TYPES = ("local", "memory")


@dataclass
class DashboardSettings:
    """
    Runtime configuration for the dashboard backend.

    Passed explicitly into the storage factory and the app so that tests can
    point every file at an isolated temporary directory.
    """

    data_dir: str = DEFAULT_DATA_DIR
    export_dir: str = DEFAULT_EXPORT_DIR
    servers_filename: str = SERVERS_DATA_FILENAME
    commands_filename: str = COMMANDS_DATA_FILENAME
    storage_type: str = DEFAULT_STORAGE_TYPE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    static_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if self.storage_type.lower() not in SUPPORTED_STORAGE_TYPES:
            raise ValueError(f"Unknown storage type: {self.storage_type}")
        self.storage_type = self.storage_type.lower()
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}")
        if not self.servers_filename or not self.commands_filename:
            raise ValueError("Collection filenames must not be empty")

    @property
    def servers_path(self) -> str:
        """Absolute path of the server collection (informational)"""
        return str(Path(self.data_dir) / self.servers_filename)

    @property
    def commands_path(self) -> str:
        """Absolute path of the command collection (informational)"""
        return str(Path(self.data_dir) / self.commands_filename)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "DashboardSettings":
        """
        Build settings from environment variables.

        A ``.env`` file is loaded first when present; variables already set in
        the process environment take precedence over it.

        Args:
            env_file: Optional explicit path to a dotenv file

        Returns:
            DashboardSettings populated from the environment

        Raises:
            ValueError: If PORT is not an integer or the storage type is unknown
        """
        if env_file and os.path.exists(env_file):
            load_dotenv(env_file)
            logger.info(f"Loaded environment from {env_file}")
        else:
            load_dotenv()

        port_raw = os.environ.get("PORT", str(DEFAULT_PORT))
        try:
            port = int(port_raw)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {port_raw!r}")

        origins_raw = os.environ.get("DASHBOARD_CORS_ORIGINS")
        cors_origins = (
            [origin.strip() for origin in origins_raw.split(",") if origin.strip()]
            if origins_raw
            else list(DEFAULT_CORS_ORIGINS)
        )

        return cls(
            data_dir=os.environ.get("DASHBOARD_DATA_DIR", DEFAULT_DATA_DIR),
            export_dir=os.environ.get("DASHBOARD_EXPORT_DIR", DEFAULT_EXPORT_DIR),
            servers_filename=os.environ.get(
                "DASHBOARD_SERVERS_FILE", SERVERS_DATA_FILENAME
            ),
            commands_filename=os.environ.get(
                "DASHBOARD_COMMANDS_FILE", COMMANDS_DATA_FILENAME
            ),
            storage_type=os.environ.get("DASHBOARD_STORAGE_TYPE", DEFAULT_STORAGE_TYPE),
            host=os.environ.get("HOST", DEFAULT_HOST),
            port=port,
            cors_origins=cors_origins,
            static_dir=os.environ.get("DASHBOARD_STATIC_DIR") or None,
        )

    @classmethod
    def for_testing(cls, base_dir: str) -> "DashboardSettings":
        """
        Settings rooted in a throwaway directory.

        Args:
            base_dir: Directory (usually pytest's tmp_path) holding data and exports
        """
        return cls(
            data_dir=str(Path(base_dir) / "data"),
            export_dir=str(Path(base_dir) / "export"),
            storage_type="local",
        )
