from typing import Any, Dict, Optional
import logging
from pathlib import Path
from src.config.settings import DashboardSettings
from src.core.storage.interface import StorageInterface
from src.core.storage.local import LocalFileStorage
from src.core.storage.memory import MemoryStorage


logger = logging.getLogger(__name__)


class StorageFactory:
    """
    Factory class for creating storage interface instances.

    This factory provides dependency injection for storage interfaces,
    enabling easy testing and configuration management. It separates the
    data storage (the JSON collections) from the export storage (CSV files
    written for download).
    """

    def __init__(
        self,
        data_storage_type: str = "local",
        data_storage_config: Optional[Dict[str, Any]] = None,
        export_storage_type: str = "local",
        export_storage_config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize storage factory with configuration.

        Args:
            data_storage_type: Type of collection storage ('local', 'memory')
            data_storage_config: Configuration for collection storage
            export_storage_type: Type of export storage ('local', 'memory')
            export_storage_config: Configuration for export storage
        """
        logger.info("Initializing StorageFactory")

        self._data_storage_type = data_storage_type
        self._data_storage_config = data_storage_config or {}
        self._export_storage_type = export_storage_type
        self._export_storage_config = export_storage_config or {}

        # Cache storage instances so per-path locks are shared across requests
        self._data_storage_instance: Optional[StorageInterface] = None
        self._export_storage_instance: Optional[StorageInterface] = None

        logger.info(
            f"StorageFactory configured: data={data_storage_type}, export={export_storage_type}"
        )

    def get_data_storage(self) -> StorageInterface:
        """
        Get the storage holding the server and command collections.

        Returns:
            StorageInterface instance for collection files
        """
        if self._data_storage_instance is None:
            logger.debug(f"Creating data storage instance: {self._data_storage_type}")
            self._data_storage_instance = self._create_storage(
                self._data_storage_type, self._data_storage_config
            )

        return self._data_storage_instance

    def get_export_storage(self) -> StorageInterface:
        """
        Get the storage CSV exports are written to and downloaded from.

        Returns:
            StorageInterface instance for export files
        """
        if self._export_storage_instance is None:
            logger.debug(
                f"Creating export storage instance: {self._export_storage_type}"
            )
            self._export_storage_instance = self._create_storage(
                self._export_storage_type, self._export_storage_config
            )

        return self._export_storage_instance

    def _create_storage(
        self, storage_type: str, config: Dict[str, Any]
    ) -> StorageInterface:
        """
        Create storage instance based on type and configuration.

        Args:
            storage_type: Type of storage ('local', 'memory')
            config: Configuration dictionary

        Returns:
            StorageInterface instance

        Raises:
            ValueError: If storage_type is not supported
        """
        storage_type_lower = storage_type.lower()

        if storage_type_lower == "memory":
            base_url = config.get("base_url", "memory://")
            return MemoryStorage(base_url=base_url)

        elif storage_type_lower == "local":
            root = config.get("root")
            if not root:
                raise ValueError("root is required for local storage")
            return LocalFileStorage(root=root)

        else:
            raise ValueError(f"Unknown storage type: {storage_type}")

    @classmethod
    def from_settings(cls, settings: DashboardSettings) -> "StorageFactory":
        """
        Create factory from application settings.

        Local storage is rooted at the configured data and export
        directories; memory storage ignores them.

        Returns:
            StorageFactory matching settings.storage_type
        """
        if settings.storage_type == "memory":
            return cls.for_development()

        return cls(
            data_storage_type="local",
            data_storage_config={"root": settings.data_dir},
            export_storage_type="local",
            export_storage_config={"root": settings.export_dir},
        )

    @classmethod
    def for_development(cls) -> "StorageFactory":
        """
        Create factory configured for development environment.

        Uses memory storage for both data and exports to avoid touching
        the filesystem during development.

        Returns:
            StorageFactory configured for development
        """
        return cls(
            data_storage_type="memory",
            data_storage_config={"base_url": "memory://data/"},
            export_storage_type="memory",
            export_storage_config={"base_url": "memory://export/"},
        )

    @classmethod
    def for_testing(cls, base_dir: str) -> "StorageFactory":
        """
        Create factory configured for testing.

        Uses local storage inside a caller-owned temporary directory.

        Args:
            base_dir: Directory to root data/ and export/ in

        Returns:
            StorageFactory configured for testing
        """
        return cls(
            data_storage_type="local",
            data_storage_config={"root": str(Path(base_dir) / "data")},
            export_storage_type="local",
            export_storage_config={"root": str(Path(base_dir) / "export")},
        )
