from typing import Any, Dict, Iterator, List

import pytest
from fastapi.testclient import TestClient

from src.app import create_app
from src.config.settings import DashboardSettings
from src.core.storage.interface import StorageInterface
from src.core.storage.json_store import JSONStore
from src.core.storage.local import LocalFileStorage
from src.core.storage.memory import MemoryStorage
from src.core.storage.storage_factory import StorageFactory


@pytest.fixture
def memory_storage() -> StorageInterface:
    """Fixture for memory storage"""
    return MemoryStorage(base_url="memory://test")


@pytest.fixture
def local_storage(tmp_path) -> LocalFileStorage:
    """Fixture for filesystem storage rooted in a temp directory"""
    return LocalFileStorage(root=str(tmp_path / "data"))


@pytest.fixture
def json_store(local_storage: LocalFileStorage) -> JSONStore:
    return JSONStore(local_storage)


@pytest.fixture
def settings(tmp_path) -> DashboardSettings:
    """Settings pointing data and export directories at tmp_path"""
    return DashboardSettings.for_testing(str(tmp_path))


@pytest.fixture
def storage_factory(settings: DashboardSettings) -> StorageFactory:
    return StorageFactory.from_settings(settings)


@pytest.fixture
def client(settings: DashboardSettings) -> Iterator[TestClient]:
    """Test client with startup (data file bootstrap) executed"""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_servers() -> List[Dict[str, Any]]:
    """Inventory shared across server tests"""
    return [
        {
            "id": "1",
            "servico": "Web Server Principal",
            "hostname": "BRSANPFWEB03",
            "ip_address": "172.21.48.30",
            "os": "Ubuntu 22.04",
            "location": "AZURE",
            "projeto": "IMOBILIÁRIO PE / PF",
            "ambiente": "PRD",
            "status": "Active",
            "observacao": "Servidor principal de aplicações web",
        },
        {
            "id": "2",
            "servico": "Database Server",
            "hostname": "BRSANPFDB01",
            "ip_address": "172.21.48.31",
            "os": "Windows Server 2022",
            "location": "AZURE",
            "projeto": "FINANCEIRA",
            "ambiente": "PRD",
            "status": "Active",
            "observacao": "Servidor de banco de dados principal",
        },
        {
            "id": "3",
            "servico": "Backup Server",
            "hostname": "BRSANPFBKP01",
            "ip_address": "172.21.48.32",
            "os": "CentOS 8",
            "location": "OCI",
            "projeto": "INFRAESTRUTURA",
            "ambiente": "NPRD",
            "status": "Inactive",
            "observacao": "Servidor desativado para manutenção",
        },
    ]
