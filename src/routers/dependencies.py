from fastapi import Depends, Request

from src.config.settings import DashboardSettings
from src.core.storage.json_store import JSONStore
from src.core.storage.storage_factory import StorageFactory
from src.repositories.command_repository import CommandRepository
from src.repositories.server_repository import ServerRepository
from src.services.export_service import ExportService


# Dependency functions
def get_settings(request: Request) -> DashboardSettings:
    """Settings the app was created with"""
    return request.app.state.settings


def get_storage_factory(request: Request) -> StorageFactory:
    """Storage factory built at startup; shared so per-path locks are shared"""
    return request.app.state.storage_factory


def get_server_repository(
    settings: DashboardSettings = Depends(get_settings),
    storage_factory: StorageFactory = Depends(get_storage_factory),
) -> ServerRepository:
    store = JSONStore(storage_factory.get_data_storage())
    return ServerRepository(store, settings.servers_filename)


def get_command_repository(
    settings: DashboardSettings = Depends(get_settings),
    storage_factory: StorageFactory = Depends(get_storage_factory),
) -> CommandRepository:
    store = JSONStore(storage_factory.get_data_storage())
    return CommandRepository(store, settings.commands_filename)


def get_export_service(
    storage_factory: StorageFactory = Depends(get_storage_factory),
) -> ExportService:
    return ExportService(storage_factory.get_export_storage())
