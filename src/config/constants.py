# Constants
DEFAULT_DATA_DIR = "/opt/dashboard-midd/data"
DEFAULT_EXPORT_DIR = "/opt/dashboard-midd/export"

SERVERS_DATA_FILENAME = "data-server.json"
COMMANDS_DATA_FILENAME = "commands.json"
BACKUP_SUFFIX = ".backup"
INVALID_SUFFIX = ".invalid"

DEFAULT_STORAGE_TYPE = "local"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 4001

DEFAULT_CORS_ORIGINS = [
    "http://localhost:4001",
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:5173",
]

JSON_INDENT = 2
