import pytest

from src.config.constants import DEFAULT_DATA_DIR, DEFAULT_PORT
from src.config.settings import DashboardSettings

ENV_VARS = [
    "DASHBOARD_DATA_DIR",
    "DASHBOARD_EXPORT_DIR",
    "DASHBOARD_SERVERS_FILE",
    "DASHBOARD_COMMANDS_FILE",
    "DASHBOARD_STORAGE_TYPE",
    "DASHBOARD_STATIC_DIR",
    "DASHBOARD_CORS_ORIGINS",
    "HOST",
    "PORT",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Empty dashboard environment, run from a directory without a .env file"""
    for name in ENV_VARS:
        # setenv first so the variable is restored (or removed) afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestDashboardSettings:
    def test_defaults(self, clean_env) -> None:
        settings = DashboardSettings.from_env()

        assert settings.data_dir == DEFAULT_DATA_DIR
        assert settings.port == DEFAULT_PORT
        assert settings.storage_type == "local"
        assert settings.servers_path.endswith("data-server.json")
        assert settings.commands_path.endswith("commands.json")
        assert settings.static_dir is None

    def test_from_env(self, clean_env, tmp_path) -> None:
        clean_env.setenv("DASHBOARD_DATA_DIR", str(tmp_path / "d"))
        clean_env.setenv("DASHBOARD_STORAGE_TYPE", "MEMORY")
        clean_env.setenv("DASHBOARD_CORS_ORIGINS", "http://a.test, http://b.test,")
        clean_env.setenv("PORT", "8080")

        settings = DashboardSettings.from_env()

        assert settings.data_dir == str(tmp_path / "d")
        assert settings.storage_type == "memory"
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.port == 8080

    def test_env_file(self, clean_env, tmp_path) -> None:
        env_file = tmp_path / "dashboard.env"
        env_file.write_text("PORT=5005\nDASHBOARD_EXPORT_DIR=/srv/export\n")

        settings = DashboardSettings.from_env(str(env_file))

        assert settings.port == 5005
        assert settings.export_dir == "/srv/export"

    def test_invalid_port(self, clean_env) -> None:
        clean_env.setenv("PORT", "http")

        with pytest.raises(ValueError, match="PORT must be an integer"):
            DashboardSettings.from_env()

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_out_of_range(self, port: int) -> None:
        with pytest.raises(ValueError, match="Invalid port"):
            DashboardSettings(port=port)

    def test_unknown_storage_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage type"):
            DashboardSettings(storage_type="s3")

    def test_for_testing(self, tmp_path) -> None:
        settings = DashboardSettings.for_testing(str(tmp_path))

        assert settings.data_dir == str(tmp_path / "data")
        assert settings.export_dir == str(tmp_path / "export")
