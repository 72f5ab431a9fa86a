import pytest

from obstore.store import LocalStore

from src.core.storage.local import LocalFileStorage


class TestLocalFileStorage:
    @pytest.mark.asyncio
    async def test_save_and_get_bytes(self, local_storage: LocalFileStorage) -> None:
        """Test saving and retrieving binary data"""
        url = await local_storage.save_bytes(b"Hello, world!", "nested/dir/file.bin")

        assert url == str(local_storage.root / "nested" / "dir" / "file.bin")
        assert await local_storage.get_bytes("nested/dir/file.bin") == b"Hello, world!"

    @pytest.mark.asyncio
    async def test_save_overwrites(self, local_storage: LocalFileStorage) -> None:
        await local_storage.save_bytes(b"first version", "file.txt")
        await local_storage.save_bytes(b"v2", "file.txt")

        assert await local_storage.get_bytes("file.txt") == b"v2"

    @pytest.mark.asyncio
    async def test_get_missing_file_raises(self, local_storage: LocalFileStorage) -> None:
        with pytest.raises(FileNotFoundError):
            await local_storage.get_bytes("missing.json")

    @pytest.mark.asyncio
    async def test_exists_copy_delete(self, local_storage: LocalFileStorage) -> None:
        await local_storage.save_bytes(b"[]", "commands.json")
        assert await local_storage.exists("commands.json")
        assert not await local_storage.exists("commands.json.backup")

        await local_storage.copy("commands.json", "commands.json.backup")
        assert await local_storage.get_bytes("commands.json.backup") == b"[]"

        await local_storage.delete("commands.json.backup")
        assert not await local_storage.exists("commands.json.backup")

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self, local_storage: LocalFileStorage) -> None:
        with pytest.raises(FileNotFoundError):
            await local_storage.delete("missing.json")

    @pytest.mark.asyncio
    async def test_list_files(self, local_storage: LocalFileStorage) -> None:
        """Test listing files with prefix"""
        await local_storage.save_bytes(b"data1", "prefix/file1.bin")
        await local_storage.save_bytes(b"data2", "prefix/file2.bin")
        await local_storage.save_bytes(b"data3", "other/file3.bin")

        files = await local_storage.list_files("prefix/")
        assert files == ["prefix/file1.bin", "prefix/file2.bin"]

    @pytest.mark.asyncio
    async def test_list_files_without_root(self, tmp_path) -> None:
        storage = LocalFileStorage(root=str(tmp_path / "does-not-exist"))
        assert await storage.list_files() == []

    @pytest.mark.asyncio
    async def test_ensure_root_creates_directory(self, tmp_path) -> None:
        storage = LocalFileStorage(root=str(tmp_path / "a" / "b"))
        await storage.ensure_root()
        await storage.ensure_root()

        assert (tmp_path / "a" / "b").is_dir()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["../escape.json", "a/../../escape.json", ""])
    async def test_rejects_paths_outside_root(
        self, local_storage: LocalFileStorage, path: str
    ) -> None:
        with pytest.raises(ValueError):
            await local_storage.save_bytes(b"x", path)

    def test_lock_is_shared_per_path(self, local_storage: LocalFileStorage) -> None:
        assert local_storage.lock_for("commands.json") is local_storage.lock_for(
            "commands.json"
        )
        assert local_storage.lock_for("commands.json") is not local_storage.lock_for(
            "data-server.json"
        )

    def test_construction_does_not_touch_disk(self, tmp_path) -> None:
        LocalFileStorage(root=str(tmp_path / "lazy"))

        assert not (tmp_path / "lazy").exists()

    @pytest.mark.asyncio
    async def test_backed_by_obstore_local_store(
        self, local_storage: LocalFileStorage
    ) -> None:
        await local_storage.save_bytes(b"[]", "commands.json")

        assert isinstance(local_storage.store, LocalStore)
        assert (local_storage.root / "commands.json").read_bytes() == b"[]"

    @pytest.mark.asyncio
    async def test_paths_are_normalized(self, local_storage: LocalFileStorage) -> None:
        url = await local_storage.save_bytes(b"x", "nested/../commands.json")

        assert url == str(local_storage.root / "commands.json")
        assert await local_storage.list_files() == ["commands.json"]

    @pytest.mark.asyncio
    async def test_copy_missing_source_raises(
        self, local_storage: LocalFileStorage
    ) -> None:
        with pytest.raises(FileNotFoundError):
            await local_storage.copy("missing.json", "missing.json.backup")

    @pytest.mark.asyncio
    async def test_unusable_root_raises_os_error(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = LocalFileStorage(root=str(blocker / "data"))

        with pytest.raises(OSError):
            await storage.ensure_root()
