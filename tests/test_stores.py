"""
Tests for the configuration stores and the store registry.
"""

import json
import pytest
from pathlib import Path
from typing import AsyncIterator, Dict, List

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer

from conflux.core.exceptions import ConfigurationError
from conflux.infrastructure.processors import JsonProcessor, YamlProcessor
from conflux.infrastructure.stores import (
    DirectoryConfigStore,
    EnvironmentConfigStore,
    FileConfigStore,
    HttpConfigStore,
    JsonConfigStore,
    create_default_store_registry,
)


class TestFileConfigStore:
    """Test cases for FileConfigStore."""

    @pytest.mark.asyncio
    async def test_reads_file_content(self, tmp_path: Path) -> None:
        config_file = tmp_path / "a.json"
        config_file.write_text('{"key": "value"}')

        store = FileConfigStore(str(config_file))

        assert await store.get() == b'{"key": "value"}'

    @pytest.mark.asyncio
    async def test_rereads_on_every_get(self, tmp_path: Path) -> None:
        config_file = tmp_path / "a.json"
        config_file.write_text('{"v": 1}')
        store = FileConfigStore(str(config_file))

        await store.get()
        config_file.write_text('{"v": 2}')

        assert json.loads(await store.get()) == {"v": 2}

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        store = FileConfigStore(str(tmp_path / "missing.json"))

        with pytest.raises(FileNotFoundError):
            await store.get()

    def test_path_required(self) -> None:
        with pytest.raises(ValueError):
            FileConfigStore("")


class TestJsonConfigStore:
    """Test cases for JsonConfigStore."""

    @pytest.mark.asyncio
    async def test_serves_inline_document(self) -> None:
        store = JsonConfigStore({"a": {"b": 1}})

        assert json.loads(await store.get()) == {"a": {"b": 1}}


class TestEnvironmentConfigStore:
    """Test cases for EnvironmentConfigStore."""

    @pytest.mark.asyncio
    async def test_converts_values(self) -> None:
        environ = {"PORT": "8080", "DEBUG": "true", "RATIO": "0.5", "NAME": "app"}
        store = EnvironmentConfigStore(environ=environ)

        assert json.loads(await store.get()) == {
            "PORT": 8080, "DEBUG": True, "RATIO": 0.5, "NAME": "app"
        }

    @pytest.mark.asyncio
    async def test_non_finite_numbers_stay_strings(self) -> None:
        store = EnvironmentConfigStore(environ={"A": "nan", "B": "inf"})

        assert json.loads(await store.get()) == {"A": "nan", "B": "inf"}

    @pytest.mark.asyncio
    async def test_raw_data(self) -> None:
        store = EnvironmentConfigStore(raw_data=True, environ={"PORT": "8080"})

        assert json.loads(await store.get()) == {"PORT": "8080"}

    @pytest.mark.asyncio
    async def test_key_filter(self) -> None:
        environ = {"KEEP": "1", "DROP": "2"}
        store = EnvironmentConfigStore(keys=["KEEP", "ABSENT"], environ=environ)

        assert json.loads(await store.get()) == {"KEEP": 1}

    @pytest.mark.asyncio
    async def test_hierarchical(self) -> None:
        environ = {"db.host": "localhost", "db.port": "5432", "plain": "x"}
        store = EnvironmentConfigStore(hierarchical=True, environ=environ)

        assert json.loads(await store.get()) == {
            "db": {"host": "localhost", "port": 5432}, "plain": "x"
        }

    @pytest.mark.asyncio
    async def test_cache(self) -> None:
        environ = {"V": "1"}
        store = EnvironmentConfigStore(cache=True, environ=environ)

        first = await store.get()
        environ["V"] = "2"

        assert await store.get() == first

    @pytest.mark.asyncio
    async def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONFLUX_TEST_VARIABLE", "present")
        store = EnvironmentConfigStore(keys=["CONFLUX_TEST_VARIABLE"])

        assert json.loads(await store.get()) == {"CONFLUX_TEST_VARIABLE": "present"}


class TestDirectoryConfigStore:
    """Test cases for DirectoryConfigStore."""

    @pytest.mark.asyncio
    async def test_merges_matching_files(self, tmp_path: Path) -> None:
        (tmp_path / "a.json").write_text('{"k": "a", "only_a": 1}')
        (tmp_path / "b.json").write_text('{"k": "b"}')
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "c.yaml").write_text("k: c\nonly_c: true\n")
        (tmp_path / "ignored.txt").write_text("not configuration")

        store = DirectoryConfigStore(str(tmp_path), [
            ("*.json", JsonProcessor()),
            ("*.yaml", YamlProcessor()),
        ])

        assert json.loads(await store.get()) == {"k": "c", "only_a": 1, "only_c": True}

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path: Path) -> None:
        store = DirectoryConfigStore(str(tmp_path / "absent"), [("*.json", JsonProcessor())])

        with pytest.raises(FileNotFoundError):
            await store.get()

    @pytest.mark.asyncio
    async def test_undecodable_file(self, tmp_path: Path) -> None:
        (tmp_path / "bad.json").write_text("{broken")
        store = DirectoryConfigStore(str(tmp_path), [("*.json", JsonProcessor())])

        with pytest.raises(ValueError, match="bad.json"):
            await store.get()

    def test_filesets_required(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            DirectoryConfigStore(str(tmp_path), [])


@pytest.fixture
async def config_server() -> AsyncIterator[TestServer]:
    """HTTP server serving a mutable configuration document."""
    state: Dict[str, object] = {"document": {"key": "value"}, "status": 200}
    requests: List[web.Request] = []

    async def handler(request: web.Request) -> web.Response:
        requests.append(request)
        if state["status"] != 200:
            return web.Response(status=state["status"])
        return web.json_response(state["document"])

    app = web.Application()
    app.router.add_get("/conf", handler)
    app["state"] = state
    app["requests"] = requests

    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


class TestHttpConfigStore:
    """Test cases for HttpConfigStore."""

    @pytest.mark.asyncio
    async def test_fetches_document(self, config_server: TestServer) -> None:
        store = HttpConfigStore(host=config_server.host, port=config_server.port, path="/conf")
        try:
            assert json.loads(await store.get()) == {"key": "value"}
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_error_status_raises(self, config_server: TestServer) -> None:
        config_server.app["state"]["status"] = 404
        store = HttpConfigStore(host=config_server.host, port=config_server.port, path="/conf")
        try:
            with pytest.raises(aiohttp.ClientResponseError) as exc_info:
                await store.get()
            assert exc_info.value.status == 404
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_redirect_without_following_raises(self, config_server: TestServer) -> None:
        """Test a 3xx response is never handed over as configuration."""
        config_server.app["state"]["status"] = 302
        store = HttpConfigStore(host=config_server.host, port=config_server.port, path="/conf")
        try:
            with pytest.raises(aiohttp.ClientResponseError) as exc_info:
                await store.get()
            assert exc_info.value.status == 302
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_sends_headers(self, config_server: TestServer) -> None:
        store = HttpConfigStore(
            host=config_server.host,
            port=config_server.port,
            path="conf",
            headers={"X-Token": "secret", "X-Skipped": None}
        )
        try:
            await store.get()
        finally:
            await store.close()

        request = config_server.app["requests"][-1]
        assert request.headers["X-Token"] == "secret"
        assert "X-Skipped" not in request.headers

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, config_server: TestServer) -> None:
        store = HttpConfigStore(host=config_server.host, port=config_server.port, path="/conf")
        await store.get()

        await store.close()
        await store.close()

    def test_url(self) -> None:
        store = HttpConfigStore(host="config.local", port=8443, path="settings", ssl=True)

        assert store.url == "https://config.local:8443/settings"

    def test_host_required(self) -> None:
        with pytest.raises(ValueError):
            HttpConfigStore(host="")


class TestStoreRegistry:
    """Test cases for StoreRegistry."""

    def test_default_types(self) -> None:
        registry = create_default_store_registry()

        assert registry.names() == ["directory", "env", "file", "http", "json"]

    def test_create_file_store(self, tmp_path: Path) -> None:
        store = create_default_store_registry().create("file", {"path": str(tmp_path / "a.json")})

        assert isinstance(store, FileConfigStore)

    def test_create_directory_store(self, tmp_path: Path) -> None:
        store = create_default_store_registry().create("directory", {
            "path": str(tmp_path),
            "filesets": [{"pattern": "*.yaml", "format": "yaml"}],
        })

        assert isinstance(store, DirectoryConfigStore)
        assert isinstance(store.filesets[0][1], YamlProcessor)

    def test_unknown_type(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown configuration store type"):
            create_default_store_registry().create("consul")

    def test_invalid_config(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            create_default_store_registry().create("file", {})

    def test_invalid_filesets(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            create_default_store_registry().create("directory", {"path": str(tmp_path)})
