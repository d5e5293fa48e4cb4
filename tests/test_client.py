"""Tests for the line-protocol client against a live TCP connector."""

import asyncio

import pytest

from mediacat.catalog.manager import Manager
from mediacat.client import CatalogClient, parse_address, run_repl
from mediacat.config import ServerConfig
from mediacat.connectors.tcp import TCPConnector
from mediacat.core import Dispatcher


@pytest.fixture
def dispatcher(manager: Manager) -> Dispatcher:
    manager.create_photo("p1", "/x.jpg", 1.0, 2.0)
    manager.create_film("f1", "/z.mp4", 20, [10, 15])
    group = manager.create_group("favs")
    group.append(manager.get_media("p1"))
    return Dispatcher(manager)


class TestParseAddress:
    def test_defaults(self):
        assert parse_address(None, "127.0.0.1", 3331) == ("127.0.0.1", 3331)

    def test_host_and_port(self):
        assert parse_address("media.local:4000", "127.0.0.1", 3331) == ("media.local", 4000)

    def test_host_only(self):
        assert parse_address("media.local", "127.0.0.1", 3331) == ("media.local", 3331)

    def test_port_only(self):
        assert parse_address(":4000", "127.0.0.1", 3331) == ("127.0.0.1", 4000)

    def test_bad_port(self):
        with pytest.raises(ValueError):
            parse_address("media.local:http", "127.0.0.1", 3331)


class TestCatalogClient:
    @pytest.mark.asyncio
    async def test_search_and_play(self, dispatcher: Dispatcher, launcher):
        connector = TCPConnector(ServerConfig(host="127.0.0.1", port=0))
        await connector.start(dispatcher.handle_request)
        try:
            async with CatalogClient("127.0.0.1", connector.port) as client:
                assert await client.search("p1") == (
                    "Name: p1, filepath: /x.jpg, Latitude: 1, Longitude: 2\n"
                )
                # Multi-line renderings come back unfolded
                assert await client.search("f1") == (
                    "Name: f1, filepath: /z.mp4, Duration: 20\n"
                    "The duration for chapter 0 of the film is 10\n"
                    "The duration for chapter 1 of the film is 15\n"
                )
                assert (await client.search("favs")).startswith("Group Name: favs\nName: p1")
                assert await client.search("missing") == ""

                await client.play("f1")
                assert launcher.media == ["/z.mp4"]
        finally:
            await connector.stop()

    @pytest.mark.asyncio
    async def test_concurrent_requests_on_one_connection(self, dispatcher: Dispatcher):
        connector = TCPConnector(ServerConfig(host="127.0.0.1", port=0))
        await connector.start(dispatcher.handle_request)
        try:
            async with CatalogClient("127.0.0.1", connector.port) as client:
                photo, missing, film = await asyncio.gather(
                    client.search("p1"), client.search("nope"), client.search("f1")
                )
            assert photo.startswith("Name: p1")
            assert missing == ""
            assert film.count("\n") == 3
        finally:
            await connector.stop()

    @pytest.mark.asyncio
    async def test_send_before_connect(self):
        with pytest.raises(ConnectionError, match="Not connected"):
            await CatalogClient().search("p1")

    @pytest.mark.asyncio
    async def test_server_gone(self, dispatcher: Dispatcher):
        connector = TCPConnector(ServerConfig(host="127.0.0.1", port=0))
        await connector.start(dispatcher.handle_request)
        client = CatalogClient("127.0.0.1", connector.port)
        await client.connect()
        await connector.stop()
        try:
            with pytest.raises(ConnectionError):
                await client.search("p1")
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_close_without_connect(self):
        await CatalogClient().close()


class TestRepl:
    @pytest.mark.asyncio
    async def test_repl(self, dispatcher: Dispatcher, capsys, launcher):
        connector = TCPConnector(ServerConfig(host="127.0.0.1", port=0))
        await connector.start(dispatcher.handle_request)
        lines = iter(["search f1", "", "play p1", "search nope", "quit"])
        try:
            async with CatalogClient("127.0.0.1", connector.port) as client:
                await run_repl(client, lambda: next(lines))
        finally:
            await connector.stop()

        out = capsys.readouterr().out
        assert "The duration for chapter 1 of the film is 15\n" in out
        assert out.count("(no output)") == 2
        assert launcher.images == ["/x.jpg"]

    @pytest.mark.asyncio
    async def test_repl_eof(self, dispatcher: Dispatcher):
        connector = TCPConnector(ServerConfig(host="127.0.0.1", port=0))
        await connector.start(dispatcher.handle_request)
        try:
            async with CatalogClient("127.0.0.1", connector.port) as client:
                await run_repl(client, lambda: None)
        finally:
            await connector.stop()
