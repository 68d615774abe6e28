"""
MediaApiClient against an in-process aiohttp server.
"""
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from unittest.mock import MagicMock

from mediadb.catalog.backend import MediaApiClient
from mediadb.core.config import ConfigManager
from mediadb.core.errors import TransportError
from mediadb.catalog.models import Tag
from tests.factories import make_tag

TAG_ROWS = [
    {"id": 1, "name": "Animals", "canonical_name": "animals", "pid": None},
    {"id": 2, "name": "Cats", "canonical_name": "cats", "pid": 1},
]


def build_app(received):
    async def autocomplete(request):
        return web.json_response({"tag": [
            {"tag": TAG_ROWS[0], "path": ["Animals"]},
            {"tag": TAG_ROWS[1], "path": ["Animals", "Cats"]},
        ]})

    async def list_tags(request):
        return web.json_response(TAG_ROWS)

    async def add_tag(request):
        body = await request.json()
        received.append(body)
        return web.json_response({
            "id": 10, "name": body["name"], "canonical_name": body["name"].lower(), "pid": body["pid"],
        })

    async def list_media(request):
        received.append(request.query.get("q"))
        return web.json_response({"entity": [{"id": 5, "thumbnail_path": "t/5.jpg"}]})

    async def get_media(request):
        entity_id = int(request.match_info["id"])
        if entity_id == 404:
            raise web.HTTPNotFound()
        return web.json_response({"id": entity_id, "path": "a.jpg", "tags": [TAG_ROWS[1]]})

    async def put_media(request):
        body = await request.json()
        received.append(body)
        return web.json_response(body)

    async def broken(request):
        return web.json_response({"tag": "nope"})

    async def garbled(request):
        return web.Response(text="{not json", content_type="application/json")

    app = web.Application()
    app.router.add_get("/api/tags/autocomplete", autocomplete)
    app.router.add_get("/api/tags", list_tags)
    app.router.add_post("/api/tags", add_tag)
    app.router.add_get("/api/media", list_media)
    app.router.add_get("/api/media/{id}", get_media)
    app.router.add_put("/api/media/{id}", put_media)
    app.router.add_get("/api/broken", broken)
    app.router.add_get("/api/garbled", garbled)
    return app


@pytest.fixture
def received():
    return []


@pytest_asyncio.fixture
async def server(received):
    server = TestServer(build_app(received))
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def client(server, tmp_path):
    config = ConfigManager(str(tmp_path / "config.json"))
    config.update("api", "base_url", str(server.make_url("/")))
    client = MediaApiClient(MagicMock(), config)
    await client.initialize()
    yield client
    await client.shutdown()


@pytest.mark.asyncio
async def test_autocomplete_listing(client):
    tags = await client.fetch_autocomplete_tags()
    assert [t.canonical_name for t in tags] == ["animals", "cats"]
    assert tags[1].path == ["Animals", "Cats"]
    assert tags[1].parent_id == 1


@pytest.mark.asyncio
async def test_flat_listing(client):
    tags = await client.fetch_tags()
    assert [t.id for t in tags] == [1, 2]
    assert tags[0].parent_id == 0


@pytest.mark.asyncio
async def test_add_tag_posts_parent_and_name(client, received):
    tag = await client.add_tag(1, "Lynx")
    assert received == [{"pid": 1, "name": "Lynx"}]
    assert tag.id == 10
    assert tag.parent_id == 1


@pytest.mark.asyncio
async def test_fetch_entities_passes_query(client, received):
    entities = await client.fetch_entities("cats+dogs")
    assert received == ["cats+dogs"]
    assert entities[0].id == 5

    await client.fetch_entities()
    assert received[-1] is None


@pytest.mark.asyncio
async def test_fetch_and_save_entity(client, received):
    entity = await client.fetch_entity(5)
    assert entity.has_tag("cats")

    entity.tags.append(make_tag(1, "Animals"))
    saved = await client.save_entity(entity)

    assert [t["canonical_name"] for t in received[-1]["tags"]] == ["cats", "animals"]
    assert saved.has_tag("animals")


@pytest.mark.asyncio
async def test_http_error_is_transport_error(client):
    with pytest.raises(TransportError) as exc:
        await client.fetch_entity(404)
    assert exc.value.status == 404
    assert exc.value.operation == "fetch_entity"


@pytest.mark.asyncio
async def test_malformed_payload_is_transport_error(client):
    payload = await client._request("read_payload", "GET", "/api/broken")
    with pytest.raises(TransportError):
        client._parse_list("read_payload", Tag, payload, "tag")


@pytest.mark.asyncio
async def test_unreachable_server(tmp_path):
    config = ConfigManager(str(tmp_path / "config.json"))
    config.update("api", "base_url", "http://127.0.0.1:1")
    async with MediaApiClient(MagicMock(), config) as client:
        with pytest.raises(TransportError):
            await client.fetch_tags()


@pytest.mark.asyncio
async def test_calls_before_initialize_fail(tmp_path):
    client = MediaApiClient(MagicMock(), ConfigManager(str(tmp_path / "config.json")))
    with pytest.raises(TransportError, match="not initialized"):
        await client.fetch_tags()


@pytest.mark.asyncio
async def test_undecodable_json_is_transport_error(client):
    with pytest.raises(TransportError, match="malformed JSON"):
        await client._request("read_payload", "GET", "/api/garbled")
