"""
Media list and media detail view models: staleness and the tag panel.
"""
import asyncio

import pytest
from loguru import logger

from mediadb.catalog.editor import DUPLICATE_TAG_MESSAGE
from mediadb.core.errors import TransportError
from mediadb.ui.mvvm import STATUS_READY, STATUS_UNAVAILABLE
from mediadb.ui.navigation import HistoryService
from mediadb.ui.viewmodels.media_detail import NO_ENTITY_MESSAGE, MediaDetailViewModel
from mediadb.ui.viewmodels.media_list import MediaListViewModel
from tests.factories import make_entity


def gated(results):
    """Async side effect whose calls resolve only when their gate is set."""
    gates = {}

    async def fetch(key=None):
        gate = gates.setdefault(key, asyncio.Event())
        await gate.wait()
        return results[key]

    return fetch, gates


async def settle():
    for _ in range(3):
        await asyncio.sleep(0)


# --- Media list ---

@pytest.mark.asyncio
async def test_list_mount_uses_query(service_locator, backend, search_settings, entity):
    history = HistoryService(service_locator, None, initial="/media?q=cats")
    media = MediaListViewModel(service_locator, backend, history, search_settings)

    await media.mount()

    backend.fetch_entities.assert_awaited_once_with("cats")
    assert media.entities == (entity,)
    assert media.query == "cats"
    assert media.status == STATUS_READY


@pytest.mark.asyncio
async def test_list_follows_navigation(service_locator, backend, history, search_settings):
    media = MediaListViewModel(service_locator, backend, history, search_settings)
    await media.mount()
    backend.fetch_entities.assert_awaited_once_with(None)

    history.push("/tags")
    assert not media._pending

    history.push("/media?q=dogs")
    await asyncio.gather(*list(media._pending))

    assert media.query == "dogs"
    assert not media._pending


@pytest.mark.asyncio
async def test_list_dispose_cancels_pending_loads(service_locator, backend, history, search_settings):
    fetch, gates = gated({"cats": (make_entity(1),)})
    backend.fetch_entities.side_effect = fetch
    media = MediaListViewModel(service_locator, backend, history, search_settings)
    history.location_changed.connect(media.on_location_changed)

    history.push("/media?q=cats")
    await settle()
    (task,) = media._pending

    media.dispose()
    await settle()

    assert task.cancelled()
    assert not media._pending
    assert media.entities == ()


@pytest.mark.asyncio
async def test_list_unexpected_failure_is_logged(service_locator, backend, history, search_settings):
    backend.fetch_entities.side_effect = RuntimeError("decoder crashed")
    media = MediaListViewModel(service_locator, backend, history, search_settings)
    history.location_changed.connect(media.on_location_changed)
    messages = []
    sink_id = logger.add(lambda message: messages.append(str(message)), level="ERROR")
    try:
        history.push("/media?q=cats")
        await settle()
    finally:
        logger.remove(sink_id)

    assert not media._pending
    assert any("decoder crashed" in message for message in messages)


@pytest.mark.asyncio
async def test_list_drops_stale_response(service_locator, backend, history, search_settings):
    fetch, gates = gated({"cats": (make_entity(1),), "dogs": (make_entity(2),)})
    backend.fetch_entities.side_effect = fetch
    media = MediaListViewModel(service_locator, backend, history, search_settings)

    first = asyncio.ensure_future(media.load("cats"))
    second = asyncio.ensure_future(media.load("dogs"))
    await settle()

    gates["dogs"].set()
    assert await second is True
    gates["cats"].set()
    assert await first is False

    assert [e.id for e in media.entities] == [2]


@pytest.mark.asyncio
async def test_list_unavailable(service_locator, backend, history, search_settings):
    backend.fetch_entities.side_effect = TransportError("fetch_entities", "refused")
    media = MediaListViewModel(service_locator, backend, history, search_settings)

    assert not await media.load("cats")
    assert media.status == STATUS_UNAVAILABLE


# --- Media detail ---

@pytest.fixture
def detail(service_locator, catalog, backend):
    return MediaDetailViewModel(service_locator, catalog, backend)


@pytest.mark.asyncio
async def test_show_entity(detail, entity):
    assert await detail.show(42) is entity
    assert detail.entity is entity
    assert [t.canonical_name for t in detail.tags] == ["cats"]


@pytest.mark.asyncio
async def test_show_drops_stale_entity(detail, backend):
    fetch, gates = gated({1: make_entity(1), 2: make_entity(2)})
    backend.fetch_entity.side_effect = fetch

    first = asyncio.ensure_future(detail.show(1))
    second = asyncio.ensure_future(detail.show(2))
    await settle()

    gates[2].set()
    await second
    gates[1].set()
    assert await first is None

    assert detail.entity.id == 2
    assert detail.current_id == 2


@pytest.mark.asyncio
async def test_duplicate_tag_leaves_entity_unchanged(detail, backend):
    await detail.show(42)

    result = await detail.add_tag("Animals")

    assert not result.ok
    assert detail.error_message == DUPLICATE_TAG_MESSAGE
    assert [t.canonical_name for t in detail.entity.tags] == ["cats"]
    backend.save_entity.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_new_tag(detail, backend):
    await detail.show(42)
    changed = []
    detail.tagsChanged.connect(lambda tags: changed.append(tags))

    result = await detail.add_tag("Kittens", parent_id=2)

    assert result.ok
    assert [t.canonical_name for t in detail.tags] == ["cats", "kittens"]
    assert len(changed) == 1
    backend.save_entity.assert_awaited_once_with(detail.entity)


@pytest.mark.asyncio
async def test_failed_save_keeps_local_change(detail, backend, sample_tags):
    await detail.show(42)
    backend.save_entity.side_effect = TransportError("save_entity", "refused")

    result = await detail.attach_tag(sample_tags[3])

    assert not result.ok
    assert "save_entity failed" in detail.error_message
    assert [t.canonical_name for t in detail.tags] == ["cats", "dogs"]


@pytest.mark.asyncio
async def test_remove_tag(detail, backend):
    await detail.show(42)
    result = await detail.remove_tag("cats")
    assert result.ok
    assert detail.tags == ()


@pytest.mark.asyncio
async def test_edit_without_entity(detail, backend):
    result = await detail.remove_tag("cats")
    assert result.message == NO_ENTITY_MESSAGE
    backend.save_entity.assert_not_awaited()


@pytest.mark.asyncio
async def test_tag_picker_attaches_existing_tag(detail, backend):
    await detail.mount()
    await detail.show(42)
    picker = detail.tag_picker

    picker.focus()
    picker.set_text("dog")
    picker.arrow_down()
    picker.enter()
    await asyncio.gather(*list(detail._pending))

    assert [t.canonical_name for t in detail.tags] == ["cats", "dogs"]
    backend.add_tag.assert_not_awaited()
    backend.save_entity.assert_awaited_once()
