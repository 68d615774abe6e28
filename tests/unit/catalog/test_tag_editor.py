"""
Tag editing workflow: creation with duplicate detection, attach and remove.
"""
import pytest

from mediadb.catalog.editor import (
    ALREADY_ATTACHED_MESSAGE,
    DUPLICATE_TAG_MESSAGE,
    EMPTY_TAG_MESSAGE,
    NOT_ATTACHED_MESSAGE,
    TagEditor,
)
from mediadb.core.errors import TransportError
from tests.factories import make_entity


@pytest.fixture
def editor(catalog, backend):
    return TagEditor(catalog, backend)


@pytest.mark.asyncio
async def test_duplicate_name_is_rejected_without_saving(editor, backend, sample_tags):
    entity = make_entity(7, tags=[sample_tags[1]])

    result = await editor.add_tag(entity, "Animals")

    assert not result.ok
    assert result.message == DUPLICATE_TAG_MESSAGE
    assert [t.canonical_name for t in entity.tags] == ["cats"]
    backend.add_tag.assert_not_awaited()
    backend.save_entity.assert_not_awaited()


@pytest.mark.asyncio
async def test_duplicate_match_covers_canonical_name(editor):
    result = await editor.create_tag("catalonia")
    assert result.message == DUPLICATE_TAG_MESSAGE


@pytest.mark.asyncio
async def test_duplicate_match_is_case_sensitive(editor, backend):
    result = await editor.create_tag("ANIMALS")
    assert result.ok
    backend.add_tag.assert_awaited_once_with(0, "ANIMALS")


@pytest.mark.asyncio
async def test_empty_name_is_rejected(editor, backend):
    result = await editor.create_tag("   ")
    assert result.message == EMPTY_TAG_MESSAGE
    backend.fetch_autocomplete_tags.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_tag_creates_attaches_and_saves(editor, backend, catalog):
    entity = make_entity(7)
    added = []
    catalog.tag_added.connect(added.append)

    result = await editor.add_tag(entity, "Horses", parent_id=1)

    assert result.ok
    assert result.tag.id == 100
    assert result.tag.path == ["Animals", "Horses"]
    assert entity.has_tag("horses")
    backend.add_tag.assert_awaited_once_with(1, "Horses")
    backend.save_entity.assert_awaited_once_with(entity)
    assert added == [result.tag]
    assert catalog.find("horses") == result.tag


@pytest.mark.asyncio
async def test_failed_save_is_not_rolled_back(editor, backend):
    entity = make_entity(7)
    backend.save_entity.side_effect = TransportError("save_entity", "connection refused")

    with pytest.raises(TransportError):
        await editor.add_tag(entity, "Horses")

    assert entity.has_tag("horses")


@pytest.mark.asyncio
async def test_attach_existing_tag(editor, backend, sample_tags):
    entity = make_entity(7)

    result = await editor.attach_tag(entity, sample_tags[3])

    assert result.ok
    assert entity.has_tag("dogs")
    backend.add_tag.assert_not_awaited()
    backend.save_entity.assert_awaited_once_with(entity)


@pytest.mark.asyncio
async def test_attach_already_attached(editor, backend, sample_tags):
    entity = make_entity(7, tags=[sample_tags[3]])

    result = await editor.attach_tag(entity, sample_tags[3])

    assert result.message == ALREADY_ATTACHED_MESSAGE
    assert len(entity.tags) == 1
    backend.save_entity.assert_not_awaited()


@pytest.mark.asyncio
async def test_remove_tag(editor, backend, sample_tags):
    entity = make_entity(7, tags=[sample_tags[1], sample_tags[3]])

    result = await editor.remove_tag(entity, "cats")

    assert result.ok
    assert result.tag == sample_tags[1]
    assert [t.canonical_name for t in entity.tags] == ["dogs"]
    backend.save_entity.assert_awaited_once_with(entity)


@pytest.mark.asyncio
async def test_remove_missing_tag(editor, backend):
    entity = make_entity(7)
    result = await editor.remove_tag(entity, "cats")
    assert result.message == NOT_ATTACHED_MESSAGE
    backend.save_entity.assert_not_awaited()
