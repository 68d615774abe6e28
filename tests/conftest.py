import pytest
from unittest.mock import AsyncMock, MagicMock

from mediadb.catalog.models import Entity, Tag
from mediadb.catalog.service import TagCatalogService
from mediadb.core.config import SearchSettings
from mediadb.ui.navigation.service import HistoryService
from tests.factories import make_tag


@pytest.fixture
def sample_tags():
    return [
        make_tag(1, "Animals"),
        make_tag(2, "Cats", parent_id=1, path=["Animals", "Cats"]),
        make_tag(3, "birds", parent_id=1, path=["Animals", "birds"]),
        make_tag(4, "Dogs", parent_id=1, path=["Animals", "Dogs"]),
        make_tag(5, "Places"),
        make_tag(6, "Catalonia", parent_id=5, path=["Places", "Catalonia"]),
    ]


@pytest.fixture
def entity(sample_tags):
    return Entity(id=42, path="2020/cat.jpg", thumbnail_path="thumbs/cat.jpg", tags=[sample_tags[1]])


@pytest.fixture
def backend(sample_tags, entity):
    """CatalogBackend double; the server echoes saves and numbers new tags from 100."""
    mock = MagicMock()
    mock.fetch_autocomplete_tags = AsyncMock(return_value=list(sample_tags))
    mock.fetch_tags = AsyncMock(return_value=[tag.model_copy(update={"path": []}) for tag in sample_tags])
    mock.add_tag = AsyncMock(
        side_effect=lambda parent_id, name: Tag(
            id=100, name=name, canonical_name=name.lower(), parent_id=parent_id
        )
    )
    mock.fetch_entities = AsyncMock(return_value=[entity])
    mock.fetch_entity = AsyncMock(return_value=entity)
    mock.save_entity = AsyncMock(side_effect=lambda saved: saved)
    return mock


@pytest.fixture
def service_locator(backend):
    mock = MagicMock()
    mock.get_system = MagicMock(return_value=backend)
    return mock


@pytest.fixture
def catalog(service_locator):
    return TagCatalogService(service_locator, MagicMock())


@pytest.fixture
def history(service_locator):
    return HistoryService(service_locator, MagicMock())


@pytest.fixture
def search_settings():
    return SearchSettings()
