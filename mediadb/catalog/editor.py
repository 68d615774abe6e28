"""
Catalog - Tag Editor

Adds and removes tag associations on an entity. Local state changes first,
then the entity is persisted; a failed save is not rolled back.
"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from mediadb.catalog.backend import CatalogBackend
from mediadb.catalog.models import ROOT_TAG_ID, Entity, Tag
from mediadb.catalog.service import TagCatalogService

DUPLICATE_TAG_MESSAGE = "Could not add tag since it already exists!"
EMPTY_TAG_MESSAGE = "Tag name must not be empty"
ALREADY_ATTACHED_MESSAGE = "Tag is already added"
NOT_ATTACHED_MESSAGE = "Tag is not attached to this item"


@dataclass
class TagEditResult:
    """Outcome of a tag edit. Rejections carry a user-facing message."""
    ok: bool
    tag: Optional[Tag] = None
    message: str = ""

    @classmethod
    def accepted(cls, tag: Optional[Tag] = None) -> "TagEditResult":
        return cls(ok=True, tag=tag)

    @classmethod
    def rejected(cls, message: str) -> "TagEditResult":
        return cls(ok=False, message=message)


class TagEditor:
    """
    Tag mutation workflow shared by the tag browser and the media detail view.

    Usage:
        editor = TagEditor(catalog, backend)
        result = await editor.add_tag(entity, "Animals")
        if not result.ok:
            show(result.message)
    """

    def __init__(self, catalog: TagCatalogService, backend: CatalogBackend):
        self.catalog = catalog
        self.backend = backend

    async def create_tag(self, name: str, parent_id: int = ROOT_TAG_ID) -> TagEditResult:
        """
        Create a new catalog tag unless the name is already known.

        Args:
            name: Candidate display name
            parent_id: Parent tag id, ROOT_TAG_ID for a top-level tag

        Returns:
            Accepted result with the created tag, or a rejection

        Raises:
            TransportError: the catalog could not be loaded or the tag created
        """
        if not name.strip():
            return TagEditResult.rejected(EMPTY_TAG_MESSAGE)

        await self.catalog.ensure_loaded()
        if self.catalog.is_taken(name):
            logger.debug(f"Rejected duplicate tag name: {name!r}")
            return TagEditResult.rejected(DUPLICATE_TAG_MESSAGE)

        tag = await self.catalog.create_tag(name, parent_id)
        return TagEditResult.accepted(tag)

    async def add_tag(self, entity: Entity, name: str, parent_id: int = ROOT_TAG_ID) -> TagEditResult:
        """
        Create a tag and attach it to ``entity``.

        A rejected name leaves the entity untouched and nothing is persisted.
        """
        result = await self.create_tag(name, parent_id)
        if not result.ok:
            return result

        entity.tags.append(result.tag)
        await self._persist(entity)
        return result

    async def attach_tag(self, entity: Entity, tag: Tag) -> TagEditResult:
        """Attach an existing catalog tag to ``entity``."""
        if entity.has_tag(tag.canonical_name):
            return TagEditResult.rejected(ALREADY_ATTACHED_MESSAGE)

        entity.tags.append(tag)
        await self._persist(entity)
        return TagEditResult.accepted(tag)

    async def remove_tag(self, entity: Entity, canonical_name: str) -> TagEditResult:
        """Detach the tag with ``canonical_name`` from ``entity``."""
        removed = [tag for tag in entity.tags if tag.canonical_name == canonical_name]
        if not removed:
            return TagEditResult.rejected(NOT_ATTACHED_MESSAGE)

        entity.tags = [tag for tag in entity.tags if tag.canonical_name != canonical_name]
        await self._persist(entity)
        return TagEditResult.accepted(removed[0])

    async def _persist(self, entity: Entity) -> None:
        await self.backend.save_entity(entity)
        logger.info(f"Entity {entity.id} saved with {len(entity.tags)} tags")
