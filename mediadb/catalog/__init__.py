"""
Catalog - tags, media entities and the server they live on.
"""
from mediadb.catalog.models import ROOT_TAG_ID, Tag, Entity, GeoLocation
from mediadb.catalog.backend import CatalogBackend, MediaApiClient
from mediadb.catalog.service import TagCatalogService
from mediadb.catalog.tree import TagTree, TagTreeNode, TagTreeRow, build_subtree
from mediadb.catalog.editor import TagEditor, TagEditResult

__all__ = [
    "ROOT_TAG_ID",
    "Tag",
    "Entity",
    "GeoLocation",
    "CatalogBackend",
    "MediaApiClient",
    "TagCatalogService",
    "TagTree",
    "TagTreeNode",
    "TagTreeRow",
    "build_subtree",
    "TagEditor",
    "TagEditResult",
]
