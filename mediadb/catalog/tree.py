"""
Catalog - Tag Tree

Builds the browsable tag hierarchy from the flat tag list. Tags are stored
once in an arena keyed by id together with a parent -> children index, so
each level is a dictionary lookup instead of a scan of the whole list.
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from mediadb.catalog.models import ROOT_TAG_ID, Tag
from mediadb.core.errors import TagHierarchyError

DEFAULT_MAX_DEPTH = 64


@dataclass
class TagTreeNode:
    """One tag in the hierarchy; ``children`` is None for a leaf."""
    tag: Tag
    children: Optional[List["TagTreeNode"]] = None

    @property
    def name(self) -> str:
        return self.tag.name

    @property
    def canonical_name(self) -> str:
        return self.tag.canonical_name


@dataclass
class TagTreeRow:
    """A tree node flattened for list display."""
    tag: Tag
    depth: int
    has_children: bool


def _sort_key(tag: Tag) -> str:
    return tag.name.lower()


class TagTree:
    """
    Tag hierarchy over a flat catalog.

    Example:
        tree = TagTree(tags)
        roots = tree.build_subtree()           # children of ROOT_TAG_ID
        rows = tree.flatten()                  # depth-first, for list views
    """

    def __init__(self, tags: Iterable[Tag] = (), max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self._tags: Dict[int, Tag] = {}
        self._children: Dict[int, List[int]] = defaultdict(list)
        for tag in tags:
            self.add(tag)

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag_id: int) -> bool:
        return tag_id in self._tags

    def add(self, tag: Tag) -> None:
        """Insert or replace a tag (a replaced tag may move to a new parent)."""
        previous = self._tags.get(tag.id)
        if previous is not None:
            self._children[previous.parent_id].remove(tag.id)
        self._tags[tag.id] = tag
        self._children[tag.parent_id].append(tag.id)

    def get(self, tag_id: int) -> Optional[Tag]:
        return self._tags.get(tag_id)

    def children(self, parent_id: int = ROOT_TAG_ID) -> List[Tag]:
        """Direct children sorted case-insensitively by display name."""
        tags = [self._tags[tag_id] for tag_id in self._children.get(parent_id, [])]
        return sorted(tags, key=_sort_key)

    def build_subtree(self, parent_id: int = ROOT_TAG_ID) -> Optional[List[TagTreeNode]]:
        """
        Build the hierarchy below ``parent_id``.

        Returns:
            Sorted child nodes, or None when ``parent_id`` has no children

        Raises:
            TagHierarchyError: nesting exceeds ``max_depth`` (parent cycle)
        """
        return self._build(parent_id, 0)

    def _build(self, parent_id: int, depth: int) -> Optional[List[TagTreeNode]]:
        children = self.children(parent_id)
        if not children:
            return None
        if depth >= self.max_depth:
            raise TagHierarchyError(parent_id, self.max_depth)
        return [TagTreeNode(tag=child, children=self._build(child.id, depth + 1)) for child in children]

    def flatten(self, parent_id: int = ROOT_TAG_ID) -> List[TagTreeRow]:
        """Depth-first rows of the subtree below ``parent_id``."""
        rows: List[TagTreeRow] = []

        def visit(nodes: Optional[List[TagTreeNode]], depth: int):
            for node in nodes or []:
                rows.append(TagTreeRow(tag=node.tag, depth=depth, has_children=bool(node.children)))
                visit(node.children, depth + 1)

        visit(self.build_subtree(parent_id), 0)
        return rows

    def path_of(self, tag_id: int) -> List[str]:
        """
        Display names from the root down to ``tag_id``.

        Raises:
            TagHierarchyError: the parent chain is longer than ``max_depth``
        """
        names: List[str] = []
        current = self._tags.get(tag_id)
        while current is not None:
            if len(names) >= self.max_depth:
                raise TagHierarchyError(tag_id, self.max_depth)
            names.append(current.name)
            current = self._tags.get(current.parent_id) if current.parent_id != ROOT_TAG_ID else None
        names.reverse()
        return names


def build_subtree(
    catalog: Iterable[Tag],
    parent_id: int = ROOT_TAG_ID,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Optional[List[TagTreeNode]]:
    """Convenience wrapper: index ``catalog`` and build the subtree below ``parent_id``."""
    return TagTree(catalog, max_depth=max_depth).build_subtree(parent_id)
