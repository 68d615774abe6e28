"""
Catalog - Data Models

Tags form a parent/child hierarchy rooted at ROOT_TAG_ID. Entities are media
items (images, videos) carrying their own set of tags.
"""
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

# Sentinel parent id for top-level tags
ROOT_TAG_ID = 0


class Tag(BaseModel):
    """
    A catalog tag.

    ``canonical_name`` is the unique, URL-safe identifier used for matching and
    query strings; ``name`` is the display name and may be duplicated or
    localized. ``path`` holds the display names from the root down to this tag
    and is only filled in by the autocomplete listing.
    """
    id: int
    name: str
    canonical_name: str
    parent_id: int = Field(
        default=ROOT_TAG_ID,
        validation_alias=AliasChoices("parent_id", "pid"),
    )
    path: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten_autocomplete_item(cls, data: Any) -> Any:
        # Autocomplete items arrive as {"tag": {...}, "path": [...]}
        if isinstance(data, dict) and isinstance(data.get("tag"), dict):
            flat = dict(data["tag"])
            flat.setdefault("path", data.get("path") or [])
            return flat
        return data

    @field_validator("parent_id", mode="before")
    @classmethod
    def _none_is_root(cls, value: Any) -> Any:
        return ROOT_TAG_ID if value is None else value

    @property
    def display_path(self) -> str:
        return "/".join(self.path) if self.path else self.name

    def __str__(self) -> str:
        return f"Tag: {self.canonical_name} ({self.display_path})"


class GeoLocation(BaseModel):
    latitude: float
    longitude: float


class Entity(BaseModel):
    """
    A media item. Summary listings only carry id, thumbnail and media type;
    the full record adds tags, location and capture metadata.
    """
    id: int
    path: str = ""
    thumbnail_path: str = ""
    preview_path: str = ""
    media_type: str = "image"
    tags: List[Tag] = Field(default_factory=list)
    location: Optional[GeoLocation] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def has_tag(self, canonical_name: str) -> bool:
        return any(tag.canonical_name == canonical_name for tag in self.tags)
