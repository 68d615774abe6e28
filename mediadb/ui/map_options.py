"""
Map widget wiring.

The map widget itself is external; it receives its access token, style and
initial view from MapSettings instead of module-level constants.
"""
from typing import Any, Dict, Iterable

from mediadb.catalog.models import Entity
from mediadb.core.config import MapSettings


def map_options(settings: MapSettings) -> Dict[str, Any]:
    """Constructor options for the map widget."""
    return {
        "accessToken": settings.access_token,
        "style": settings.style,
        "center": [settings.longitude, settings.latitude],
        "zoom": settings.zoom,
    }


def entity_features(entities: Iterable[Entity]) -> Dict[str, Any]:
    """GeoJSON point features for every entity that has a location."""
    features = []
    for entity in entities:
        if entity.location is None:
            continue
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": [entity.location.longitude, entity.location.latitude],
            },
            "properties": {
                "id": entity.id,
                "thumbnail_path": entity.thumbnail_path,
            },
        })
    return {"type": "FeatureCollection", "features": features}
