from typing import Any, List
import json
import os
from pydantic import BaseModel, Field
from loguru import logger
from .events import Signal


# --- Settings Models ---
class GeneralSettings(BaseModel):
    debug_mode: bool = True
    log_dir: str = "logs"


class ApiSettings(BaseModel):
    base_url: str = "http://127.0.0.1:5000"
    timeout: float = 10.0  # seconds, per request


class SearchSettings(BaseModel):
    query_param: str = "q"
    search_route: str = "/media"
    # Routes without a natural search context; the search box is cleared on them
    reset_routes: List[str] = Field(default_factory=lambda: ["/", "/tags", "/map"])
    max_tree_depth: int = 64


class MapSettings(BaseModel):
    access_token: str = ""
    style: str = "mapbox://styles/mapbox/streets-v11"
    longitude: float = 0.0
    latitude: float = 30.0
    zoom: float = 1.5


class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    map: MapSettings = Field(default_factory=MapSettings)


# --- Manager ---
class ConfigManager:
    """
    Manages client configuration with persistence and reactivity.
    """
    def __init__(self, filepath: str = "config.json"):
        self.filepath = filepath
        self._data = AppConfig()
        self.on_changed = Signal("ConfigChanged")
        self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if section not in AppConfig.model_fields:
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        validated = type(section_obj).model_validate({**section_obj.model_dump(), key: value})
        setattr(self._data, section, validated)
        self._save()
        self.on_changed.emit(section, key, getattr(validated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
                logger.debug(f"Config loaded from {self.filepath}")
            except Exception as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if self.filepath.endswith('.toml'):
            # TOML configs are hand-edited and read-only for us
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except Exception as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
