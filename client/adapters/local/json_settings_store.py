"""JsonFileSettingsStore - keeps the user's backend URL override in a JSON file."""

import json
import logging
from pathlib import Path
from typing import Optional

from ports.settings_store import SettingsStorePort

logger = logging.getLogger(__name__)

API_URL_KEY = "api_url"


class JsonFileSettingsStore(SettingsStorePort):
    def __init__(self, settings_file: str):
        self._settings_file = Path(settings_file)

    @property
    def path(self) -> Path:
        return self._settings_file

    def _load(self) -> dict:
        try:
            with open(self._settings_file) as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.warning(f"Could not load settings file: {e}")
            return {}

    def _save(self, data: dict) -> None:
        self._settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self._settings_file, "w") as f:
            json.dump(data, f, indent=2)

    def get_api_url(self) -> Optional[str]:
        value = self._load().get(API_URL_KEY)
        return value if isinstance(value, str) and value.strip() else None

    def set_api_url(self, url: str) -> None:
        data = self._load()
        data[API_URL_KEY] = url
        self._save(data)

    def clear_api_url(self) -> None:
        data = self._load()
        if data.pop(API_URL_KEY, None) is not None:
            self._save(data)
