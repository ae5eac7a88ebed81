"""Persists the last used class name, JSON text and switches."""

import json
import logging
from dataclasses import dataclass, field

from dartize.history import KeyValueStore
from dartize.options import OptionSet

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_KEY = 'dartize-settings'


@dataclass
class Settings:
    """The form state restored on the next session."""
    class_name: str = ''
    json_text: str = ''
    options: OptionSet = field(default_factory=OptionSet)


class SettingsStore:
    """Reads and writes Settings as one JSON document in a key-value store."""

    def __init__(self, store: KeyValueStore, storage_key: str = DEFAULT_SETTINGS_KEY) -> None:
        self.store = store
        self.storage_key = storage_key

    def save(self, class_name: str, json_text: str, options: OptionSet) -> None:
        self.store.set(self.storage_key, json.dumps({
            'className': class_name,
            'jsonInput': json_text,
            'checkboxes': options.to_dict(),
        }))

    def load(self) -> Settings:
        """Returns the saved settings, or defaults when nothing usable is stored."""
        raw = self.store.get(self.storage_key)
        if not raw:
            return Settings()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable settings: %s", e)
            return Settings()
        if not isinstance(data, dict):
            return Settings()
        checkboxes = data.get('checkboxes')
        return Settings(
            class_name=str(data.get('className') or ''),
            json_text=str(data.get('jsonInput') or ''),
            options=OptionSet.from_dict(checkboxes if isinstance(checkboxes, dict) else None),
        )
