"""Bounded history of past conversions kept in a key-value store.

The history is stored as one JSON document under a single key, newest entry
first. Stores are plain string key-value stores; a JSON file backed store is
provided for the command line.
"""

# pylint: disable=line-too-long

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from dartize.schema_inference import ParseError

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = 'dartize-history'
DEFAULT_HISTORY_SIZE = 20
EXTENDED_HISTORY_SIZE = 50
PREVIEW_KEYS = 3


class KeyValueStore:
    """A persistent string key-value store."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """Keeps values in a dict, for tests and embedding."""

    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)

    def keys(self) -> List[str]:
        return list(self.values.keys())


class JsonFileKeyValueStore(KeyValueStore):
    """
    Keeps values in a JSON object file.

    Every write rewrites the whole file through a temporary file that replaces
    the existing file, so readers never observe a partial document.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.file_path):
            return {}
        with open(self.file_path, 'r', encoding='utf-8') as f:
            content = f.read().strip()
        if not content:
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable store %s: %s", self.file_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: not a JSON object", self.file_path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, values: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.file_path))
        os.makedirs(directory, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=directory, prefix='.dartize-', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(values, f, indent=2)
            os.replace(temp_path, self.file_path)
        except OSError:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def remove(self, key: str) -> None:
        values = self._read()
        if key in values:
            del values[key]
            self._write(values)

    def keys(self) -> List[str]:
        return list(self._read().keys())


def generate_preview(json_text: str) -> str:
    """Summarizes a JSON document by its first top-level keys."""
    try:
        value = json.loads(json_text)
    except (json.JSONDecodeError, TypeError):
        return 'Invalid JSON'
    if isinstance(value, list):
        value = value[0] if value else {}
    if not isinstance(value, dict) or len(value) == 0:
        return 'Empty'
    keys = list(value.keys())
    preview = ', '.join(keys[:PREVIEW_KEYS])
    if len(keys) > PREVIEW_KEYS:
        preview += '...'
    return preview


def format_timestamp(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Formats a timestamp relative to now: Just now, 5m ago, 3h ago, 2d ago, or the date."""
    if now is None:
        now = datetime.now(timezone.utc)
    minutes = int((now - timestamp).total_seconds() // 60)
    if minutes < 1:
        return 'Just now'
    if minutes < 60:
        return f'{minutes}m ago'
    hours = minutes // 60
    if hours < 24:
        return f'{hours}h ago'
    days = hours // 24
    if days < 7:
        return f'{days}d ago'
    return timestamp.date().isoformat()


@dataclass
class HistoryEntry:
    """One recorded conversion."""
    class_name: str
    json_text: str
    timestamp: datetime

    @property
    def preview(self) -> str:
        return generate_preview(self.json_text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'className': self.class_name,
            'jsonString': self.json_text,
            'timestamp': self.timestamp.isoformat(),
            'preview': self.preview,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HistoryEntry':
        """Reads an entry; raises KeyError/ValueError/TypeError on malformed data."""
        timestamp = data['timestamp']
        if isinstance(timestamp, (int, float)):
            # epoch milliseconds
            parsed = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
        else:
            parsed = datetime.fromisoformat(str(timestamp).replace('Z', '+00:00'))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return cls(class_name=str(data['className']), json_text=str(data['jsonString']), timestamp=parsed)


class HistoryStore:
    """Keeps the most recent conversions, one entry per class name."""

    def __init__(self, store: KeyValueStore, storage_key: str = DEFAULT_HISTORY_KEY, max_items: int = DEFAULT_HISTORY_SIZE) -> None:
        if max_items < 1:
            raise ValueError('max_items must be at least 1')
        self.store = store
        self.storage_key = storage_key
        self.max_items = max_items

    def _load(self) -> List[HistoryEntry]:
        raw = self.store.get(self.storage_key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Discarding unreadable history: %s", e)
            return []
        if isinstance(data, dict):
            data = list(data.values())
        if not isinstance(data, list):
            logger.warning("Discarding history: unexpected %s document", type(data).__name__)
            return []
        entries = []
        for item in data:
            try:
                entries.append(HistoryEntry.from_dict(item))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Skipping malformed history entry: %s", e)
        return entries

    def _save(self, entries: Iterable[HistoryEntry]) -> None:
        self.store.set(self.storage_key, json.dumps([entry.to_dict() for entry in entries]))

    def _bounded(self, entries: List[HistoryEntry]) -> List[HistoryEntry]:
        entries = sorted(entries, key=lambda entry: entry.timestamp, reverse=True)
        evicted = entries[self.max_items:]
        if evicted:
            logger.debug("Evicting %d history entries", len(evicted))
        return entries[:self.max_items]

    def entries(self) -> List[HistoryEntry]:
        """All entries, most recently recorded first."""
        return self._load()[:self.max_items]

    def get(self, class_name: str) -> Optional[HistoryEntry]:
        return next((entry for entry in self._load() if entry.class_name == class_name), None)

    def record(self, class_name: str, json_text: str, timestamp: Optional[datetime] = None) -> HistoryEntry:
        """
        Records a conversion as the most recent entry.

        An existing entry for the same class name is replaced, and the oldest
        entries beyond capacity are evicted.
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        entry = HistoryEntry(class_name=class_name, json_text=json_text, timestamp=timestamp)
        others = [e for e in self._load() if e.class_name != class_name]
        # the new entry stays first even when clocks disagree
        entries = [entry] + self._bounded(others)[:self.max_items - 1]
        self._save(entries)
        return entry

    def delete(self, class_name: str) -> bool:
        entries = self._load()
        remaining = [e for e in entries if e.class_name != class_name]
        if len(remaining) == len(entries):
            return False
        self._save(remaining)
        return True

    def clear(self) -> None:
        self.store.remove(self.storage_key)

    def export_json(self) -> str:
        """Exports the history as a JSON object keyed by class name."""
        return json.dumps({entry.class_name: entry.to_dict() for entry in self.entries()}, indent=2)

    def import_json(self, json_text: str) -> int:
        """
        Merges an exported history into this one; imported entries win.

        Accepts the object form written by export_json and a plain list of
        entries. Returns the number of imported entries.
        """
        try:
            data = json.loads(json_text)
        except json.JSONDecodeError as e:
            raise ParseError(str(e), 'history import') from e
        items = list(data.values()) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ParseError('Invalid file format', 'history import')
        try:
            imported = [HistoryEntry.from_dict(item) for item in items]
        except (KeyError, ValueError, TypeError) as e:
            raise ParseError(f'Invalid history entry: {e}', 'history import') from e
        merged = {entry.class_name: entry for entry in self._load()}
        for entry in imported:
            merged[entry.class_name] = entry
        self._save(self._bounded(list(merged.values())))
        return len(imported)


def open_history(history_file: str, max_items: int = DEFAULT_HISTORY_SIZE) -> HistoryStore:
    """Opens the history kept in a JSON file"""
    return HistoryStore(JsonFileKeyValueStore(history_file), max_items=max_items)


def list_history(history_file: str) -> None:
    """Prints the recorded conversions, newest first"""
    entries = open_history(history_file).entries()
    if not entries:
        print('No history yet')
        return
    for entry in entries:
        print(f'{entry.class_name}\t{format_timestamp(entry.timestamp)}\t{entry.preview}')


def show_history(history_file: str, class_name: str) -> None:
    """Prints the JSON recorded for a class name"""
    entry = open_history(history_file).get(class_name)
    if entry is None:
        raise ValueError(f'No history entry for {class_name}')
    print(entry.json_text)


def delete_history(history_file: str, class_name: str) -> None:
    """Deletes the entry recorded for a class name"""
    if not open_history(history_file).delete(class_name):
        raise ValueError(f'No history entry for {class_name}')
    print(f'Deleted: {class_name}')


def clear_history(history_file: str) -> None:
    """Deletes all recorded conversions"""
    open_history(history_file).clear()
    print('History cleared')


def export_history(history_file: str, output_file_path: str) -> None:
    """Writes the history as a JSON document"""
    with open(output_file_path, 'w', encoding='utf-8') as f:
        f.write(open_history(history_file).export_json())


def import_history(history_file: str, input_file_path: str) -> None:
    """Merges an exported history document into the history"""
    with open(input_file_path, 'r', encoding='utf-8') as f:
        count = open_history(history_file).import_json(f.read())
    print(f'Imported {count} history entries')
