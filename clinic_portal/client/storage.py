# clinic_portal/client/storage.py
"""
Browser-style local storage for the offline client.

Values are strings, as in ``window.localStorage``; callers serialize JSON
themselves. Every backend notifies its listeners on writes, which plays the
role of the browser's cross-tab ``storage`` event.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

StorageListener = Callable[[str], None]
EventListener = Callable[[str], None]


class LocalStorage(ABC):
    def __init__(self):
        self._listeners: List[StorageListener] = []

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def _write(self, key: str, value: Optional[str]) -> None:
        """Store ``value`` under ``key``; ``None`` removes the key."""

    def set_item(self, key: str, value: str) -> None:
        self._write(key, value)
        self._notify(key)

    def remove_item(self, key: str) -> None:
        self._write(key, None)
        self._notify(key)

    def add_listener(self, listener: StorageListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StorageListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)

    # JSON helpers

    def get_json(self, key: str, default: Any = None) -> Any:
        """Parsed value under ``key``; ``default`` when missing or corrupt."""
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding corrupt local data under %s", key)
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))


class MemoryStorage(LocalStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__()
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def _write(self, key: str, value: Optional[str]) -> None:
        if value is None:
            self._items.pop(key, None)
        else:
            self._items[key] = value


class JsonFileStorage(LocalStorage):
    """
    All keys in one JSON document on disk.

    The file is re-read on every access and replaced atomically on every
    write, so several processes sharing it race last-write-wins.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except ValueError:
            logger.warning("Local storage file %s is corrupt; starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            handle = os.fdopen(fd, "w", encoding="utf-8")
        except BaseException:
            os.close(fd)
            os.unlink(tmp_path)
            raise
        try:
            with handle:
                json.dump(data, handle)
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def _write(self, key: str, value: Optional[str]) -> None:
        data = self._load()
        if value is None:
            if key not in data:
                return
            data.pop(key)
        else:
            data[key] = value
        self._dump(data)


class ChangeNotifier:
    """Same-process change events, named like the browser's custom events."""

    def __init__(self):
        self._listeners: Dict[str, List[EventListener]] = defaultdict(list)

    def subscribe(self, event: str, listener: EventListener) -> Callable[[], None]:
        """Register ``listener`` for ``event``; returns an unsubscribe callable."""
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def dispatch(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            listener(event)
