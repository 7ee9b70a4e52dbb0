import pathlib
import re
from typing import Dict, List, Optional


class StorageHelper:
    """
    Minimal string key/value storage used for saves and the profile registry.
    Values are raw strings (normally JSON) so that corrupt data reaches the loader untouched.
    """

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str):
        raise NotImplementedError

    def remove_item(self, key: str):
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class MemoryStorage(StorageHelper):
    """Dictionary-backed storage for tests and short-lived sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = value

    def remove_item(self, key: str):
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items.keys())


class FileStorage(StorageHelper):
    """Stores each key as <key>.json inside a directory."""

    _SAFE_KEY = re.compile(r'^[A-Za-z0-9_.\-]+$')

    def __init__(self, directory: pathlib.Path):
        self.directory = pathlib.Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> pathlib.Path:
        if not self._SAFE_KEY.match(key) or key.startswith('.'):
            raise ValueError(f"Storage key '{key}' contains unsupported characters.")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        file_path = self._path_for(key)
        if not file_path.exists():
            return None
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()

    def set_item(self, key: str, value: str):
        file_path = self._path_for(key)
        temp_path = file_path.with_suffix(".json.tmp")
        with open(temp_path, 'w', encoding='utf-8') as f:
            f.write(value)
        temp_path.replace(file_path)

    def remove_item(self, key: str):
        file_path = self._path_for(key)
        if file_path.exists():
            file_path.unlink()

    def keys(self) -> List[str]:
        return sorted(p.stem for p in self.directory.glob("*.json"))
