"""
Storage Backends

Small key-value stores holding the engine's persisted state as JSON strings.
Every backend supports compare_and_set, which the statistics store uses as
its single serialization point when more than one writer shares a backend.
"""

import json
import os
import tempfile
import threading
from typing import Dict, List, Optional

from pymongo.errors import DuplicateKeyError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..utils.game_logger import game_logger


class KeyValueStore:
    """Interface shared by all storage backends."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        """
        Write value only if the stored value still equals expected.

        expected=None means the key must not exist yet.

        Returns:
            True if the value was written, False if another writer got there first
        """
        raise NotImplementedError

    def keys(self, prefix: str = "") -> List[str]:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store. Nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        with self._lock:
            if self._data.get(key) != expected:
                return False
            self._data[key] = value
            return True

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object on disk.

    Writes go to a temporary file that replaces the original, so a crash
    mid-write leaves the previous content intact. A file that does not
    decode is reported and treated as empty; the next write replaces it.
    I/O errors while reading for an update are raised to the caller.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _load(self, for_update: bool = False) -> Dict[str, str]:
        """
        Read the whole file.

        A file that cannot be read is reported and treated as empty for
        lookups. Before an update the OSError propagates instead, so the
        existing content is never replaced by a partial copy.
        """
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            if for_update:
                raise
            game_logger.log_corrupt_state(self.path, str(e))
            return {}
        except ValueError as e:
            # JSONDecodeError and undecodable bytes
            game_logger.log_corrupt_state(self.path, str(e))
            return {}

        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            game_logger.log_corrupt_state(self.path, "expected an object of string values")
            return {}
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.worldle-', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load(for_update=True)
            data[key] = value
            self._dump(data)

    def delete(self, key: str) -> bool:
        with self._lock:
            data = self._load(for_update=True)
            if key not in data:
                return False
            del data[key]
            self._dump(data)
            return True

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        with self._lock:
            data = self._load(for_update=True)
            if data.get(key) != expected:
                return False
            data[key] = value
            self._dump(data)
            return True

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._load() if k.startswith(prefix))


class MongoStore(KeyValueStore):
    """
    Store backed by a MongoDB collection, one document per key:
    {"_id": key, "value": "<json string>"}.
    """

    def __init__(self, mongo_uri: Optional[str] = None, db_name: str = 'worldle',
                 collection: str = 'state', client: Optional[MongoClient] = None):
        """
        Initialize the store with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database holding the state collection
            collection: Collection name
            client: Already-built client, used instead of mongo_uri when given
        """
        if client is None:
            if not mongo_uri:
                raise ValueError("MONGO_URI is required for the mongo storage backend")
            client = MongoClient(mongo_uri, server_api=ServerApi('1'))
            # Fail early when the server is unreachable
            client.admin.command('ping')

        self.client = client
        self.collection = client[db_name][collection]

    def get(self, key: str) -> Optional[str]:
        document = self.collection.find_one({"_id": key})
        return document["value"] if document else None

    def set(self, key: str, value: str) -> None:
        self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)

    def delete(self, key: str) -> bool:
        result = self.collection.delete_one({"_id": key})
        return result.deleted_count > 0

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        if expected is None:
            try:
                self.collection.insert_one({"_id": key, "value": value})
                return True
            except DuplicateKeyError:
                return False

        result = self.collection.update_one(
            {"_id": key, "value": expected},
            {"$set": {"value": value}}
        )
        return result.matched_count == 1

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(
            doc["_id"] for doc in self.collection.find({}, {"_id": 1})
            if doc["_id"].startswith(prefix)
        )


def create_store(config_class) -> KeyValueStore:
    """
    Build the storage backend named by config_class.STORAGE_BACKEND.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = (getattr(config_class, 'STORAGE_BACKEND', 'memory') or 'memory').lower()

    if backend == 'memory':
        return MemoryStore()
    if backend == 'json':
        return JsonFileStore(config_class.STORAGE_PATH)
    if backend == 'mongo':
        return MongoStore(config_class.MONGO_URI, db_name=config_class.MONGO_DB)

    raise ValueError(f"Unknown storage backend: {backend}")
