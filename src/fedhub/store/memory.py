import copy
import logging
from typing import Optional

from fedhub.exception import AlreadyExists
from fedhub.store import COLLECTIONS
from fedhub.store import Store
from fedhub.store import StoreSession

logger = logging.getLogger(__name__)


class MemorySession(StoreSession):

    def __init__(self, db: dict):
        self._db = db

    def find(self, collection, key) -> Optional[dict]:
        _rec = self._db[collection].get(key)
        if _rec is None:
            return None
        return copy.deepcopy(_rec)

    def add(self, collection, key, record):
        if key in self._db[collection]:
            raise AlreadyExists(collection, key)
        self._db[collection][key] = copy.deepcopy(record)

    def keys(self, collection):
        return list(self._db[collection].keys())


class MemoryStore(Store):
    """Keeps everything in a dictionary. Only useful for tests and development."""

    def __init__(self, **kwargs):
        self._db = {}

    def ensure_schema(self):
        for collection in COLLECTIONS:
            self._db.setdefault(collection, {})

    def open(self):
        return MemorySession(self._db)

    def dumps(self):
        return copy.deepcopy(self._db)
