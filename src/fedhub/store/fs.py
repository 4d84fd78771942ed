import copy
import logging
import os
from typing import Optional

from cryptojwt.utils import importer
from filelock import FileLock
from idpyoidc.storage.abfile import AbstractFileSystem

from fedhub.exception import AlreadyExists
from fedhub.exception import StoreUnavailable
from fedhub.store import COLLECTIONS
from fedhub.store import Store
from fedhub.store import StoreSession

logger = logging.getLogger(__name__)


class FileSystemSession(StoreSession):

    def __init__(self, base_path, key_conv, value_conv):
        self.base_path = base_path
        self.key_conv = importer(key_conv)()
        self._collection = {}
        for name in COLLECTIONS:
            self._collection[name] = AbstractFileSystem(fdir=os.path.join(base_path, name),
                                                        key_conv=key_conv,
                                                        value_conv=value_conv)

    def _lock(self, collection):
        return FileLock(os.path.join(self.base_path, f"{collection}.lock"))

    def _on_disk(self, collection, key) -> bool:
        # The AbstractFileSystem cache only knows what was there when the session opened
        _fname = os.path.join(self.base_path, collection, self.key_conv.serialize(key))
        return os.path.isfile(_fname)

    def find(self, collection, key) -> Optional[dict]:
        if not self._on_disk(collection, key):
            return None
        return copy.deepcopy(self._collection[collection][key])

    def add(self, collection, key, record):
        # One file per record, check and write under the same lock
        with self._lock(collection):
            if self._on_disk(collection, key):
                raise AlreadyExists(collection, key)
            self._collection[collection][key] = copy.deepcopy(record)

    def keys(self, collection):
        _db = self._collection[collection]
        _db.synch()
        return list(_db.keys())


class FileSystemStore(Store):
    """
    One directory per collection and one file per record. The uniqueness guarantee
    only holds for processes sharing the same file system.
    """

    def __init__(self,
                 fdir: str = "",
                 key_conv: Optional[str] = "idpyoidc.util.QPKey",
                 value_conv: Optional[str] = "idpyoidc.util.JSON",
                 **kwargs):
        self.fdir = fdir
        self.key_conv = key_conv
        self.value_conv = value_conv

    def ensure_schema(self):
        try:
            for collection in COLLECTIONS:
                os.makedirs(os.path.join(self.fdir, collection), exist_ok=True)
        except OSError as err:
            raise StoreUnavailable(f"Can not use '{self.fdir}': {err}")

    def open(self):
        if not os.path.isdir(self.fdir):
            raise StoreUnavailable(f"No store at '{self.fdir}'")
        return FileSystemSession(self.fdir, self.key_conv, self.value_conv)
