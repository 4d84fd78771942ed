"""
Persistent configuration store.

A store holds a number of collections, each a mapping from a unique key to a record
(a JSON serializable dictionary). Work is done through a session opened with
:py:meth:`Store.session` which is always closed on the way out.
"""
import logging
from contextlib import contextmanager
from typing import List
from typing import Optional

logger = logging.getLogger(__name__)

CLIENTS = "clients"
SCOPES = "scopes"
USERS = "users"
SERVICE_PROVIDERS = "service_providers"

# collection -> name of the record attribute that is the unique key
COLLECTIONS = {
    CLIENTS: "client_id",
    SCOPES: "name",
    USERS: "normalized_user_name",
    SERVICE_PROVIDERS: "entity_id",
}


class StoreSession(object):

    def find(self, collection: str, key: str) -> Optional[dict]:
        raise NotImplementedError()

    def add(self, collection: str, key: str, record: dict) -> None:
        """
        Add a record. Must raise :py:class:`fedhub.exception.AlreadyExists` if there
        already is a record with that key. Either the whole record is written or nothing.
        """
        raise NotImplementedError()

    def keys(self, collection: str) -> List[str]:
        raise NotImplementedError()

    def items(self, collection: str):
        for key in self.keys(collection):
            yield key, self.find(collection, key)

    def close(self):
        pass


class Store(object):

    def ensure_schema(self):
        raise NotImplementedError()

    def open(self) -> StoreSession:
        raise NotImplementedError()

    @contextmanager
    def session(self):
        _session = self.open()
        try:
            yield _session
        finally:
            _session.close()
