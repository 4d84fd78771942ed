"""
Idempotent registration of the entities a federation hub can't do without.

Each registrar looks for an entity by its unique key and only creates it if it's
not already there. Existing records are never modified.
"""
import logging
from typing import Optional

from fedhub.exception import AlreadyExists
from fedhub.exception import ValidationFailure

logger = logging.getLogger(__name__)


class Registrar(object):
    collection = ""
    key_attribute = ""

    def __init__(self, session, **kwargs):
        self.session = session

    def find(self, key: str) -> Optional[dict]:
        return self.session.find(self.collection, key)

    def create(self, key: str, descriptor) -> dict:
        """Builds the record. Everything that can fail must fail here, before the write."""
        raise NotImplementedError()

    def ensure(self, key: str, descriptor) -> bool:
        """
        Create the entity unless it already exists.

        :param key: The unique key of the entity
        :param descriptor: Information about the entity
        :return: True if a new record was written otherwise False
        """
        if not key:
            raise ValidationFailure(self.key_attribute,
                                    f"{self.key_attribute} must not be empty")

        if self.find(key) is not None:
            logger.debug(f"{self.collection}: '{key}' already registered")
            return False

        _record = self.create(key, descriptor)
        try:
            self.session.add(self.collection, key, _record)
        except AlreadyExists:
            # Someone else got there first
            logger.info(f"{self.collection}: '{key}' was registered by someone else")
            return False

        logger.info(f"{self.collection}: registered '{key}'")
        return True
