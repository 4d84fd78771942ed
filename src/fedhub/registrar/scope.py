import logging
from typing import List
from typing import Optional

from fedhub.defaults import CLAIMS_PROPERTY
from fedhub.registrar import Registrar
from fedhub.store import CLIENTS
from fedhub.store import SCOPES

logger = logging.getLogger(__name__)


class Scope(object):
    """An OIDC scope, the audiences it applies to and the claims it gives access to."""

    def __init__(self, name: str, resources: Optional[List[str]] = None,
                 claims: Optional[List[str]] = None, properties: Optional[dict] = None):
        self.name = name
        self.resources = list(resources or [])
        self.claims = list(claims or [])
        self.properties = dict(properties or {})

    def to_record(self) -> dict:
        _properties = self.properties.copy()
        _properties[CLAIMS_PROPERTY] = list(self.claims)
        return {
            "name": self.name,
            "resources": list(self.resources),
            "properties": _properties
        }

    @classmethod
    def from_record(cls, record: dict):
        _properties = dict(record.get("properties", {}))
        _claims = _properties.pop(CLAIMS_PROPERTY, [])
        return cls(record["name"], record.get("resources", []), _claims, _properties)


class ScopeRegistrar(Registrar):
    collection = SCOPES
    key_attribute = "name"

    def create(self, key, descriptor: Scope) -> dict:
        for resource in descriptor.resources:
            if self.session.find(CLIENTS, resource) is None:
                logger.warning(f"Scope '{key}': resource '{resource}' is not a known client")
        return descriptor.to_record()

    def ensure_scope(self, name: str, resources: Optional[List[str]] = None,
                     claims: Optional[List[str]] = None) -> bool:
        return self.ensure(name, Scope(name, resources, claims))

    def get(self, name: str) -> Optional[Scope]:
        _record = self.find(name)
        if _record is None:
            return None
        return Scope.from_record(_record)
