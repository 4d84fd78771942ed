import logging
from typing import Union

from fedhub.message import ClientDescriptor
from fedhub.registrar import Registrar
from fedhub.store import CLIENTS

logger = logging.getLogger(__name__)


class ClientRegistrar(Registrar):
    collection = CLIENTS
    key_attribute = "client_id"

    def create(self, key, descriptor: ClientDescriptor) -> dict:
        descriptor.verify()
        return descriptor.to_record()

    def ensure_client(self, descriptor: Union[ClientDescriptor, dict]) -> bool:
        if not isinstance(descriptor, ClientDescriptor):
            descriptor = ClientDescriptor(**descriptor)
        return self.ensure(descriptor.get("client_id", ""), descriptor)
