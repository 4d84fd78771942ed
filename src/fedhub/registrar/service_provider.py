import logging
from typing import Optional
from typing import Union

from fedhub.certificate import CertificateLoader
from fedhub.registrar import Registrar
from fedhub.saml import ServiceProviderDescriptor
from fedhub.store import SERVICE_PROVIDERS
from fedhub.utils import full_path

logger = logging.getLogger(__name__)


class FederationTrustRegistrar(Registrar):
    """Registers the SAML service providers the identity provider trusts."""
    collection = SERVICE_PROVIDERS
    key_attribute = "entity_id"

    def __init__(self, session,
                 certificate_loader: Optional[CertificateLoader] = None,
                 base_path: Optional[str] = "",
                 **kwargs):
        Registrar.__init__(self, session, **kwargs)
        self.certificate_loader = certificate_loader or CertificateLoader()
        self.base_path = base_path

    def _load(self, path):
        return self.certificate_loader.load(full_path(path, self.base_path))

    def create(self, key, descriptor: ServiceProviderDescriptor) -> dict:
        _endpoints = descriptor.verify()

        # All certificates are loaded before anything is written
        _signing = [self._load(p).to_reference() for p in descriptor.signing_certificates]
        if descriptor.encryption_certificate:
            _encryption = self._load(descriptor.encryption_certificate).to_reference()
        else:
            _encryption = None

        _record = {
            "entity_id": descriptor.entity_id,
            "encrypt_assertions": bool(descriptor.encrypt_assertions),
            "allow_idp_initiated_sso": bool(descriptor.allow_idp_initiated_sso),
            "signing_certificates": _signing,
        }
        for endpoint_type, endpoints in _endpoints.items():
            _record[endpoint_type] = [e.to_dict() for e in endpoints]
        if _encryption:
            _record["encryption_certificate"] = _encryption
        return _record

    def ensure_service_provider(self,
                                descriptor: Union[ServiceProviderDescriptor, dict]) -> bool:
        if not isinstance(descriptor, ServiceProviderDescriptor):
            descriptor = ServiceProviderDescriptor(**descriptor)
        return self.ensure(descriptor.entity_id, descriptor)
