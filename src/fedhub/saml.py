"""SAML service provider (relying party) descriptions."""
import logging
from typing import List
from typing import Optional

from cryptojwt.key_jar import KeyJar
from saml2 import BINDING_HTTP_ARTIFACT
from saml2 import BINDING_HTTP_POST
from saml2 import BINDING_HTTP_REDIRECT
from saml2 import BINDING_SOAP

from fedhub.certificate import Certificate
from fedhub.exception import UnknownBinding
from fedhub.exception import ValidationFailure
from fedhub.store import SERVICE_PROVIDERS
from fedhub.utils import is_absolute_uri

logger = logging.getLogger(__name__)

BINDINGS = {
    "HTTP-Redirect": BINDING_HTTP_REDIRECT,
    "HTTP-POST": BINDING_HTTP_POST,
    "HTTP-Artifact": BINDING_HTTP_ARTIFACT,
    "SOAP": BINDING_SOAP,
}

ENDPOINT_TYPES = ["assertion_consumer_services", "single_logout_services",
                  "artifact_resolution_services"]


def binding_urn(binding: str) -> str:
    """Accepts the short name or the full URN of one of the supported bindings."""
    if binding in BINDINGS:
        return BINDINGS[binding]
    if binding in BINDINGS.values():
        return binding
    raise UnknownBinding("binding", f"Unsupported binding '{binding}'")


class Endpoint(object):
    def __init__(self, binding: str, location: str):
        self.binding = binding_urn(binding)
        if not is_absolute_uri(location):
            raise ValidationFailure("location", f"'{location}' is not an absolute URI")
        self.location = location

    def to_dict(self):
        return {"binding": self.binding, "location": self.location}

    def __eq__(self, other):
        return self.to_dict() == other.to_dict()


class ServiceProviderDescriptor(object):
    """
    What the identity provider needs to know about a SAML service provider.
    Certificates are given as file paths, they are read when the trust record is created.
    """

    def __init__(self,
                 entity_id: str = "",
                 encrypt_assertions: Optional[bool] = False,
                 allow_idp_initiated_sso: Optional[bool] = False,
                 assertion_consumer_services: Optional[List[dict]] = None,
                 single_logout_services: Optional[List[dict]] = None,
                 artifact_resolution_services: Optional[List[dict]] = None,
                 signing_certificates: Optional[List[str]] = None,
                 encryption_certificate: Optional[str] = "",
                 **kwargs):
        self.entity_id = entity_id
        self.encrypt_assertions = encrypt_assertions
        self.allow_idp_initiated_sso = allow_idp_initiated_sso
        self.assertion_consumer_services = assertion_consumer_services or []
        self.single_logout_services = single_logout_services or []
        self.artifact_resolution_services = artifact_resolution_services or []
        self.signing_certificates = signing_certificates or []
        self.encryption_certificate = encryption_certificate

    def endpoints(self, endpoint_type: str) -> List[Endpoint]:
        try:
            return [Endpoint(**spec) for spec in getattr(self, endpoint_type)]
        except ValidationFailure as err:
            raise ValidationFailure(endpoint_type, f"{self.entity_id}: {err}")
        except TypeError as err:
            raise ValidationFailure(endpoint_type, f"{self.entity_id}: {err}")

    def verify(self):
        if not self.entity_id:
            raise ValidationFailure("entity_id", "entity_id must not be empty")
        if not is_absolute_uri(self.entity_id):
            raise ValidationFailure("entity_id", f"'{self.entity_id}' is not an absolute URI")

        _endpoints = {t: self.endpoints(t) for t in ENDPOINT_TYPES}
        if not _endpoints["assertion_consumer_services"]:
            raise ValidationFailure("assertion_consumer_services",
                                    f"{self.entity_id}: at least one is needed")

        _ars = _endpoints["artifact_resolution_services"]
        if _ars:
            if BINDING_HTTP_ARTIFACT not in [e.binding for e in
                                             _endpoints["assertion_consumer_services"]]:
                raise ValidationFailure("artifact_resolution_services",
                                        f"{self.entity_id}: only for service providers "
                                        "using the artifact binding")
            for _endpoint in _ars:
                if _endpoint.binding != BINDING_SOAP:
                    raise ValidationFailure("artifact_resolution_services",
                                            "Artifact resolution must use the SOAP binding")

        if self.encrypt_assertions and not self.encryption_certificate:
            raise ValidationFailure("encryption_certificate",
                                    f"{self.entity_id}: needed to encrypt assertions")
        return _endpoints


def service_provider_keyjar(session, keyjar: Optional[KeyJar] = None) -> KeyJar:
    """
    Collects the signing keys of all registered service providers.
    The keys are filed under the service provider's entity ID.
    """
    if keyjar is None:
        keyjar = KeyJar()

    for entity_id, record in session.items(SERVICE_PROVIDERS):
        _keys = []
        for ref in record.get("signing_certificates", []):
            _keys.append(Certificate.from_reference(ref).to_jwk(use="sig"))
        if _keys:
            keyjar.add_keys(entity_id, _keys)
    return keyjar
