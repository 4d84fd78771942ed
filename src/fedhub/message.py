"""Descriptors for the OAuth2/OIDC client applications registered at start up."""
import logging

from idpyoidc.exception import MissingRequiredAttribute
from idpyoidc.message import Message
from idpyoidc.message import OPTIONAL_LIST_OF_STRINGS
from idpyoidc.message import SINGLE_OPTIONAL_STRING
from idpyoidc.message import SINGLE_REQUIRED_STRING

from fedhub.defaults import CLIENT_TYPES
from fedhub.defaults import CONSENT_TYPES
from fedhub.defaults import GRANTS_REQUIRING_SECRET
from fedhub.exception import ValidationFailure
from fedhub.utils import is_absolute_uri

logger = logging.getLogger(__name__)


class ClientDescriptor(Message):
    """Everything needed to create a client application record."""
    c_param = {
        "client_id": SINGLE_REQUIRED_STRING,
        "client_secret": SINGLE_OPTIONAL_STRING,
        "client_type": SINGLE_OPTIONAL_STRING,
        "consent_type": SINGLE_OPTIONAL_STRING,
        "display_name": SINGLE_OPTIONAL_STRING,
        "redirect_uris": OPTIONAL_LIST_OF_STRINGS,
        "post_logout_redirect_uris": OPTIONAL_LIST_OF_STRINGS,
        "permissions": OPTIONAL_LIST_OF_STRINGS,
        "requirements": OPTIONAL_LIST_OF_STRINGS,
    }

    def effective_client_type(self):
        _type = self.get("client_type")
        if _type:
            return _type
        if self.get("client_secret"):
            return "confidential"
        return "public"

    def verify(self, **kwargs):
        if not self.get("client_id"):
            raise ValidationFailure("client_id", "client_id must not be empty")

        try:
            super(ClientDescriptor, self).verify(**kwargs)
        except MissingRequiredAttribute as err:
            raise ValidationFailure(str(err), f"Missing required attribute: {err}")

        _type = self.effective_client_type()
        if _type not in CLIENT_TYPES:
            raise ValidationFailure("client_type", f"Unknown client type '{_type}'")

        _consent = self.get("consent_type")
        if _consent and _consent not in CONSENT_TYPES:
            raise ValidationFailure("consent_type", f"Unknown consent type '{_consent}'")

        if not self.get("client_secret"):
            if _type == "confidential":
                raise ValidationFailure("client_secret",
                                        "A confidential client must have a client_secret")
            for _grant in self.get("permissions", []):
                if _grant in GRANTS_REQUIRING_SECRET:
                    raise ValidationFailure(
                        "client_secret", f"Grant '{_grant}' requires a client_secret")

        for attr in ["redirect_uris", "post_logout_redirect_uris"]:
            for uri in self.get(attr, []):
                if not is_absolute_uri(uri):
                    raise ValidationFailure(attr, f"'{uri}' is not an absolute URI")

        return True

    def to_record(self):
        _rec = {
            "client_id": self["client_id"],
            "client_type": self.effective_client_type(),
            "consent_type": self.get("consent_type", "explicit"),
            "display_name": self.get("display_name", ""),
        }
        if self.get("client_secret"):
            _rec["client_secret"] = self["client_secret"]
        for attr in ["redirect_uris", "post_logout_redirect_uris", "permissions",
                     "requirements"]:
            _rec[attr] = list(self.get(attr, []))
        return _rec
