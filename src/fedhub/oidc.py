"""
What the token issuing part of the hub needs from the store, in the form idpyoidc
expects it.
"""
import logging
from typing import Optional

from idpyoidc.message.oauth2 import OauthClientMetadata

from fedhub.defaults import PERMISSION_PREFIX
from fedhub.registrar.scope import Scope
from fedhub.store import CLIENTS
from fedhub.store import SCOPES

logger = logging.getLogger(__name__)


def _permissions(record, kind):
    _prefix = PERMISSION_PREFIX[kind]
    return [p[len(_prefix):] for p in record.get("permissions", []) if p.startswith(_prefix)]


def client_metadata(record: dict) -> OauthClientMetadata:
    """
    Translates a stored client application into OAuth2 client metadata.

    :param record: A record from the clients collection
    :return: A OauthClientMetadata instance
    """
    _args = {
        "client_id": record["client_id"],
        "grant_types": _permissions(record, "grant_type"),
        "response_types": _permissions(record, "response_type"),
        "token_endpoint_auth_method": "none",
    }
    if record.get("client_secret"):
        _args["client_secret"] = record["client_secret"]
        _args["token_endpoint_auth_method"] = "client_secret_basic"
    if record.get("display_name"):
        _args["client_name"] = record["display_name"]
    if record.get("redirect_uris"):
        _args["redirect_uris"] = record["redirect_uris"]
    if record.get("post_logout_redirect_uris"):
        _args["post_logout_redirect_uris"] = record["post_logout_redirect_uris"]

    _scopes = _permissions(record, "scope")
    if _scopes:
        _args["scope"] = _scopes

    return OauthClientMetadata(**_args)


def client_db(session) -> dict:
    """The client database the way idpyoidc keeps it, keyed on client_id."""
    return {key: client_metadata(record).to_dict() for key, record in session.items(CLIENTS)}


def scopes_to_claims(session) -> dict:
    """Maps every registered scope to the claims it gives access to."""
    return {name: Scope.from_record(record).claims for name, record in session.items(SCOPES)}


def provider_endpoints(endpoints: dict, issuer: Optional[str] = "") -> dict:
    """
    :param endpoints: endpoint name to path
    :param issuer: The base URL the paths are relative to
    :return: endpoint name to URL
    """
    _base = issuer.rstrip("/")
    return {name: f"{_base}/{path.lstrip('/')}" for name, path in endpoints.items()}
