import pytest

from fedhub.defaults import DEFAULT_OIDC_ENDPOINTS
from fedhub.defaults import DEFAULT_SEED
from fedhub.oidc import client_db
from fedhub.oidc import client_metadata
from fedhub.oidc import provider_endpoints
from fedhub.oidc import scopes_to_claims
from fedhub.registrar.client import ClientRegistrar
from fedhub.registrar.scope import ScopeRegistrar
from fedhub.store import CLIENTS
from fedhub.store.memory import MemoryStore

SP_ID = "https://localhost:5001/saml"


class TestOidcExport(object):

    @pytest.fixture(autouse=True)
    def create_store(self):
        self.store = MemoryStore()
        self.store.ensure_schema()
        self.session = self.store.open()
        _clients = ClientRegistrar(self.session)
        _clients.ensure_client(DEFAULT_SEED["clients"][0])
        _clients.ensure_client(DEFAULT_SEED["resource_clients"][0])
        _scopes = ScopeRegistrar(self.session)
        _scopes.ensure_scope("email", [SP_ID], ["email"])
        _scopes.ensure_scope("profile", [], ["name", "given_name"])

    def test_client_metadata(self):
        _meta = client_metadata(self.session.find(CLIENTS, "mvc"))
        assert _meta["client_id"] == "mvc"
        assert _meta["grant_types"] == ["authorization_code"]
        assert _meta["response_types"] == ["code"]
        assert _meta["scope"] == ["email", "profile", "roles"]
        assert _meta["redirect_uris"] == ["https://localhost:44338/callback/login/local"]
        assert _meta["token_endpoint_auth_method"] == "client_secret_basic"
        assert _meta["client_name"] == "MVC client application"

    def test_public_client_metadata(self):
        _meta = client_metadata(self.session.find(CLIENTS, SP_ID))
        assert _meta["token_endpoint_auth_method"] == "none"
        assert _meta["scope"] == ["email"]
        assert "client_secret" not in _meta

    def test_client_db(self):
        _cdb = client_db(self.session)
        assert set(_cdb.keys()) == {"mvc", SP_ID}
        assert _cdb["mvc"]["client_secret"] == DEFAULT_SEED["clients"][0]["client_secret"]

    def test_scopes_to_claims(self):
        assert scopes_to_claims(self.session) == {"email": ["email"],
                                                  "profile": ["name", "given_name"]}


def test_provider_endpoints():
    _endpoints = provider_endpoints(DEFAULT_OIDC_ENDPOINTS, "https://localhost:5003/")
    assert _endpoints["authorization"] == "https://localhost:5003/connect/authorize"
    assert _endpoints["token"] == "https://localhost:5003/connect/token"
