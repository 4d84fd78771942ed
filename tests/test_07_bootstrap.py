import os

import pytest

from fedhub.bootstrap import Bootstrap
from fedhub.bootstrap import start
from fedhub.configure import HubConfiguration
from fedhub.exception import AccountPolicyFailure
from fedhub.exception import CertificateLoadFailure
from fedhub.registrar.client import ClientRegistrar
from fedhub.registrar.scope import ScopeRegistrar
from fedhub.seed import SeedData
from fedhub.store import CLIENTS
from fedhub.store import SCOPES
from fedhub.store import SERVICE_PROVIDERS
from fedhub.store import USERS
from fedhub.store.memory import MemorySession
from fedhub.store.memory import MemoryStore
from fedhub.store.sql import SQLStore
from tests import make_resources

SP_ID = "https://localhost:5001/saml"


class CountingSession(MemorySession):

    def __init__(self, db, writes):
        MemorySession.__init__(self, db)
        self.writes = writes

    def add(self, collection, key, record):
        self.writes.append((collection, key))
        MemorySession.add(self, collection, key, record)


class CountingStore(MemoryStore):
    """Remembers every write."""

    def __init__(self, **kwargs):
        MemoryStore.__init__(self, **kwargs)
        self.writes = []

    def open(self):
        return CountingSession(self._db, self.writes)


class TestBootstrap(object):

    @pytest.fixture(autouse=True)
    def create_seed(self, tmp_path):
        self.base_path = str(tmp_path)
        make_resources(self.base_path)
        self.seed = SeedData.from_conf(base_path=self.base_path)
        self.store = CountingStore()

    def test_fresh_store(self):
        report = Bootstrap(self.store, seed=self.seed).run()
        assert report == {
            "clients": ["mvc"],
            "resource_clients": [SP_ID],
            "service_providers": [SP_ID, f"{SP_ID}/artifact"],
            "scopes": ["email"],
            "users": ["bob@test.fake"]
        }

        with self.store.session() as session:
            assert set(session.keys(CLIENTS)) == {"mvc", SP_ID}
            assert set(session.keys(SERVICE_PROVIDERS)) == {SP_ID, f"{SP_ID}/artifact"}
            assert ScopeRegistrar(session).get("email").claims == ["email"]
            assert session.keys(USERS) == ["BOB@TEST.FAKE"]

    def test_order(self):
        Bootstrap(self.store, seed=self.seed).run()
        assert [c for c, _ in self.store.writes] == [
            CLIENTS, CLIENTS, SERVICE_PROVIDERS, SERVICE_PROVIDERS, SCOPES, USERS]

    def test_idempotent(self):
        Bootstrap(self.store, seed=self.seed).run()
        _before = self.store.dumps()
        _writes = len(self.store.writes)

        report = Bootstrap(self.store, seed=self.seed).run()
        assert all(v == [] for v in report.values())
        assert len(self.store.writes) == _writes
        assert self.store.dumps() == _before

    def test_partial_store(self):
        self.store.ensure_schema()
        with self.store.session() as session:
            ClientRegistrar(session).ensure_client(
                {"client_id": "mvc", "display_name": "Registered earlier",
                 "redirect_uris": ["https://example.com/cb"]})
        self.store.writes.clear()

        report = Bootstrap(self.store, seed=self.seed).run()
        assert report["clients"] == []
        assert report["resource_clients"] == [SP_ID]
        assert report["users"] == ["bob@test.fake"]
        assert (CLIENTS, "mvc") not in self.store.writes

        with self.store.session() as session:
            _mvc = session.find(CLIENTS, "mvc")
        assert _mvc["display_name"] == "Registered earlier"
        assert _mvc["redirect_uris"] == ["https://example.com/cb"]

    def test_disabled_seed(self):
        report = Bootstrap(self.store, seed=SeedData.disabled()).run()
        assert all(v == [] for v in report.values())
        assert self.store.writes == []
        assert self.store.dumps() == {CLIENTS: {}, SCOPES: {}, USERS: {}, SERVICE_PROVIDERS: {}}

    def test_missing_certificate(self):
        os.unlink(os.path.join(self.base_path, "Resources", "testclient.cer"))
        with pytest.raises(CertificateLoadFailure):
            Bootstrap(self.store, seed=self.seed).run()

        # clients are committed one by one, nothing after the failing step
        with self.store.session() as session:
            assert set(session.keys(CLIENTS)) == {"mvc", SP_ID}
            assert session.keys(SERVICE_PROVIDERS) == []
            assert session.keys(SCOPES) == []
            assert session.keys(USERS) == []

    def test_empty_sections(self):
        _seed = SeedData.from_conf({"service_providers": [], "users": []},
                                   base_path=self.base_path)
        report = Bootstrap(self.store, seed=_seed).run()
        assert report["service_providers"] == []
        assert report["users"] == []
        assert report["scopes"] == ["email"]

    def test_registrar_class_spec(self):
        _registrars = {
            "user": {
                "class": "fedhub.registrar.user.UserProvisioner",
                "kwargs": {"password_policy": {"required_length": 20}}
            }
        }
        with pytest.raises(AccountPolicyFailure):
            Bootstrap(self.store, seed=self.seed, registrars=_registrars).run()

    def test_sql_store(self):
        _store = SQLStore(url=f"sqlite:///{self.base_path}/hub.db")
        assert Bootstrap(_store, seed=self.seed).run()["clients"] == ["mvc"]
        report = Bootstrap(_store, seed=self.seed).run()
        assert all(v == [] for v in report.values())


def test_start(tmp_path, monkeypatch):
    monkeypatch.delenv("FEDHUB_DATABASE_URL", raising=False)
    make_resources(str(tmp_path))
    _config = HubConfiguration({"seed": {"users": []}}, base_path=str(tmp_path))
    _store, report = start(_config)
    assert report["clients"] == ["mvc"]
    assert report["service_providers"] == [SP_ID, f"{SP_ID}/artifact"]
    assert report["users"] == []
    with _store.session() as session:
        assert session.find(CLIENTS, "mvc")
        assert session.keys(USERS) == []


def test_start_reports_nothing_on_converged_store(tmp_path, monkeypatch):
    monkeypatch.delenv("FEDHUB_DATABASE_URL", raising=False)
    make_resources(str(tmp_path))
    _conf = {"store": {"class": "fedhub.store.fs.FileSystemStore", "kwargs": {"fdir": "store"}}}
    _, first = start(HubConfiguration(_conf, base_path=str(tmp_path)))
    assert first["clients"] == ["mvc"]
    _, second = start(HubConfiguration(_conf, base_path=str(tmp_path)))
    assert all(v == [] for v in second.values())


def test_start_failure(tmp_path, monkeypatch):
    monkeypatch.delenv("FEDHUB_DATABASE_URL", raising=False)
    # no certificates
    _config = HubConfiguration({}, base_path=str(tmp_path))
    with pytest.raises(CertificateLoadFailure):
        start(_config)
