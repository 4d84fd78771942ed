"""
The start up trust bootstrap.

Runs once every time the process starts, before any traffic is accepted, and makes
sure the minimum federation state exists in the store. Only missing entities are
created, so a store left half populated by an earlier run is simply completed.
"""
import logging
from typing import Optional
from typing import Tuple

from idpyoidc.logging import configure_logging
from idpyoidc.server.util import execute
from idpyoidc.util import instantiate

from fedhub.certificate import CertificateLoader
from fedhub.configure import HubConfiguration
from fedhub.defaults import DEFAULT_REGISTRARS
from fedhub.exception import FedHubError
from fedhub.seed import SeedData
from fedhub.store import Store

logger = logging.getLogger(__name__)

STEPS = ["clients", "resource_clients", "service_providers", "scopes", "users"]


class Bootstrap(object):

    def __init__(self,
                 store: Store,
                 seed: Optional[SeedData] = None,
                 registrars: Optional[dict] = None,
                 certificate_loader: Optional[CertificateLoader] = None):
        self.store = store
        self.seed = seed or SeedData.from_conf()
        self.registrars = DEFAULT_REGISTRARS.copy()
        if registrars:
            self.registrars.update(registrars)
        self.certificate_loader = certificate_loader or CertificateLoader()

    def _registrar(self, name, session, **kwargs):
        _spec = self.registrars[name]
        _kwargs = _spec.get("kwargs", {}).copy()
        _kwargs.update(kwargs)
        return instantiate(_spec["class"], session=session, **_kwargs)

    def run(self) -> dict:
        """
        Ensure schema, clients, resource clients, service providers, scopes and users
        in that order. Each record is committed on its own. Any exception aborts the run.

        :return: Dictionary with the keys of the entities created in each step
        """
        report = {step: [] for step in STEPS}

        self.store.ensure_schema()
        if not self.seed.enabled:
            logger.info("Bootstrap seed data disabled")
            return report

        with self.store.session() as session:
            _client = self._registrar("client", session)
            for step in ["clients", "resource_clients"]:
                for descriptor in getattr(self.seed, step):
                    if _client.ensure_client(descriptor):
                        report[step].append(descriptor["client_id"])

            _sp = self._registrar("service_provider", session,
                                  certificate_loader=self.certificate_loader,
                                  base_path=self.seed.base_path)
            for descriptor in self.seed.service_providers:
                if _sp.ensure_service_provider(descriptor):
                    report["service_providers"].append(descriptor["entity_id"])

            _scope = self._registrar("scope", session)
            for spec in self.seed.scopes:
                if _scope.ensure_scope(spec["name"], spec.get("resources"), spec.get("claims")):
                    report["scopes"].append(spec["name"])

            _user = self._registrar("user", session)
            for spec in self.seed.users:
                if _user.ensure_user(spec["user_name"], spec.get("email", spec["user_name"]),
                                     spec["password"]):
                    report["users"].append(spec["user_name"])

        logger.info("Bootstrap done, created: {}".format(
            ", ".join(f"{k}={len(v)}" for k, v in report.items())))
        return report


def start(config: HubConfiguration) -> Tuple[Store, dict]:
    """
    Process start up. Sets up logging and the store and runs the bootstrap.
    Nothing should be served if this raises.

    :return: The store and the report of what the bootstrap created
    """
    if config.logging:
        configure_logging(config=config.logging)

    store = execute(config.store)
    try:
        report = Bootstrap(store, seed=config.seed, registrars=config.registrars).run()
    except FedHubError as err:
        logger.error(f"Bootstrap failed: {err}")
        raise
    return store, report
