"""
Bootstrap seed data.

Everything in here is a development/test fixture: client applications, scopes,
trusted service providers and a test account. Set ``enabled`` to False to turn
the whole thing off in production.
"""
import copy
import logging
from typing import Optional

from fedhub.defaults import DEFAULT_SEED

logger = logging.getLogger(__name__)

SECTIONS = ["clients", "resource_clients", "service_providers", "scopes", "users"]


class SeedData(object):

    def __init__(self,
                 enabled: Optional[bool] = True,
                 clients: Optional[list] = None,
                 resource_clients: Optional[list] = None,
                 service_providers: Optional[list] = None,
                 scopes: Optional[list] = None,
                 users: Optional[list] = None,
                 base_path: Optional[str] = "",
                 **kwargs):
        self.enabled = enabled
        self.clients = clients or []
        self.resource_clients = resource_clients or []
        self.service_providers = service_providers or []
        self.scopes = scopes or []
        self.users = users or []
        # certificate paths are relative to this
        self.base_path = base_path

    @classmethod
    def from_conf(cls, conf: Optional[dict] = None, base_path: Optional[str] = ""):
        """
        Missing sections are taken from the default seed. An empty list means
        nothing should be registered for that section.
        """
        if conf is None:
            conf = {}
        _args = {}
        for section in SECTIONS:
            if section in conf:
                _args[section] = copy.deepcopy(conf[section])
            else:
                _args[section] = copy.deepcopy(DEFAULT_SEED[section])
        _args["enabled"] = conf.get("enabled", DEFAULT_SEED["enabled"])
        return cls(base_path=conf.get("base_path", base_path), **_args)

    @classmethod
    def disabled(cls):
        return cls(enabled=False)
