"""Configuration of the federation hub."""
import copy
import json
import logging
import os
from typing import Optional

from idpyoidc.util import load_config_file

from fedhub.certificate import CertificateLoader
from fedhub.defaults import DEFAULT_OIDC_ENDPOINTS
from fedhub.defaults import DEFAULT_REGISTERED_SCOPES
from fedhub.defaults import DEFAULT_SAML_HOST_OPTIONS
from fedhub.defaults import DEFAULT_STORE
from fedhub.seed import SeedData
from fedhub.utils import full_path

logger = logging.getLogger(__name__)

DATABASE_URL_VARIABLE = "FEDHUB_DATABASE_URL"


def _import(val):
    path = val[len("file:"):]
    if os.path.isfile(path) is False:
        logger.info(f"No such file: {path}")
        return None

    with open(path, "r") as fp:
        _dat = fp.read()
        if val.endswith('.json'):
            return json.loads(_dat)

    raise ValueError("Unknown file type")


def _substitute(val):
    if isinstance(val, str):
        if val.startswith("file:"):
            return _import(val)
        elif val.startswith("env:"):
            _name = val[len("env:"):]
            if _name not in os.environ:
                logger.warning(f"Environment variable {_name} not set")
            return os.environ.get(_name)
    elif isinstance(val, dict):
        return load_values_from_file(val)
    elif isinstance(val, list):
        return [_substitute(v) for v in val]
    return val


def load_values_from_file(config: dict) -> dict:
    """
    Replaces string values of the form 'file:<path>.json' with the content of the file
    and 'env:<NAME>' with the value of the environment variable. Works recursively.
    """
    for key, val in config.items():
        config[key] = _substitute(val)
    return config


class SamlIdpOptions(object):
    """
    Options for the SAML identity provider component. The license values are
    passed on as they are, nothing here knows what they mean.
    """

    def __init__(self,
                 licensee: Optional[str] = "",
                 license_key: Optional[str] = "",
                 login_url: Optional[str] = DEFAULT_SAML_HOST_OPTIONS["login_url"],
                 logout_url: Optional[str] = DEFAULT_SAML_HOST_OPTIONS["logout_url"],
                 **kwargs):
        self.licensee = licensee
        self.license_key = license_key
        self.login_url = login_url
        self.logout_url = logout_url
        self.extra = kwargs


class ServiceProviderHostOptions(object):
    """Options for a test service provider host talking to this identity provider."""

    def __init__(self,
                 entity_id: Optional[str] = "https://localhost:5001/saml",
                 idp_metadata_address: Optional[str] = "https://localhost:5003/saml/metadata",
                 callback_path: Optional[str] = "/signin-saml-openIddict",
                 artifact_resolution_service: Optional[str] = "/ars-saml-openIddict",
                 metadata_path: Optional[str] = "/saml-openIddict",
                 time_comparison_tolerance: Optional[int] = 10,
                 require_encrypted_assertions: Optional[bool] = False,
                 signing_certificate: Optional[dict] = None,
                 encryption_certificate: Optional[dict] = None,
                 licensee: Optional[str] = "",
                 license_key: Optional[str] = "",
                 base_path: Optional[str] = "",
                 **kwargs):
        self.entity_id = entity_id
        self.idp_metadata_address = idp_metadata_address
        self.callback_path = callback_path
        self.artifact_resolution_service = artifact_resolution_service
        self.metadata_path = metadata_path
        self.time_comparison_tolerance = time_comparison_tolerance
        self.require_encrypted_assertions = require_encrypted_assertions
        self.signing_certificate = signing_certificate or {
            "path": "Resources/testclient.pfx", "passphrase": "test"}
        self.encryption_certificate = encryption_certificate or {
            "path": "Resources/idsrv3test.pfx", "passphrase": "idsrv3test"}
        self.licensee = licensee
        self.license_key = license_key
        self.base_path = base_path

    def load_certificates(self, loader: Optional[CertificateLoader] = None) -> dict:
        """
        Loads the service provider's own signing and encryption certificates.

        :param loader: A CertificateLoader instance
        :return: Dictionary with the keys 'signing' and 'encryption'
        """
        loader = loader or CertificateLoader()
        res = {}
        for usage, spec in [("signing", self.signing_certificate),
                            ("encryption", self.encryption_certificate)]:
            _passphrase = spec.get("passphrase")
            res[usage] = loader.load(full_path(spec["path"], self.base_path),
                                     passphrase=_passphrase)
        return res


class HubConfiguration(object):

    def __init__(self, conf: Optional[dict] = None, base_path: Optional[str] = ""):
        if conf is None:
            conf = {}
        conf = load_values_from_file(copy.deepcopy(conf))
        self.base_path = conf.get("base_path", base_path)

        _url = os.environ.get(DATABASE_URL_VARIABLE)
        if _url:
            logger.debug(f"Store set from {DATABASE_URL_VARIABLE}")
            self.store = {"class": "fedhub.store.sql.SQLStore", "kwargs": {"url": _url}}
        else:
            self.store = copy.deepcopy(conf.get("store", DEFAULT_STORE))
            if self.store["class"] == "fedhub.store.fs.FileSystemStore":
                _kwargs = self.store.setdefault("kwargs", {})
                if "fdir" in _kwargs:
                    _kwargs["fdir"] = full_path(_kwargs["fdir"], self.base_path)

        self.logging = conf.get("logging")

        _oidc = conf.get("oidc", {})
        self.endpoints = DEFAULT_OIDC_ENDPOINTS.copy()
        self.endpoints.update(_oidc.get("endpoints", {}))
        self.registered_scopes = _oidc.get("scopes", DEFAULT_REGISTERED_SCOPES[:])
        self.issuer = _oidc.get("issuer", "https://localhost:5003")

        self.saml = SamlIdpOptions(**conf.get("saml", {}))
        self.sp_host = ServiceProviderHostOptions(base_path=self.base_path,
                                                  **conf.get("sp_host", {}))
        self.registrars = conf.get("registrars")

        _seed = conf.get("seed")
        if _seed is False:
            self.seed = SeedData.disabled()
        else:
            self.seed = SeedData.from_conf(_seed, base_path=self.base_path)

    @classmethod
    def create_from_config_file(cls, filename: str, base_path: Optional[str] = ""):
        """
        :param filename: Name of a JSON or YAML configuration file
        :param base_path: Relative paths in the configuration are relative to this.
            Defaults to the directory of the configuration file.
        """
        if not base_path:
            base_path = os.path.dirname(os.path.abspath(filename))
        return cls(load_config_file(filename), base_path=base_path)
