"""Loading of the X.509 certificates used to sign and encrypt SAML messages."""
import base64
import logging
import os
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptojwt.jwk.jwk import jwk_wrap
from cryptojwt.utils import as_bytes
from cryptojwt.utils import as_unicode

from fedhub.exception import CertificateLoadFailure

logger = logging.getLogger(__name__)

PKCS12_SUFFIXES = ['.pfx', '.p12']


class Certificate(object):
    def __init__(self, cert: x509.Certificate, private_key=None, source: Optional[str] = ""):
        self.cert = cert
        self.private_key = private_key
        self.source = source

    @property
    def der(self) -> bytes:
        return self.cert.public_bytes(Encoding.DER)

    @property
    def thumbprint(self) -> str:
        """SHA-1 over the DER encoding, upper case hex. Same as the Windows certificate store."""
        return self.cert.fingerprint(hashes.SHA1()).hex().upper()

    @property
    def subject(self) -> str:
        return self.cert.subject.rfc4514_string()

    def to_reference(self) -> dict:
        return {
            "thumbprint": self.thumbprint,
            "subject": self.subject,
            "certificate": as_unicode(base64.b64encode(self.der))
        }

    @classmethod
    def from_reference(cls, ref: dict):
        _cert = x509.load_der_x509_certificate(base64.b64decode(as_bytes(ref["certificate"])))
        return cls(_cert, source=ref.get("thumbprint", ""))

    def to_jwk(self, use: Optional[str] = ""):
        """The public key as a JWK with the certificate in the x5c parameter."""
        _key = jwk_wrap(self.cert.public_key(), use=use, kid=self.thumbprint)
        _key.x5c = [as_unicode(base64.b64encode(self.der))]
        return _key


class CertificateLoader(object):
    """
    Reads certificates from files. PEM and DER encoded certificates are supported, as
    are PKCS#12 bundles containing a certificate and its private key.
    Nothing is cached, every call reads the file.
    """

    def load(self, path: str, passphrase: Optional[str] = None) -> Certificate:
        if not path:
            raise CertificateLoadFailure(path, "no path given")
        if not os.path.isfile(path):
            raise CertificateLoadFailure(path, "no such file")

        try:
            with open(path, "rb") as fp:
                _data = fp.read()
        except OSError as err:
            raise CertificateLoadFailure(path, str(err))

        if os.path.splitext(path)[1].lower() in PKCS12_SUFFIXES:
            _cert = self._load_pkcs12(path, _data, passphrase)
        else:
            _cert = Certificate(self._load_x509(path, _data), source=path)

        logger.debug(f"Loaded certificate {_cert.subject} ({_cert.thumbprint}) from {path}")
        return _cert

    @staticmethod
    def _load_x509(path, data) -> x509.Certificate:
        try:
            if b"-----BEGIN CERTIFICATE-----" in data:
                return x509.load_pem_x509_certificate(data)
            return x509.load_der_x509_certificate(data)
        except ValueError as err:
            raise CertificateLoadFailure(path, f"not a valid certificate: {err}")

    @staticmethod
    def _load_pkcs12(path, data, passphrase) -> Certificate:
        _password = as_bytes(passphrase) if passphrase else None
        try:
            _key, _cert, _ = pkcs12.load_key_and_certificates(data, _password)
        except ValueError as err:
            raise CertificateLoadFailure(path, f"could not open PKCS#12 bundle: {err}")

        if _cert is None:
            raise CertificateLoadFailure(path, "PKCS#12 bundle holds no certificate")
        return Certificate(_cert, private_key=_key, source=path)
