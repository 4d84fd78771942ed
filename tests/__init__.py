import datetime
import os

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

SIGNING_CERTIFICATE = "Resources/testclient.cer"
ENCRYPTION_CERTIFICATE = "Resources/idsrv3test.cer"


def make_certificate(common_name="test"):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = x509.CertificateBuilder().subject_name(
        name
    ).issuer_name(
        name
    ).public_key(
        key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now - datetime.timedelta(days=1)
    ).not_valid_after(
        now + datetime.timedelta(days=30)
    ).sign(key, hashes.SHA256())
    return cert, key


def write_certificate(path, cert, encoding=serialization.Encoding.DER):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as fp:
        fp.write(cert.public_bytes(encoding))
    return path


def write_pkcs12(path, cert, key, passphrase):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    _data = pkcs12.serialize_key_and_certificates(
        b"test", key, cert, None,
        serialization.BestAvailableEncryption(passphrase.encode()))
    with open(path, "wb") as fp:
        fp.write(_data)
    return path


def make_resources(base_path):
    """The certificate files the default seed data refers to."""
    _signing, _ = make_certificate("testclient")
    _encryption, _ = make_certificate("idsrv3test")
    write_certificate(os.path.join(base_path, SIGNING_CERTIFICATE), _signing)
    write_certificate(os.path.join(base_path, ENCRYPTION_CERTIFICATE), _encryption,
                      serialization.Encoding.PEM)
    return _signing, _encryption
