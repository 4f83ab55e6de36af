"""
Shared fixtures for starter service tests.
"""

import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from fastapi.testclient import TestClient

from service_starter.app.main import StarterService
from service_starter.app.tokens.claims import TokenDetails
from service_starter.app.tokens.issuer import TokenIssuer
from service_starter.app.tokens.keys import KeyResolver
from service_starter.app.tokens.refresher import TokenRefresher
from service_starter.app.tokens.verifier import TokenVerifier
from shared.config import get_config


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _generate_rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def write_key_files(key_dir):
    """Write an RSA keypair and a certificate-backed keypair into ``key_dir``."""
    rsa_key = _generate_rsa_key()
    (key_dir / "rsa_private_key").write_bytes(rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ))
    (key_dir / "rsa_public_key").write_bytes(rsa_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ))

    # The certificate keypair is stored as DER to cover both encodings
    cert_key = _generate_rsa_key()
    (key_dir / "cert_private_key").write_bytes(cert_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ))

    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "starter-test")])
    now = datetime.datetime.now(datetime.timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(cert_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(cert_key, hashes.SHA256())
    )
    (key_dir / "certificate").write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    return key_dir


def corrupt_signature(encoded: str) -> str:
    """Flip one character in the middle of the signature segment."""
    header, payload, signature = encoded.split(".")
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    return ".".join([header, payload, signature[:index] + replacement + signature[index + 1:]])


@pytest.fixture(scope="session")
def key_dir(tmp_path_factory):
    """Directory holding freshly generated key files."""
    return write_key_files(tmp_path_factory.mktemp("JWT"))


@pytest.fixture(scope="session")
def keys(key_dir):
    return KeyResolver.from_directory(key_dir)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def issuer(keys, clock):
    return TokenIssuer[TokenDetails](keys, clock=clock)


@pytest.fixture
def verifier(keys, clock):
    return TokenVerifier[TokenDetails](keys, TokenDetails, clock=clock)


@pytest.fixture
def refresher(issuer):
    return TokenRefresher(issuer)


@pytest.fixture
def alice():
    return TokenDetails(sub="alice", kid="0", favourite=7)


@pytest.fixture
def config(key_dir):
    return get_config("starter", 8080, jwt_key_dir=key_dir)


@pytest.fixture
def service(config, clock):
    return StarterService(config, clock)


@pytest.fixture
def client(service):
    """Create test client."""
    return TestClient(service.app)


@pytest.fixture
def corrupt():
    return corrupt_signature


@pytest.fixture
def write_keys():
    return write_key_files
