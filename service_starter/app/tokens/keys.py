"""
Key resolution for signing and verifying tokens.

Two keys are configured, selected by the ``kid`` token header:

- ``"0"``: an RSA keypair (``rsa_private_key`` / ``rsa_public_key``)
- ``"1"``: a certificate-backed keypair (``cert_private_key`` / ``certificate``)

Files may be PEM or DER. Everything is parsed once at startup and normalised
to PEM so the signer and verifier never touch the file system again.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Tuple

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from shared.logging import get_logger
from .errors import KeyLoadError, UnknownKeyID


RSA_KEY_ID = "0"
CERT_KEY_ID = "1"

# kid -> (signing key file, verification key file)
KEY_FILES: Dict[str, Tuple[str, str]] = {
    RSA_KEY_ID: ("rsa_private_key", "rsa_public_key"),
    CERT_KEY_ID: ("cert_private_key", "certificate"),
}

logger = get_logger("starter.tokens.keys")


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise KeyLoadError(f"Cannot read key file {path.name}", {"path": str(path), "error": str(e)}) from e


def _parse(path: Path, data: bytes, pem_loader: Callable, der_loader: Callable):
    loader = pem_loader if data.lstrip().startswith(b"-----BEGIN") else der_loader
    try:
        return loader(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyLoadError(f"Cannot parse key file {path.name}", {"path": str(path), "error": str(e)}) from e


def load_private_key(path: Path) -> str:
    """Load an RSA private key file and return it as PKCS#8 PEM."""
    key = _parse(
        path,
        _read(path),
        lambda data: serialization.load_pem_private_key(data, password=None),
        lambda data: serialization.load_der_private_key(data, password=None),
    )
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyLoadError(f"Key file {path.name} is not an RSA private key", {"path": str(path)})
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def load_public_key(path: Path) -> str:
    """Load an RSA public key file and return it as SubjectPublicKeyInfo PEM."""
    key = _parse(path, _read(path), serialization.load_pem_public_key, serialization.load_der_public_key)
    return _public_pem(path, key)


def load_certificate_key(path: Path) -> str:
    """Extract the RSA public key from an X.509 certificate file."""
    certificate = _parse(path, _read(path), x509.load_pem_x509_certificate, x509.load_der_x509_certificate)
    return _public_pem(path, certificate.public_key())


def _public_pem(path: Path, key) -> str:
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyLoadError(f"Key file {path.name} does not hold an RSA public key", {"path": str(path)})
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@dataclass(frozen=True)
class KeyResolver:
    """Immutable ``kid`` -> key material table."""

    signing_keys: Mapping[str, str] = field(repr=False)
    verification_keys: Mapping[str, str] = field(repr=False)

    def __post_init__(self):
        object.__setattr__(self, "signing_keys", MappingProxyType(dict(self.signing_keys)))
        object.__setattr__(self, "verification_keys", MappingProxyType(dict(self.verification_keys)))

    @classmethod
    def from_directory(cls, key_dir: Path) -> "KeyResolver":
        """Load the configured keys from ``key_dir``."""
        key_dir = Path(key_dir)
        verification_loaders = {
            RSA_KEY_ID: load_public_key,
            CERT_KEY_ID: load_certificate_key,
        }

        signing_keys = {}
        verification_keys = {}
        for kid, (signing_file, verification_file) in KEY_FILES.items():
            signing_keys[kid] = load_private_key(key_dir / signing_file)
            verification_keys[kid] = verification_loaders[kid](key_dir / verification_file)

        logger.info("JWT keys loaded", key_dir=str(key_dir), key_ids=sorted(signing_keys))
        return cls(signing_keys, verification_keys)

    @property
    def key_ids(self) -> Tuple[str, ...]:
        return tuple(sorted(self.signing_keys))

    def signing_key(self, kid: str) -> str:
        try:
            return self.signing_keys[kid]
        except (KeyError, TypeError):
            raise UnknownKeyID(kid) from None

    def verification_key(self, kid: str) -> str:
        try:
            return self.verification_keys[kid]
        except (KeyError, TypeError):
            raise UnknownKeyID(kid) from None
