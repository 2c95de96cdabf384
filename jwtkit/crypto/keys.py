"""Key generation, PEM loading, and at-rest encryption of private keys."""

import secrets

import uuid_utils
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import (
    PrivateKeyTypes,
    PublicKeyTypes,
)
from pydantic import BaseModel

from jwtkit.core.errors import InvalidKeyError
from jwtkit.crypto.types import AlgorithmFamily, AlgorithmType

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
HMAC_SECRET_BYTES = 64

EC_CURVES: dict[AlgorithmType, type[ec.EllipticCurve]] = {
    AlgorithmType.ES256: ec.SECP256R1,
    AlgorithmType.ES384: ec.SECP384R1,
    AlgorithmType.ES512: ec.SECP521R1,
}


class SigningKeyData(BaseModel):
    """An asymmetric keypair in PEM form, tagged with its key id."""

    kid: str
    algorithm: AlgorithmType
    private_key_pem: str
    public_key_pem: str


def new_key_id() -> str:
    """Return a fresh, time-ordered key id."""
    return str(uuid_utils.uuid7())


def _to_pem_pair(private_key: PrivateKeyTypes) -> tuple[str, str]:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return private_pem, public_pem


def generate_rsa_keypair(
    algorithm: AlgorithmType = AlgorithmType.RS256,
) -> SigningKeyData:
    """Generate a new RSA-2048 keypair for the given RS algorithm."""
    if algorithm.family is not AlgorithmFamily.RSA:
        raise InvalidKeyError(f"{algorithm} is not an RSA algorithm")
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    private_pem, public_pem = _to_pem_pair(private_key)
    return SigningKeyData(
        kid=new_key_id(),
        algorithm=algorithm,
        private_key_pem=private_pem,
        public_key_pem=public_pem,
    )


def generate_ec_keypair(
    algorithm: AlgorithmType = AlgorithmType.ES256,
) -> SigningKeyData:
    """Generate an EC keypair on the curve the ES algorithm requires."""
    curve = EC_CURVES.get(algorithm)
    if curve is None:
        raise InvalidKeyError(f"{algorithm} is not an ECDSA algorithm")
    private_pem, public_pem = _to_pem_pair(ec.generate_private_key(curve()))
    return SigningKeyData(
        kid=new_key_id(),
        algorithm=algorithm,
        private_key_pem=private_pem,
        public_key_pem=public_pem,
    )


def generate_hmac_secret() -> bytes:
    """Generate a random shared secret for the HS algorithms."""
    return secrets.token_bytes(HMAC_SECRET_BYTES)


def _as_bytes(pem: str | bytes) -> bytes:
    return pem.encode() if isinstance(pem, str) else pem


def load_private_key_pem(pem: str | bytes) -> PrivateKeyTypes:
    """Load an unencrypted PKCS#8 or traditional private key."""
    try:
        return serialization.load_pem_private_key(_as_bytes(pem), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise InvalidKeyError(f"Could not load private key: {exc}") from exc


def load_public_key_pem(pem: str | bytes) -> PublicKeyTypes:
    """Load a SubjectPublicKeyInfo public key."""
    try:
        return serialization.load_pem_public_key(_as_bytes(pem))
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise InvalidKeyError(f"Could not load public key: {exc}") from exc


def load_pem_key(pem: str | bytes) -> PrivateKeyTypes | PublicKeyTypes:
    """Load a private or public key, telling them apart by the PEM label."""
    if b"PRIVATE KEY-----" in _as_bytes(pem):
        return load_private_key_pem(pem)
    return load_public_key_pem(pem)


def encrypt_private_key(private_pem: str, fernet_key: str) -> str:
    """Encrypt a PEM private key with Fernet for storage at rest."""
    cipher = Fernet(fernet_key.encode())
    return cipher.encrypt(private_pem.encode()).decode()


def decrypt_private_key(encrypted: str, fernet_key: str) -> str:
    """Decrypt a Fernet-encrypted PEM private key."""
    cipher = Fernet(fernet_key.encode())
    try:
        return cipher.decrypt(encrypted.encode()).decode()
    except InvalidToken as exc:
        raise InvalidKeyError("Could not decrypt private key") from exc
