"""Shared test fixtures for jwtkit."""

import pytest

from jwtkit.crypto.keys import (
    SigningKeyData,
    generate_ec_keypair,
    generate_rsa_keypair,
)
from jwtkit.crypto.types import AlgorithmType

_SETTINGS_ENV = (
    "JWTKIT_KEY_DIR",
    "JWTKIT_HMAC_SECRETS",
    "JWTKIT_HMAC_ALGORITHM",
    "JWTKIT_KEY_ENCRYPTION_KEY",
)


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep keyring settings from leaking in from the environment."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def rsa_keypair() -> SigningKeyData:
    """One RSA keypair per session; generation is slow."""
    return generate_rsa_keypair()


@pytest.fixture(scope="session")
def ec_keypairs() -> dict[AlgorithmType, SigningKeyData]:
    """An EC keypair on the matching curve for each ES algorithm."""
    return {
        alg: generate_ec_keypair(alg)
        for alg in (AlgorithmType.ES256, AlgorithmType.ES384, AlgorithmType.ES512)
    }
