"""Build a key store from settings: shared secrets and a PEM directory.

PEM files are named ``<kid>.<ALG>.pem``, or ``<kid>.<ALG>.pem.enc`` for a
private key encrypted with the configured Fernet key. A private key file
registers a key that can sign and verify; a public key file registers a
verify-only key. Only RS and ES codes are accepted in file names, so a PEM
file can never be read as an HMAC secret.
"""

import logging
from pathlib import Path

from jwtkit.core.errors import InvalidKeyError
from jwtkit.core.settings import KeyringSettings
from jwtkit.crypto.algorithms import HmacAlgorithm, algorithm_for
from jwtkit.crypto.keys import decrypt_private_key
from jwtkit.crypto.store import KeyStore
from jwtkit.crypto.types import AlgorithmFamily, AlgorithmType

logger = logging.getLogger(__name__)

PEM_SUFFIX = ".pem"
ENCRYPTED_SUFFIX = ".pem.enc"


def _split_key_filename(name: str) -> tuple[str, AlgorithmType, bool]:
    encrypted = name.endswith(ENCRYPTED_SUFFIX)
    stem = name.removesuffix(ENCRYPTED_SUFFIX if encrypted else PEM_SUFFIX)
    kid, sep, code = stem.rpartition(".")
    if not sep or not kid:
        raise InvalidKeyError(f"Key file {name!r} is not named <kid>.<ALG>.pem")
    algorithm = AlgorithmType.from_code(code)
    if algorithm.family is AlgorithmFamily.HMAC:
        raise InvalidKeyError(
            f"Key file {name!r} names {algorithm}; "
            "HMAC secrets are only read from hmac_secrets"
        )
    return kid, algorithm, encrypted


def _load_pem_dir(store: KeyStore, key_dir: Path, fernet_key: str) -> None:
    for path in sorted(key_dir.iterdir()):
        if not path.name.endswith((PEM_SUFFIX, ENCRYPTED_SUFFIX)):
            continue
        kid, algorithm, encrypted = _split_key_filename(path.name)
        pem = path.read_text()
        if encrypted:
            if not fernet_key:
                raise InvalidKeyError(
                    f"{path.name} is encrypted but no key_encryption_key is set"
                )
            pem = decrypt_private_key(pem, fernet_key)
        store.register(kid, algorithm_for(algorithm, pem))


def load_key_store(settings: KeyringSettings | None = None) -> KeyStore:
    """Create a ``KeyStore`` from the configured secrets and key directory."""
    settings = settings or KeyringSettings()
    if settings.hmac_algorithm.family is not AlgorithmFamily.HMAC:
        raise InvalidKeyError(
            f"hmac_algorithm must be an HS algorithm, got {settings.hmac_algorithm}"
        )

    store = KeyStore()
    for kid, secret in settings.hmac_secrets.items():
        store.register(kid, HmacAlgorithm(settings.hmac_algorithm, secret))
    if settings.key_dir is not None:
        _load_pem_dir(store, settings.key_dir, settings.key_encryption_key)
    logger.info("Loaded %d keys into key store", len(store))
    return store
