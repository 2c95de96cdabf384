"""Signing and verification through a key-id indexed store."""

import logging
from typing import Any

from jwtkit.core.errors import (
    InvalidKeyError,
    KeyNotFoundError,
    MissingKeyIdError,
    SigningError,
)
from jwtkit.crypto.store import KeySource, StoreEntry, lookup_entry
from jwtkit.crypto.types import Signer, Verifier
from jwtkit.token.header import Header, JoseHeader
from jwtkit.token.token import Token, VerifiedToken, parse

logger = logging.getLogger(__name__)


def _lookup(store: KeySource, key_id: str) -> StoreEntry:
    entry = lookup_entry(store, key_id)
    if entry is None:
        logger.warning("No key registered under key id %s", key_id)
        raise KeyNotFoundError(key_id)
    return entry


def sign_with_store(
    store: KeySource,
    key_id: str,
    header: JoseHeader | None,
    claims: Any,
) -> str:
    """Sign with the key registered under ``key_id``.

    The header's ``kid`` and ``alg`` are overwritten to match the stored
    key before signing.
    """
    entry = _lookup(store, key_id)
    if not isinstance(entry, Signer):
        raise SigningError(f"Key {key_id!r} cannot sign")
    if header is None:
        header = Header()
    bound = header.bind(entry.algorithm, key_id)
    return Token(bound, claims).sign(entry)


def verify_with_store(
    store: KeySource,
    text: str,
    header_type: Any = Header,
    claims_type: Any = dict,
) -> VerifiedToken[Any, Any]:
    """Verify with the key named by the token's own ``kid``.

    The key id is read from the unverified header; the algorithm check in
    ``UnverifiedToken.verify`` still applies to the resolved key.
    """
    unverified = parse(text, header_type, claims_type)
    key_id = unverified.header.key_id
    if key_id is None:
        logger.warning("Rejected token without a key id")
        raise MissingKeyIdError()
    entry = _lookup(store, key_id)
    if not isinstance(entry, Verifier):
        raise InvalidKeyError(f"Key {key_id!r} cannot verify")
    return unverified.verify(entry)
