"""Compact token serialization, signing, parsing, and verification.

A token moves one way through three states::

    Token --sign--> compact str --parse--> UnverifiedToken --verify--> VerifiedToken

Parsing never checks the signature, so callers can inspect the header
(for instance to choose a key) before doing any cryptographic work.
"""

import logging
from typing import Any, Generic, TypeVar

from jwtkit.codec.base64url import decode_segment, encode_segment
from jwtkit.codec.canonical import canonicalize, decanonicalize, validate_into
from jwtkit.core.errors import (
    AlgorithmMismatchError,
    CanonicalizationError,
    InvalidSignatureError,
    MalformedTokenError,
    ParseError,
    SigningError,
)
from jwtkit.crypto.types import AlgorithmType, Signer, Verifier
from jwtkit.token.header import Header, JoseHeader

logger = logging.getLogger(__name__)

SEPARATOR = "."

H = TypeVar("H", bound=JoseHeader)
C = TypeVar("C")


class _TokenParts(Generic[H, C]):
    __slots__ = ("_header", "_claims")

    def __init__(self, header: H, claims: C) -> None:
        self._header = header
        self._claims = claims

    @property
    def header(self) -> H:
        return self._header

    @property
    def claims(self) -> C:
        return self._claims

    def __repr__(self) -> str:
        return f"{type(self).__name__}(header={self._header!r})"


class Token(_TokenParts[H, C]):
    """An unsigned header and claims pair."""

    __slots__ = ()

    def sign(self, signer: Signer) -> str:
        """Sign the token and return its compact serialization.

        An unset header algorithm is filled in from ``signer``; a header that
        already declares a different algorithm is refused.
        """
        header = _bind_algorithm(self._header, signer.algorithm)
        try:
            header_b64 = encode_segment(canonicalize(header))
            claims_b64 = encode_segment(canonicalize(self._claims))
        except CanonicalizationError as exc:
            raise SigningError(f"Could not encode token: {exc}") from exc

        signing_input = header_b64 + SEPARATOR + claims_b64
        signature = signer.sign(signing_input.encode("ascii"))
        logger.debug(
            "Signed token with %s (kid=%s)", signer.algorithm, header.key_id
        )
        return signing_input + SEPARATOR + encode_segment(signature)


class UnverifiedToken(_TokenParts[H, C]):
    """A parsed token whose signature has not been checked yet."""

    __slots__ = ("_signature", "_signing_input", "_text")

    def __init__(
        self,
        header: H,
        claims: C,
        signature: bytes,
        signing_input: str,
        text: str,
    ) -> None:
        super().__init__(header, claims)
        self._signature = signature
        self._signing_input = signing_input
        self._text = text

    @property
    def signature(self) -> bytes:
        return self._signature

    @property
    def signing_input(self) -> str:
        """The first two segments exactly as transmitted."""
        return self._signing_input

    def verify(self, verifier: Verifier) -> "VerifiedToken[H, C]":
        """Check the signature, refusing any algorithm other than the verifier's."""
        declared = self._header.algorithm_type
        if declared != verifier.algorithm:
            logger.warning(
                "Rejected token declaring %s for a %s verifier",
                declared,
                verifier.algorithm,
            )
            raise AlgorithmMismatchError(verifier.algorithm, declared)

        message = self._signing_input.encode("ascii")
        if not verifier.verify(message, self._signature):
            logger.warning("Rejected token with invalid %s signature", declared)
            raise InvalidSignatureError("Signature verification failed")
        return VerifiedToken(self._header, self._claims, self._text)


class VerifiedToken(_TokenParts[H, C]):
    """A token whose signature has been checked."""

    __slots__ = ("_text",)

    def __init__(self, header: H, claims: C, text: str) -> None:
        super().__init__(header, claims)
        self._text = text

    def as_str(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text


def _bind_algorithm(header: H, algorithm: AlgorithmType) -> H:
    declared = header.algorithm_type
    if declared is None:
        return header.bind(algorithm)
    if declared != algorithm:
        raise SigningError(
            f"Header declares {declared} but the signer uses {algorithm}"
        )
    return header


def parse(
    text: str,
    header_type: Any = Header,
    claims_type: Any = dict,
) -> UnverifiedToken[Any, Any]:
    """Split and decode a compact token without verifying it."""
    if not isinstance(text, str):
        raise MalformedTokenError(
            f"Expected token text, got {type(text).__name__}"
        )
    segments = text.split(SEPARATOR)
    if len(segments) != 3:
        raise MalformedTokenError(
            f"Expected 3 dot-separated segments, found {len(segments)}"
        )
    header_b64, claims_b64, signature_b64 = segments

    raw_header = decanonicalize(decode_segment(header_b64))
    if not isinstance(raw_header, dict):
        raise ParseError("Token header must be a JSON object")
    if "alg" not in raw_header:
        raise MalformedTokenError("Token header does not declare 'alg'")
    AlgorithmType.from_code(raw_header["alg"])
    header = validate_into(raw_header, header_type)

    claims = decanonicalize(decode_segment(claims_b64), into=claims_type)
    signature = decode_segment(signature_b64)
    return UnverifiedToken(
        header, claims, signature, header_b64 + SEPARATOR + claims_b64, text
    )


def verify(
    text: str,
    verifier: Verifier,
    header_type: Any = Header,
    claims_type: Any = dict,
) -> VerifiedToken[Any, Any]:
    """Parse ``text`` and verify it with ``verifier``."""
    return parse(text, header_type, claims_type).verify(verifier)


def sign_claims(claims: Any, signer: Signer) -> str:
    """Sign ``claims`` under a header declaring only the signer's algorithm."""
    return Token(Header(), claims).sign(signer)


def verify_claims(text: str, verifier: Verifier, claims_type: Any = dict) -> Any:
    """Verify ``text`` and return only its claims."""
    return verify(text, verifier, claims_type=claims_type).claims
