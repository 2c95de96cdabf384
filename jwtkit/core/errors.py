"""Exception hierarchy for token encoding, signing, and verification."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jwtkit.crypto.types import AlgorithmType


class TokenError(Exception):
    """Base class for every error raised by jwtkit."""


class MalformedTokenError(TokenError):
    """Token text does not have the compact three-segment shape."""


class DecodeError(MalformedTokenError):
    """A segment is not valid unpadded base64url."""


class ParseError(MalformedTokenError):
    """Decoded bytes are not valid JSON or do not fit the expected shape."""


class CanonicalizationError(TokenError):
    """A value cannot be rendered as canonical JSON."""


class UnsupportedAlgorithmError(TokenError):
    """An algorithm code has no registered implementation."""

    def __init__(self, code: object) -> None:
        super().__init__(f"Unsupported algorithm: {code!r}")
        self.code = code


class KeyNotFoundError(TokenError):
    """The store holds no key under the requested key id."""

    def __init__(self, key_id: str | None) -> None:
        super().__init__(f"Key with key id {key_id!r} not found")
        self.key_id = key_id


class MissingKeyIdError(KeyNotFoundError):
    """The token header carries no key id to look up."""

    def __init__(self) -> None:
        super().__init__(None)
        self.args = ("No key id found in token header",)


class InvalidKeyError(TokenError):
    """Key material is unusable for the requested algorithm."""


class SigningError(TokenError):
    """A signature could not be produced."""


class InvalidSignatureError(TokenError):
    """The signature does not verify for the token's signing input."""


class AlgorithmMismatchError(InvalidSignatureError):
    """The header declares a different algorithm than the verifier uses."""

    def __init__(
        self, expected: "AlgorithmType", found: "AlgorithmType | None"
    ) -> None:
        super().__init__(f"Expected algorithm type {expected} but found {found}")
        self.expected = expected
        self.found = found


class MalformedSignatureError(InvalidSignatureError):
    """Signature bytes cannot be a valid signature for the algorithm."""
