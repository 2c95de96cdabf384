"""Algorithm identities and the signer/verifier capability protocols."""

from enum import StrEnum
from typing import Protocol, runtime_checkable

from jwtkit.core.errors import UnsupportedAlgorithmError


class AlgorithmFamily(StrEnum):
    """Cryptographic family behind an algorithm code."""

    HMAC = "HMAC"
    RSA = "RSA"
    ECDSA = "ECDSA"


class AlgorithmType(StrEnum):
    """Closed set of JWS algorithm codes understood by jwtkit."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"

    @property
    def family(self) -> AlgorithmFamily:
        return _FAMILY_BY_PREFIX[self.value[:2]]

    @property
    def digest_bits(self) -> int:
        return int(self.value[2:])

    @classmethod
    def from_code(cls, code: object) -> "AlgorithmType":
        """Resolve a wire ``alg`` value, rejecting anything outside the enum."""
        if isinstance(code, str):
            try:
                return cls(code)
            except ValueError:
                pass
        raise UnsupportedAlgorithmError(code)


_FAMILY_BY_PREFIX = {
    "HS": AlgorithmFamily.HMAC,
    "RS": AlgorithmFamily.RSA,
    "ES": AlgorithmFamily.ECDSA,
}


@runtime_checkable
class Signer(Protocol):
    """Produces a signature over a byte string."""

    @property
    def algorithm(self) -> AlgorithmType: ...

    def sign(self, message: bytes) -> bytes: ...


@runtime_checkable
class Verifier(Protocol):
    """Checks a signature over a byte string."""

    @property
    def algorithm(self) -> AlgorithmType: ...

    def verify(self, message: bytes, signature: bytes) -> bool: ...
