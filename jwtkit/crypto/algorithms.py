"""HMAC, RSA, and ECDSA implementations of the signer/verifier protocols.

Each algorithm family has exactly one class. Which class handles a given
``AlgorithmType`` is fixed by ``algorithm_for``; it is never inferred from
the key material, so a key can only ever be used under the algorithm it
was registered with.
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from jwtkit.core.errors import (
    InvalidKeyError,
    MalformedSignatureError,
    SigningError,
)
from jwtkit.crypto.keys import EC_CURVES, load_pem_key
from jwtkit.crypto.types import AlgorithmFamily, AlgorithmType

_HASHES: dict[int, type[hashes.HashAlgorithm]] = {
    256: hashes.SHA256,
    384: hashes.SHA384,
    512: hashes.SHA512,
}


def _require_family(algorithm: AlgorithmType, family: AlgorithmFamily) -> None:
    if algorithm.family is not family:
        raise InvalidKeyError(f"{algorithm} is not a {family} algorithm")


class HmacAlgorithm:
    """HS256/384/512 with a shared secret."""

    def __init__(self, algorithm: AlgorithmType, secret: bytes | str) -> None:
        algorithm = AlgorithmType.from_code(algorithm)
        _require_family(algorithm, AlgorithmFamily.HMAC)
        key = secret.encode() if isinstance(secret, str) else bytes(secret)
        if not key:
            raise InvalidKeyError("HMAC secret must not be empty")
        self._algorithm = algorithm
        self._key = key

    @property
    def algorithm(self) -> AlgorithmType:
        return self._algorithm

    def _mac(self, message: bytes) -> hmac.HMAC:
        mac = hmac.HMAC(self._key, _HASHES[self._algorithm.digest_bits]())
        mac.update(message)
        return mac

    def sign(self, message: bytes) -> bytes:
        return self._mac(message).finalize()

    def verify(self, message: bytes, signature: bytes) -> bool:
        # HMAC.verify compares in constant time
        try:
            self._mac(message).verify(signature)
        except InvalidSignature:
            return False
        return True

    def __repr__(self) -> str:
        return f"HmacAlgorithm({self._algorithm})"


class _AsymmetricAlgorithm:
    """Shared key handling for the public-key families.

    Built from a private key the instance can sign and verify; built from
    a public key it can only verify.
    """

    family: AlgorithmFamily
    private_type: type
    public_type: type

    def __init__(self, algorithm: AlgorithmType, key: object) -> None:
        algorithm = AlgorithmType.from_code(algorithm)
        _require_family(algorithm, self.family)
        if isinstance(key, (str, bytes)):
            key = load_pem_key(key)
        if isinstance(key, self.private_type):
            self._private_key = key
            self._public_key = key.public_key()
        elif isinstance(key, self.public_type):
            self._private_key = None
            self._public_key = key
        else:
            raise InvalidKeyError(
                f"{algorithm} requires an {self.family} key, "
                f"got {type(key).__name__}"
            )
        self._algorithm = algorithm
        self._hash = _HASHES[algorithm.digest_bits]()
        self._check_key()

    def _check_key(self) -> None:
        """Hook for family-specific key constraints."""

    @property
    def algorithm(self) -> AlgorithmType:
        return self._algorithm

    @property
    def can_sign(self) -> bool:
        return self._private_key is not None

    def _require_private_key(
        self,
    ) -> rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey:
        if self._private_key is None:
            raise SigningError(
                f"{self._algorithm} key holds only a public key and cannot sign"
            )
        return self._private_key

    def __repr__(self) -> str:
        kind = "private" if self.can_sign else "public"
        return f"{type(self).__name__}({self._algorithm}, {kind})"


class RsaAlgorithm(_AsymmetricAlgorithm):
    """RS256/384/512: RSASSA-PKCS1-v1_5."""

    family = AlgorithmFamily.RSA
    private_type = rsa.RSAPrivateKey
    public_type = rsa.RSAPublicKey

    def sign(self, message: bytes) -> bytes:
        key = self._require_private_key()
        try:
            return key.sign(message, padding.PKCS1v15(), self._hash)
        except ValueError as exc:
            raise SigningError(f"{self._algorithm} signing failed: {exc}") from exc

    def verify(self, message: bytes, signature: bytes) -> bool:
        try:
            self._public_key.verify(
                signature, message, padding.PKCS1v15(), self._hash
            )
        except InvalidSignature:
            return False
        return True


class EcdsaAlgorithm(_AsymmetricAlgorithm):
    """ES256/384/512 with signatures in the JOSE ``r || s`` form."""

    family = AlgorithmFamily.ECDSA
    private_type = ec.EllipticCurvePrivateKey
    public_type = ec.EllipticCurvePublicKey

    def _check_key(self) -> None:
        curve = EC_CURVES[self._algorithm]
        if not isinstance(self._public_key.curve, curve):
            raise InvalidKeyError(
                f"{self._algorithm} requires curve {curve.name}, "
                f"got {self._public_key.curve.name}"
            )
        self._component_size = (self._public_key.curve.key_size + 7) // 8

    def sign(self, message: bytes) -> bytes:
        key = self._require_private_key()
        der = key.sign(message, ec.ECDSA(self._hash))
        r, s = decode_dss_signature(der)
        size = self._component_size
        return r.to_bytes(size, "big") + s.to_bytes(size, "big")

    def verify(self, message: bytes, signature: bytes) -> bool:
        size = self._component_size
        if len(signature) != 2 * size:
            raise MalformedSignatureError(
                f"{self._algorithm} signature must be {2 * size} bytes, "
                f"got {len(signature)}"
            )
        r = int.from_bytes(signature[:size], "big")
        s = int.from_bytes(signature[size:], "big")
        try:
            self._public_key.verify(
                encode_dss_signature(r, s), message, ec.ECDSA(self._hash)
            )
        except InvalidSignature:
            return False
        return True


Algorithm = HmacAlgorithm | RsaAlgorithm | EcdsaAlgorithm

_FAMILY_CLASSES: dict[AlgorithmFamily, type] = {
    AlgorithmFamily.HMAC: HmacAlgorithm,
    AlgorithmFamily.RSA: RsaAlgorithm,
    AlgorithmFamily.ECDSA: EcdsaAlgorithm,
}


def algorithm_for(algorithm: AlgorithmType | str, key: object) -> Algorithm:
    """Build the signer/verifier for ``algorithm`` around ``key``.

    ``key`` is a secret (``bytes``/``str``) for HS algorithms, and a PEM
    string or a loaded ``cryptography`` key object for RS/ES algorithms.
    """
    alg = AlgorithmType.from_code(algorithm)
    return _FAMILY_CLASSES[alg.family](alg, key)
