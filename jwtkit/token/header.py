"""JOSE header contract and the default header model."""

from typing import Protocol, Self

from pydantic import BaseModel, ConfigDict, Field

from jwtkit.crypto.types import AlgorithmType

JWT_TYPE = "JWT"


class JoseHeader(Protocol):
    """What the token machinery needs from any header type."""

    @property
    def algorithm_type(self) -> AlgorithmType | None: ...

    @property
    def key_id(self) -> str | None: ...

    def bind(self, algorithm: AlgorithmType, key_id: str | None = None) -> Self:
        """Return a copy declaring ``algorithm`` (and ``key_id`` when given)."""
        ...


class Header(BaseModel):
    """Header with the commonly registered JOSE fields.

    The algorithm stays unset until a signer or store binds it. Parameters
    other than these four are kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    algorithm: AlgorithmType | None = Field(default=None, alias="alg")
    key_id: str | None = Field(default=None, alias="kid")
    token_type: str | None = Field(default=None, alias="typ")
    content_type: str | None = Field(default=None, alias="cty")

    @property
    def algorithm_type(self) -> AlgorithmType | None:
        return self.algorithm

    def bind(self, algorithm: AlgorithmType, key_id: str | None = None) -> Self:
        update: dict[str, object] = {"algorithm": algorithm}
        if key_id is not None:
            update["key_id"] = key_id
        return self.model_copy(update=update)
