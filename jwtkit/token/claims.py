"""Registered claim names, for callers that want a typed payload."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SecondsSinceEpoch = int


class RegisteredClaims(BaseModel):
    """The claims registered by RFC 7519, all optional."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    issuer: str | None = Field(default=None, alias="iss")
    subject: str | None = Field(default=None, alias="sub")
    audience: str | list[str] | None = Field(default=None, alias="aud")
    expiration: SecondsSinceEpoch | None = Field(default=None, alias="exp")
    not_before: SecondsSinceEpoch | None = Field(default=None, alias="nbf")
    issued_at: SecondsSinceEpoch | None = Field(default=None, alias="iat")
    token_id: str | None = Field(default=None, alias="jti")


class Claims(RegisteredClaims):
    """Registered claims plus any private claims."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    @property
    def private(self) -> dict[str, Any]:
        return dict(self.model_extra or {})
