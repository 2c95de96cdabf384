"""Keyring settings loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from jwtkit.crypto.types import AlgorithmType


class KeyringSettings(BaseSettings):
    """Where the key store finds its keys."""

    model_config = SettingsConfigDict(env_prefix="JWTKIT_")

    key_dir: Path | None = None
    hmac_secrets: dict[str, str] = {}
    hmac_algorithm: AlgorithmType = AlgorithmType.HS256
    key_encryption_key: str = ""
