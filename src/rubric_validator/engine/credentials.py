"""Credential providers for the model API key.

The service asks its provider for the key on every evaluation, so a key
added to (or removed from) the environment takes effect without a restart.
"""

import os
from typing import Protocol

from ..config import settings


class CredentialProvider(Protocol):
    def get_api_key(self) -> str | None: ...


class EnvCredentialProvider:
    def __init__(self, env_var: str | None = None):
        self.env_var = env_var or settings.api_key_env

    def get_api_key(self) -> str | None:
        value = os.environ.get(self.env_var, "").strip()
        return value or None


class StaticCredentialProvider:
    """Fixed key, for tests and embedding."""

    def __init__(self, api_key: str | None):
        self.api_key = api_key

    def get_api_key(self) -> str | None:
        return self.api_key
