"""Credentials - Where the API key comes from."""

import getpass
import os
import subprocess
import sys
from abc import ABC, abstractmethod

from gentools import ENV_API_KEY
from gentools.errors import MissingCredentialError, ToolUnavailableError


class SecretProvider(ABC):
    """Looks up a named secret. Returns None when it is not set."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass


class EnvSecretProvider(SecretProvider):
    """Reads secrets from environment variables."""

    def __init__(self, environ=None):
        self._environ = os.environ if environ is None else environ

    @property
    def description(self) -> str:
        return "environment"

    def get(self, name: str) -> str | None:
        value = self._environ.get(name, "").strip()
        return value or None


class KeychainSecretProvider(SecretProvider):
    """Reads generic passwords from the macOS login keychain.

    Store a key with:
        security add-generic-password -a "$USER" -s OPENAI_API_KEY -w 'sk-...'
    """

    def __init__(self, service: str | None = None, account: str | None = None):
        self.service = service
        self.account = account or getpass.getuser()

    @property
    def description(self) -> str:
        return "macOS keychain"

    def get(self, name: str) -> str | None:
        if sys.platform != 'darwin':
            raise ToolUnavailableError("The keychain credential source is only available on macOS")

        args = ['security', 'find-generic-password', '-a', self.account, '-s', self.service or name, '-w']
        try:
            result = subprocess.run(args, capture_output=True, text=True)
        except FileNotFoundError:
            raise ToolUnavailableError("The 'security' command is not in PATH")

        # exit status 44: item not found
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None


def get_secret_provider(source: str = "env", service: str | None = None) -> SecretProvider:
    """Get a secret provider. Source can be 'env' or 'keychain'."""
    if source == "keychain":
        return KeychainSecretProvider(service=service)
    if source == "env":
        return EnvSecretProvider()
    raise ValueError(f"Unknown credential source: {source}. Use 'env' or 'keychain'.")


def require_api_key(provider: SecretProvider, name: str = ENV_API_KEY) -> str:
    """Return the API key or fail with a hint on how to set it."""
    key = provider.get(name)
    if not key:
        if isinstance(provider, KeychainSecretProvider):
            raise MissingCredentialError(
                f"{name} is not in the keychain. Add it with:\n"
                f"  security add-generic-password -a \"$USER\" -s {provider.service or name} -w 'your-key-here'"
            )
        raise MissingCredentialError(
            f"{name} is not set. Set it with:\n"
            f"  export {name}='your-key-here'"
        )
    return key


__all__ = [
    "SecretProvider",
    "EnvSecretProvider",
    "KeychainSecretProvider",
    "get_secret_provider",
    "require_api_key",
]
