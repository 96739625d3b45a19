"""Configuration Management Package

Two layers:
- Config: user preferences persisted as JSON in .genrc
- Settings: the resolved, immutable values one invocation runs with
"""

import json
import math
import os
from urllib.parse import urlparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from gentools import DEFAULT_ENDPOINT, DEFAULT_MODEL, ENV_API_KEY, ENV_ENDPOINT, ENV_MODEL, ENV_TIMEOUT
from gentools.credentials import SecretProvider, get_secret_provider, require_api_key
from gentools.errors import MissingCredentialError
from gentools.llm.request import DEFAULT_TEMPERATURE, DEFAULT_TEMPERATURES, TemperaturePolicy
from gentools.output import print_warning

# Valid configuration values
VALID_CREDENTIAL_SOURCES = {"env", "keychain"}
DEFAULT_TIMEOUT = 120  # seconds; 0 waits forever

# Keys a .genrc in the working directory may not set: they decide where the API key is read and sent
HOME_ONLY_KEYS = {"endpoint", "credential_source", "keychain_service"}


@dataclass
class Config:
    """User configuration with sensible defaults."""
    model: Optional[str] = None
    endpoint: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    default_temperature: float = DEFAULT_TEMPERATURE
    temperature_overrides: dict = field(default_factory=lambda: dict(DEFAULT_TEMPERATURES))
    credential_source: str = "env"
    keychain_service: Optional[str] = None
    extension: str = ".txt"

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults silently after warning.
        """
        warnings = []
        defaults = Config()

        if self.credential_source not in VALID_CREDENTIAL_SOURCES:
            warnings.append(f"Invalid credential_source '{self.credential_source}', using '{defaults.credential_source}'")
            self.credential_source = defaults.credential_source

        if self.model is not None and not _is_text(self.model):
            warnings.append(f"Invalid model '{self.model}', using the default model")
            self.model = defaults.model

        if self.endpoint is not None and not is_http_url(self.endpoint):
            warnings.append(f"Invalid endpoint '{self.endpoint}', expected an http(s) URL")
            self.endpoint = defaults.endpoint

        if self.keychain_service is not None and not _is_text(self.keychain_service):
            warnings.append(f"Invalid keychain_service '{self.keychain_service}', using the key name")
            self.keychain_service = defaults.keychain_service

        if not _is_number(self.timeout) or not math.isfinite(self.timeout) or self.timeout < 0:
            warnings.append(f"Invalid timeout '{self.timeout}', using {defaults.timeout}")
            self.timeout = defaults.timeout

        if not _is_temperature(self.default_temperature):
            warnings.append(f"Invalid default_temperature '{self.default_temperature}', using {defaults.default_temperature}")
            self.default_temperature = defaults.default_temperature

        if not isinstance(self.temperature_overrides, dict):
            warnings.append(f"Invalid temperature_overrides '{self.temperature_overrides}', using {defaults.temperature_overrides}")
            self.temperature_overrides = defaults.temperature_overrides
        else:
            for model, value in list(self.temperature_overrides.items()):
                if not _is_temperature(value):
                    warnings.append(f"Invalid temperature '{value}' for model '{model}', ignoring it")
                    del self.temperature_overrides[model]

        if not isinstance(self.extension, str) or not self.extension.startswith('.') or len(self.extension) < 2:
            warnings.append(f"Invalid extension '{self.extension}', using '{defaults.extension}'")
            self.extension = defaults.extension

        return warnings

    def temperature_policy(self) -> TemperaturePolicy:
        return TemperaturePolicy(overrides=dict(self.temperature_overrides), default=self.default_temperature)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        # Validate and print warnings to stderr
        for warning in config.validate():
            print_warning(f"Config warning: {warning}")
        return config


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_temperature(value) -> bool:
    return _is_number(value) and 0 <= value <= 1


def _is_text(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_http_url(value) -> bool:
    """True for an absolute http:// or https:// URL with a host."""
    if not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ConfigManager:
    """Loads configuration: ~/.genrc first, then .genrc in the working directory on top.

    A project .genrc cannot set HOME_ONLY_KEYS, so a cloned repository cannot
    redirect the API key or the staged diff to another server.
    """

    CONFIG_FILENAME = ".genrc"

    def __init__(self):
        self._config: Optional[Config] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        data = {}
        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            data.update(self._read_file(home_path))

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists() and local_path != home_path:
            local = self._read_file(local_path)
            for key in sorted(HOME_ONLY_KEYS & local.keys()):
                print_warning(f"Config warning: Ignoring '{key}' in {local_path}, set it in {home_path}")
                del local[key]
            data.update(local)

        self._config = Config.from_dict(data)
        return self._config

    def _read_file(self, path: Path) -> dict:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return data
        except (ValueError, OSError) as e:
            print_warning(f"Warning: Could not load {path}: {e}")
            return {}


@dataclass(frozen=True)
class Settings:
    """Everything one invocation needs, resolved once at startup."""
    api_key: str
    endpoint: str
    model: str
    temperature: float
    timeout: Optional[float]
    extension: str = ".txt"

    def __repr__(self) -> str:
        # keep the key out of tracebacks and --verbose output
        return (f"Settings(endpoint={self.endpoint!r}, model={self.model!r}, "
                f"temperature={self.temperature!r}, timeout={self.timeout!r})")


def resolve_settings(
    config: Config,
    model: str | None = None,
    require_endpoint: bool = False,
    secrets: SecretProvider | None = None,
    environ=None,
) -> Settings:
    """Resolve runtime settings.

    Precedence: CLI args > environment variables > config file > defaults

    Args:
        config: Loaded user configuration
        model: Model given on the command line, if any
        require_endpoint: Fail unless an endpoint is configured (no built-in default)
        secrets: Where to read the API key (default: from config.credential_source)
        environ: Environment mapping (default: os.environ)

    Raises:
        MissingCredentialError: API key or required endpoint is missing
    """
    environ = os.environ if environ is None else environ
    secrets = secrets or get_secret_provider(config.credential_source, config.keychain_service)

    api_key = require_api_key(secrets, ENV_API_KEY)

    endpoint = environ.get(ENV_ENDPOINT, "").strip() or config.endpoint
    if not endpoint:
        if require_endpoint:
            raise MissingCredentialError(
                f"{ENV_ENDPOINT} is not set. Set it with:\n"
                f"  export {ENV_ENDPOINT}='{DEFAULT_ENDPOINT}'"
            )
        endpoint = DEFAULT_ENDPOINT

    model = model or environ.get(ENV_MODEL, "").strip() or config.model or DEFAULT_MODEL
    temperature = config.temperature_policy().select(model)

    timeout = config.timeout
    env_timeout = environ.get(ENV_TIMEOUT, "").strip()
    if env_timeout:
        try:
            parsed = float(env_timeout)
        except ValueError:
            parsed = None
        if parsed is None or not math.isfinite(parsed) or parsed < 0:
            print_warning(f"Config warning: Invalid {ENV_TIMEOUT} '{env_timeout}', using {timeout:g}")
        else:
            timeout = parsed

    return Settings(
        api_key=api_key,
        endpoint=endpoint,
        model=model,
        temperature=temperature,
        timeout=timeout if timeout and timeout > 0 else None,
        extension=config.extension,
    )


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


__all__ = [
    "Config",
    "ConfigManager",
    "Settings",
    "resolve_settings",
    "load_config",
    "VALID_CREDENTIAL_SOURCES",
    "DEFAULT_TIMEOUT",
]
