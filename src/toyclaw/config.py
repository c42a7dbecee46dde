# src/toyclaw/config.py
"""Configuration loading for the toyclaw CLI.

Responsibilities:
- Locating toyclaw.yaml (or .yml / .toyclawrc) upward from the cwd
- Reading provider keys from a local .env
- Building Settings from YAML and TOYCLAW_* environment variables
- Creating Toyclaw instances from configuration
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import litellm
import yaml
from pydantic import ValidationError

from toyclaw.providers.litellm.models import ChatModels, EmbeddingModels
from toyclaw.settings import Settings

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from toyclaw.toyclaw import Toyclaw

# Default paths
DEFAULT_INDEX_DIR = "storage/compliance-index"
DEFAULT_DOCS_DIR = "compliance-docs"
DEFAULT_DATA_DIR = "storage"
CONFIG_FILES = ["toyclaw.yaml", "toyclaw.yml", ".toyclawrc"]
ENV_FILE = ".env"
ENV_PREFIX = "TOYCLAW_"

DEFAULT_LLM_MODEL = ChatModels.GEMINI_3_FLASH
DEFAULT_EMBEDDING_MODEL = EmbeddingModels.GEMINI_EMBEDDING_001


@dataclass
class ConfigError:
    """A configuration problem to show the user, with an optional fix."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from a .env file if it exists.

    Existing environment variables are never overridden. Values may be
    wrapped in single or double quotes.

    Args:
        env_path: File to read; a missing file is ignored.
    """
    path = Path(env_path)
    if not path.exists():
        return

    for raw in path.read_text(encoding="utf-8").splitlines():
        entry = raw.strip()
        if entry.startswith("#") or "=" not in entry:
            continue
        name, _, raw_value = entry.partition("=")
        name, raw_value = name.strip(), raw_value.strip()
        if len(raw_value) >= 2 and raw_value[0] == raw_value[-1] and raw_value[0] in "'\"":
            raw_value = raw_value[1:-1]
        # the real environment wins
        os.environ.setdefault(name, raw_value)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Walk upward from start_dir looking for one of CONFIG_FILES.

    Args:
        start_dir: First directory to look in. Defaults to the cwd.

    Returns:
        The first match, or None.
    """
    directory = start_dir or Path.cwd()
    for candidate_dir in [directory, *directory.parents][:10]:
        for name in CONFIG_FILES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
    return None


# Keys accepted at the top level and under settings:
VALID_ROOT_KEYS = {
    "llm_model",
    "embedding_model",
    "index_dir",
    "docs_dir",
    "data_dir",
    "settings",
}

VALID_SETTINGS_KEYS = set(Settings.model_fields) | {"rate_limit_profile"}


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """List human-readable warnings for keys toyclaw does not know.

    Args:
        config: Parsed YAML mapping.
        config_path: Where the mapping came from, used in messages.

    Returns:
        Warning strings; empty when every key is recognised.
    """
    source = str(config_path) if config_path else "config"
    warnings: list[str] = []

    extra = sorted(set(config) - VALID_ROOT_KEYS)
    if extra:
        warnings.append(f"Unknown config keys in {source}: {', '.join(extra)}")

    block = config.get("settings") or {}
    if isinstance(block, dict):
        extra_settings = sorted(set(block) - VALID_SETTINGS_KEYS)
        if extra_settings:
            warnings.append(f"Unknown settings keys in {source}: {', '.join(extra_settings)}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Parse toyclaw.yaml into a dict.

    Args:
        config_path: File to read. When None, find_config_file() decides.

    Returns:
        The parsed mapping, or {} when there is no config file.
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()

    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    return config


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from TOYCLAW_* environment variables.

    Only explicitly set variables are returned, so YAML values survive
    unless overridden. Values are raw strings; Settings coerces them.

    Returns:
        Setting name mapped to the raw variable value.
    """
    result: dict[str, Any] = {}
    for key in VALID_SETTINGS_KEYS:
        env_name = f"{ENV_PREFIX}{key.upper()}"
        if env_name in os.environ and os.environ[env_name] != "":
            result[key] = os.environ[env_name]
    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract the 'settings:' section of a YAML config.

    Args:
        config: Parsed YAML mapping.

    Returns:
        Known settings only; anything else is left to validate_config.
    """
    block = config.get("settings") or {}
    return {key: value for key, value in block.items() if key in VALID_SETTINGS_KEYS}


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Merge the YAML settings: block and TOYCLAW_* variables into Settings.

    Later sources override earlier ones:
    1. Settings field defaults
    2. the settings: block
    3. TOYCLAW_* variables

    Args:
        config: Parsed YAML mapping, or None.
        env_settings: Overrides to use instead of reading os.environ.

    Returns:
        The validated Settings.

    Raises:
        pydantic.ValidationError: If a value does not validate.
    """
    overrides = env_settings if env_settings is not None else get_settings_from_env()
    values = {**get_settings_from_yaml(config or {}), **overrides}
    profile = values.pop("rate_limit_profile", None)

    if profile:
        return Settings.with_profile(profile, **values)
    return Settings(**values)


def is_local_model(model: str) -> bool:
    """True for self-hosted models that need no API key.

    Args:
        model: litellm model string, e.g. "ollama/nomic-embed-text".
    """
    lowered = model.lower()
    return any(
        marker in lowered
        for marker in ["ollama", "local", "llama.cpp", "llamacpp", "gguf", "ggml"]
    )


def _api_key(env_name: str, model: str) -> str | None:
    key = os.environ.get(env_name)
    if key:
        return key
    if model.startswith("gemini/"):
        return os.environ.get("GEMINI_API_KEY") or None
    return None


def _setting(config: dict[str, Any], key: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{key.upper()}") or config.get(key) or default


@dataclass
class ToyclawConfig:
    """Configuration for creating a Toyclaw instance."""

    llm_model: str
    embedding_model: str
    index_dir: str
    docs_dir: str
    data_dir: str
    settings: Settings
    llm_api_key: str | None = None
    embedding_api_key: str | None = None


def get_toyclaw_config(
    index_dir: str | None = None,
    data_dir: str | None = None,
    docs_dir: str | None = None,
    config_path: str | Path | None = None,
) -> ToyclawConfig | ConfigError:
    """Resolve configuration without creating the instance.

    Explicit arguments win over TOYCLAW_* variables, which win over the
    YAML file, which wins over defaults.

    Returns:
        ToyclawConfig, or ConfigError if the configuration is invalid
    """
    resolved_path = Path(config_path) if config_path is not None else find_config_file()
    try:
        config = load_config(resolved_path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        return ConfigError(
            message=f"Cannot read config file: {e}",
            suggestion="Fix or remove toyclaw.yaml",
        )

    for warning in validate_config(config, resolved_path):
        logger.warning(warning)

    try:
        settings = build_settings(config)
    except (ValidationError, ValueError) as e:
        return ConfigError(
            message=f"Invalid settings: {e}",
            suggestion="Check the settings: section of toyclaw.yaml and TOYCLAW_* variables",
        )

    llm_model = _setting(config, "llm_model", DEFAULT_LLM_MODEL)
    embedding_model = _setting(config, "embedding_model", DEFAULT_EMBEDDING_MODEL)

    return ToyclawConfig(
        llm_model=llm_model,
        embedding_model=embedding_model,
        index_dir=index_dir or _setting(config, "index_dir", DEFAULT_INDEX_DIR),
        docs_dir=docs_dir or _setting(config, "docs_dir", DEFAULT_DOCS_DIR),
        data_dir=data_dir or _setting(config, "data_dir", DEFAULT_DATA_DIR),
        settings=settings,
        llm_api_key=_api_key("TOYCLAW_LLM_API_KEY", llm_model),
        embedding_api_key=_api_key("TOYCLAW_EMBEDDING_API_KEY", embedding_model),
    )


def check_embedding_credentials(config: ToyclawConfig) -> ConfigError | None:
    """Return a ConfigError when the embedding model has no usable credentials."""
    if config.embedding_api_key or is_local_model(config.embedding_model):
        return None

    environment = litellm.validate_environment(model=config.embedding_model)
    if environment.get("keys_in_environment"):
        return None

    missing = environment.get("missing_keys") or []
    hint = ", ".join(missing) if missing else "the provider's API key variable"
    return ConfigError(
        message=f"No API key found for embedding model {config.embedding_model}.",
        suggestion=f"Set TOYCLAW_EMBEDDING_API_KEY or {hint} (a .env file works too)",
    )


def create_toyclaw(config: ToyclawConfig) -> Toyclaw:
    """Create a Toyclaw instance from configuration."""
    from toyclaw.configuration import LiteLLMProvider, LocalStorage
    from toyclaw.toyclaw import Toyclaw

    return Toyclaw(
        provider=LiteLLMProvider(
            llm=config.llm_model,
            embedding=config.embedding_model,
            llm_api_key=config.llm_api_key,
            embedding_api_key=config.embedding_api_key,
        ),
        storage=LocalStorage(config.data_dir),
        index_dir=config.index_dir,
        settings=config.settings,
    )


def get_toyclaw(
    index_dir: str | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> Toyclaw | ConfigError:
    """Create a Toyclaw instance based on configuration.

    Returns:
        Configured Toyclaw instance, or ConfigError if configuration is invalid
    """
    config = get_toyclaw_config(index_dir=index_dir, data_dir=data_dir, config_path=config_path)
    if isinstance(config, ConfigError):
        return config
    return create_toyclaw(config)
