"""
Configuration Management for Blinks

Loads configuration from ~/.blinks/config.json, a local .env file and
environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger("blinks.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".blinks"
CONFIG_PATH = CONFIG_DIR / "config.json"
BLINKS_PATH = CONFIG_DIR / "blinks.json"
STATE_PATH = CONFIG_DIR / "state.json"


@dataclass
class NotionConfig:
    """Notion database configuration"""
    api_token: str = ""
    database_id: str = ""

    def require(self) -> "NotionConfig":
        """Return self, raising if the token or database id is missing"""
        if not self.api_token or not self.database_id:
            raise ConfigError(
                "Missing Notion preferences. Set the API token and database ID "
                "in ~/.blinks/config.json or NOTION_API_TOKEN / NOTION_DATABASE_ID."
            )
        return self


@dataclass
class LLMConfig:
    """LLM provider configuration shared by all processors"""
    provider: str = "google"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-haiku-4-5-20251001"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    google_api_key: str = ""
    google_model: str = "gemini-2.0-flash"
    max_retries: int = 2


@dataclass
class StorageConfig:
    """Where Blinks and local state live"""
    backend: str = "notion"  # "notion" or "local"
    blinks_path: str = str(BLINKS_PATH)
    state_path: str = str(STATE_PATH)


@dataclass
class CleanupConfig:
    """Completed reminder sweep settings"""
    interval_hours: float = 1.0
    cutoff_hour: int = 4
    last_run_key: str = "last_cleanup_timestamp"


@dataclass
class ServerConfig:
    """HTTP server settings"""
    host: str = "127.0.0.1"
    port: int = 8787


@dataclass
class BlinksConfig:
    """Main Blinks configuration"""
    notion: NotionConfig = field(default_factory=NotionConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    cleanup: CleanupConfig = field(default_factory=CleanupConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    _env_sourced_keys: set = field(default_factory=set, repr=False)


def _parse_notion_config(data: dict) -> NotionConfig:
    """Parse notion section from config dict"""
    notion_data = data.get("notion", {})
    return NotionConfig(
        api_token=notion_data.get("api_token") or notion_data.get("notion_api_token", ""),
        database_id=notion_data.get("database_id") or notion_data.get("notion_database_id", ""),
    )


def _parse_llm_config(data: dict) -> LLMConfig:
    """Parse llm section from config dict"""
    llm_data = data.get("llm", {})
    defaults = LLMConfig()
    return LLMConfig(
        provider=llm_data.get("provider", defaults.provider),
        anthropic_api_key=llm_data.get("anthropic_api_key", ""),
        anthropic_model=llm_data.get("anthropic_model", defaults.anthropic_model),
        openai_api_key=llm_data.get("openai_api_key", ""),
        openai_model=llm_data.get("openai_model", defaults.openai_model),
        google_api_key=llm_data.get("google_api_key", ""),
        google_model=llm_data.get("google_model", defaults.google_model),
        max_retries=llm_data.get("max_retries", defaults.max_retries),
    )


def _parse_storage_config(data: dict) -> StorageConfig:
    """Parse storage section from config dict"""
    storage_data = data.get("storage", {})
    return StorageConfig(
        backend=storage_data.get("backend", "notion"),
        blinks_path=storage_data.get("blinks_path", str(BLINKS_PATH)),
        state_path=storage_data.get("state_path", str(STATE_PATH)),
    )


def _parse_cleanup_config(data: dict) -> CleanupConfig:
    """Parse cleanup section from config dict"""
    cleanup_data = data.get("cleanup", {})
    return CleanupConfig(
        interval_hours=cleanup_data.get("interval_hours", 1.0),
        cutoff_hour=cleanup_data.get("cutoff_hour", 4),
        last_run_key=cleanup_data.get("last_run_key", "last_cleanup_timestamp"),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server section from config dict"""
    server_data = data.get("server", {})
    return ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=server_data.get("port", 8787),
    )


def load_config() -> BlinksConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (including a local .env file)
    2. Config file (~/.blinks/config.json)
    3. Default values
    """
    load_dotenv()
    config = BlinksConfig()

    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH) as f:
                data = json.load(f)

            config.notion = _parse_notion_config(data)
            config.llm = _parse_llm_config(data)
            config.storage = _parse_storage_config(data)
            config.cleanup = _parse_cleanup_config(data)
            config.server = _parse_server_config(data)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Failed to load config file: %s", e)

    if os.getenv("NOTION_API_TOKEN"):
        config.notion.api_token = os.getenv("NOTION_API_TOKEN")
        config._env_sourced_keys.add("notion_api_token")
    if os.getenv("NOTION_DATABASE_ID"):
        config.notion.database_id = os.getenv("NOTION_DATABASE_ID")

    if os.getenv("BLINKS_STORAGE_BACKEND"):
        config.storage.backend = os.getenv("BLINKS_STORAGE_BACKEND")
    if os.getenv("BLINKS_PORT"):
        config.server.port = int(os.getenv("BLINKS_PORT"))

    # LLM env var overrides (track env-sourced keys so they are never saved)
    _env_llm_map = {
        "ANTHROPIC_API_KEY": "anthropic_api_key",
        "OPENAI_API_KEY": "openai_api_key",
        "GOOGLE_API_KEY": "google_api_key",
        "GEMINI_API_KEY": "google_api_key",
        "BLINKS_LLM_PROVIDER": "provider",
    }
    for env_var, attr in _env_llm_map.items():
        val = os.getenv(env_var)
        if val:
            setattr(config.llm, attr, val)
            config._env_sourced_keys.add(attr)

    return config


def save_config(config: BlinksConfig) -> None:
    """Save configuration to file.

    Secrets that were sourced from environment variables are written as
    empty strings so they are not persisted to disk.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    env_sourced = getattr(config, "_env_sourced_keys", set())

    llm_section = {
        "provider": config.llm.provider,
        "anthropic_api_key": config.llm.anthropic_api_key,
        "anthropic_model": config.llm.anthropic_model,
        "openai_api_key": config.llm.openai_api_key,
        "openai_model": config.llm.openai_model,
        "google_api_key": config.llm.google_api_key,
        "google_model": config.llm.google_model,
        "max_retries": config.llm.max_retries,
    }
    for key in ("anthropic_api_key", "openai_api_key", "google_api_key"):
        if key in env_sourced:
            llm_section[key] = ""

    data = {
        "notion": {
            "api_token": "" if "notion_api_token" in env_sourced else config.notion.api_token,
            "database_id": config.notion.database_id,
        },
        "llm": llm_section,
        "storage": {
            "backend": config.storage.backend,
            "blinks_path": config.storage.blinks_path,
            "state_path": config.storage.state_path,
        },
        "cleanup": {
            "interval_hours": config.cleanup.interval_hours,
            "cutoff_hour": config.cleanup.cutoff_hour,
            "last_run_key": config.cleanup.last_run_key,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
        },
    }

    with open(CONFIG_PATH, "w") as f:
        json.dump(data, f, indent=2)

    # Set secure permissions
    CONFIG_PATH.chmod(0o600)


def ensure_directories() -> None:
    """Ensure required directories exist"""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
