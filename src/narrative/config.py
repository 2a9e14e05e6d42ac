"""
Configuration loader for the Narrative Progress Engine.
Loads configuration from YAML files and environment variables.
"""

from typing import Dict, Any, Optional
from pathlib import Path
import yaml
import os
from pydantic import BaseModel, ConfigDict, Field
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


class EngineConfig(BaseModel):
    """Main engine configuration."""

    model_config = ConfigDict(extra="allow")

    # Environment
    environment: str = "development"
    debug: bool = False

    # Logging
    log_level: str = "INFO"

    # Data access: "supabase" | "memory"
    backend: str = "supabase"
    supabase_url: str = ""
    supabase_key: str = ""

    # Feed / history display
    feed_limit: int = Field(default=50, ge=1)
    history_display_limit: int = Field(default=5, ge=1)

    # API
    api_prefix: str = "/api"


class ConfigLoader:
    """Load and manage engine configuration."""

    def __init__(self, config_dir: str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
        """
        self.config_dir = Path(config_dir)
        self.config: Optional[EngineConfig] = None
        self.load()

    def load(self) -> EngineConfig:
        """Load configuration from YAML and environment variables."""

        env = os.getenv("NARRATIVE_ENV", "development")
        config_file = self.config_dir / f"{env}.yaml"

        # Defaults first, then environment-specific overrides
        merged = self._load_yaml(self.config_dir / "default.yaml")

        if config_file.exists():
            merged.update(self._load_yaml(config_file))
        else:
            logger.debug(f"Config file not found: {config_file}, using defaults")

        merged.update(self._load_from_env())
        merged.setdefault("environment", env)

        try:
            self.config = EngineConfig(**merged)
        except Exception as e:
            logger.error(f"Invalid configuration ({e}), falling back to defaults")
            self.config = EngineConfig(environment=env)

        logger.info(f"Configuration loaded (environment: {env}, backend: {self.config.backend})")

        return self.config

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML config file."""
        if not path.exists():
            return {}

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
                return data or {}
        except Exception as e:
            logger.warning(f"Failed to load YAML config {path}: {e}")
            return {}

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        if log_level := os.getenv("NARRATIVE_LOG_LEVEL"):
            config["log_level"] = log_level.upper()
        if backend := os.getenv("NARRATIVE_BACKEND"):
            config["backend"] = backend
        if supabase_url := os.getenv("SUPABASE_URL"):
            config["supabase_url"] = supabase_url
        if supabase_key := os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY"):
            config["supabase_key"] = supabase_key
        if feed_limit := os.getenv("NARRATIVE_FEED_LIMIT"):
            try:
                config["feed_limit"] = int(feed_limit)
            except ValueError:
                logger.warning(f"Ignoring non-integer NARRATIVE_FEED_LIMIT={feed_limit!r}")

        return config

    def get(self) -> EngineConfig:
        """Get current configuration."""
        if not self.config:
            self.load()
        return self.config

    def reload(self):
        """Reload configuration (useful for development)."""
        logger.info("Reloading configuration...")
        self.load()


# Global config instance
_global_config_loader: Optional[ConfigLoader] = None


def get_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _global_config_loader
    if _global_config_loader is None:
        _global_config_loader = ConfigLoader()
    return _global_config_loader.get()


def initialize_config(config_dir: str = "config") -> EngineConfig:
    """Initialize the global configuration loader."""
    global _global_config_loader
    _global_config_loader = ConfigLoader(config_dir)
    return _global_config_loader.get()
