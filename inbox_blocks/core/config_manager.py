# File: inbox_blocks/core/config_manager.py
"""
Centralized configuration management for Inbox Blocks.
Loads settings from environment variables and the block config file.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytz
from dotenv import load_dotenv

from inbox_blocks.models.config import EngineConfig
from inbox_blocks.models.errors import ConfigError

# Load environment variables
load_dotenv()


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from inbox_blocks/core/
    CONFIG_DIR = BASE_DIR / "config"
    LOGS_DIR = BASE_DIR / "logs"

    # Files
    BLOCK_CONFIG_FILE = Path(os.getenv("BLOCK_CONFIG_FILE", str(CONFIG_DIR / "blocks.json")))
    TOKEN_FILE = BASE_DIR / "token.json"
    CREDENTIALS_FILE = BASE_DIR / "credentials.json"
    ENV_FILE = BASE_DIR / ".env"

    # Google Services
    CALENDAR_ID = os.getenv("CALENDAR_ID", "primary")
    GOOGLE_SCOPES = [
        'https://www.googleapis.com/auth/calendar',
    ]

    # Application Settings
    TARGET_TIMEZONE = os.getenv("TIMEZONE", "Europe/London")
    GENERATOR_ID = "inbox_blocks_v1"
    LOOKAHEAD_DAYS = os.getenv("LOOKAHEAD_DAYS")

    # Block cosmetics: graphite, never alerts
    BLOCK_COLOR_ID = os.getenv("BLOCK_COLOR_ID", "8")
    BLOCK_VISIBILITY = "public"
    BLOCK_TRANSPARENCY = "transparent"

    @classmethod
    def timezone(cls) -> pytz.BaseTzInfo:
        try:
            return pytz.timezone(cls.TARGET_TIMEZONE)
        except pytz.UnknownTimeZoneError as e:
            raise ConfigError(f"Unknown timezone: {cls.TARGET_TIMEZONE}") from e

    @classmethod
    def load_block_config(cls, path: Optional[Path] = None) -> EngineConfig:
        """
        Load the engine configuration.

        A missing config file is not an error: the built-in defaults apply.
        LOOKAHEAD_DAYS from the environment overrides the file.
        """
        path = Path(path) if path else cls.BLOCK_CONFIG_FILE
        data: Dict[str, Any] = {}

        if path.exists():
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

        if cls.LOOKAHEAD_DAYS:
            data['lookahead_days'] = cls.LOOKAHEAD_DAYS

        return EngineConfig.from_dict(data)

    @classmethod
    def validate(cls) -> bool:
        """Validate that all required configuration is present."""
        errors = []

        if not cls.TOKEN_FILE.exists():
            errors.append(f"token.json not found at {cls.TOKEN_FILE} (run scripts/authenticate.py)")

        try:
            cls.timezone()
            cls.load_block_config()
        except ConfigError as e:
            errors.append(str(e))

        if errors:
            for error in errors:
                print(f"Configuration Error: {error}")
            return False

        return True
