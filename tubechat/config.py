"""
Configuration settings for the YouTube transcript chat application.
"""

import os
from typing import Dict, List
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "YouTube Transcript Chat"
    APP_VERSION = "0.2.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
    LOGS_DIR = Path(os.getenv("LOGS_DIR", BASE_DIR / "logs"))

    # API keys
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")

    # Default models
    MODEL_PROVIDER = os.getenv("MODEL_PROVIDER", "groq")
    DEFAULT_CHAT_MODEL = os.getenv("DEFAULT_CHAT_MODEL", "llama-3.3-70b-versatile")
    DEFAULT_TEMPERATURE = float(os.getenv("DEFAULT_TEMPERATURE", "0.7"))
    DEFAULT_MAX_TOKENS = int(os.getenv("DEFAULT_MAX_TOKENS", "4000"))

    # Captions
    DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")
    FALLBACK_LANGUAGES = _env_list("FALLBACK_LANGUAGES", "en,es,fr,de")
    SUPPORTED_LANGUAGES: Dict[str, str] = {
        "en": "English",
        "es": "Spanish",
        "fr": "French",
        "de": "German",
        "it": "Italian",
        "pt": "Portuguese",
        "ru": "Russian",
        "ja": "Japanese",
        "ko": "Korean",
        "zh": "Chinese (Simplified)",
        "zh-TW": "Chinese (Traditional)",
        "ar": "Arabic",
        "hi": "Hindi",
        "nl": "Dutch",
        "sv": "Swedish",
        "da": "Danish",
        "no": "Norwegian",
        "fi": "Finnish",
        "pl": "Polish",
        "tr": "Turkish",
    }

    # Optional external session cache
    REDIS_URL = os.getenv("REDIS_URL")

    PUBLIC_URL = os.getenv("PUBLIC_URL", "http://localhost:8000")

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)

        # Validate required environment variables
        if not cls.GROQ_API_KEY:
            print("WARNING: GROQ_API_KEY environment variable not set.")
            print("Please set it in the .env file or environment variables.")


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


class ChatConfig:
    """Limits and tunables for chat context management."""

    # Context building
    MAX_CONTEXT_MESSAGES = int(os.getenv("MAX_CONTEXT_MESSAGES", "20"))
    MAX_TRANSCRIPT_CHARS = int(os.getenv("MAX_TRANSCRIPT_CHARS", "50000"))
    CONTEXT_TOKEN_BUDGET = int(os.getenv("CONTEXT_TOKEN_BUDGET", "12000"))
    RELEVANT_SEGMENT_LIMIT = 15
    NARROW_FALLBACK_SEGMENTS = 20

    # Request limits
    MAX_MESSAGE_LENGTH = 4000
    MIN_TEMPERATURE = 0.0
    MAX_TEMPERATURE = 2.0
    MAX_COMPLETION_TOKENS = 8000

    # Session lifecycle
    SESSION_MAX_AGE_MS = int(os.getenv("SESSION_MAX_AGE_MS", str(24 * 60 * 60 * 1000)))
    REAP_PROBABILITY = float(os.getenv("REAP_PROBABILITY", "0.1"))

    # External calls
    TRANSCRIPT_FETCH_TIMEOUT = float(os.getenv("TRANSCRIPT_FETCH_TIMEOUT", "30"))
    COMPLETION_TIMEOUT = float(os.getenv("COMPLETION_TIMEOUT", "60"))
    TRANSCRIPT_FETCH_RETRIES = int(os.getenv("TRANSCRIPT_FETCH_RETRIES", "3"))
    TRANSCRIPT_FETCH_RETRY_DELAY = float(os.getenv("TRANSCRIPT_FETCH_RETRY_DELAY", "1"))
    TRANSCRIPT_FETCH_BACKOFF = 2


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
chat_config = ChatConfig
