"""
Application configuration management.

This module handles configuration from environment variables using Pydantic Settings.
Only the CLI and the file runner read these settings; the transformation
pipeline itself takes everything as explicit parameters.
"""

from pydantic_settings import BaseSettings

from .models.edit_plan import WhitespacePolicy


class Settings(BaseSettings):
    """
    Application configuration from environment variables.

    All settings can be overridden via environment variables with the same name.
    """

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Removal behavior
    whitespace_policy: WhitespacePolicy = WhitespacePolicy.LINE

    # Parallelism (0 = one worker per CPU)
    max_workers: int = 0

    # File discovery
    source_suffix: str = ".java"
    module_file_name: str = "module-info.java"

    # Encoding
    default_encoding: str = "utf-8"
    detect_encoding: bool = True  # Fall back to charset-normalizer when UTF-8 fails

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
