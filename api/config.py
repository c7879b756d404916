"""
API configuration settings.
"""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""
    
    # API Settings
    api_title: str = "Books JSON API"
    api_version: str = "1.0.0"
    api_description: str = (
        "A small REST API over a single books collection persisted as a JSON file. "
        "Intended for demos and prototyping: there is no authentication, no schema "
        "validation and no pagination. Every request reads the whole file and every "
        "change rewrites it."
    )
    
    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    
    # Storage Settings
    data_file: str = "data.json"
    create_data_file: bool = False
    id_strategy: str = "length"  # "length" keeps len(books) + 1, "max" uses highest id + 1
    
    # CORS Settings
    cors_origins: list = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]
    
    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None
    
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields from .env
    }

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Ensure port is a usable TCP port."""
        if v < 1 or v > 65535:
            raise ValueError('port must be between 1 and 65535')
        return v

    @field_validator('id_strategy')
    @classmethod
    def validate_id_strategy(cls, v):
        """Ensure id strategy is known."""
        valid_strategies = ['length', 'max']
        if v.lower() not in valid_strategies:
            raise ValueError(f'id_strategy must be one of: {valid_strategies}')
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_data_file_path(self) -> Path:
        """Get data file path as Path object."""
        return Path(self.data_file)

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global config instance
config = APIConfig()
