"""
Configuration management using environment variables.
Handles the book collection settings with proper validation and defaults.
"""

from typing import Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class LibraryConfig(BaseSettings):
    """
    Configuration class for the book collection core.
    Uses pydantic BaseSettings for environment variable management.
    """
    
    # Collection Configuration
    max_books: int = Field(default=25, description="Maximum number of books across all owners")
    seed_demo_books: bool = Field(default=True, description="Load the demo books at startup")
    demo_owner_id: str = Field(default="demo123", description="Owner of the demo books")
    
    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)
    
    # Development/Testing
    debug: bool = Field(default=False)
    
    @field_validator('max_books')
    @classmethod
    def validate_max_books(cls, v):
        """Ensure the collection bound is reasonable."""
        if v < 1 or v > 10000:
            raise ValueError('max_books must be between 1 and 10000')
        return v
    
    @field_validator('demo_owner_id')
    @classmethod
    def validate_demo_owner_id(cls, v):
        """Ensure the demo owner is a usable identifier."""
        if not v.strip():
            raise ValueError('demo_owner_id cannot be blank')
        return v.strip()
    
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
    
    model_config = {
        "env_prefix": "LIBRARY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields from .env
    }
    
    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = LibraryConfig()
