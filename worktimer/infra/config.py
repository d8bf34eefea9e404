"""
Configuration management using Pydantic Settings.

Architecture Decision: Why pydantic-settings?
- Type-safe configuration with validation
- Supports multiple sources (YAML, env vars, defaults)
- Easy to test with different configurations
"""

import os
from pathlib import Path
from typing import Optional
import yaml

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UserPreferences(BaseModel):
    """
    User configuration and preferences.

    Loaded from settings.yaml so behaviour can change without touching code.
    """

    # Export settings
    export_dir: Optional[str] = Field(default=None, description="Directory for CSV exports")
    include_project_column: bool = Field(
        default=True,
        description="Write the Project column in every CSV export"
    )
    uncategorized_label: str = Field(default="Uncategorized", min_length=1)

    # Backup settings
    backup_directory: Optional[str] = Field(default=None, description="Custom backup directory path")
    backup_retention_count: int = Field(default=5, ge=1, description="Number of backup files to keep")

    # Logging
    log_level: str = Field(default="INFO", description="Console log level")


class Settings(BaseSettings):
    """
    Application settings with multiple sources:
    1. Default values (hardcoded)
    2. YAML config file
    3. Environment variables (highest priority)
    """
    model_config = SettingsConfigDict(
        env_prefix='WORKTIMER_',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    # Application paths
    app_name: str = "WorkTimer"
    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None

    # Database
    database_url: Optional[str] = None

    # User preferences
    preferences: UserPreferences = UserPreferences()

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._init_paths()
        self._load_yaml_config()

    def _init_paths(self):
        """Initialize default paths based on OS"""
        if self.config_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.config'
            self.config_dir = base / self.app_name.lower()

        if self.data_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.local' / 'share'
            self.data_dir = base / self.app_name.lower()

        # Create directories if they don't exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _load_yaml_config(self):
        """Load configuration from YAML file"""
        # First check in workspace config folder
        config_file = Path("config/settings.yaml")
        if not config_file.exists():
            # Then check in user's config directory
            config_file = self.config_dir / "settings.yaml"

        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
                if config_data:
                    # Update preferences with YAML data
                    self.preferences = UserPreferences(**config_data)

    def get_db_url(self) -> str:
        """Get database URL, creating default if not set"""
        if self.database_url:
            return self.database_url

        db_path = self.data_dir / 'worktimer.db'
        return f"sqlite+aiosqlite:///{db_path}"

    def get_export_dir(self) -> Path:
        """Directory CSV exports are written to"""
        if self.preferences.export_dir:
            return Path(self.preferences.export_dir)
        return self.data_dir / 'exports'

    def get_backup_dir(self) -> Path:
        if self.preferences.backup_directory and self.preferences.backup_directory.strip():
            return Path(self.preferences.backup_directory)
        return self.data_dir / 'backups'

    def get_log_dir(self) -> Path:
        return self.data_dir / 'logs'


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
