"""
DLT Export Configuration Settings
"""
import os
from typing import Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv


def get_env(key: str, default: str = "") -> str:
    """Get environment variable with default value"""
    return os.getenv(key, default)


def get_env_int(key: str, default: int = 0) -> int:
    """Get environment variable as integer"""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get environment variable as float"""
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean"""
    value = os.getenv(key, str(default)).lower()
    return value in ('true', '1', 'yes', 'on')


@dataclass
class ExportSettings:
    """Export pipeline configuration settings"""

    # Silent mode suppresses the interactive progress bar and asks decoders
    # to run without operator interaction
    silent_mode: bool = field(default_factory=lambda: get_env_bool("DLT_EXPORT_SILENT_MODE", False))
    progress_min_interval: float = field(default_factory=lambda: get_env_float("DLT_EXPORT_PROGRESS_INTERVAL", 0.1))
    default_format: str = field(default_factory=lambda: get_env("DLT_EXPORT_DEFAULT_FORMAT", "ascii"))
    output_dir: Optional[str] = field(default_factory=lambda: get_env("DLT_EXPORT_OUTPUT_DIR") or None)


@dataclass
class AppSettings:
    """Application configuration settings"""

    app_name: str = field(default_factory=lambda: get_env("APP_NAME", "DLT Export"))
    app_version: str = field(default_factory=lambda: get_env("APP_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: get_env_bool("DEBUG", False))
    log_level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))

    # Log file settings
    log_dir: str = field(default_factory=lambda: get_env("LOG_DIR", "logs"))
    log_to_file: bool = field(default_factory=lambda: get_env_bool("LOG_TO_FILE", False))
    log_max_bytes: int = field(default_factory=lambda: get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))
    log_backup_count: int = field(default_factory=lambda: get_env_int("LOG_BACKUP_COUNT", 5))


@dataclass
class Settings:
    """Main settings class that combines all configuration sections"""

    export: ExportSettings = field(default_factory=ExportSettings)
    app: AppSettings = field(default_factory=AppSettings)


# Load .env file if it exists
load_dotenv()

# Global settings instance
settings = Settings()
