"""
Configuration management for AutoDJ
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class AutoDJConfig:
    """Defaults applied to stations created without explicit settings."""

    default_queue_length: int = 3
    default_crossfade_duration: float = 2.0  # seconds
    default_timezone: str = "UTC"

    def validate(self) -> None:
        """Validate AutoDJ configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.default_queue_length < 0:
            raise ValueError(
                f"default_queue_length must be >= 0, got {self.default_queue_length}"
            )
        if self.default_crossfade_duration < 0:
            raise ValueError(
                "default_crossfade_duration must be >= 0, "
                f"got {self.default_crossfade_duration}"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/autodj/autodj.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of backup files to keep
    console_output: bool = False  # Also output to console (for debugging)


@dataclass
class CentralConfig:
    """Configuration for the central update/IP service."""

    enabled: bool = True
    base_url: str = "https://central.azuracast.com"
    timeout_seconds: int = 10
    release_channel: str = "rolling"  # 'rolling' | 'stable'


@dataclass
class Config:
    """Main configuration object."""

    autodj: AutoDJConfig = field(default_factory=AutoDJConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    central: CentralConfig = field(default_factory=CentralConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "autodj"
    return Path.home() / ".config" / "autodj"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/autodj (or ~/.config/autodj)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "autodj"
    return Path.home() / ".local" / "share" / "autodj"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# AutoDJ Configuration

[autodj]
# Number of upcoming tracks to keep cued for new stations
default_queue_length = 3

# Crossfade overlap between tracks, in seconds
default_crossfade_duration = 2.0

# IANA timezone used when a station does not set one
default_timezone = "UTC"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/autodj/autodj.log)
# log_file = "/path/to/custom/autodj.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to console (useful for debugging)
console_output = false

[central]
# Check the central service for updates and the public IP
enabled = true

base_url = "https://central.azuracast.com"

# Request timeout in seconds
timeout_seconds = 10

# Release channel to report (rolling or stable)
release_channel = "rolling"
""".strip()


def _apply_env_overrides(config: Config) -> None:
    """Override central settings with environment variables if present."""
    central_url = os.environ.get("AUTODJ_CENTRAL_URL")
    release_channel = os.environ.get("AUTODJ_RELEASE_CHANNEL")

    if central_url:
        config.central.base_url = central_url
    if release_channel:
        config.central.release_channel = release_channel


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - AUTODJ_CENTRAL_URL
    - AUTODJ_RELEASE_CHANNEL
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        config = Config()
        _apply_env_overrides(config)
        return config

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        config = Config()

        if "autodj" in toml_data:
            autodj_data = toml_data["autodj"]
            config.autodj = AutoDJConfig(
                default_queue_length=autodj_data.get(
                    "default_queue_length", config.autodj.default_queue_length
                ),
                default_crossfade_duration=float(
                    autodj_data.get(
                        "default_crossfade_duration",
                        config.autodj.default_crossfade_duration,
                    )
                ),
                default_timezone=autodj_data.get(
                    "default_timezone", config.autodj.default_timezone
                ),
            )
            try:
                config.autodj.validate()
            except ValueError as e:
                print(f"Warning: Invalid autodj configuration: {e}")
                print("Using default autodj configuration.")
                config.autodj = AutoDJConfig()

        if "logging" in toml_data:
            logging_data = toml_data["logging"]
            log_file = logging_data.get("log_file")
            if log_file:
                log_file = str(Path(log_file).expanduser())
            config.logging = LoggingConfig(
                level=logging_data.get("level", config.logging.level).upper(),
                log_file=log_file,
                max_file_size_mb=logging_data.get(
                    "max_file_size_mb", config.logging.max_file_size_mb
                ),
                backup_count=logging_data.get(
                    "backup_count", config.logging.backup_count
                ),
                console_output=logging_data.get(
                    "console_output", config.logging.console_output
                ),
            )

        if "central" in toml_data:
            central_data = toml_data["central"]
            config.central = CentralConfig(
                enabled=central_data.get("enabled", config.central.enabled),
                base_url=central_data.get("base_url", config.central.base_url),
                timeout_seconds=central_data.get(
                    "timeout_seconds", config.central.timeout_seconds
                ),
                release_channel=central_data.get(
                    "release_channel", config.central.release_channel
                ),
            )

        _apply_env_overrides(config)
        return config

    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration from {config_path}: {e}")
        print("Using default configuration.")
        return Config()


def save_config(config: Config) -> bool:
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        toml_content = f"""# AutoDJ Configuration

[autodj]
default_queue_length = {config.autodj.default_queue_length}
default_crossfade_duration = {config.autodj.default_crossfade_duration}
default_timezone = "{config.autodj.default_timezone}"

[logging]
level = "{config.logging.level}"
max_file_size_mb = {config.logging.max_file_size_mb}
backup_count = {config.logging.backup_count}
console_output = {str(config.logging.console_output).lower()}"""

        if config.logging.log_file:
            toml_content += f'\nlog_file = "{config.logging.log_file}"'

        toml_content += f"""

[central]
enabled = {str(config.central.enabled).lower()}
base_url = "{config.central.base_url}"
timeout_seconds = {config.central.timeout_seconds}
release_channel = "{config.central.release_channel}"
"""

        with open(config_path, "w", encoding="utf-8") as f:
            f.write(toml_content)

        return True

    except OSError as e:
        print(f"Error saving configuration to {config_path}: {e}")
        return False


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
