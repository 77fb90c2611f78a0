"""
Configuration utilities for Listarr.
Handles config loading, environment overrides, and the immutable settings
value handed to every service adapter.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml

from .errors import ConfigurationError

# Project version - single source of truth
__version__ = "1.0.0"

# Built-in fallbacks used when neither the service nor the config supplies a value
DEFAULT_MOVIE_ROOT = "/movies"
DEFAULT_SERIES_ROOT = "/tv"
DEFAULT_QUALITY_PROFILE_ID = 1
DEFAULT_IMAGE_PROTOCOL = "https:"
IMAGE_CDN_BASE = "https://image.tmdb.org/t/p/w500"
DEFAULT_DATA_FILE = "lists.json"
DEFAULT_LOG_RETENTION_DAYS = 14

# Placeholder keys shipped in the example config
PLACEHOLDER_API_KEYS = ('YOUR_RADARR_API_KEY', 'YOUR_SONARR_API_KEY', 'YOUR_TELEGRAM_TOKEN')

# Environment variables take precedence over all config file values.
# (env var, section, key); the first env var found for a key wins.
ENV_OVERRIDES = [
    ('RADARR_URL', 'radarr', 'url'),
    ('RADARR_BASE', 'radarr', 'url'),
    ('RADARR_APIKEY', 'radarr', 'api_key'),
    ('RADARR_ROOT', 'radarr', 'root_folder'),
    ('RADARR_QUALITY_PROFILE_ID', 'radarr', 'quality_profile_id'),
    ('SONARR_URL', 'sonarr', 'url'),
    ('SONARR_BASE', 'sonarr', 'url'),
    ('SONARR_APIKEY', 'sonarr', 'api_key'),
    ('SONARR_ROOT', 'sonarr', 'root_folder'),
    ('SONARR_QUALITY_PROFILE_ID', 'sonarr', 'quality_profile_id'),
    ('TELEGRAM_TOKEN', 'telegram', 'token'),
    ('TELEGRAM_NOTIFY_CHAT_ID', 'telegram', 'chat_id'),
    ('SERVER_PROTOCOL', 'images', 'protocol'),
    ('DATA_FILE', 'general', 'data_file'),
    ('LOG_DIR', 'general', 'log_dir'),
]

MODULE_SECTIONS = ['radarr', 'sonarr', 'telegram']


@dataclass(frozen=True)
class ServiceSettings:
    """Connection details and add fallbacks for one media manager."""
    name: str
    url: Optional[str] = None
    api_key: Optional[str] = None
    root_folder: str = DEFAULT_MOVIE_ROOT
    quality_profile_id: int = DEFAULT_QUALITY_PROFILE_ID

    @property
    def is_configured(self) -> bool:
        if not self.url or not self.api_key:
            return False
        return self.api_key not in PLACEHOLDER_API_KEYS


@dataclass(frozen=True)
class TelegramSettings:
    token: Optional[str] = None
    chat_id: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.chat_id and self.token not in PLACEHOLDER_API_KEYS)


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration built once at startup."""
    radarr: ServiceSettings = field(default_factory=lambda: ServiceSettings('Radarr'))
    sonarr: ServiceSettings = field(
        default_factory=lambda: ServiceSettings('Sonarr', root_folder=DEFAULT_SERIES_ROOT)
    )
    telegram: TelegramSettings = field(default_factory=TelegramSettings)
    image_protocol: str = DEFAULT_IMAGE_PROTOCOL
    image_cdn_base: str = IMAGE_CDN_BASE
    data_file: str = DEFAULT_DATA_FILE
    log_dir: Optional[str] = None
    log_retention_days: int = DEFAULT_LOG_RETENTION_DAYS

    def service(self, target) -> ServiceSettings:
        """Return the service settings for a Target (or its string value)."""
        name = getattr(target, 'value', target)
        if name == 'radarr':
            return self.radarr
        if name == 'sonarr':
            return self.sonarr
        raise ConfigurationError(f"Unknown target: {target}")


def get_config_section(config: Dict, key: str, default: Dict = None) -> Dict:
    """
    Get a config section case-insensitively.

    Args:
        config: The configuration dictionary
        key: The key to look for (will check lowercase and uppercase)
        default: Default value if key not found

    Returns:
        The config section or default value
    """
    if default is None:
        default = {}
    return config.get(key.lower(), config.get(key.upper(), default)) or default


def _load_module_configs(config: dict, config_dir: str) -> dict:
    """
    Load and merge modular config files into the main config.

    Loads radarr.yml, sonarr.yml, telegram.yml if they exist.
    Module files take precedence over main config.yml.
    """
    for module in MODULE_SECTIONS:
        module_path = os.path.join(config_dir, f'{module}.yml')
        if not os.path.exists(module_path):
            continue
        with open(module_path, 'r', encoding='utf-8') as f:
            module_config = yaml.safe_load(f)
        if module_config:
            config[module] = module_config
    return config


def _apply_env_overrides(config: dict, environ: Dict[str, str]) -> dict:
    applied = set()
    for env_var, section, key in ENV_OVERRIDES:
        value = environ.get(env_var)
        if not value or (section, key) in applied:
            continue
        config.setdefault(section, {})
        if config[section] is None:
            config[section] = {}
        config[section][key] = value
        applied.add((section, key))
    return config


def load_config(config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> dict:
    """
    Load YAML configuration with modular config file support.

    Loads config.yml and merges optional module files:
    - radarr.yml: Movie manager connection and defaults
    - sonarr.yml: Series manager connection and defaults
    - telegram.yml: Notification credentials

    Environment variables take precedence over all config values
    (see ENV_OVERRIDES). A missing config file is not an error; the
    environment alone can configure everything.

    Args:
        config_path: Path to config.yml file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Parsed and merged config dictionary
    """
    if environ is None:
        environ = os.environ

    config = {}
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse {config_path}: {e}") from e
        config = _load_module_configs(config, os.path.dirname(config_path) or '.')

    return _apply_env_overrides(config, environ)


def _positive_int(value, fallback: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback


def _service_settings(name: str, section: Dict, default_root: str) -> ServiceSettings:
    url = section.get('url')
    return ServiceSettings(
        name=name,
        url=url.rstrip('/') if url else None,
        api_key=section.get('api_key'),
        root_folder=section.get('root_folder') or default_root,
        quality_profile_id=_positive_int(section.get('quality_profile_id'), DEFAULT_QUALITY_PROFILE_ID),
    )


def build_settings(config: Dict) -> Settings:
    """
    Freeze a loaded config dict into a Settings value.

    Args:
        config: Dict returned by load_config()

    Returns:
        Settings with built-in fallbacks filled in
    """
    general = get_config_section(config, 'general')
    images = get_config_section(config, 'images')
    telegram = get_config_section(config, 'telegram')

    return Settings(
        radarr=_service_settings('Radarr', get_config_section(config, 'radarr'), DEFAULT_MOVIE_ROOT),
        sonarr=_service_settings('Sonarr', get_config_section(config, 'sonarr'), DEFAULT_SERIES_ROOT),
        telegram=TelegramSettings(
            token=telegram.get('token'),
            chat_id=str(telegram['chat_id']) if telegram.get('chat_id') else None,
        ),
        image_protocol=images.get('protocol') or DEFAULT_IMAGE_PROTOCOL,
        image_cdn_base=(images.get('cdn_base') or IMAGE_CDN_BASE).rstrip('/'),
        data_file=general.get('data_file') or DEFAULT_DATA_FILE,
        log_dir=general.get('log_dir'),
        log_retention_days=int(general.get('log_retention_days', DEFAULT_LOG_RETENTION_DAYS)),
    )
