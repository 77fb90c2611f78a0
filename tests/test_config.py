"""Tests for listarr/config.py"""

import os
import tempfile

import pytest
import yaml

from listarr.config import (
    DEFAULT_DATA_FILE,
    DEFAULT_MOVIE_ROOT,
    DEFAULT_SERIES_ROOT,
    IMAGE_CDN_BASE,
    ServiceSettings,
    Settings,
    build_settings,
    get_config_section,
    load_config,
)
from listarr.errors import ConfigurationError
from listarr.models import Target


class TestGetConfigSection:
    """Tests for get_config_section function."""

    def test_lowercase_key(self):
        config = {'radarr': {'url': 'http://x'}}
        assert get_config_section(config, 'radarr') == {'url': 'http://x'}

    def test_uppercase_key(self):
        config = {'RADARR': {'url': 'http://x'}}
        assert get_config_section(config, 'radarr') == {'url': 'http://x'}

    def test_missing_key_returns_default(self):
        assert get_config_section({}, 'radarr') == {}

    def test_none_section_returns_default(self):
        assert get_config_section({'radarr': None}, 'radarr') == {}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_uses_environment(self):
        """A missing config file is not an error."""
        config = load_config('/nonexistent/config.yml', environ={'RADARR_URL': 'http://radarr:7878'})
        assert config == {'radarr': {'url': 'http://radarr:7878'}}

    def test_loads_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'config.yml')
            with open(path, 'w') as f:
                yaml.dump({'radarr': {'url': 'http://localhost:7878', 'api_key': 'abc'}}, f)

            config = load_config(path, environ={})

        assert config['radarr']['api_key'] == 'abc'

    def test_module_file_overrides_section(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'config.yml')
            with open(path, 'w') as f:
                yaml.dump({'sonarr': {'url': 'http://old'}}, f)
            with open(os.path.join(tmpdir, 'sonarr.yml'), 'w') as f:
                yaml.dump({'url': 'http://new', 'api_key': 'k'}, f)

            config = load_config(path, environ={})

        assert config['sonarr'] == {'url': 'http://new', 'api_key': 'k'}

    def test_environment_overrides_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'config.yml')
            with open(path, 'w') as f:
                yaml.dump({'radarr': {'api_key': 'from_file'}}, f)

            config = load_config(path, environ={'RADARR_APIKEY': 'from_env'})

        assert config['radarr']['api_key'] == 'from_env'

    def test_first_env_var_wins(self):
        """RADARR_URL takes precedence over RADARR_BASE."""
        config = load_config(None, environ={'RADARR_URL': 'http://a', 'RADARR_BASE': 'http://b'})
        assert config['radarr']['url'] == 'http://a'

    def test_env_fallback_alias(self):
        config = load_config(None, environ={'SONARR_BASE': 'http://sonarr'})
        assert config['sonarr']['url'] == 'http://sonarr'

    def test_invalid_yaml_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'config.yml')
            with open(path, 'w') as f:
                f.write("radarr: [unclosed")

            with pytest.raises(ConfigurationError, match="Could not parse"):
                load_config(path, environ={})


class TestBuildSettings:
    """Tests for build_settings function."""

    def test_empty_config_uses_fallbacks(self):
        settings = build_settings({})

        assert settings.radarr.root_folder == DEFAULT_MOVIE_ROOT
        assert settings.sonarr.root_folder == DEFAULT_SERIES_ROOT
        assert settings.radarr.quality_profile_id == 1
        assert settings.image_protocol == 'https:'
        assert settings.image_cdn_base == IMAGE_CDN_BASE
        assert settings.data_file == DEFAULT_DATA_FILE
        assert not settings.radarr.is_configured
        assert not settings.telegram.is_configured

    def test_service_values(self):
        settings = build_settings({
            'radarr': {'url': 'http://localhost:7878/', 'api_key': 'key',
                       'root_folder': '/data/movies', 'quality_profile_id': '4'},
        })

        assert settings.radarr.url == 'http://localhost:7878'
        assert settings.radarr.root_folder == '/data/movies'
        assert settings.radarr.quality_profile_id == 4
        assert settings.radarr.is_configured

    def test_invalid_quality_profile_falls_back(self):
        settings = build_settings({'sonarr': {'quality_profile_id': 'best'}})
        assert settings.sonarr.quality_profile_id == 1

    def test_telegram_chat_id_is_string(self):
        settings = build_settings({'telegram': {'token': 't', 'chat_id': 12345}})
        assert settings.telegram.chat_id == '12345'
        assert settings.telegram.is_configured

    def test_image_settings(self):
        settings = build_settings({'images': {'protocol': 'http:', 'cdn_base': 'https://cdn.example/'}})
        assert settings.image_protocol == 'http:'
        assert settings.image_cdn_base == 'https://cdn.example'

    def test_settings_are_immutable(self):
        settings = build_settings({})
        with pytest.raises(Exception):
            settings.data_file = 'other.json'


class TestServiceLookup:
    """Tests for Settings.service()"""

    def test_by_target(self):
        settings = Settings()
        assert settings.service(Target.SONARR) is settings.sonarr
        assert settings.service('radarr') is settings.radarr

    def test_unknown_raises(self):
        with pytest.raises(ConfigurationError):
            Settings().service('lidarr')

    def test_placeholder_key_not_configured(self):
        service = ServiceSettings('Sonarr', url='http://x', api_key='YOUR_SONARR_API_KEY')
        assert not service.is_configured
